"""
Recursive feature elimination with cross-validation.

Inside each stratified fold the classifier is fitted on every predictor,
scored on the held-out rows whenever the current subset size is a
candidate, and the least important predictors are dropped to reach the next
candidate size. Fold scores are averaged per size; the best size is the one
with the highest mean score (smaller size on ties). The final ranking comes
from the same elimination run on all rows.
"""

from __future__ import annotations

import copy
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd
from joblib import Parallel, delayed
from sklearn.model_selection import StratifiedKFold

from ..classifiers.classifiers import make_classifier, score_classifier
from ..config import check_choice, check_folds, WRAPPER_METRICS
from ..exceptions import DataSufficiencyError, ParameterError
from ..preprocessing.data_preprocessing import check_fold_sufficiency
from .results import SelectionResult

TIE_TOLERANCE = 1e-12


def _eliminate(classifier, X_train, y_train, sizes, X_test=None, y_test=None, metric="accuracy"):
    """
    Run one elimination sweep.

    Args:
        classifier: Classifier capability object (copied, never mutated).
        X_train, y_train: Rows used for fitting (ndarray).
        sizes: Candidate sizes, all <= number of columns.
        X_test, y_test: Optional held-out rows scored at each candidate size.
        metric: Scoring metric for held-out rows.

    Returns:
        tuple: (scores, ranking, first_importance) where ``scores`` maps size to
               held-out score, ``ranking`` orders every column index best first
               and ``first_importance`` is the importance from the full fit.
    """
    classifier = copy.deepcopy(classifier)
    sizes = sorted(set(sizes), reverse=True)
    current = np.arange(X_train.shape[1])
    scores: Dict[int, float] = {}
    dropped: List[np.ndarray] = []
    first_importance = None

    while True:
        classifier.fit(X_train[:, current], y_train)
        if len(current) in sizes and X_test is not None:
            scores[len(current)] = score_classifier(
                classifier, X_test[:, current], y_test, metric=metric
            )

        importance = np.asarray(classifier.importance(), dtype=float)
        if first_importance is None:
            first_importance = importance
        order = current[np.argsort(-importance, kind="stable")]

        smaller = [s for s in sizes if s < len(current)]
        if not smaller:
            ranking = list(order)
            break
        target = smaller[0]
        dropped.append(order[target:])
        current = np.sort(order[:target])

    for group in reversed(dropped):
        ranking.extend(group)
    return scores, [int(i) for i in ranking], first_importance


def recursive_elimination(
    X,
    y,
    candidate_sizes: Sequence[int],
    folds: int = 10,
    base_classifier: str = "random_forest",
    metric: str = "accuracy",
    random_state: int = 42,
    n_jobs: Optional[int] = None,
    classifier=None,
    verbose: bool = True,
) -> SelectionResult:
    """
    Cross-validated recursive feature elimination.

    Args:
        X: Numeric predictor matrix (DataFrame).
        y: Label vector.
        candidate_sizes: Subset sizes to evaluate. Sizes larger than the number
            of predictors are skipped.
        folds: Number of stratified folds (>= 2).
        base_classifier: Backend name used when ``classifier`` is None.
        metric: ``accuracy`` or ``auc``.
        random_state: Seed for fold assignment and the classifier.
        n_jobs: Folds evaluated in parallel through joblib.
        classifier: Optional object implementing the Classifier interface.
        verbose: If True, prints progress information.

    Returns:
        SelectionResult with ``selected`` = top ``best_size`` predictors and
        ``details['path']`` = mean/std score per evaluated size.
    """
    folds = check_folds(folds)
    check_choice(metric, WRAPPER_METRICS, "metric")
    sizes = [int(s) for s in candidate_sizes]
    if not sizes:
        raise ParameterError("candidate_sizes must not be empty")
    if any(s <= 0 for s in sizes):
        raise ParameterError(f"candidate_sizes must be positive, got {sizes}")

    X = pd.DataFrame(X)
    names = list(X.columns)
    n_features = len(names)
    if n_features == 0:
        raise DataSufficiencyError("Recursive elimination needs at least one predictor")

    evaluated = sorted({s for s in sizes if s <= n_features})
    skipped = sorted({s for s in sizes if s > n_features})
    if not evaluated:
        raise ParameterError(
            f"Every candidate size {sorted(set(sizes))} exceeds the {n_features} available "
            f"predictors; nothing to evaluate",
            evaluated_sizes=[],
        )

    y = np.asarray(y)
    if len(y) != len(X):
        raise DataSufficiencyError(f"{len(X)} rows but {len(y)} labels")
    check_fold_sufficiency(y, folds)

    if classifier is None:
        classifier = make_classifier(base_classifier, random_state=random_state)
        label = base_classifier
    else:
        label = type(classifier).__name__

    if verbose:
        print(f"\n[RFE] {label}, {folds}-fold CV, metric={metric}")
        print(f"    Candidate sizes: {evaluated}")
        if skipped:
            print(f"    [WARNING] Skipping sizes larger than {n_features} predictors: {skipped}")

    values = X.to_numpy(dtype=float)
    splitter = StratifiedKFold(n_splits=folds, shuffle=True, random_state=random_state)
    fold_results = Parallel(n_jobs=n_jobs)(
        delayed(_eliminate)(
            classifier, values[train], y[train], evaluated, values[test], y[test], metric
        )
        for train, test in splitter.split(values, y)
    )

    fold_scores = np.array([[res[0][s] for s in evaluated] for res in fold_results])
    means = fold_scores.mean(axis=0)
    stds = fold_scores.std(axis=0, ddof=1)

    best_mean = means.max()
    best_size = min(s for s, m in zip(evaluated, means) if m >= best_mean - TIE_TOLERANCE)

    _, ranking_idx, importance = _eliminate(classifier, values, y, evaluated)
    ranking = [names[i] for i in ranking_idx]
    selected = ranking[:best_size]

    path = pd.DataFrame({"size": evaluated, "mean_score": means, "std_score": stds})

    if verbose:
        for size, mean, std in zip(evaluated, means, stds):
            marker = "  <- best" if size == best_size else ""
            print(f"    size={size:>3}  {metric}={mean:.4f} (+/- {std:.4f}){marker}")
        print(f"    Selected {best_size}: {', '.join(selected)}")

    return SelectionResult(
        method="recursive_elimination",
        selected=selected,
        ranking=ranking,
        scores={name: float(v) for name, v in zip(names, importance)},
        details={
            "best_size": best_size,
            "best_score": float(means[evaluated.index(best_size)]),
            "evaluated_sizes": evaluated,
            "skipped_sizes": skipped,
            "metric": metric,
            "path": path,
            "fold_scores": fold_scores,
        },
    )
