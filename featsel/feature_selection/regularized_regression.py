"""
L1-regularized logistic regression (lasso) selection.

Penalty strengths follow the glmnet scale: the fitted objective is the mean
log-loss plus ``penalty * ||beta||_1``, which maps onto scikit-learn's
``C = 1 / (penalty * n_rows)``. Predictors are standardized inside every
fit and coefficients are reported back on the original scale; the intercept
is never penalized.

Two reference penalties are derived from the cross-validated path:

* ``lambda_min`` - best mean CV score (largest penalty on ties),
* ``lambda_1se`` - largest penalty whose mean score is within one standard
  error of the best.
"""

from __future__ import annotations

import warnings
from typing import Optional, Sequence

import numpy as np
import pandas as pd
from joblib import Parallel, delayed
from sklearn.exceptions import ConvergenceWarning
from sklearn.linear_model import LogisticRegression
from sklearn.model_selection import StratifiedKFold
from sklearn.pipeline import make_pipeline
from sklearn.preprocessing import StandardScaler

from ..classifiers.classifiers import SklearnClassifier, score_classifier
from ..config import check_choice, check_folds, PENALTY_METRICS, REFERENCE_PENALTIES
from ..exceptions import DataSufficiencyError, ParameterError
from ..preprocessing.data_preprocessing import binarize_labels, check_fold_sufficiency
from .results import SelectionResult

COEF_DECIMALS = 2


def default_penalty_path(X, y, n_penalties=100, min_ratio=None):
    """
    Log-spaced penalty strengths from the smallest penalty that zeroes every
    coefficient down to ``min_ratio`` times that value (descending).
    """
    X = np.asarray(X, dtype=float)
    y = np.asarray(y, dtype=float)
    n_rows, n_features = X.shape
    if min_ratio is None:
        min_ratio = 1e-4 if n_rows > n_features else 1e-2

    scale = X.std(axis=0)
    scale[scale == 0] = 1.0
    Xs = (X - X.mean(axis=0)) / scale
    lambda_max = float(np.max(np.abs(Xs.T @ (y - y.mean()))) / n_rows)
    if lambda_max <= 0:
        raise DataSufficiencyError("No predictor varies with the label; penalty path is empty")

    return np.logspace(np.log10(lambda_max), np.log10(lambda_max * min_ratio), n_penalties)


def _fit_lasso(X, y, penalty, random_state=42):
    """Fit one standardized L1 logistic model at a glmnet-scale penalty."""
    model = make_pipeline(
        StandardScaler(),
        LogisticRegression(
            C=1.0 / (penalty * len(y)),
            l1_ratio=1.0,
            solver="saga",
            max_iter=10000,
            tol=1e-6,
            random_state=random_state,
        ),
    )
    classifier = SklearnClassifier(model, importance_from="coefficients")
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", ConvergenceWarning)
        classifier.fit(X, y)
    return classifier


def _original_scale(classifier):
    """Return (intercept, coefficients) on the unstandardized predictor scale."""
    scaler, logit = classifier.model_.steps[0][1], classifier.model_.steps[-1][1]
    coef = logit.coef_[0] / scaler.scale_
    intercept = float(logit.intercept_[0] - np.sum(coef * scaler.mean_))
    return intercept, coef


def _fold_scores(X_train, y_train, X_test, y_test, penalties, metric, random_state):
    return [
        score_classifier(_fit_lasso(X_train, y_train, lam, random_state), X_test, y_test, metric)
        for lam in penalties
    ]


def lasso_selection(
    X,
    labels,
    positive_class,
    penalty_path: Optional[Sequence[float]] = None,
    n_penalties: int = 100,
    penalty_min_ratio: Optional[float] = None,
    folds: int = 10,
    metric: str = "auc",
    reference: str = "lambda_min",
    random_state: int = 42,
    n_jobs: Optional[int] = None,
    verbose: bool = True,
) -> SelectionResult:
    """
    Cross-validated lasso logistic regression.

    Args:
        X: Numeric predictor matrix (DataFrame).
        labels: Two-category label vector.
        positive_class: Category mapped to 1 (explicit, never inferred).
        penalty_path: Explicit penalty strengths; automatic path when None.
        n_penalties: Length of the automatic path.
        penalty_min_ratio: Smallest/largest penalty ratio of the automatic path.
        folds: Number of stratified CV folds (>= 2).
        metric: ``auc``, ``accuracy`` or ``log_loss``.
        reference: Penalty whose coefficients define the selection.
        random_state: Seed for folds and the solver.
        n_jobs: Folds evaluated in parallel through joblib.
        verbose: If True, prints progress information.

    Returns:
        SelectionResult; ``details['coefficients']`` holds the coefficient
        table at both reference penalties rounded to two decimals and
        ``details['path']`` the CV curve.
    """
    folds = check_folds(folds)
    check_choice(metric, PENALTY_METRICS, "metric")
    check_choice(reference, REFERENCE_PENALTIES, "reference")

    X = pd.DataFrame(X)
    names = list(X.columns)
    if not names:
        raise DataSufficiencyError("Lasso selection needs at least one predictor")
    y, classes = binarize_labels(labels, positive_class)
    if len(y) != len(X):
        raise DataSufficiencyError(f"{len(X)} rows but {len(y)} labels")
    check_fold_sufficiency(y, folds)
    values = X.to_numpy(dtype=float)

    if penalty_path is None:
        penalties = default_penalty_path(values, y, n_penalties=n_penalties, min_ratio=penalty_min_ratio)
    else:
        penalties = np.asarray(sorted((float(p) for p in penalty_path), reverse=True))
        if penalties.size == 0 or np.any(penalties <= 0):
            raise ParameterError("penalty path must hold positive penalty strengths")

    if verbose:
        print(f"\n[Lasso] Positive class '{classes[1]}' = 1, '{classes[0]}' = 0")
        print(f"    {len(penalties)} penalties in [{penalties[-1]:.2e}, {penalties[0]:.2e}], "
              f"{folds}-fold CV, metric={metric}")

    splitter = StratifiedKFold(n_splits=folds, shuffle=True, random_state=random_state)
    fold_scores = np.array(Parallel(n_jobs=n_jobs)(
        delayed(_fold_scores)(
            values[train], y[train], values[test], y[test], penalties, metric, random_state
        )
        for train, test in splitter.split(values, y)
    ))
    means = fold_scores.mean(axis=0)
    ses = fold_scores.std(axis=0, ddof=1) / np.sqrt(folds)

    # penalties are descending, so the first index reaching a value is the largest penalty
    best = float(means.max())
    idx_min = int(np.flatnonzero(means >= best)[0])
    idx_1se = int(np.flatnonzero(means >= best - ses[idx_min])[0])

    coefficients = []
    intercepts = []
    for lam in penalties:
        intercept, coef = _original_scale(_fit_lasso(values, y, lam, random_state))
        intercepts.append(intercept)
        coefficients.append(coef)
    coefficients = np.array(coefficients)

    refs = {"lambda_min": idx_min, "lambda_1se": idx_1se}
    table = pd.DataFrame(
        {
            key: np.round(np.concatenate([[intercepts[idx]], coefficients[idx]]), COEF_DECIMALS)
            for key, idx in refs.items()
        },
        index=["(Intercept)"] + names,
    )

    chosen = coefficients[refs[reference]]
    selected = [name for name, c in zip(names, chosen) if c != 0]
    standardized = chosen * values.std(axis=0)
    order = np.argsort(-np.abs(standardized), kind="stable")
    ranking = [names[i] for i in order]

    path = pd.DataFrame({
        "penalty": penalties,
        "log_penalty": np.log(penalties),
        "mean_score": means,
        "se_score": ses,
        "n_nonzero": (coefficients != 0).sum(axis=1),
    })

    if verbose:
        for key, idx in refs.items():
            print(f"    {key}={penalties[idx]:.4g}  {metric}={means[idx]:.4f} "
                  f"(se {ses[idx]:.4f}), {int(path['n_nonzero'][idx])} non-zero")
        print(f"    Coefficients (rounded to {COEF_DECIMALS} dp):")
        print(table.to_string(float_format=lambda v: f"{v:.2f}"))
        print(f"    Selected at {reference}: {', '.join(selected) if selected else '(none)'}")

    return SelectionResult(
        method="lasso",
        selected=selected,
        ranking=ranking,
        scores={name: round(float(c), COEF_DECIMALS) for name, c in zip(names, chosen)},
        details={
            "classes": classes,
            "metric": metric,
            "reference": reference,
            "lambda_min": float(penalties[idx_min]),
            "lambda_1se": float(penalties[idx_1se]),
            "coefficients": table,
            "nonzero": {
                key: [n for n, c in zip(names, coefficients[idx]) if c != 0]
                for key, idx in refs.items()
            },
            "path": path,
            "coefficient_path": pd.DataFrame(coefficients, columns=names, index=penalties),
        },
    )
