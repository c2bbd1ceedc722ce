"""
Random-forest variable importance.

The forest is fitted on the train partition only. Two scores per predictor:

* mean decrease in accuracy - for each tree, accuracy on its out-of-bag
  rows minus accuracy after permuting the predictor within those rows,
  averaged over ``num_resamples`` permutations and then over trees;
* mean decrease in impurity - the forest's impurity-based importance.

The test partition is only used to report the forest's held-out accuracy.
"""

from __future__ import annotations

from typing import Optional

import numpy as np
import pandas as pd
from sklearn.ensemble import RandomForestClassifier

from ..exceptions import DataSufficiencyError, ParameterError
from ..preprocessing.data_preprocessing import split_data
from .results import SelectionResult


def oob_permutation_importance(forest, X, y, num_resamples=1, random_state=42):
    """
    Out-of-bag permutation importance of a fitted random forest.

    Args:
        forest: Fitted ``RandomForestClassifier`` (bootstrap=True).
        X: Training matrix the forest was fitted on (ndarray).
        y: Training labels.
        num_resamples: Permutations per predictor and tree.
        random_state: Seed for the permutations.

    Returns:
        tuple: (mean, std) arrays, one entry per predictor.
    """
    rng = np.random.default_rng(random_state)
    X = np.asarray(X, dtype=float)
    y_encoded = np.searchsorted(forest.classes_, np.asarray(y))
    n_rows, n_features = X.shape

    per_tree = []
    for tree, in_bag in zip(forest.estimators_, forest.estimators_samples_):
        oob_mask = np.ones(n_rows, dtype=bool)
        oob_mask[in_bag] = False
        if not oob_mask.any():
            continue
        X_oob = X[oob_mask]
        y_oob = y_encoded[oob_mask]
        baseline = np.mean(tree.predict(X_oob) == y_oob)

        decrease = np.zeros(n_features)
        for j in range(n_features):
            for _ in range(num_resamples):
                X_perm = X_oob.copy()
                X_perm[:, j] = rng.permutation(X_perm[:, j])
                decrease[j] += baseline - np.mean(tree.predict(X_perm) == y_oob)
        per_tree.append(decrease / num_resamples)

    if not per_tree:
        raise DataSufficiencyError("No tree has out-of-bag rows; cannot compute permutation importance")
    per_tree = np.array(per_tree)
    std = per_tree.std(axis=0, ddof=1) if len(per_tree) > 1 else np.zeros(n_features)
    return per_tree.mean(axis=0), std


def forest_importance(
    X,
    y,
    split_ratio: float = 0.75,
    random_state: int = 42,
    num_resamples: int = 1,
    n_estimators: int = 500,
    n_jobs: Optional[int] = None,
    verbose: bool = True,
) -> SelectionResult:
    """
    Fit a random forest on a train split and report per-predictor importance.

    Args:
        X: Numeric predictor matrix (DataFrame).
        y: Label vector.
        split_ratio: Fraction of rows in the train partition.
        random_state: Seed for the split, the forest and the permutations.
        num_resamples: Permutations per predictor and tree.
        n_estimators: Number of trees.
        n_jobs: Parallel tree fitting (results do not depend on it).
        verbose: If True, prints progress information.

    Returns:
        SelectionResult ranked by mean decrease in accuracy;
        ``details['importance']`` holds both scores per predictor.
    """
    if num_resamples < 1:
        raise ParameterError(f"num_resamples must be >= 1, got {num_resamples}")
    if n_estimators < 1:
        raise ParameterError(f"n_estimators must be >= 1, got {n_estimators}")

    X = pd.DataFrame(X)
    names = list(X.columns)
    if not names:
        raise DataSufficiencyError("Forest importance needs at least one predictor")
    y = np.asarray(y)
    if len(y) != len(X):
        raise DataSufficiencyError(f"{len(X)} rows but {len(y)} labels")

    X_train, X_test, y_train, y_test = split_data(
        X.to_numpy(dtype=float), y, split_ratio=split_ratio, random_state=random_state
    )

    if verbose:
        print(f"\n[Random Forest] {n_estimators} trees on {len(y_train)} train rows "
              f"({split_ratio:.0%}), {len(y_test)} test rows held out")

    forest = RandomForestClassifier(
        n_estimators=n_estimators,
        bootstrap=True,
        random_state=random_state,
        n_jobs=n_jobs,
    )
    forest.fit(X_train, y_train)

    mda, mda_std = oob_permutation_importance(
        forest, X_train, y_train, num_resamples=num_resamples, random_state=random_state
    )
    mdi = forest.feature_importances_
    test_accuracy = float(forest.score(X_test, y_test))

    importance = pd.DataFrame(
        {
            "mean_decrease_accuracy": mda,
            "mda_std": mda_std,
            "mean_decrease_impurity": mdi,
        },
        index=names,
    ).sort_values("mean_decrease_accuracy", ascending=False, kind="stable")
    ranking = list(importance.index)

    if verbose:
        print(f"    Test accuracy: {test_accuracy:.4f}")
        print(importance.round(4).to_string())

    return SelectionResult(
        method="random_forest",
        selected=list(ranking),
        ranking=ranking,
        scores={name: float(v) for name, v in importance["mean_decrease_accuracy"].items()},
        details={
            "importance": importance,
            "test_accuracy": test_accuracy,
            "n_train": int(len(y_train)),
            "n_test": int(len(y_test)),
            "split_ratio": split_ratio,
        },
    )
