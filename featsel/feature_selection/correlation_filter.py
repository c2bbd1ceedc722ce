"""
Correlation filtering.

Pairwise Pearson correlation among predictors, then greedy removal: while
some retained pair has |r| above the threshold, take the most correlated
pair and drop the member with the larger mean |r| against the other
retained predictors. On a tie the lower column index is kept.

Each step depends only on the retained set, never on the threshold, so a
lower threshold replays the same removals and possibly continues further.
"""

from __future__ import annotations

from typing import List

import numpy as np
import pandas as pd

from ..config import check_threshold
from ..exceptions import DataSufficiencyError
from .results import SelectionResult


def correlation_matrix(matrix: pd.DataFrame) -> pd.DataFrame:
    """Pearson correlation; constant columns correlate 0 with everything else."""
    values = matrix.to_numpy(dtype=float)
    with np.errstate(invalid="ignore", divide="ignore"):
        corr = np.corrcoef(values, rowvar=False) if values.shape[1] > 1 else np.ones((1, 1))
    corr = np.nan_to_num(np.atleast_2d(corr), nan=0.0)
    corr = np.clip(corr, -1.0, 1.0)
    np.fill_diagonal(corr, 1.0)
    return pd.DataFrame(corr, index=matrix.columns, columns=matrix.columns)


def find_correlated(corr: pd.DataFrame, threshold: float) -> List[str]:
    """
    Return the ordered list of predictors to drop so that no retained pair
    exceeds ``threshold`` in absolute correlation.
    """
    names = list(corr.columns)
    abs_corr = np.abs(corr.to_numpy(dtype=float))
    np.fill_diagonal(abs_corr, 0.0)

    retained = list(range(len(names)))
    removed: List[str] = []

    while len(retained) >= 2:
        sub = abs_corr[np.ix_(retained, retained)]
        upper = np.triu(sub, k=1)
        best = upper.max()
        if best <= threshold:
            break

        # argmax walks row-major, so among equal maxima the lowest (i, j) wins
        i, j = np.unravel_index(np.argmax(upper), upper.shape)
        mean_i = sub[i].sum() / (len(retained) - 1)
        mean_j = sub[j].sum() / (len(retained) - 1)
        drop = i if mean_i > mean_j else j

        removed.append(names[retained[drop]])
        del retained[drop]

    return removed


def correlation_filter(matrix, threshold=0.7, verbose=True):
    """
    Run the correlation filter over a numeric matrix.

    Args:
        matrix: Numeric predictor matrix (DataFrame).
        threshold: Absolute correlation threshold in (0, 1].
        verbose: If True, prints progress information.

    Returns:
        SelectionResult: ``selected`` holds the retained predictors in column
        order, ``details['removed']`` the removal order and
        ``details['correlation']`` the full correlation matrix.
    """
    threshold = check_threshold(threshold)
    matrix = pd.DataFrame(matrix)
    if matrix.shape[1] == 0:
        raise DataSufficiencyError("Correlation filter needs at least one predictor")
    if matrix.shape[0] < 2:
        raise DataSufficiencyError("Correlation filter needs at least two rows")

    if verbose:
        print(f"\n[Correlation Filter] Computing correlation matrix over {matrix.shape[1]} predictors...")

    corr = correlation_matrix(matrix)
    removed = find_correlated(corr, threshold)
    retained = [c for c in matrix.columns if c not in removed]

    retained_corr = np.abs(corr.loc[retained, retained].to_numpy())
    np.fill_diagonal(retained_corr, 0.0)
    max_retained = float(retained_corr.max()) if len(retained) > 1 else 0.0

    if verbose:
        print(f"    Threshold (|r|): {threshold:.2f}")
        if removed:
            print(f"    Removed {len(removed)}/{matrix.shape[1]}: {', '.join(removed)}")
        else:
            print("    No predictor pair exceeds the threshold")
        print(f"    Max |r| among retained predictors: {max_retained:.3f}")

    mean_abs = (np.abs(corr).sum(axis=0) - 1.0) / max(len(corr) - 1, 1)

    return SelectionResult(
        method="correlation_filter",
        selected=retained,
        ranking=retained,
        scores={name: round(float(v), 4) for name, v in mean_abs.items()},
        details={
            "threshold": threshold,
            "removed": removed,
            "correlation": corr,
            "max_retained_abs_correlation": max_retained,
        },
    )
