"""
Data Preprocessing Module

Handles:
1. Schema checks (declared predictor / label columns present)
2. Numeric coercion of predictors with a named missing-value policy
3. Explicit binarization of a two-category label
4. Deterministic stratified train/test split
5. Row-count checks for cross-validation
"""

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split

from ..exceptions import DataSufficiencyError, ParameterError, SchemaError


def check_columns(frame, predictors, label=None):
    """
    Fail fast when a declared predictor or label column is absent.

    Args:
        frame: pandas DataFrame.
        predictors: Iterable of predictor column names.
        label: Optional label column name.
    """
    required = list(predictors) + ([label] if label is not None else [])
    missing = [col for col in required if col not in frame.columns]
    if missing:
        raise SchemaError(f"Columns missing from table: {missing}")
    if label is not None and label in predictors:
        raise SchemaError(f"Label column '{label}' is also declared as a predictor")


def zero_fill(matrix):
    """Replace missing values with 0.0. Lossy: missing becomes a measured zero."""
    return matrix.fillna(0.0)


def median_fill(matrix):
    """Replace missing values with the column median (0.0 for all-missing columns)."""
    return matrix.fillna(matrix.median()).fillna(0.0)


MISSING_VALUE_POLICIES = {
    "zero": zero_fill,
    "median": median_fill,
}


def coerce_numeric(frame, predictors, policy="zero", verbose=True):
    """
    Convert every predictor column to float64 and fill missing values.

    Values that cannot be parsed as finite numbers are treated as missing and then
    filled by the named ``policy`` (see :data:`MISSING_VALUE_POLICIES`).
    Coercing an already coerced matrix returns the same matrix.

    Args:
        frame: Table holding the predictor columns.
        predictors: Ordered predictor column names.
        policy: Missing-value policy name or a callable DataFrame -> DataFrame.
        verbose: If True, reports how many cells were filled.

    Returns:
        pd.DataFrame: numeric matrix with the predictor columns in order.
    """
    predictors = list(predictors)
    check_columns(frame, predictors)

    if callable(policy):
        fill = policy
    elif policy in MISSING_VALUE_POLICIES:
        fill = MISSING_VALUE_POLICIES[policy]
    else:
        raise ParameterError(
            f"Unknown missing-value policy '{policy}'. "
            f"Available: {sorted(MISSING_VALUE_POLICIES)}"
        )

    # astype(object) lets categorical columns (e.g. from OpenML) parse like strings
    matrix = pd.DataFrame(
        {col: pd.to_numeric(frame[col].astype(object), errors="coerce") for col in predictors},
        index=frame.index,
    ).astype(np.float64)
    # "inf" and "Infinity" parse as numbers but no model can use them
    matrix = matrix.replace([np.inf, -np.inf], np.nan)

    n_missing = int(matrix.isna().sum().sum())
    if n_missing and verbose:
        print(f"    [WARNING] Found {n_missing} missing/non-numeric predictor values")
        print(f"             Filling with policy '{getattr(fill, '__name__', policy)}'...")

    return fill(matrix).astype(np.float64)


def binarize_labels(labels, positive_class):
    """
    Map a two-category label to 0/1 with an explicit positive class.

    Args:
        labels: Sequence of label values.
        positive_class: Category mapped to 1; the other category maps to 0.

    Returns:
        tuple: (y, classes) where ``y`` is an int array and ``classes`` is
               ``(negative_class, positive_class)``.
    """
    labels = pd.Series(labels).astype(str).str.strip()
    categories = sorted(labels.unique())
    if len(categories) != 2:
        raise SchemaError(
            f"A binary label needs exactly two categories, found {len(categories)}: {categories}"
        )
    positive_class = str(positive_class)
    if positive_class not in categories:
        raise SchemaError(
            f"Positive class '{positive_class}' is not one of the label categories {categories}"
        )
    negative_class = categories[0] if categories[1] == positive_class else categories[1]
    y = (labels == positive_class).astype(int).to_numpy()
    return y, (negative_class, positive_class)


def check_fold_sufficiency(y, folds):
    """Every class needs at least ``folds`` rows for stratified k-fold CV."""
    classes, counts = np.unique(np.asarray(y), return_counts=True)
    if len(classes) < 2:
        raise DataSufficiencyError("Cross-validation needs at least two label classes")
    if counts.min() < folds:
        smallest = classes[np.argmin(counts)]
        raise DataSufficiencyError(
            f"Class '{smallest}' has {counts.min()} rows, fewer than the {folds} folds requested"
        )


def split_data(X, y, split_ratio=0.75, random_state=42):
    """
    Split data into train and test partitions, stratified on the label.

    Args:
        X: Numeric matrix.
        y: Label vector.
        split_ratio: Fraction of rows in the train partition.
        random_state: Random seed.

    Returns:
        tuple: (X_train, X_test, y_train, y_test)
    """
    if not 0.0 < split_ratio < 1.0:
        raise ParameterError(f"split_ratio must lie in (0, 1), got {split_ratio}")

    y = np.asarray(y)
    n_rows = len(y)
    n_classes = len(np.unique(y))
    n_test = int(np.ceil(n_rows * (1.0 - split_ratio)))
    n_train = n_rows - n_test
    if n_classes < 2 or n_test < n_classes or n_train < n_classes:
        raise DataSufficiencyError(
            f"{n_rows} rows cannot be split {split_ratio:.0%}/{1 - split_ratio:.0%} "
            f"with every class present in both partitions"
        )
    try:
        return train_test_split(
            X, y, train_size=split_ratio, random_state=random_state, stratify=y
        )
    except ValueError as exc:
        raise DataSufficiencyError(f"Stratified split failed: {exc}") from exc
