"""Data loading and preprocessing module."""

from .data_loader import Dataset, DATASETS, available_datasets, load_dataset, dataset_from_frame
from .data_preprocessing import (
    MISSING_VALUE_POLICIES,
    binarize_labels,
    check_columns,
    check_fold_sufficiency,
    coerce_numeric,
    median_fill,
    split_data,
    zero_fill,
)

__all__ = [
    'Dataset',
    'DATASETS',
    'available_datasets',
    'load_dataset',
    'dataset_from_frame',
    'MISSING_VALUE_POLICIES',
    'binarize_labels',
    'check_columns',
    'check_fold_sufficiency',
    'coerce_numeric',
    'median_fill',
    'split_data',
    'zero_fill',
]
