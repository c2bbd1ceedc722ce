"""Analysis module: method comparison and the per-dataset pipeline."""

from .method_comparison import ComparisonReport, compare_selections, NOT_SELECTED
from .pipeline import run_dataset, save_tables, STEPS

__all__ = [
    'ComparisonReport',
    'compare_selections',
    'NOT_SELECTED',
    'run_dataset',
    'save_tables',
    'STEPS'
]
