"""
Feature selection package.

Four independent selectors over a numeric predictor matrix:
correlation filtering, cross-validated recursive elimination,
lasso logistic regression and random-forest importance.
"""

from .results import SelectionResult  # noqa: F401
from .correlation_filter import correlation_filter, correlation_matrix, find_correlated  # noqa: F401
from .recursive_elimination import recursive_elimination  # noqa: F401
from .regularized_regression import lasso_selection, default_penalty_path  # noqa: F401
from .ensemble_importance import forest_importance, oob_permutation_importance  # noqa: F401

__all__ = [
    "SelectionResult",
    "correlation_filter",
    "correlation_matrix",
    "find_correlated",
    "recursive_elimination",
    "lasso_selection",
    "default_penalty_path",
    "forest_importance",
    "oob_permutation_importance",
]
