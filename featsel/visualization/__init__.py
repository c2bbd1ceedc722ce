"""Visualization module."""

from .visualizers import (
    plot_correlation_heatmap,
    plot_elimination_path,
    plot_penalty_path,
    plot_importance
)

__all__ = [
    'plot_correlation_heatmap',
    'plot_elimination_path',
    'plot_penalty_path',
    'plot_importance'
]
