"""
Visualization Module

Creates the per-selector figures: correlation heatmap, elimination path,
lasso cross-validation curve and random-forest importance bars.
"""

import numpy as np
from pathlib import Path
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
import seaborn as sns


def _save(fig, output_dir, filename, verbose=True):
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_file = output_dir / filename
    fig.tight_layout()
    fig.savefig(output_file, dpi=300, bbox_inches='tight')
    if verbose:
        print(f"    [Saved] {output_file}")
    plt.close(fig)
    return output_file


def plot_correlation_heatmap(result, dataset_name, output_dir='results', verbose=True):
    """
    Heatmap of the predictor correlation matrix; removed predictors are
    marked with an asterisk.

    Args:
        result: SelectionResult from the correlation filter.
        dataset_name: Dataset name used in title and filename.
        output_dir: Output directory.
        verbose: If True, prints progress information.
    """
    if verbose:
        print(f"\n[Visualization] Correlation heatmap for {dataset_name}...")
    corr = result.details['correlation']
    removed = set(result.details['removed'])
    labels = [f"{name}*" if name in removed else name for name in corr.columns]

    size = max(6, 0.7 * len(labels))
    fig, ax = plt.subplots(figsize=(size, size * 0.85))
    mask = np.triu(np.ones(corr.shape, dtype=bool), k=1)
    sns.heatmap(corr, mask=mask, annot=True, fmt='.2f', cmap='RdBu_r', vmin=-1, vmax=1,
                square=True, xticklabels=labels, yticklabels=labels, ax=ax,
                cbar_kws={'label': 'Pearson r'})
    ax.set_title(f"{dataset_name}: correlation (|r| > {result.details['threshold']:.2f} removed *)")
    return _save(fig, output_dir, f"{dataset_name.lower()}_correlation_heatmap.png", verbose)


def plot_elimination_path(result, dataset_name, output_dir='results', verbose=True):
    """Mean CV score (+/- std) against subset size for recursive elimination."""
    if verbose:
        print(f"\n[Visualization] Elimination path for {dataset_name}...")
    path = result.details['path']
    best_size = result.details['best_size']

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.errorbar(path['size'], path['mean_score'], yerr=path['std_score'],
                marker='o', capsize=3, color='steelblue')
    ax.axvline(best_size, color='firebrick', linestyle='--', label=f'best size = {best_size}')
    ax.set_xlabel('Number of predictors')
    ax.set_ylabel(f"CV {result.details['metric']}")
    ax.set_xticks(path['size'])
    ax.set_title(f'{dataset_name}: recursive feature elimination')
    ax.legend()
    return _save(fig, output_dir, f"{dataset_name.lower()}_elimination_path.png", verbose)


def plot_penalty_path(result, dataset_name, output_dir='results', verbose=True):
    """
    Lasso CV score (+/- one standard error) against log penalty, with the
    coefficient paths underneath. Both reference penalties are marked.
    """
    if verbose:
        print(f"\n[Visualization] Lasso penalty path for {dataset_name}...")
    path = result.details['path']
    coef_path = result.details['coefficient_path']
    log_min = np.log(result.details['lambda_min'])
    log_1se = np.log(result.details['lambda_1se'])

    fig, axes = plt.subplots(2, 1, figsize=(9, 9), sharex=True)

    axes[0].errorbar(path['log_penalty'], path['mean_score'], yerr=path['se_score'],
                     fmt='o', markersize=3, color='firebrick', ecolor='lightgray', capsize=2)
    axes[0].set_ylabel(f"CV {result.details['metric']}")
    axes[0].set_title(f'{dataset_name}: lasso logistic regression')

    for name in coef_path.columns:
        axes[1].plot(np.log(coef_path.index), coef_path[name], label=name)
    axes[1].axhline(0, color='black', linewidth=0.5)
    axes[1].set_xlabel('log(penalty)')
    axes[1].set_ylabel('Coefficient')
    axes[1].legend(fontsize=8, loc='best')

    for ax in axes:
        ax.axvline(log_min, color='gray', linestyle='--', label='lambda_min')
        ax.axvline(log_1se, color='gray', linestyle=':', label='lambda_1se')

    return _save(fig, output_dir, f"{dataset_name.lower()}_lasso_path.png", verbose)


def plot_importance(result, dataset_name, output_dir='results', verbose=True):
    """Two-panel bar chart: mean decrease in accuracy and in impurity."""
    if verbose:
        print(f"\n[Visualization] Random-forest importance for {dataset_name}...")
    importance = result.details['importance']

    fig, axes = plt.subplots(1, 2, figsize=(12, max(4, 0.45 * len(importance))))
    for ax, column, title in zip(
        axes,
        ['mean_decrease_accuracy', 'mean_decrease_impurity'],
        ['Mean decrease in accuracy', 'Mean decrease in impurity'],
    ):
        ordered = importance[column].sort_values()
        ax.barh(ordered.index, ordered.values, color='seagreen')
        ax.set_title(title)
        ax.set_xlabel(column.replace('_', ' '))
    fig.suptitle(f'{dataset_name}: random forest ({result.details["n_train"]} train rows)')
    return _save(fig, output_dir, f"{dataset_name.lower()}_forest_importance.png", verbose)
