"""
Per-dataset pipeline.

load -> coerce -> correlation filter / recursive elimination / lasso /
random forest (independent, each on its own copy of the matrix) -> compare.
Tables are written as CSV and figures as PNG under ``<results_dir>/<dataset>``.
"""

from pathlib import Path

from ..config import PipelineConfig
from ..exceptions import ParameterError
from ..feature_selection import (
    correlation_filter,
    forest_importance,
    lasso_selection,
    recursive_elimination,
)
from ..preprocessing import coerce_numeric
from ..visualization import (
    plot_correlation_heatmap,
    plot_elimination_path,
    plot_importance,
    plot_penalty_path,
)
from .method_comparison import compare_selections

STEPS = ('correlation', 'rfe', 'lasso', 'forest', 'compare')
RANKED_STEPS = ('rfe', 'lasso', 'forest')


def save_tables(results, output_dir, dataset_name, verbose=True):
    """Write each selector's table as CSV. Returns the written paths."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    name = dataset_name.lower()
    written = []

    def write(frame, suffix, **kwargs):
        path = output_dir / f"{name}_{suffix}.csv"
        frame.to_csv(path, **kwargs)
        if verbose:
            print(f"    [Saved] {path}")
        written.append(path)

    if 'correlation' in results:
        details = results['correlation'].details
        write(details['correlation'], 'correlation_matrix')
    if 'rfe' in results:
        write(results['rfe'].details['path'], 'elimination_path', index=False)
    if 'lasso' in results:
        write(results['lasso'].details['coefficients'], 'lasso_coefficients')
        write(results['lasso'].details['path'], 'lasso_path', index=False)
    if 'forest' in results:
        write(results['forest'].details['importance'], 'forest_importance')
    return written


def run_dataset(dataset, config=None, steps=None, output_dir=None, plots=True, verbose=True):
    """
    Run the selected steps over one dataset.

    Args:
        dataset: Dataset returned by a provider.
        config: PipelineConfig (defaults when None).
        steps: Subset of :data:`STEPS`; all steps when None.
        output_dir: Where tables and figures go; nothing is written when None.
        plots: Write figures as well as tables.
        verbose: Print progress and summaries.

    Returns:
        dict: step name -> SelectionResult, plus ``'compare'`` -> ComparisonReport.
    """
    config = config or PipelineConfig()
    steps = list(steps) if steps else list(STEPS)
    unknown = [s for s in steps if s not in STEPS]
    if unknown:
        raise ParameterError(f"Unknown steps {unknown}. Available: {list(STEPS)}")

    if verbose:
        print("\n" + "=" * 80)
        print(f"FEATURE SELECTION: {dataset.name} "
              f"({dataset.n_rows} rows, {len(dataset.predictors)} predictors)")
        print("=" * 80)

    matrix = coerce_numeric(
        dataset.frame, dataset.predictors, policy=config.missing_value_policy, verbose=verbose
    )
    labels = dataset.frame[dataset.label].to_numpy()
    seed = config.random_seed
    results = {}

    if 'correlation' in steps:
        results['correlation'] = correlation_filter(
            matrix.copy(), threshold=config.correlation_filter.threshold, verbose=verbose
        )

    if 'rfe' in steps:
        rfe_cfg = config.recursive_elimination
        results['rfe'] = recursive_elimination(
            matrix.copy(),
            labels.copy(),
            candidate_sizes=rfe_cfg.candidate_sizes,
            folds=rfe_cfg.folds,
            base_classifier=rfe_cfg.base_classifier,
            metric=rfe_cfg.metric,
            random_state=seed,
            n_jobs=config.n_jobs,
            verbose=verbose,
        )

    if 'lasso' in steps:
        lasso_cfg = config.regularized_regression
        results['lasso'] = lasso_selection(
            matrix.copy(),
            labels.copy(),
            positive_class=dataset.positive_class,
            penalty_path=lasso_cfg.penalty_path,
            n_penalties=lasso_cfg.n_penalties,
            penalty_min_ratio=lasso_cfg.penalty_min_ratio,
            folds=lasso_cfg.folds,
            metric=lasso_cfg.metric,
            reference=lasso_cfg.reference,
            random_state=seed,
            n_jobs=config.n_jobs,
            verbose=verbose,
        )

    if 'forest' in steps:
        forest_cfg = config.ensemble_importance
        results['forest'] = forest_importance(
            matrix.copy(),
            labels.copy(),
            split_ratio=forest_cfg.split_ratio,
            random_state=seed,
            num_resamples=forest_cfg.num_resamples,
            n_estimators=forest_cfg.n_estimators,
            n_jobs=config.n_jobs,
            verbose=verbose,
        )

    ranked = {step: results[step] for step in RANKED_STEPS if step in results}
    if 'compare' in steps:
        if len(ranked) >= 2:
            results['compare'] = compare_selections(ranked, top_n=config.top_n, verbose=verbose)
        elif verbose:
            print("\n[Comparison] [WARNING] Needs at least two of rfe/lasso/forest; skipped")

    if output_dir is not None:
        output_dir = Path(output_dir)
        save_tables(results, output_dir, dataset.name, verbose=verbose)
        if 'compare' in results:
            path = results['compare'].save(output_dir, dataset.name.lower())
            if verbose:
                print(f"    [Saved] {path}")
        if plots:
            if 'correlation' in results:
                plot_correlation_heatmap(results['correlation'], dataset.name, output_dir, verbose)
            if 'rfe' in results:
                plot_elimination_path(results['rfe'], dataset.name, output_dir, verbose)
            if 'lasso' in results:
                plot_penalty_path(results['lasso'], dataset.name, output_dir, verbose)
            if 'forest' in results:
                plot_importance(results['forest'], dataset.name, output_dir, verbose)

    return results
