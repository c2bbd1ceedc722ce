"""
Main Orchestration Script

Runs the feature-selection comparison for each dataset:
1. Load the labeled table (OpenML copy or local CSV)
2. Coerce predictors to numbers (named missing-value policy)
3. Correlation filter
4. Recursive feature elimination
5. Lasso logistic regression
6. Random-forest importance
7. Method comparison

Outputs go to <results_dir>/<dataset>/.
"""

import argparse
import sys
from pathlib import Path

from featsel.analysis import run_dataset, STEPS
from featsel.config import build_pipeline_config, load_config
from featsel.exceptions import FeatureSelectionError
from featsel.preprocessing import available_datasets, load_dataset


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Compare feature-selection methods on labeled tabular datasets'
    )
    parser.add_argument('--config', type=str, default='config/config.yml', help='Config file')
    parser.add_argument('--datasets', nargs='+', choices=available_datasets(),
                        help='Datasets to run (default: all)')
    parser.add_argument('--steps', nargs='+', choices=list(STEPS), help='Run specific steps only')
    parser.add_argument('--no_plots', action='store_true', help='Write tables only')
    parser.add_argument('--quiet', action='store_true', help='Suppress progress output')

    args = parser.parse_args(argv)

    try:
        config = build_pipeline_config(load_config(args.config))
    except FeatureSelectionError as exc:
        print(f"[ERROR] {exc}")
        return 2

    verbose = not args.quiet
    datasets = args.datasets or available_datasets()

    if verbose:
        print("\n" + "=" * 80)
        print("FEATURE SELECTION COMPARISON - COMPLETE PIPELINE")
        print("=" * 80)
        print(f"Datasets: {', '.join(datasets)}")
        print(f"Steps: {', '.join(args.steps or STEPS)}")

    failures = 0
    for name in datasets:
        try:
            dataset = load_dataset(
                name,
                csv_path=config.dataset_csv.get(name),
                data_home=config.data_home,
                verbose=verbose,
            )
            run_dataset(
                dataset,
                config=config,
                steps=args.steps,
                output_dir=Path(config.results_dir) / name,
                plots=not args.no_plots,
                verbose=verbose,
            )
        except FeatureSelectionError as exc:
            print(f"\n[ERROR] {name}: {exc}")
            failures += 1

    if verbose:
        print("\n" + "=" * 80)
        print("PIPELINE COMPLETE" if not failures else f"PIPELINE FINISHED WITH {failures} FAILURE(S)")
        print("=" * 80)

    return 1 if failures else 0


if __name__ == '__main__':
    sys.exit(main())
