"""
Method Comparison Module

Cross-references the predictor rankings produced by the selectors:
- rank of every predictor under each method ("not selected" when dropped)
- predictors shared by every method's top-N

Descriptive only; no significance testing.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

import pandas as pd

from ..exceptions import ParameterError

NOT_SELECTED = "not selected"


@dataclass
class ComparisonReport:
    """Rank-agreement summary across selectors."""

    ranks: pd.DataFrame
    top_n: int
    top_n_by_method: Dict[str, List[str]] = field(default_factory=dict)
    top_n_intersection: List[str] = field(default_factory=list)

    def save(self, output_dir, dataset_name):
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        output_file = output_dir / f"{dataset_name}_method_comparison.csv"
        self.ranks.to_csv(output_file, index_label="predictor")
        return output_file


def compare_selections(results, top_n=3, verbose=True):
    """
    Compare two or more selection results.

    Args:
        results: Mapping of method name to SelectionResult (or a list of
            results, keyed by their ``method`` attribute).
        top_n: Size of the per-method top list intersected across methods.
        verbose: If True, prints the rank table.

    Returns:
        ComparisonReport
    """
    if not isinstance(results, dict):
        results = list(results)
        methods = [res.method for res in results]
        duplicates = sorted({m for m in methods if methods.count(m) > 1})
        if duplicates:
            raise ParameterError(
                f"Selection results must have distinct method names, repeated: {duplicates}"
            )
        results = {res.method: res for res in results}
    if len(results) < 2:
        raise ParameterError(f"Need at least two selection results to compare, got {len(results)}")
    if top_n < 1:
        raise ParameterError(f"top_n must be >= 1, got {top_n}")

    predictors: List[str] = []
    for res in results.values():
        for name in res.ranking + res.selected:
            if name not in predictors:
                predictors.append(name)

    ranks = pd.DataFrame(index=predictors, columns=list(results), dtype=object)
    for method, res in results.items():
        for name in predictors:
            rank = res.rank_of(name)
            ranks.loc[name, method] = rank if rank is not None else NOT_SELECTED

    top_by_method = {method: res.top(top_n) for method, res in results.items()}
    shared = set.intersection(*(set(top) for top in top_by_method.values()))
    # keep the order of the first method's top list
    first = next(iter(top_by_method.values()))
    intersection = [name for name in first if name in shared]

    if verbose:
        print(f"\n{'='*80}")
        print("METHOD COMPARISON")
        print(f"{'='*80}")
        print(ranks.to_string())
        for method, top in top_by_method.items():
            print(f"  {method:<24} top {top_n}: {', '.join(top)}")
        print(f"  Shared top {top_n}: {', '.join(intersection) if intersection else '(none)'}")

    return ComparisonReport(
        ranks=ranks,
        top_n=top_n,
        top_n_by_method=top_by_method,
        top_n_intersection=intersection,
    )
