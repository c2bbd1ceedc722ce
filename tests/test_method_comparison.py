"""
Unit tests for the method comparison.
Usage:
    python -m pytest tests/test_method_comparison.py
"""
import pandas as pd
import pytest

from featsel.analysis import NOT_SELECTED, compare_selections
from featsel.exceptions import ParameterError
from featsel.feature_selection import SelectionResult


@pytest.fixture
def results():
    return {
        "rfe": SelectionResult("rfe", selected=["a", "b"], ranking=["a", "b", "c", "d"]),
        "lasso": SelectionResult("lasso", selected=["b", "a", "d"], ranking=["b", "a", "d", "c"]),
        "forest": SelectionResult(
            "random_forest", selected=["a", "c", "b", "d"], ranking=["a", "c", "b", "d"]
        ),
    }


class TestSelectionResult:

    def test_rank_of(self, results):
        lasso = results["lasso"]
        assert lasso.rank_of("b") == 1
        assert lasso.rank_of("d") == 3
        assert lasso.rank_of("c") is None

    def test_top_skips_unselected(self, results):
        assert results["rfe"].top(3) == ["a", "b"]
        assert results["forest"].top(2) == ["a", "c"]

    def test_to_dict(self, results):
        as_dict = results["rfe"].to_dict()
        assert as_dict["method"] == "rfe"
        assert as_dict["selected"] == ["a", "b"]


class TestCompareSelections:

    def test_rank_table(self, results):
        report = compare_selections(results, top_n=2, verbose=False)
        ranks = report.ranks
        assert list(ranks.columns) == ["rfe", "lasso", "forest"]
        assert sorted(ranks.index) == ["a", "b", "c", "d"]
        assert ranks.loc["a", "rfe"] == 1
        assert ranks.loc["b", "lasso"] == 1
        assert ranks.loc["c", "forest"] == 2
        assert ranks.loc["c", "rfe"] == NOT_SELECTED
        assert ranks.loc["c", "lasso"] == NOT_SELECTED
        assert ranks.loc["d", "rfe"] == NOT_SELECTED

    def test_top_n_intersection(self, results):
        report = compare_selections(results, top_n=2, verbose=False)
        assert report.top_n_by_method["lasso"] == ["b", "a"]
        assert report.top_n_intersection == ["a"]

        wider = compare_selections(results, top_n=3, verbose=False)
        assert wider.top_n_intersection == ["a", "b"]

    def test_empty_intersection(self):
        report = compare_selections(
            [
                SelectionResult("x", selected=["a"], ranking=["a", "b"]),
                SelectionResult("y", selected=["b"], ranking=["b", "a"]),
            ],
            top_n=1,
            verbose=False,
        )
        assert list(report.ranks.columns) == ["x", "y"]
        assert report.top_n_intersection == []

    def test_duplicate_method_names(self, results):
        twin = SelectionResult("rfe", selected=["c"], ranking=["c", "a", "b", "d"])
        with pytest.raises(ParameterError, match="distinct"):
            compare_selections([results["rfe"], twin, results["lasso"]], verbose=False)

    def test_needs_two_results(self, results):
        with pytest.raises(ParameterError):
            compare_selections({"rfe": results["rfe"]}, verbose=False)

    def test_top_n_must_be_positive(self, results):
        with pytest.raises(ParameterError):
            compare_selections(results, top_n=0, verbose=False)

    def test_save(self, results, tmp_path):
        report = compare_selections(results, top_n=2, verbose=False)
        path = report.save(tmp_path / "out", "toy")
        assert path.name == "toy_method_comparison.csv"
        saved = pd.read_csv(path, index_col="predictor")
        assert list(saved.columns) == ["rfe", "lasso", "forest"]
        assert saved.loc["c", "rfe"] == NOT_SELECTED
