"""
Integration tests for the per-dataset pipeline and the command line entry point.
Usage:
    python -m pytest tests/test_pipeline.py
"""
import numpy as np
import pandas as pd
import pytest
import yaml
from sklearn.datasets import make_classification

import run_all
from featsel.analysis import NOT_SELECTED, STEPS, run_dataset
from featsel.config import (
    EnsembleImportanceConfig,
    PipelineConfig,
    RecursiveEliminationConfig,
    RegularizedRegressionConfig,
)
from featsel.exceptions import ParameterError
from featsel.preprocessing import dataset_from_frame

SMALL_SETTINGS = {
    "recursive_elimination": {
        "candidate_sizes": [1, 2, 3],
        "folds": 3,
        "base_classifier": "decision_tree",
    },
    "regularized_regression": {"n_penalties": 6, "folds": 3},
    "ensemble_importance": {"n_estimators": 25},
}


@pytest.fixture
def small_config():
    return PipelineConfig(
        recursive_elimination=RecursiveEliminationConfig(
            candidate_sizes=(1, 2, 3), folds=3, base_classifier="decision_tree"
        ),
        regularized_regression=RegularizedRegressionConfig(n_penalties=6, folds=3),
        ensemble_importance=EnsembleImportanceConfig(n_estimators=25),
    )


@pytest.fixture
def diabetes_csv(tmp_path):
    X, y = make_classification(
        n_samples=150, n_features=8, n_informative=3, shuffle=False, random_state=2
    )
    frame = pd.DataFrame(
        np.abs(X) + 1.0, columns=["preg", "plas", "pres", "skin", "insu", "mass", "pedi", "age"]
    )
    frame["class"] = np.where(y == 1, "tested_positive", "tested_negative")
    path = tmp_path / "pima.csv"
    frame.to_csv(path, index=False)
    return path


class TestRunDataset:

    def test_all_steps(self, binary_dataset, small_config):
        results = run_dataset(binary_dataset, config=small_config, verbose=False)
        assert set(results) == set(STEPS)
        report = results["compare"]
        assert list(report.ranks.columns) == ["rfe", "lasso", "forest"]
        assert set(report.ranks.index) == set(binary_dataset.predictors)
        assert (report.ranks["forest"] != NOT_SELECTED).all()

    def test_selectors_do_not_share_state(self, binary_dataset, small_config):
        before = binary_dataset.frame.copy()
        alone = run_dataset(binary_dataset, config=small_config, steps=["forest"], verbose=False)
        together = run_dataset(binary_dataset, config=small_config, verbose=False)
        pd.testing.assert_frame_equal(before, binary_dataset.frame)
        pd.testing.assert_frame_equal(
            alone["forest"].details["importance"], together["forest"].details["importance"]
        )

    def test_comparison_skipped_with_one_ranked_result(self, binary_dataset, small_config):
        results = run_dataset(
            binary_dataset, config=small_config, steps=["correlation", "forest", "compare"],
            verbose=False
        )
        assert "compare" not in results
        assert set(results) == {"correlation", "forest"}

    def test_infinite_cells_do_not_break_selectors(self, binary_table, small_config):
        frame, predictors, label = binary_table
        frame = frame.astype({"f0": object})
        frame.loc[[3, 40], "f0"] = ["Infinity", "-inf"]
        dataset = dataset_from_frame(frame, predictors, label, positive_class="yes", name="inf")
        results = run_dataset(dataset, config=small_config, steps=["rfe", "lasso"], verbose=False)
        assert sorted(results["rfe"].ranking) == sorted(predictors)

    def test_unknown_step(self, binary_dataset, small_config):
        with pytest.raises(ParameterError):
            run_dataset(binary_dataset, config=small_config, steps=["bagging"], verbose=False)

    def test_writes_tables_and_figures(self, binary_dataset, small_config, tmp_path):
        run_dataset(binary_dataset, config=small_config, output_dir=tmp_path, verbose=False)
        written = {path.name for path in tmp_path.iterdir()}
        for suffix in ["correlation_matrix", "elimination_path", "lasso_coefficients",
                       "lasso_path", "forest_importance", "method_comparison"]:
            assert f"synthetic_{suffix}.csv" in written
        for suffix in ["correlation_heatmap", "elimination_path", "lasso_path",
                       "forest_importance"]:
            assert f"synthetic_{suffix}.png" in written

        coefficients = pd.read_csv(tmp_path / "synthetic_lasso_coefficients.csv", index_col=0)
        assert coefficients.index[0] == "(Intercept)"

    def test_quiet_run_prints_nothing(self, binary_dataset, small_config, tmp_path, capsys):
        run_dataset(binary_dataset, config=small_config, output_dir=tmp_path, verbose=False)
        assert capsys.readouterr().out == ""
        assert (tmp_path / "synthetic_forest_importance.png").exists()

    def test_tables_only(self, binary_dataset, small_config, tmp_path):
        run_dataset(binary_dataset, config=small_config, steps=["rfe"], output_dir=tmp_path,
                    plots=False, verbose=False)
        assert [path.name for path in tmp_path.iterdir()] == ["synthetic_elimination_path.csv"]


class TestCommandLine:

    def write_config(self, tmp_path, diabetes_csv):
        settings = dict(
            SMALL_SETTINGS,
            results_dir=str(tmp_path / "results"),
            datasets={"diabetes": {"csv": str(diabetes_csv)}},
        )
        path = tmp_path / "config.yml"
        path.write_text(yaml.safe_dump(settings))
        return path

    def test_runs_selected_dataset(self, tmp_path, diabetes_csv):
        config = self.write_config(tmp_path, diabetes_csv)
        status = run_all.main([
            "--config", str(config), "--datasets", "diabetes",
            "--steps", "rfe", "forest", "compare", "--no_plots", "--quiet",
        ])
        assert status == 0
        out = tmp_path / "results" / "diabetes"
        comparison = pd.read_csv(out / "diabetes_method_comparison.csv", index_col="predictor")
        assert list(comparison.columns) == ["rfe", "forest"]
        assert "glucose" in comparison.index
        assert not list(out.glob("*.png"))

    def test_quiet_flag_silences_output(self, tmp_path, diabetes_csv, capsys):
        config = self.write_config(tmp_path, diabetes_csv)
        status = run_all.main([
            "--config", str(config), "--datasets", "diabetes",
            "--steps", "correlation", "forest", "--quiet",
        ])
        assert status == 0
        assert capsys.readouterr().out == ""

    def test_missing_config(self, tmp_path):
        assert run_all.main(["--config", str(tmp_path / "absent.yml"), "--quiet"]) == 2

    def test_invalid_config_value(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text(yaml.safe_dump({"correlation_filter": {"threshold": 2}}))
        assert run_all.main(["--config", str(path), "--quiet"]) == 2

    def test_dataset_failure_is_reported(self, tmp_path):
        config = self.write_config(tmp_path, tmp_path / "missing.csv")
        status = run_all.main([
            "--config", str(config), "--datasets", "diabetes", "--no_plots", "--quiet",
        ])
        assert status == 1
