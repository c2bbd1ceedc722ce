"""
Unit tests for configuration loading and validation.
Usage:
    python -m pytest tests/test_config.py
"""
from pathlib import Path

import numpy as np
import pytest
import yaml

from featsel.config import (
    PipelineConfig,
    RecursiveEliminationConfig,
    RegularizedRegressionConfig,
    build_pipeline_config,
    check_folds,
    load_config,
)
from featsel.exceptions import ConfigError, ParameterError

REPO_CONFIG = Path(__file__).resolve().parents[1] / "config" / "config.yml"


def write_config(tmp_path, content):
    path = tmp_path / "config.yml"
    path.write_text(yaml.safe_dump(content) if isinstance(content, dict) else content)
    return path


class TestLoadConfig:

    def test_repository_config_matches_defaults(self):
        config = build_pipeline_config(load_config(REPO_CONFIG))
        assert config == PipelineConfig(dataset_csv={"breast_cancer": None, "diabetes": None})

    def test_defaults(self):
        config = build_pipeline_config()
        assert config.correlation_filter.threshold == 0.7
        assert config.recursive_elimination.candidate_sizes == (1, 2, 3, 4, 5, 6, 7, 8)
        assert config.recursive_elimination.folds == 10
        assert config.regularized_regression.metric == "auc"
        assert config.ensemble_importance.split_ratio == 0.75
        assert config.top_n == 3

    def test_partial_override(self, tmp_path):
        path = write_config(tmp_path, {
            "random_seed": 7,
            "recursive_elimination": {"candidate_sizes": [2, 4], "folds": 5},
            "regularized_regression": {"penalty_path": [0.1, 0.01]},
            "datasets": {"diabetes": {"csv": "pima.csv"}},
        })
        config = build_pipeline_config(load_config(path))
        assert config.random_seed == 7
        assert config.recursive_elimination.candidate_sizes == (2, 4)
        assert config.recursive_elimination.base_classifier == "random_forest"
        assert config.regularized_regression.penalty_path == (0.1, 0.01)
        assert config.dataset_csv == {"diabetes": "pima.csv"}
        assert config.to_dict()["recursive_elimination"]["folds"] == 5

    def test_empty_file(self, tmp_path):
        assert load_config(write_config(tmp_path, "")) == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "absent.yml")

    def test_malformed_yaml(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(write_config(tmp_path, "threshold: [0.7\n"))

    def test_top_level_must_be_mapping(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(write_config(tmp_path, "- 1\n- 2\n"))

    def test_unknown_key(self):
        with pytest.raises(ConfigError, match="Invalid configuration"):
            build_pipeline_config({"correlation_filter": {"treshold": 0.5}})

    def test_section_must_be_mapping(self):
        with pytest.raises(ConfigError):
            build_pipeline_config({"ensemble_importance": [0.75]})


class TestValidation:

    @pytest.mark.parametrize("section", [
        {"correlation_filter": {"threshold": 0}},
        {"correlation_filter": {"threshold": 1.5}},
        {"recursive_elimination": {"candidate_sizes": []}},
        {"recursive_elimination": {"candidate_sizes": [0, 1]}},
        {"recursive_elimination": {"folds": 1}},
        {"recursive_elimination": {"base_classifier": "svm"}},
        {"recursive_elimination": {"metric": "f1"}},
        {"regularized_regression": {"penalty_path": [0.1, 0]}},
        {"regularized_regression": {"n_penalties": 1}},
        {"regularized_regression": {"penalty_min_ratio": 2.0}},
        {"regularized_regression": {"reference": "lambda_max"}},
        {"ensemble_importance": {"split_ratio": 1.0}},
        {"ensemble_importance": {"num_resamples": 0}},
        {"comparison": {"top_n": 0}},
    ])
    def test_invalid_values(self, section):
        with pytest.raises(ParameterError):
            build_pipeline_config(section)

    def test_configs_are_frozen(self):
        config = RecursiveEliminationConfig()
        with pytest.raises(AttributeError):
            config.folds = 3

    def test_numpy_integer_folds(self):
        assert check_folds(np.int64(5)) == 5
        assert RecursiveEliminationConfig(folds=np.int32(4)).folds == 4
        with pytest.raises(ParameterError):
            check_folds(np.int64(1))
        with pytest.raises(ParameterError):
            check_folds(np.float64(5.0))

    def test_penalty_path_normalized_to_floats(self):
        config = RegularizedRegressionConfig(penalty_path=[1, 0.5])
        assert config.penalty_path == (1.0, 0.5)
