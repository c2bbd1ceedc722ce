"""
Pipeline configuration.

The YAML file (``config/config.yml`` by default) is read with
``yaml.safe_load`` and turned into frozen dataclasses, one per selector.
Every dataclass validates itself on construction so that invalid settings
are rejected before any model is fitted.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Dict, Optional, Tuple

import yaml

from .exceptions import ConfigError, ParameterError

BASE_CLASSIFIERS = ("random_forest", "logistic_regression", "decision_tree")
WRAPPER_METRICS = ("accuracy", "auc")
PENALTY_METRICS = ("auc", "accuracy", "log_loss")
REFERENCE_PENALTIES = ("lambda_min", "lambda_1se")


def check_folds(folds) -> int:
    """Validate a cross-validation fold count."""
    if isinstance(folds, bool) or not isinstance(folds, numbers.Integral) or folds < 2:
        raise ParameterError(f"folds must be an integer >= 2, got {folds!r}")
    return int(folds)


def check_threshold(threshold) -> float:
    """Validate a correlation threshold in (0, 1]."""
    try:
        value = float(threshold)
    except (TypeError, ValueError):
        raise ParameterError(f"threshold must be a number in (0, 1], got {threshold!r}")
    if not 0.0 < value <= 1.0:
        raise ParameterError(f"threshold must lie in (0, 1], got {value}")
    return value


def check_choice(value, choices, name) -> str:
    if value not in choices:
        raise ParameterError(f"{name} must be one of {list(choices)}, got {value!r}")
    return value


@dataclass(frozen=True)
class CorrelationFilterConfig:
    threshold: float = 0.7

    def __post_init__(self):
        object.__setattr__(self, "threshold", check_threshold(self.threshold))


@dataclass(frozen=True)
class RecursiveEliminationConfig:
    candidate_sizes: Tuple[int, ...] = (1, 2, 3, 4, 5, 6, 7, 8)
    folds: int = 10
    base_classifier: str = "random_forest"
    metric: str = "accuracy"

    def __post_init__(self):
        sizes = tuple(int(s) for s in self.candidate_sizes)
        if not sizes:
            raise ParameterError("candidate_sizes must not be empty")
        if any(s <= 0 for s in sizes):
            raise ParameterError(f"candidate_sizes must be positive, got {list(sizes)}")
        object.__setattr__(self, "candidate_sizes", sizes)
        object.__setattr__(self, "folds", check_folds(self.folds))
        check_choice(self.base_classifier, BASE_CLASSIFIERS, "base_classifier")
        check_choice(self.metric, WRAPPER_METRICS, "metric")


@dataclass(frozen=True)
class RegularizedRegressionConfig:
    penalty_path: Optional[Tuple[float, ...]] = None
    n_penalties: int = 100
    penalty_min_ratio: Optional[float] = None
    folds: int = 10
    metric: str = "auc"
    reference: str = "lambda_min"

    def __post_init__(self):
        if self.penalty_path is not None:
            path = tuple(float(p) for p in self.penalty_path)
            if not path or any(p <= 0 for p in path):
                raise ParameterError("penalty_path must hold positive penalty strengths")
            object.__setattr__(self, "penalty_path", path)
        if self.n_penalties < 2:
            raise ParameterError(f"n_penalties must be >= 2, got {self.n_penalties}")
        if self.penalty_min_ratio is not None and not 0.0 < self.penalty_min_ratio < 1.0:
            raise ParameterError(
                f"penalty_min_ratio must lie in (0, 1), got {self.penalty_min_ratio}"
            )
        object.__setattr__(self, "folds", check_folds(self.folds))
        check_choice(self.metric, PENALTY_METRICS, "metric")
        check_choice(self.reference, REFERENCE_PENALTIES, "reference")


@dataclass(frozen=True)
class EnsembleImportanceConfig:
    split_ratio: float = 0.75
    num_resamples: int = 1
    n_estimators: int = 500

    def __post_init__(self):
        if not 0.0 < self.split_ratio < 1.0:
            raise ParameterError(f"split_ratio must lie in (0, 1), got {self.split_ratio}")
        if self.num_resamples < 1:
            raise ParameterError(f"num_resamples must be >= 1, got {self.num_resamples}")
        if self.n_estimators < 1:
            raise ParameterError(f"n_estimators must be >= 1, got {self.n_estimators}")


@dataclass(frozen=True)
class PipelineConfig:
    random_seed: int = 42
    n_jobs: Optional[int] = None
    data_home: str = "data"
    results_dir: str = "results"
    missing_value_policy: str = "zero"
    dataset_csv: Dict[str, Optional[str]] = field(default_factory=dict)
    correlation_filter: CorrelationFilterConfig = field(default_factory=CorrelationFilterConfig)
    recursive_elimination: RecursiveEliminationConfig = field(
        default_factory=RecursiveEliminationConfig
    )
    regularized_regression: RegularizedRegressionConfig = field(
        default_factory=RegularizedRegressionConfig
    )
    ensemble_importance: EnsembleImportanceConfig = field(default_factory=EnsembleImportanceConfig)
    top_n: int = 3

    def __post_init__(self):
        if self.top_n < 1:
            raise ParameterError(f"comparison.top_n must be >= 1, got {self.top_n}")

    def to_dict(self) -> Dict:
        return asdict(self)


def load_config(config_path='config/config.yml'):
    """Load configuration from YAML file."""
    path = Path(config_path)
    try:
        with open(path, 'r') as f:
            config = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed YAML in {path}: {exc}") from exc
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(f"Top level of {path} must be a mapping")
    return config


def build_pipeline_config(config: Optional[Dict] = None) -> PipelineConfig:
    """
    Turn a raw config mapping (as returned by :func:`load_config`) into a
    validated :class:`PipelineConfig`. Missing sections fall back to defaults.
    """
    config = config or {}

    def section(name):
        value = config.get(name) or {}
        if not isinstance(value, dict):
            raise ConfigError(f"Config section '{name}' must be a mapping")
        return value

    datasets = section('datasets')
    dataset_csv = {
        name: (opts or {}).get('csv') for name, opts in datasets.items()
    }

    rfe_cfg = section('recursive_elimination')
    if 'candidate_sizes' in rfe_cfg:
        rfe_cfg = dict(rfe_cfg, candidate_sizes=tuple(rfe_cfg['candidate_sizes']))
    lasso_cfg = section('regularized_regression')
    if lasso_cfg.get('penalty_path') is not None:
        lasso_cfg = dict(lasso_cfg, penalty_path=tuple(lasso_cfg['penalty_path']))

    try:
        return PipelineConfig(
            random_seed=int(config.get('random_seed', 42)),
            n_jobs=config.get('n_jobs'),
            data_home=str(config.get('data_home', 'data')),
            results_dir=str(config.get('results_dir', 'results')),
            missing_value_policy=config.get('missing_value_policy', 'zero'),
            dataset_csv=dataset_csv,
            correlation_filter=CorrelationFilterConfig(**section('correlation_filter')),
            recursive_elimination=RecursiveEliminationConfig(**rfe_cfg),
            regularized_regression=RegularizedRegressionConfig(**lasso_cfg),
            ensemble_importance=EnsembleImportanceConfig(**section('ensemble_importance')),
            top_n=int(section('comparison').get('top_n', 3)),
        )
    except TypeError as exc:
        # Unknown keys in a section surface as unexpected keyword arguments.
        raise ConfigError(f"Invalid configuration: {exc}") from exc
