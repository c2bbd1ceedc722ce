"""Exceptions raised by the feature-selection pipeline."""


class FeatureSelectionError(Exception):
    """Base class for every error raised by ``featsel``."""
    pass


class SchemaError(FeatureSelectionError, ValueError):
    """
    Exception raised when the table does not match the declared schema.

    For example, a declared predictor or label column is absent, or the label
    column holds more (or fewer) than two categories where a binary label is
    required.
    """
    pass


class ParameterError(FeatureSelectionError, ValueError):
    """
    Exception raised for invalid selector configuration.

    Raised before any model is fitted: threshold outside (0, 1], fold count
    below 2, non-positive candidate size, unknown classifier or metric.
    """

    def __init__(self, message, evaluated_sizes=None):
        super().__init__(message)
        self.evaluated_sizes = evaluated_sizes


class DataSufficiencyError(FeatureSelectionError, ValueError):
    """
    Exception raised when there are too few rows for the requested fold
    count or split ratio.
    """
    pass


class ConfigError(FeatureSelectionError):
    """Exception raised when the YAML configuration cannot be read."""
    pass


class DatasetError(FeatureSelectionError):
    """Exception raised when a dataset provider cannot produce its table."""
    pass
