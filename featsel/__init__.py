"""Feature-selection comparison on labeled tabular data."""

__version__ = "1.0.0"
