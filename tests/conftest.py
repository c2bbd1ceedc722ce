import os
import sys
import warnings

import numpy as np
import pandas as pd
import pytest
from sklearn.datasets import make_classification

# Project root on sys.path so `featsel` and `run_all` import without installing.
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from featsel.preprocessing import dataset_from_frame  # noqa: E402

# Solver convergence chatter from scikit-learn is expected on the tiny
# synthetic tables used here. Deprecations are left visible.
warnings.filterwarnings("ignore", message=".*did not converge.*")


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "network: needs the OpenML datasets (skipped when they cannot be fetched)"
    )


@pytest.fixture
def binary_table():
    """300 rows, 6 predictors (3 informative), string label 'no'/'yes'."""
    X, y = make_classification(
        n_samples=300,
        n_features=6,
        n_informative=3,
        n_redundant=0,
        n_repeated=0,
        shuffle=False,
        class_sep=1.5,
        random_state=0,
    )
    columns = [f"f{i}" for i in range(X.shape[1])]
    frame = pd.DataFrame(X, columns=columns)
    frame["outcome"] = np.where(y == 1, "yes", "no")
    return frame, columns, "outcome"


@pytest.fixture
def binary_dataset(binary_table):
    frame, predictors, label = binary_table
    return dataset_from_frame(frame, predictors, label, positive_class="yes", name="synthetic")


@pytest.fixture
def correlated_matrix():
    """a/b nearly identical (r ~ 0.99), d moderately anti-correlated with a (r ~ -0.55)."""
    rng = np.random.default_rng(7)
    n = 200
    a = rng.normal(size=n)
    return pd.DataFrame({
        "a": a,
        "b": a + rng.normal(scale=0.1, size=n),
        "c": rng.normal(size=n),
        "d": -a + rng.normal(scale=1.5, size=n),
        "e": rng.normal(size=n),
    })
