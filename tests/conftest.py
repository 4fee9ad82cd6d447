"""
Pytest configuration and shared fixtures
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from credit_gbdt.data.synthetic import generate_credit_data


@pytest.fixture
def step_data():
    """Four rows, one feature, cleanly separable at 2.5."""
    X = [[1.0], [2.0], [3.0], [4.0]]
    y = [0, 0, 1, 1]
    return X, y


@pytest.fixture
def credit_data():
    return generate_credit_data(n_samples=200, test_size=0.25, random_state=7)


@pytest.fixture
def regression_data():
    rng = np.random.default_rng(3)
    X = rng.uniform(0, 1, size=(80, 3))
    y = np.clip(0.2 + 0.6 * X[:, 0] - 0.3 * X[:, 2] + rng.normal(0, 0.05, size=80), 0, 1)
    return X, y
