"""
Synthetic applicant generation

Draws business applicants uniformly inside FEATURE_RANGES and labels them
with the good-credit threshold rule, for experiments and tests.
"""

from typing import Optional, Tuple

import numpy as np
import pandas as pd

from .business_credit import FEATURE_NAMES, FEATURE_RANGES, label_by_thresholds, threshold_score


def generate_credit_data(n_samples: int = 500,
                         test_size: float = 0.2,
                         label_noise: float = 0.0,
                         objective: str = "binary",
                         random_state: Optional[int] = None) -> Tuple:
    """
    Synthetic business credit data split into train and test sets

    Parameters:
    -----------
    n_samples : int, default=500
        Number of applicants
    test_size : float, default=0.2
        Share of applicants held out for testing
    label_noise : float, default=0.0
        Probability of flipping a binary label
    objective : str, default="binary"
        "binary" labels by the 7-of-8 rule, "regression" uses the share of
        thresholds met
    random_state : int, optional
        Seed for the generator

    Returns:
    --------
    X_train : pd.DataFrame, shape=(n_samples * (1 - test_size), 8)
    y_train : pd.Series
    X_test : pd.DataFrame, shape=(n_samples * test_size, 8)
    y_test : pd.Series
    """
    if not 0.0 <= test_size < 1.0:
        raise ValueError(f"test_size must be in [0, 1), got {test_size}")

    rng = np.random.default_rng(random_state)

    lows = np.array([low for low, _ in FEATURE_RANGES])
    highs = np.array([high for _, high in FEATURE_RANGES])
    X = rng.uniform(lows, highs, size=(n_samples, len(FEATURE_NAMES)))

    # counts and years are whole numbers
    X[:, 4:7] = np.round(X[:, 4:7])

    if objective == "regression":
        y = threshold_score(X)
    else:
        y = label_by_thresholds(X)
        if label_noise > 0:
            flip = rng.random(n_samples) < label_noise
            y = np.where(flip, 1 - y, y)

    frame = pd.DataFrame(X, columns=FEATURE_NAMES)
    target = pd.Series(y, name='good_credit' if objective != "regression" else 'threshold_score')

    n_test = int(n_samples * test_size)
    n_train = n_samples - n_test

    X_train, X_test = frame.iloc[:n_train].reset_index(drop=True), frame.iloc[n_train:].reset_index(drop=True)
    y_train, y_test = target.iloc[:n_train].reset_index(drop=True), target.iloc[n_train:].reset_index(drop=True)

    return X_train, y_train, X_test, y_test
