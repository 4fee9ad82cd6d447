"""
Business credit reference data

Feature definitions, good-credit thresholds and the hand-built reference
applicants used to train and sanity-check the scoring model. Every feature
matrix in this module has the eight columns of FEATURE_NAMES, in order.
"""

from typing import Tuple

import numpy as np
import pandas as pd

FEATURE_NAMES = [
    'Annual Revenue',
    'Debt to Equity',
    'Payment History',
    'Cash Reserves',
    'Years in Business',
    'Industry Risk',
    'Late Payments',
    'Credit Utilization'
]

# (min, max) normalisation range per feature
FEATURE_RANGES = [
    (0.0, 50.0),    # millions
    (0.0, 3.0),     # ratio
    (0.0, 1.0),     # share of on-time payments
    (0.0, 5.0),     # millions
    (0.0, 15.0),    # years
    (0.0, 10.0),    # scale 1-10
    (0.0, 12.0),    # count
    (0.0, 1.0)
]

THRESHOLDS = {
    'MIN_ANNUAL_REVENUE': 1.0,
    'MAX_DEBT_TO_EQUITY': 1.3,
    'MIN_PAYMENT_HISTORY': 0.78,
    'MIN_CASH_RESERVES': 0.5,
    'MIN_YEARS_IN_BUSINESS': 2,
    'MAX_INDUSTRY_RISK': 7,
    'MAX_LATE_PAYMENTS': 6,
    'MAX_CREDIT_UTILIZATION': 0.65
}

# criteria an applicant must meet out of the eight for a "good" label
MIN_CRITERIA_FOR_GOOD = 7

_REFERENCE_TRAINING_ROWS = [
    # threshold edge cases
    [1.0, 0.8, 0.78, 0.5, 2, 7, 6, 0.65],
    [1.1, 1.3, 0.79, 0.51, 3, 6, 5, 0.64],
    [0.9, 1.4, 0.77, 0.49, 1, 8, 7, 0.66],
    # strong performers, large and small
    [50.0, 0.5, 0.95, 5.0, 10, 3, 1, 0.30],
    [30.0, 0.7, 0.93, 3.0, 8, 4, 2, 0.40],
    [20.0, 0.6, 0.94, 2.5, 7, 3, 1, 0.35],
    [1.5, 0.4, 0.98, 0.6, 3, 4, 0, 0.25],
    [1.2, 0.5, 0.96, 0.55, 2, 3, 1, 0.30],
    [1.8, 0.3, 0.97, 0.7, 4, 5, 0, 0.35],
    # mixed performance
    [15.0, 1.8, 0.75, 0.3, 5, 8, 7, 0.80],
    [12.0, 1.6, 0.77, 0.4, 4, 7, 8, 0.75],
    [1.3, 0.6, 0.92, 0.6, 3, 4, 2, 0.45],
    [1.6, 0.7, 0.90, 0.55, 2, 5, 3, 0.50],
    # industry risk variations
    [8.0, 0.8, 0.93, 1.2, 6, 8, 2, 0.45],
    [6.0, 0.9, 0.91, 1.0, 5, 9, 3, 0.50],
    [7.0, 1.7, 0.76, 0.3, 4, 3, 7, 0.85],
    [5.0, 1.8, 0.75, 0.2, 3, 4, 8, 0.90],
    # payment history
    [4.0, 0.9, 0.95, 0.8, 5, 6, 1, 0.55],
    [3.0, 1.0, 0.94, 0.7, 4, 5, 2, 0.60],
    [6.0, 1.4, 0.70, 0.9, 6, 7, 9, 0.70],
    [5.0, 1.5, 0.72, 0.8, 5, 6, 8, 0.75],
    # cash reserves
    [10.0, 1.1, 0.88, 2.5, 7, 5, 3, 0.60],
    [8.0, 1.2, 0.87, 2.0, 6, 6, 4, 0.62],
    [12.0, 1.3, 0.86, 0.2, 8, 7, 5, 0.68],
    [9.0, 1.4, 0.85, 0.1, 7, 8, 6, 0.70]
]

_REFERENCE_SCENARIOS = [
    ([5.0, 0.5, 0.94, 0.8, 4, 4, 1, 0.4], "Well-balanced business with multiple strengths", "good"),
    ([25.0, 2.2, 0.76, 0.2, 5, 8, 7, 0.9], "High revenue but poor risk management", "bad"),
    ([1.8, 0.4, 0.96, 0.4, 6, 3, 0, 0.3], "Small but excellently managed business", "good"),
    ([12.0, 1.1, 0.91, 0.15, 3, 7, 5, 0.8], "Growing business with cash flow issues", "bad"),
    ([3.0, 0.7, 0.93, 1.5, 5, 5, 2, 0.5], "Conservative mid-sized business", "good"),
    ([7.0, 1.8, 0.79, 0.1, 8, 6, 6, 0.85], "Established business showing decline", "bad"),
    ([9.0, 1.0, 0.97, 0.7, 8, 6, 4, 0.65], "Strong payment history", "good"),
    ([15.0, 2.5, 0.88, 0.3, 7, 8, 5, 0.7], "Fast-growing business with weak risk management", "bad"),
    ([4.0, 0.6, 0.94, 0.5, 6, 5, 3, 0.6], "Small business with recent growth", "good"),
    ([18.0, 1.9, 0.85, 0.1, 8, 7, 6, 0.7], "Established business with cash flow issues", "bad")
]


def meets_thresholds(X) -> np.ndarray:
    """
    Check every applicant against the eight good-credit criteria

    Parameters:
    -----------
    X : array-like, shape=(n_samples, 8)
        Applicants in FEATURE_NAMES order

    Returns:
    --------
    checks : np.ndarray of bool, shape=(n_samples, 8)
        True where the applicant satisfies that feature's threshold
    """
    X = np.atleast_2d(np.asarray(X, dtype=np.float64))
    if X.shape[1] != len(FEATURE_NAMES):
        raise ValueError(f"Expected {len(FEATURE_NAMES)} features, got {X.shape[1]}")

    return np.column_stack([
        X[:, 0] >= THRESHOLDS['MIN_ANNUAL_REVENUE'],
        X[:, 1] <= THRESHOLDS['MAX_DEBT_TO_EQUITY'],
        X[:, 2] >= THRESHOLDS['MIN_PAYMENT_HISTORY'],
        X[:, 3] >= THRESHOLDS['MIN_CASH_RESERVES'],
        X[:, 4] >= THRESHOLDS['MIN_YEARS_IN_BUSINESS'],
        X[:, 5] <= THRESHOLDS['MAX_INDUSTRY_RISK'],
        X[:, 6] <= THRESHOLDS['MAX_LATE_PAYMENTS'],
        X[:, 7] <= THRESHOLDS['MAX_CREDIT_UTILIZATION']
    ])


def label_by_thresholds(X, min_criteria: int = MIN_CRITERIA_FOR_GOOD) -> np.ndarray:
    """1 where at least ``min_criteria`` of the eight thresholds are met, else 0"""
    return (meets_thresholds(X).sum(axis=1) >= min_criteria).astype(np.int64)


def threshold_score(X) -> np.ndarray:
    """Share of the eight thresholds met, as a regression target in [0, 1]"""
    return meets_thresholds(X).sum(axis=1) / len(FEATURE_NAMES)


def normalize_features(X) -> np.ndarray:
    """
    Min-max scale every column into [0, 1] using FEATURE_RANGES

    Values outside a range are clipped.
    """
    X = np.atleast_2d(np.asarray(X, dtype=np.float64))
    lows = np.array([low for low, _ in FEATURE_RANGES])
    highs = np.array([high for _, high in FEATURE_RANGES])
    return np.clip((X - lows) / (highs - lows), 0.0, 1.0)


def probability_to_credit_score(probability: float, min_score: int = 300, max_score: int = 850) -> int:
    """
    Map a model probability onto the 300-850 credit score scale

    A steep logistic around 0.5 spreads out mid-range probabilities.
    """
    p = min(max(float(probability), 0.0), 1.0)
    scaled = 1.0 / (1.0 + np.exp(-12.0 * (p - 0.5)))
    return int(round(min_score + (max_score - min_score) * scaled))


def load_reference_training_set() -> Tuple[pd.DataFrame, pd.Series]:
    """
    The 25 hand-built reference applicants with threshold-rule labels

    Returns:
    --------
    X : pd.DataFrame, shape=(25, 8)
        Applicants with FEATURE_NAMES columns
    y : pd.Series, shape=(25,)
        1 for good credit, 0 for bad
    """
    X = pd.DataFrame(_REFERENCE_TRAINING_ROWS, columns=FEATURE_NAMES, dtype=np.float64)
    y = pd.Series(label_by_thresholds(X.to_numpy()), name='good_credit')
    return X, y


def load_reference_scenarios() -> pd.DataFrame:
    """
    Named hold-out applicants with the outcome an analyst expects

    Returns:
    --------
    scenarios : pd.DataFrame
        FEATURE_NAMES columns plus 'scenario' and 'expected_outcome'
    """
    frame = pd.DataFrame([features for features, _, _ in _REFERENCE_SCENARIOS], columns=FEATURE_NAMES, dtype=np.float64)
    frame['scenario'] = [scenario for _, scenario, _ in _REFERENCE_SCENARIOS]
    frame['expected_outcome'] = [outcome for _, _, outcome in _REFERENCE_SCENARIOS]
    return frame
