from .business_credit import (
    FEATURE_NAMES,
    FEATURE_RANGES,
    THRESHOLDS,
    meets_thresholds,
    label_by_thresholds,
    threshold_score,
    normalize_features,
    probability_to_credit_score,
    load_reference_training_set,
    load_reference_scenarios
)
from .synthetic import generate_credit_data

__all__ = [
    'FEATURE_NAMES',
    'FEATURE_RANGES',
    'THRESHOLDS',
    'meets_thresholds',
    'label_by_thresholds',
    'threshold_score',
    'normalize_features',
    'probability_to_credit_score',
    'load_reference_training_set',
    'load_reference_scenarios',
    'generate_credit_data'
]
