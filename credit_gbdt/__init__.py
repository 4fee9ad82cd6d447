"""
credit-gbdt: gradient-boosted decision trees for business credit scoring.
"""

from .models import GBDT, GBMBase, InvalidInputError, ModelFormatError

__version__ = "0.1.0"

__all__ = [
    'GBDT',
    'GBMBase',
    'InvalidInputError',
    'ModelFormatError'
]
