from .base import GBMBase
from .booster import GBDT
from .exceptions import InvalidInputError, ModelFormatError

__all__ = [
    'GBMBase',
    'GBDT',
    'InvalidInputError',
    'ModelFormatError'
]
