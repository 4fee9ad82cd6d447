"""
Exception types raised by the GBDT engine.
"""


class InvalidInputError(ValueError):
    """Training data is missing, empty, ragged or misaligned with its labels."""


class ModelFormatError(ValueError):
    """A serialized model payload could not be turned back into a model."""
