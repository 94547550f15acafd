"""
Exceptions raised by the classification pipeline stages.
"""


class ISeeFoodError(Exception):
    """Base class for ISeeFood errors."""


class ImageConversionError(ISeeFoodError):
    """Image could not be decoded or converted to the model input format."""


class ModelLoadError(ISeeFoodError):
    """Classification model or its labels could not be loaded."""


class InferenceError(ISeeFoodError):
    """Inference engine failed while classifying an image."""
