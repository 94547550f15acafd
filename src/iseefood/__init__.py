"""
ISeeFood - On-device food classification demo

Capture or pick a photo, classify it with a pretrained ImageNet model,
and find out whether it is a hotdog.
"""

__version__ = "0.1.0"
__author__ = "ISeeFood Team"

from .core.pipeline import ClassificationPipeline
from .core.result import ClassificationResult, DisplayUpdate, PipelineOutcome, Prediction

__all__ = [
    "ClassificationPipeline",
    "ClassificationResult",
    "DisplayUpdate",
    "PipelineOutcome",
    "Prediction",
    "__version__",
]
