"""Core components for ISeeFood."""

from .classifier import InferenceEngine, OpenCVClassifier, OpenCVModelLoader
from .config import Config
from .pipeline import ClassificationPipeline
from .preprocessing import ImageConverter
from .state import CaptureViewModel, DisplayState, ProfileViewModel, StateStore

__all__ = [
    "Config",
    "InferenceEngine",
    "OpenCVClassifier",
    "OpenCVModelLoader",
    "ClassificationPipeline",
    "ImageConverter",
    "CaptureViewModel",
    "DisplayState",
    "ProfileViewModel",
    "StateStore",
]
