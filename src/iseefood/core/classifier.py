"""
On-device image classifier backed by OpenCV's DNN module.

The classifier is a fixed pretrained ImageNet model (MobileNetV2 exported
to ONNX by default). It is treated as a black box: one blob in, a ranked
list of label/confidence pairs out.
"""

import logging
import time
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import cv2
import numpy as np

from .errors import InferenceError, ModelLoadError
from .result import ClassificationResult, Prediction

logger = logging.getLogger(__name__)

DEFAULT_MODEL_PATH = "models/mobilenetv2-7.onnx"
DEFAULT_LABELS_PATH = "models/imagenet_labels.txt"


@runtime_checkable
class InferenceEngine(Protocol):
    """Protocol for image classification engines."""

    def classify(self, blob: np.ndarray) -> ClassificationResult:
        """Classify a preprocessed NCHW blob. Returns predictions ranked by confidence."""
        ...


def load_labels(path: Path) -> list[str]:
    """
    Load class labels, one per line.

    Args:
        path: Text file with one label per line, in model output order

    Returns:
        List of labels

    Raises:
        ModelLoadError: If the file is missing, not UTF-8 text, or empty
    """
    try:
        with open(path, encoding="utf-8") as f:
            labels = [line.strip() for line in f if line.strip()]
    except (OSError, UnicodeDecodeError) as e:
        raise ModelLoadError(f"Unable to read labels file {path}: {e}") from e

    if not labels:
        raise ModelLoadError(f"Labels file is empty: {path}")
    return labels


def softmax(scores: np.ndarray) -> np.ndarray:
    """Numerically stable softmax over a 1-D score vector."""
    shifted = scores - np.max(scores)
    exp = np.exp(shifted)
    return exp / np.sum(exp)


class OpenCVClassifier:
    """
    Inference engine wrapping a cv2.dnn.Net classification model.

    Usage:
        engine = OpenCVClassifier(net, labels, top_k=5)
        result = engine.classify(blob)
    """

    def __init__(self, net: Any, labels: list[str], top_k: int = 5):
        """
        Initialize the classifier.

        Args:
            net: Loaded cv2.dnn.Net (or any object with setInput/forward)
            labels: Class labels in model output order
            top_k: Number of ranked predictions to return
        """
        self.net = net
        self.labels = labels
        self.top_k = max(1, top_k)

    def classify(self, blob: np.ndarray) -> ClassificationResult:
        """
        Run one forward pass.

        Args:
            blob: 1x3xHxW float32 model input

        Returns:
            ClassificationResult ranked by descending confidence

        Raises:
            InferenceError: If the forward pass fails or the output shape is wrong
        """
        start_time = time.perf_counter()

        try:
            self.net.setInput(blob)
            output = self.net.forward()
        except cv2.error as e:
            raise InferenceError(f"Forward pass failed: {e}") from e

        scores = np.asarray(output, dtype=np.float32).reshape(-1)
        if scores.size != len(self.labels):
            raise InferenceError(
                f"Model returned {scores.size} scores for {len(self.labels)} labels"
            )

        # ONNX MobileNetV2 emits raw logits
        if scores.min() < 0.0 or not np.isclose(scores.sum(), 1.0, atol=1e-3):
            scores = softmax(scores)

        k = min(self.top_k, scores.size)
        top_indices = np.argsort(scores)[::-1][:k]
        predictions = tuple(
            Prediction(label=self.labels[i], confidence=float(scores[i])) for i in top_indices
        )

        processing_time = (time.perf_counter() - start_time) * 1000
        return ClassificationResult(predictions=predictions, processing_time_ms=processing_time)


class OpenCVModelLoader:
    """
    Loads the fixed classification model on demand.

    Each call reads the same model and labels files and returns a fresh
    OpenCVClassifier.

    Usage:
        loader = OpenCVModelLoader(model_path, labels_path)
        engine = loader()
    """

    def __init__(self, model_path: Path, labels_path: Path, top_k: int = 5):
        """
        Initialize the loader.

        Args:
            model_path: Path to the ONNX model file
            labels_path: Path to the labels text file
            top_k: Number of predictions the engine returns
        """
        self.model_path = Path(model_path)
        self.labels_path = Path(labels_path)
        self.top_k = top_k

    @classmethod
    def from_config(cls, config) -> "OpenCVModelLoader":
        """Build a loader from the application Config."""
        return cls(
            model_path=config.resolve_path("model.path", DEFAULT_MODEL_PATH),
            labels_path=config.resolve_path("model.labels_path", DEFAULT_LABELS_PATH),
            top_k=config.get("model.top_k", 5),
        )

    def __call__(self) -> InferenceEngine:
        """
        Load the model and labels.

        Raises:
            ModelLoadError: If either file is missing or unreadable
        """
        if not self.model_path.exists():
            raise ModelLoadError(f"Model file not found: {self.model_path}")

        labels = load_labels(self.labels_path)

        try:
            net = cv2.dnn.readNetFromONNX(str(self.model_path))
        except cv2.error as e:
            raise ModelLoadError(f"Failed to load model {self.model_path}: {e}") from e

        if net.empty():
            raise ModelLoadError(f"Model loaded empty: {self.model_path}")

        logger.debug(f"Loaded model {self.model_path.name} with {len(labels)} labels")
        return OpenCVClassifier(net, labels, top_k=self.top_k)
