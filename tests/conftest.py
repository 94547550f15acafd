"""
Pytest fixtures for ISeeFood tests.

Provides common test fixtures including:
- Synthetic test images
- Test configuration
- Fake inference engines and model loaders
"""

import cv2
import numpy as np
import pytest

from iseefood.core.errors import InferenceError, ModelLoadError
from iseefood.core.pipeline import ClassificationPipeline
from iseefood.core.result import ClassificationResult, Prediction


class FakeEngine:
    """Inference engine returning canned predictions."""

    def __init__(self, predictions=None, error: Exception | None = None):
        self.predictions = predictions
        self.error = error
        self.blobs = []

    def classify(self, blob):
        self.blobs.append(blob)
        if self.error is not None:
            raise self.error
        if isinstance(self.predictions, (ClassificationResult, type(None))):
            return self.predictions
        return ClassificationResult(predictions=tuple(self.predictions))


class FakeModelLoader:
    """Model loader handing out one engine, or failing."""

    def __init__(self, engine=None, error: Exception | None = None):
        self.engine = engine
        self.error = error
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.engine


def ranked(*pairs) -> list[Prediction]:
    """Build predictions from (label, confidence) pairs."""
    return [Prediction(label=label, confidence=confidence) for label, confidence in pairs]


@pytest.fixture
def engine_cls():
    """FakeEngine class, for tests that build or subclass their own engine."""
    return FakeEngine


@pytest.fixture
def loader_cls():
    """FakeModelLoader class."""
    return FakeModelLoader


@pytest.fixture
def test_config():
    """Test configuration dictionary."""
    return {
        "capture": {
            "source": "camera",
            "crop_square": False,
        },
        "model": {
            "path": "models/mobilenetv2-7.onnx",
            "labels_path": "models/imagenet_labels.txt",
            "input_size": 224,
            "mean": [0.485, 0.456, 0.406],
            "std": [0.229, 0.224, 0.225],
            "top_k": 5,
        },
        "classification": {
            "hotdog_token": "hotdog",
            "celebration_label": "Hotdog!",
        },
        "worker": {"max_queue_size": 2},
    }


@pytest.fixture
def sample_image():
    """Synthetic BGR photo: a brown sausage on a bun-colored background."""
    img = np.full((240, 320, 3), (120, 180, 220), dtype=np.uint8)
    cv2.ellipse(img, (160, 120), (110, 30), 0, 0, 360, (30, 60, 150), -1)
    return img


@pytest.fixture
def sample_png_bytes(sample_image):
    """Synthetic photo encoded as PNG bytes."""
    ok, encoded = cv2.imencode(".png", sample_image)
    assert ok
    return encoded.tobytes()


@pytest.fixture
def hotdog_engine():
    return FakeEngine(ranked(("hotdog, hot dog, red hot", 0.91), ("bagel, beigel", 0.03)))


@pytest.fixture
def pizza_engine():
    return FakeEngine(ranked(("pizza", 0.88), ("hotdog, hot dog, red hot", 0.05)))


@pytest.fixture
def make_pipeline():
    """Factory for inline pipelines publishing into a list."""

    def factory(engine=None, loader=None, dispatcher=None, **kwargs):
        published = []
        pipeline = ClassificationPipeline(
            model_loader=loader or FakeModelLoader(engine),
            dispatcher=dispatcher,
            publish=published.append,
            **kwargs,
        )
        pipeline.published = published
        return pipeline

    return factory


@pytest.fixture
def failing_loader():
    return FakeModelLoader(error=ModelLoadError("Failed to load MobileNetV2 model"))


@pytest.fixture
def failing_engine():
    return FakeEngine(error=InferenceError("Error performing classification"))
