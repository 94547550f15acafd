"""
Classification result data structures.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

# Accent colors (R, G, B, A) - normalized 0-1
NEUTRAL_COLOR = (0.0, 0.48, 1.0, 1.0)  # Blue
POSITIVE_COLOR = (0.0, 0.8, 0.0, 1.0)  # Green
NEGATIVE_COLOR = (0.9, 0.0, 0.0, 1.0)  # Red

CELEBRATION_LABEL = "Hotdog!"

Color = tuple[float, float, float, float]


class Verdict(Enum):
    """Binary verdict for a classified image."""

    HOTDOG = "HOTDOG"
    NOT_HOTDOG = "NOT_HOTDOG"

    def __str__(self) -> str:
        return self.value


class PipelineFailure(Enum):
    """Stage at which a classification request stopped."""

    CONVERSION = "CONVERSION"
    MODEL_LOAD = "MODEL_LOAD"
    INFERENCE = "INFERENCE"
    EMPTY_RESULT = "EMPTY_RESULT"
    STALE = "STALE"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Prediction:
    """A single label/confidence pair from the inference engine."""

    label: str
    confidence: float


@dataclass(frozen=True)
class ClassificationResult:
    """
    Ranked predictions from one inference call.

    Attributes:
        predictions: Predictions sorted by descending confidence
        processing_time_ms: Time taken by the engine in milliseconds
    """

    predictions: tuple[Prediction, ...]
    processing_time_ms: float = 0.0

    @property
    def top(self) -> Prediction | None:
        """Highest-confidence prediction, or None when empty."""
        return self.predictions[0] if self.predictions else None

    def __len__(self) -> int:
        return len(self.predictions)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "predictions": [
                {"label": p.label, "confidence": round(p.confidence, 4)}
                for p in self.predictions
            ],
            "processing_time_ms": round(self.processing_time_ms, 2),
        }


@dataclass(frozen=True)
class DisplayUpdate:
    """Label and accent color produced by one successful classification."""

    label: str
    color: Color
    verdict: Verdict
    prediction: Prediction


@dataclass(frozen=True)
class PipelineOutcome:
    """
    Outcome of one classification request.

    Exactly one of ``update`` or ``failure`` is set.

    Attributes:
        request_id: Identifier handed out when the request was submitted
        update: Display update on success
        failure: Failing stage on error
        error: Human-readable description of the failure
    """

    request_id: int
    update: DisplayUpdate | None = None
    failure: PipelineFailure | None = None
    error: str = ""

    @classmethod
    def success(cls, request_id: int, update: DisplayUpdate) -> "PipelineOutcome":
        return cls(request_id=request_id, update=update)

    @classmethod
    def failed(
        cls, request_id: int, failure: PipelineFailure, error: str = ""
    ) -> "PipelineOutcome":
        return cls(request_id=request_id, failure=failure, error=error)

    @property
    def ok(self) -> bool:
        """Check if the request produced a display update."""
        return self.update is not None
