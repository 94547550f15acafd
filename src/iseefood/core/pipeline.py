"""
Capture -> classify -> display pipeline.

Coordinates one classification request:
1. Convert the captured bitmap to the model input blob
2. Load the fixed classification model
3. Run inference (on the background worker when a dispatcher is set)
4. Interpret the ranked result, keeping only the top prediction
5. Map the top label to a display label and accent color
6. Publish the outcome to the UI-owning context
"""

import itertools
import logging
from numbers import Real
from typing import Any, Callable

from .classifier import InferenceEngine
from .errors import ImageConversionError
from .preprocessing import ImageConverter, ImageSource
from .result import (
    CELEBRATION_LABEL,
    NEGATIVE_COLOR,
    POSITIVE_COLOR,
    ClassificationResult,
    DisplayUpdate,
    PipelineFailure,
    PipelineOutcome,
    Prediction,
    Verdict,
)

logger = logging.getLogger(__name__)

ModelLoader = Callable[[], InferenceEngine]
Dispatcher = Callable[[Callable[[], None]], Any]
Publisher = Callable[[PipelineOutcome], None]

DEFAULT_HOTDOG_TOKEN = "hotdog"


class ClassificationPipeline:
    """
    Runs classification requests and publishes their outcomes.

    Failures never raise to the caller; they are logged and returned as a
    PipelineOutcome with ``failure`` set.

    Usage:
        pipeline = ClassificationPipeline(loader, dispatcher=worker.submit, publish=on_outcome)
        request_id = pipeline.classify(frame)
    """

    def __init__(
        self,
        model_loader: ModelLoader,
        converter: ImageConverter | None = None,
        dispatcher: Dispatcher | None = None,
        publish: Publisher | None = None,
        hotdog_token: str = DEFAULT_HOTDOG_TOKEN,
        celebration_label: str = CELEBRATION_LABEL,
    ):
        """
        Initialize the pipeline.

        Args:
            model_loader: Zero-argument callable returning a fresh InferenceEngine
            converter: ImageConverter for model input. Defaults to ImageNet settings.
            dispatcher: Callable that schedules a job off the calling thread.
                        If None, jobs run inline.
            publish: Callable receiving each PipelineOutcome. The app binds it to
                     a main-thread scheduler.
            hotdog_token: Case-sensitive substring marking a positive label
            celebration_label: Label shown for a positive match
        """
        self.model_loader = model_loader
        self.converter = converter or ImageConverter()
        self.dispatcher = dispatcher
        self.publish = publish
        self.hotdog_token = hotdog_token
        self.celebration_label = celebration_label

        self._request_ids = itertools.count(1)
        self._latest_request_id = 0

    @property
    def latest_request_id(self) -> int:
        """Identifier of the most recently submitted request (0 if none)."""
        return self._latest_request_id

    def classify(self, image: ImageSource) -> int:
        """
        Submit an image for classification.

        Returns immediately when a dispatcher is configured; the outcome is
        delivered through ``publish``.

        Args:
            image: Captured image (BGR ndarray, encoded bytes or file path)

        Returns:
            Request identifier for the submitted job
        """
        request_id = next(self._request_ids)
        self._latest_request_id = request_id

        def job() -> None:
            outcome = self.run(image, request_id)
            if self.publish is not None:
                self.publish(outcome)

        if self.dispatcher is None:
            job()
        else:
            self.dispatcher(job)

        logger.debug(f"Classification request {request_id} submitted")
        return request_id

    def run(self, image: ImageSource, request_id: int = 0) -> PipelineOutcome:
        """
        Run all pipeline stages synchronously on the calling thread.

        Args:
            image: Captured image
            request_id: Identifier carried into the outcome

        Returns:
            PipelineOutcome with either a display update or a failure stage
        """
        try:
            blob = self.converter.to_blob(image)
        except ImageConversionError as e:
            return self._fail(request_id, PipelineFailure.CONVERSION, e)

        try:
            engine = self.model_loader()
        except Exception as e:
            return self._fail(request_id, PipelineFailure.MODEL_LOAD, e)

        try:
            result = engine.classify(blob)
        except Exception as e:
            return self._fail(request_id, PipelineFailure.INFERENCE, e)

        top = self._top_prediction(result)
        if top is None:
            return self._fail(
                request_id,
                PipelineFailure.EMPTY_RESULT,
                "Unexpected results from inference engine",
            )

        update = self.map_prediction(top)
        logger.info(
            f"Request {request_id}: {top.label!r} ({top.confidence * 100:.1f}%) -> {update.verdict}"
        )
        return PipelineOutcome.success(request_id, update)

    def map_prediction(self, prediction: Prediction) -> DisplayUpdate:
        """
        Map the top prediction to a display label and accent color.

        Args:
            prediction: Highest-confidence prediction

        Returns:
            DisplayUpdate with label and color set together
        """
        if self.hotdog_token in prediction.label:
            return DisplayUpdate(
                label=self.celebration_label,
                color=POSITIVE_COLOR,
                verdict=Verdict.HOTDOG,
                prediction=prediction,
            )
        return DisplayUpdate(
            label=prediction.label,
            color=NEGATIVE_COLOR,
            verdict=Verdict.NOT_HOTDOG,
            prediction=prediction,
        )

    def _top_prediction(self, result: Any) -> Prediction | None:
        """Extract a well-formed top prediction, or None if empty or malformed."""
        if isinstance(result, ClassificationResult):
            predictions = result.predictions
        elif isinstance(result, (list, tuple)):
            predictions = result
        else:
            return None

        if not predictions:
            return None

        top = predictions[0]
        label = getattr(top, "label", None)
        confidence = getattr(top, "confidence", None)
        if not isinstance(label, str):
            return None
        if isinstance(confidence, bool) or not isinstance(confidence, Real):
            return None

        if isinstance(top, Prediction):
            return top
        return Prediction(label=label, confidence=float(confidence))

    def _fail(
        self, request_id: int, failure: PipelineFailure, error: Exception | str
    ) -> PipelineOutcome:
        """Log a failed stage and build the failure outcome."""
        logger.error(f"Request {request_id} failed at {failure}: {error}")
        return PipelineOutcome.failed(request_id, failure, str(error))
