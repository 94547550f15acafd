"""
Observable UI state for the capture and profile views.

State objects are immutable snapshots held by a StateStore. Updates replace
the snapshot and notify subscribers once, so the rendering layer (Kivy or
anything else) only ever observes complete states.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Generic, TypeVar

import numpy as np

from .capture import CaptureResult, CaptureSession, Captured
from .errors import ImageConversionError
from .pipeline import ClassificationPipeline
from .result import NEUTRAL_COLOR, Color, PipelineFailure, PipelineOutcome

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "Tap camera to select image"

S = TypeVar("S")
Listener = Callable[[S], None]


class StateStore(Generic[S]):
    """
    Holds one immutable state snapshot and notifies listeners on change.

    Single writer by convention: all ``set`` calls happen on the UI thread.
    """

    def __init__(self, initial: S):
        self._state = initial
        self._listeners: list[Listener] = []

    @property
    def state(self) -> S:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with each new state.

        Returns:
            Function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set(self, new_state: S) -> None:
        """Replace the state and notify listeners if it changed."""
        if new_state is self._state or new_state == self._state:
            return
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)


@dataclass(frozen=True, eq=False)
class DisplayState:
    """
    Everything the capture screen renders.

    Attributes:
        label: Headline text
        color: Full-bleed accent color (R, G, B, A)
        image: Current captured image (BGR), or None
        picker_visible: Whether the capture surface is shown
    """

    label: str = DEFAULT_PROMPT
    color: Color = NEUTRAL_COLOR
    image: np.ndarray | None = field(default=None, repr=False)
    picker_visible: bool = False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DisplayState):
            return NotImplemented
        return (
            self.label == other.label
            and self.color == other.color
            and self.image is other.image
            and self.picker_visible == other.picker_visible
        )

    __hash__ = None


class CaptureViewModel:
    """
    State owner for the capture screen.

    Wires capture results into the classification pipeline and applies
    pipeline outcomes to DisplayState. Outcomes must be applied on the UI
    thread.

    Usage:
        view_model = CaptureViewModel(pipeline)
        view_model.open_capture()
        session = view_model.begin_capture()
    """

    def __init__(self, pipeline: ClassificationPipeline, initial: DisplayState | None = None):
        self.pipeline = pipeline
        self.store: StateStore[DisplayState] = StateStore(initial or DisplayState())
        self.last_outcome: PipelineOutcome | None = None

    @property
    def state(self) -> DisplayState:
        return self.store.state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self.store.subscribe(listener)

    def open_capture(self) -> None:
        """Show the capture surface."""
        if self.state.picker_visible:
            return
        self.store.set(replace(self.state, picker_visible=True))

    def close_picker(self) -> None:
        """Hide the capture surface."""
        self.store.set(replace(self.state, picker_visible=False))

    def begin_capture(self) -> CaptureSession:
        """Create the single-shot session handed to a capture surface."""
        return CaptureSession(on_result=self.on_captured, on_close=self.close_picker)

    def on_captured(self, result: CaptureResult) -> None:
        """
        Store a captured image and submit it for classification.

        An image the converter cannot read is still submitted, so its
        CONVERSION failure is published, but DisplayState keeps the
        previous image.
        """
        if not isinstance(result, Captured):
            return

        try:
            self.pipeline.converter.load(result.image)
        except ImageConversionError as e:
            logger.warning(f"Captured image is unreadable, display unchanged: {e}")
        else:
            self.store.set(replace(self.state, image=result.image))
        self.pipeline.classify(result.image)

    def apply_outcome(self, outcome: PipelineOutcome) -> bool:
        """
        Apply a pipeline outcome to DisplayState.

        Only successful outcomes for the latest request change the state;
        label and color are replaced together.

        Returns:
            True if DisplayState was updated.
        """
        latest = self.pipeline.latest_request_id
        if outcome.request_id < latest:
            logger.warning(
                f"Dropping outcome of request {outcome.request_id}: "
                f"superseded by {latest} ({PipelineFailure.STALE})"
            )
            return False

        self.last_outcome = outcome
        if not outcome.ok:
            logger.info(f"Classification failed at {outcome.failure}; display unchanged")
            return False

        update = outcome.update
        self.store.set(replace(self.state, label=update.label, color=update.color))
        return True


@dataclass(frozen=True)
class ProfileState:
    """Comment draft and posted comments (newest first)."""

    draft: str = ""
    comments: tuple[str, ...] = ()


class ProfileViewModel:
    """
    State owner for the profile screen.

    Usage:
        profile = ProfileViewModel()
        profile.set_draft("Nice!")
        profile.post()
    """

    def __init__(self, initial: ProfileState | None = None):
        self.store: StateStore[ProfileState] = StateStore(initial or ProfileState())

    @property
    def state(self) -> ProfileState:
        return self.store.state

    @property
    def comments(self) -> tuple[str, ...]:
        return self.state.comments

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self.store.subscribe(listener)

    def set_draft(self, text: str) -> None:
        self.store.set(replace(self.state, draft=text))

    def post(self) -> bool:
        """
        Prepend the draft to the comments and clear it.

        Whitespace-only drafts are ignored and left in the field.

        Returns:
            True if a comment was added.
        """
        draft = self.state.draft
        if not draft.strip():
            return False

        self.store.set(ProfileState(draft="", comments=(draft,) + self.state.comments))
        return True
