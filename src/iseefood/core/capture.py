"""
Capture adapter contract.

A capture surface (camera or photo library) reports exactly one outcome per
presentation: Captured(image) or Cancelled.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Union

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Captured:
    """The user captured or selected an image."""

    image: np.ndarray = field(repr=False)


@dataclass(frozen=True)
class Cancelled:
    """The user closed the capture surface without an image."""

    reason: str = "user"


CaptureResult = Union[Captured, Cancelled]


class CaptureSession:
    """
    Single-shot bridge between a capture surface and its caller.

    ``on_result`` is called at most once. ``on_close`` is called exactly once,
    on both the success and cancellation paths.

    Usage:
        session = CaptureSession(on_result=view.on_captured, on_close=view.close_picker)
        session.deliver(frame)  # or session.cancel()
    """

    def __init__(
        self,
        on_result: Callable[[CaptureResult], None],
        on_close: Callable[[], None] | None = None,
    ):
        self.on_result = on_result
        self.on_close = on_close
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    def deliver(self, image: np.ndarray | None) -> bool:
        """
        Deliver a captured image and close the session.

        A missing or empty image closes the session as cancelled.

        Returns:
            True if the image was delivered.
        """
        if image is None or getattr(image, "size", 0) == 0:
            logger.warning("Capture produced no image")
            self._finish(Cancelled(reason="no_image"))
            return False
        return self._finish(Captured(image=image))

    def cancel(self, reason: str = "user") -> None:
        """Close the session without an image."""
        self._finish(Cancelled(reason=reason))

    def _finish(self, result: CaptureResult) -> bool:
        if self._closed:
            logger.debug(f"Capture session already closed, ignoring {type(result).__name__}")
            return False
        self._closed = True

        if self.on_close is not None:
            self.on_close()

        if isinstance(result, Captured):
            self.on_result(result)
            return True

        logger.info(f"Capture cancelled ({result.reason})")
        return False
