"""
Still-photo camera used by the capture surface.

The surface streams preview frames while it is open and takes exactly one
photo when the user taps Capture. The photo must survive the camera being
released right after, so snap() always hands back an owned copy and falls
back to the last preview frame when the device drops a read.
"""

import logging
from typing import Any, Callable, Protocol, runtime_checkable

import cv2
import numpy as np

logger = logging.getLogger(__name__)

BACKENDS = {
    "CAP_ANY": cv2.CAP_ANY,
    "CAP_MSMF": cv2.CAP_MSMF,
    "CAP_DSHOW": cv2.CAP_DSHOW,
    "CAP_V4L2": cv2.CAP_V4L2,
    "CAP_AVFOUNDATION": cv2.CAP_AVFOUNDATION,
}


@runtime_checkable
class StillCamera(Protocol):
    """Protocol for cameras that preview and take one still photo."""

    preview_fps: float

    def start(self) -> bool:
        """Start the device. Returns True on success."""
        ...

    def preview(self) -> np.ndarray | None:
        """Latest preview frame (BGR), or None if none is available."""
        ...

    def snap(self) -> np.ndarray | None:
        """Take a photo the caller owns, or None if nothing was ever read."""
        ...

    def stop(self) -> None:
        """Release the device."""
        ...


class OpenCVStillCamera:
    """
    Still camera over cv2.VideoCapture.

    Usage:
        camera = OpenCVStillCamera(config["camera"])
        if camera.start():
            frame = camera.preview()
            photo = camera.snap()
        camera.stop()
    """

    def __init__(self, config: dict, capture_factory: Callable[..., Any] | None = None):
        """
        Initialize the camera.

        Args:
            config: Camera configuration with keys:
                - source: Device index (int) or video file path (str)
                - backend: OpenCV backend name (CAP_ANY, CAP_DSHOW, ...)
                - width, height: Requested capture resolution
                - fps: Preview refresh rate
            capture_factory: Callable building the capture object.
                             Defaults to cv2.VideoCapture.
        """
        self.source = config.get("source", 0)
        self.backend_name = config.get("backend", "CAP_ANY")
        self.width = config.get("width", 1280)
        self.height = config.get("height", 720)
        self.preview_fps = float(config.get("fps", 30) or 30)

        self._capture_factory = capture_factory or cv2.VideoCapture
        self._cap = None
        self._last_frame: np.ndarray | None = None

    @property
    def is_active(self) -> bool:
        return self._cap is not None

    def start(self) -> bool:
        """Open the device and request the configured resolution."""
        if self._cap is not None:
            return True

        try:
            if isinstance(self.source, str):
                cap = self._capture_factory(self.source)
            else:
                cap = self._capture_factory(
                    self.source, BACKENDS.get(self.backend_name, cv2.CAP_ANY)
                )
        except cv2.error as e:
            logger.error(f"Error opening camera {self.source}: {e}")
            return False

        if not cap.isOpened():
            logger.error(f"Camera {self.source} unavailable")
            cap.release()
            return False

        cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        # Keep the newest frame only, so a snap is not a stale buffered one
        cap.set(cv2.CAP_PROP_BUFFERSIZE, 1)

        self._cap = cap
        self._last_frame = None
        logger.info(f"Camera {self.source} started")
        return True

    def preview(self) -> np.ndarray | None:
        frame = self._read()
        return frame if frame is not None else self._last_frame

    def snap(self) -> np.ndarray | None:
        """
        Take a still photo.

        Reads a fresh frame; if the device drops it, the last preview frame
        is used instead.

        Returns:
            BGR array owned by the caller, or None if no frame was ever read
        """
        frame = self._read()
        if frame is None:
            frame = self._last_frame
            if frame is None:
                logger.warning("Snap failed: no frame read from camera")
                return None
            logger.debug("Snap fell back to the last preview frame")
        return frame.copy()

    def stop(self) -> None:
        if self._cap is None:
            return
        self._cap.release()
        self._cap = None
        self._last_frame = None
        logger.info(f"Camera {self.source} stopped")

    def _read(self) -> np.ndarray | None:
        if self._cap is None:
            return None
        ok, frame = self._cap.read()
        if not ok or frame is None or frame.size == 0:
            return None
        self._last_frame = frame
        return frame


def camera_from_config(config: dict, platform_type: str = "desktop") -> StillCamera:
    """
    Build the still camera for the current platform.

    Mobile builds ship OpenCV with the default device at index 0 and no
    selectable backend.

    Args:
        config: Camera configuration dictionary
        platform_type: "desktop", "android" or "ios"
    """
    if platform_type != "desktop":
        config = {**config, "source": config.get("source", 0), "backend": "CAP_ANY"}
    return OpenCVStillCamera(config)
