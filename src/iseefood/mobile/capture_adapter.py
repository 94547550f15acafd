"""
Modal capture surfaces for ISeeFood.

Two interchangeable surfaces obtain one image and report it through a
CaptureSession:
- CameraCaptureSurface: live camera preview with Capture / Cancel
- PhotoLibrarySurface: file chooser over the photo library with Select / Cancel
"""

import logging
from pathlib import Path

import cv2
import numpy as np
from kivy.clock import Clock
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.button import Button
from kivy.uix.filechooser import FileChooserIconView
from kivy.uix.modalview import ModalView

from ..core.capture import CaptureSession
from ..core.preprocessing import crop_square
from .camera_provider import StillCamera, camera_from_config
from .widgets.image_preview import ImagePreview

logger = logging.getLogger(__name__)

IMAGE_FILTERS = ["*.jpg", "*.jpeg", "*.png", "*.bmp", "*.webp", "*.tif", "*.tiff"]


class CaptureSurface(ModalView):
    """
    Base modal surface bound to one CaptureSession.

    Dismissing the modal without an image (back button, tap outside)
    cancels the session.
    """

    def __init__(self, session: CaptureSession, crop: bool = False, **kwargs):
        kwargs.setdefault("size_hint", (0.95, 0.95))
        kwargs.setdefault("auto_dismiss", True)
        super().__init__(**kwargs)

        self.session = session
        self.crop = crop
        self.bind(on_dismiss=self._on_dismiss)

    def deliver(self, image: np.ndarray | None) -> None:
        """Hand the image to the session and close the surface."""
        if image is not None and self.crop:
            image = crop_square(image).copy()
        self.session.deliver(image)
        self.dismiss()

    def cancel(self, *args) -> None:
        """Close the surface without an image."""
        self.session.cancel()
        self.dismiss()

    def _on_dismiss(self, instance):
        # Idempotent: session ignores the cancel if it already delivered
        if not self.session.is_closed:
            self.session.cancel(reason="dismissed")


class CameraCaptureSurface(CaptureSurface):
    """
    Camera surface with live preview.

    Layout:
    ┌─────────────────────────────┐
    │   LIVE CAMERA PREVIEW       │
    │                             │
    │  [Cancel]        [Capture]  │
    └─────────────────────────────┘
    """

    def __init__(self, session: CaptureSession, camera: StillCamera, **kwargs):
        super().__init__(session, **kwargs)

        self.camera = camera
        self._preview_event = None

        layout = BoxLayout(orientation="vertical", spacing=10, padding=10)

        self.preview = ImagePreview(size_hint=(1, 1))
        layout.add_widget(self.preview)

        buttons = BoxLayout(orientation="horizontal", size_hint=(1, None), height=70, spacing=20)
        cancel_btn = Button(text="Cancel", font_size="16sp")
        cancel_btn.bind(on_press=self.cancel)
        buttons.add_widget(cancel_btn)

        capture_btn = Button(
            text="Capture",
            font_size="16sp",
            bold=True,
            background_color=(0.0, 0.48, 1.0, 1),
        )
        capture_btn.bind(on_press=self._on_capture_press)
        buttons.add_widget(capture_btn)

        layout.add_widget(buttons)
        self.add_widget(layout)

        self.bind(on_open=self._start_preview)

    def _start_preview(self, instance):
        if not self.camera.start():
            logger.error("Camera unavailable, closing capture surface")
            self.session.cancel(reason="camera_unavailable")
            self.dismiss()
            return
        self._preview_event = Clock.schedule_interval(
            self._refresh_preview, 1.0 / self.camera.preview_fps
        )

    def _refresh_preview(self, dt):
        frame = self.camera.preview()
        if frame is not None:
            self.preview.show(frame)

    def _on_capture_press(self, instance):
        self.deliver(self.camera.snap())

    def on_dismiss(self):
        if self._preview_event is not None:
            self._preview_event.cancel()
            self._preview_event = None
        self.camera.stop()


class PhotoLibrarySurface(CaptureSurface):
    """
    Photo library surface backed by a file chooser.

    Layout:
    ┌─────────────────────────────┐
    │   IMAGE FILE GRID           │
    │                             │
    │  [Cancel]         [Select]  │
    └─────────────────────────────┘
    """

    def __init__(self, session: CaptureSession, library_path: Path | None = None, **kwargs):
        super().__init__(session, **kwargs)

        layout = BoxLayout(orientation="vertical", spacing=10, padding=10)

        start_path = library_path if library_path and library_path.is_dir() else Path.home()
        self.chooser = FileChooserIconView(
            path=str(start_path),
            filters=IMAGE_FILTERS,
            size_hint=(1, 1),
        )
        self.chooser.bind(on_submit=self._on_submit)
        layout.add_widget(self.chooser)

        buttons = BoxLayout(orientation="horizontal", size_hint=(1, None), height=70, spacing=20)
        cancel_btn = Button(text="Cancel", font_size="16sp")
        cancel_btn.bind(on_press=self.cancel)
        buttons.add_widget(cancel_btn)

        select_btn = Button(
            text="Select",
            font_size="16sp",
            bold=True,
            background_color=(0.0, 0.48, 1.0, 1),
        )
        select_btn.bind(on_press=self._on_select_press)
        buttons.add_widget(select_btn)

        layout.add_widget(buttons)
        self.add_widget(layout)

    def _on_submit(self, chooser, selection, touch):
        self._pick(selection)

    def _on_select_press(self, instance):
        self._pick(self.chooser.selection)

    def _pick(self, selection: list[str]):
        if not selection:
            logger.debug("No file selected")
            return

        path = selection[0]
        image = cv2.imread(path, cv2.IMREAD_COLOR)
        if image is None:
            logger.error(f"Unable to read image file: {path}")
        self.deliver(image)


def present_capture_surface(
    source: str,
    session: CaptureSession,
    config,
    platform_type: str = "desktop",
) -> CaptureSurface:
    """
    Create and open the configured capture surface.

    Args:
        source: "camera" or "library".
        session: Session receiving the result.
        config: Application Config.
        platform_type: Platform type for the camera provider.

    Returns:
        The opened CaptureSurface.
    """
    crop = bool(config.get("capture.crop_square", False))

    if source == "library":
        surface: CaptureSurface = PhotoLibrarySurface(
            session,
            library_path=config.resolve_path("capture.library_path"),
            crop=crop,
        )
    else:
        if source != "camera":
            logger.warning(f"Unknown capture source {source!r}, using camera")
        camera = camera_from_config(config.get("camera", {}) or {}, platform_type)
        surface = CameraCaptureSurface(session, camera=camera, crop=crop)

    logger.info(f"Presenting {type(surface).__name__}")
    surface.open()
    return surface
