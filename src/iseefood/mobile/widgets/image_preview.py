"""
Image preview widget for ISeeFood.

Displays OpenCV BGR frames (live camera feed or a captured photo) as a
Kivy Image widget with texture updates.
"""

import logging

import cv2
import numpy as np
from kivy.graphics import Color, RoundedRectangle, StencilPop, StencilPush, StencilUnUse, StencilUse
from kivy.graphics.texture import Texture
from kivy.uix.image import Image

logger = logging.getLogger(__name__)


class ImagePreview(Image):
    """
    Kivy Image widget for displaying BGR frames.

    Optionally clips the image to a rounded rectangle.
    """

    def __init__(self, corner_radius: float = 0, **kwargs):
        """
        Initialize the preview widget.

        Args:
            corner_radius: Radius of the rounded clip mask (0 disables clipping).
        """
        kwargs.setdefault("fit_mode", "contain")
        super().__init__(**kwargs)

        self.corner_radius = corner_radius
        self._mask_rect: RoundedRectangle | None = None

        if corner_radius > 0:
            self._draw_mask()
            self.bind(pos=self._update_mask, size=self._update_mask)

    def _draw_mask(self):
        """Clip drawing to a rounded rectangle."""
        with self.canvas.before:
            StencilPush()
            Color(1, 1, 1, 1)
            self._mask_rect = RoundedRectangle(
                pos=self.pos, size=self.size, radius=[self.corner_radius]
            )
            StencilUse()
        with self.canvas.after:
            StencilUnUse()
            self._mask_after = RoundedRectangle(
                pos=self.pos, size=self.size, radius=[self.corner_radius]
            )
            StencilPop()

    def _update_mask(self, *args):
        if self._mask_rect is not None:
            self._mask_rect.pos = self.pos
            self._mask_rect.size = self.size
            self._mask_after.pos = self.pos
            self._mask_after.size = self.size

    def show(self, frame: np.ndarray | None) -> None:
        """
        Display a frame immediately (must be called from main thread).

        Args:
            frame: BGR numpy array, or None to clear.
        """
        if frame is None:
            self.texture = None
            self.opacity = 0
            return

        try:
            height, width = frame.shape[:2]

            # Convert BGR to RGB for Kivy
            frame_rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

            # Flip vertically (Kivy textures are bottom-up)
            frame_rgb = cv2.flip(frame_rgb, 0)

            if (
                self.texture is None
                or self.texture.width != width
                or self.texture.height != height
            ):
                self.texture = Texture.create(size=(width, height), colorfmt="rgb")

            self.texture.blit_buffer(
                frame_rgb.tobytes(), colorfmt="rgb", bufferfmt="ubyte"
            )
            self.opacity = 1
            self.canvas.ask_update()

        except cv2.error as e:
            logger.error(f"Error updating preview texture: {e}")
