"""
Image conversion for the classification model.

Turns a captured bitmap into the tensor layout the classifier expects:
- Decode encoded bytes or image files
- Normalize grayscale / BGRA input to 3-channel BGR
- Resize, swap to RGB and apply ImageNet mean/std
- Pack into an NCHW float32 blob
"""

from pathlib import Path
from typing import Any, Union

import cv2
import numpy as np

from .errors import ImageConversionError

ImageSource = Union[np.ndarray, bytes, bytearray, str, Path]

IMAGENET_MEAN = (0.485, 0.456, 0.406)
IMAGENET_STD = (0.229, 0.224, 0.225)


class ImageConverter:
    """
    Converts captured images into model input blobs.

    Usage:
        converter = ImageConverter(config['model'])
        blob = converter.to_blob(frame)
    """

    def __init__(self, config: dict[str, Any] | None = None):
        """
        Initialize converter with configuration.

        Args:
            config: Model configuration with keys:
                - input_size: int - Square input edge length in pixels
                - mean: [float, float, float] - Per-channel RGB mean (0-1 scale)
                - std: [float, float, float] - Per-channel RGB std (0-1 scale)
        """
        config = config or {}
        self.input_size = int(config.get("input_size", 224))
        self.mean = tuple(config.get("mean", IMAGENET_MEAN))
        self.std = tuple(config.get("std", IMAGENET_STD))

    def load(self, source: ImageSource) -> np.ndarray:
        """
        Load an image into a BGR uint8 array.

        Args:
            source: BGR/gray/BGRA ndarray, encoded image bytes, or a file path

        Returns:
            HxWx3 BGR uint8 array

        Raises:
            ImageConversionError: If the image is missing, unreadable or empty
        """
        if source is None:
            raise ImageConversionError("No image supplied")

        if isinstance(source, (bytes, bytearray)):
            buffer = np.frombuffer(bytes(source), dtype=np.uint8)
            image = cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED) if buffer.size else None
            if image is None:
                raise ImageConversionError("Unable to decode image bytes")
        elif isinstance(source, (str, Path)):
            image = cv2.imread(str(source), cv2.IMREAD_UNCHANGED)
            if image is None:
                raise ImageConversionError(f"Unable to read image file: {source}")
        elif isinstance(source, np.ndarray):
            image = source
        else:
            raise ImageConversionError(f"Unsupported image type: {type(source).__name__}")

        return self._to_bgr(image)

    def _to_bgr(self, image: np.ndarray) -> np.ndarray:
        """Normalize channel layout and dtype to 3-channel BGR uint8."""
        if image.size == 0 or image.ndim not in (2, 3):
            raise ImageConversionError(f"Unsupported image shape: {image.shape}")

        if image.dtype != np.uint8:
            if np.issubdtype(image.dtype, np.floating):
                image = np.clip(image * 255.0, 0, 255).astype(np.uint8)
            else:
                image = cv2.convertScaleAbs(image)

        if image.ndim == 2:
            return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)

        channels = image.shape[2]
        if channels == 1:
            return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
        if channels == 3:
            return image
        if channels == 4:
            return cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)

        raise ImageConversionError(f"Unsupported channel count: {channels}")

    def to_blob(self, source: ImageSource) -> np.ndarray:
        """
        Convert an image into a 1x3xSxS float32 blob.

        Args:
            source: Anything accepted by load()

        Returns:
            NCHW float32 tensor normalized with the configured mean/std

        Raises:
            ImageConversionError: If the image cannot be converted
        """
        image = self.load(source)

        try:
            # Scale to 0-1 and swap BGR -> RGB while resizing
            blob = cv2.dnn.blobFromImage(
                image,
                scalefactor=1.0 / 255.0,
                size=(self.input_size, self.input_size),
                mean=(0, 0, 0),
                swapRB=True,
                crop=False,
            )
        except cv2.error as e:
            raise ImageConversionError(f"Unable to build model input: {e}") from e

        mean = np.array(self.mean, dtype=np.float32).reshape(1, 3, 1, 1)
        std = np.array(self.std, dtype=np.float32).reshape(1, 3, 1, 1)
        return ((blob - mean) / std).astype(np.float32)


def crop_square(image: np.ndarray) -> np.ndarray:
    """
    Center-crop an image to a square.

    Args:
        image: HxWxC array

    Returns:
        Square view of the image using the shorter edge
    """
    height, width = image.shape[:2]
    edge = min(height, width)
    top = (height - edge) // 2
    left = (width - edge) // 2
    return image[top : top + edge, left : left + edge]
