"""
Unit tests for ImageConverter.
"""

import cv2
import numpy as np
import pytest

from iseefood.core.errors import ImageConversionError
from iseefood.core.preprocessing import ImageConverter, crop_square


class TestImageConverter:
    """Tests for model input conversion."""

    @pytest.fixture
    def converter(self, test_config):
        return ImageConverter(test_config["model"])

    def test_blob_shape_and_dtype(self, converter, sample_image):
        blob = converter.to_blob(sample_image)

        assert blob.shape == (1, 3, 224, 224)
        assert blob.dtype == np.float32

    def test_channels_swapped_to_rgb(self, converter):
        # Pure blue in BGR
        img = np.zeros((32, 32, 3), dtype=np.uint8)
        img[:, :] = (255, 0, 0)

        blob = converter.to_blob(img)

        # Channel 2 (blue in RGB order) carries the high value
        assert blob[0, 2].mean() > blob[0, 0].mean()

    def test_mean_std_normalization(self):
        converter = ImageConverter({"input_size": 8, "mean": [0.5, 0.5, 0.5], "std": [0.5, 0.5, 0.5]})
        white = np.full((8, 8, 3), 255, dtype=np.uint8)

        blob = converter.to_blob(white)

        np.testing.assert_allclose(blob, 1.0, atol=1e-5)

    def test_custom_input_size(self):
        blob = ImageConverter({"input_size": 96}).to_blob(np.zeros((10, 20, 3), dtype=np.uint8))

        assert blob.shape == (1, 3, 96, 96)

    def test_decode_png_bytes(self, converter, sample_png_bytes, sample_image):
        image = converter.load(sample_png_bytes)

        np.testing.assert_array_equal(image, sample_image)

    def test_read_file(self, converter, sample_image, tmp_path):
        path = tmp_path / "food.png"
        cv2.imwrite(str(path), sample_image)

        image = converter.load(path)

        assert image.shape == sample_image.shape

    def test_grayscale_to_bgr(self, converter):
        image = converter.load(np.zeros((10, 10), dtype=np.uint8))

        assert image.shape == (10, 10, 3)

    def test_bgra_to_bgr(self, converter):
        image = converter.load(np.zeros((10, 10, 4), dtype=np.uint8))

        assert image.shape == (10, 10, 3)

    def test_float_image(self, converter):
        image = converter.load(np.ones((10, 10, 3), dtype=np.float32))

        assert image.dtype == np.uint8
        assert image.max() == 255

    @pytest.mark.parametrize(
        "source",
        [
            None,
            b"",
            b"\x00\x01garbage",
            np.zeros((0, 0, 3), dtype=np.uint8),
            np.zeros((4, 4, 2), dtype=np.uint8),
            np.zeros((2, 2, 2, 2), dtype=np.uint8),
            12345,
        ],
    )
    def test_unconvertible_input(self, converter, source):
        with pytest.raises(ImageConversionError):
            converter.to_blob(source)

    def test_missing_file(self, converter, tmp_path):
        with pytest.raises(ImageConversionError):
            converter.load(tmp_path / "missing.jpg")


class TestCropSquare:
    """Tests for center crop."""

    def test_landscape(self):
        img = np.zeros((100, 200, 3), dtype=np.uint8)
        img[:, 50:150] = 255

        cropped = crop_square(img)

        assert cropped.shape == (100, 100, 3)
        assert cropped.min() == 255

    def test_portrait(self):
        cropped = crop_square(np.zeros((300, 120, 3), dtype=np.uint8))

        assert cropped.shape == (120, 120, 3)

    def test_square_unchanged(self):
        img = np.zeros((64, 64, 3), dtype=np.uint8)

        assert crop_square(img).shape == img.shape
