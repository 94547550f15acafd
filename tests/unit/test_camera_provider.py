"""
Unit tests for the OpenCV still camera.
"""

import cv2
import numpy as np
import pytest

from iseefood.mobile.camera_provider import OpenCVStillCamera, StillCamera, camera_from_config


class FakeCapture:
    """cv2.VideoCapture stand-in serving a scripted list of reads."""

    def __init__(self, frames, opened=True):
        self.frames = list(frames)
        self.opened = opened
        self.released = False
        self.props = {}
        self.args = ()

    def isOpened(self):
        return self.opened

    def set(self, prop, value):
        self.props[prop] = value
        return True

    def read(self):
        if not self.frames:
            return False, None
        frame = self.frames.pop(0)
        return frame is not None, frame

    def release(self):
        self.released = True


@pytest.fixture
def frame():
    return np.full((48, 64, 3), 90, dtype=np.uint8)


def make_camera(capture, config=None):
    def factory(*args):
        capture.args = args
        return capture

    return OpenCVStillCamera(config or {"source": 0, "width": 640, "height": 480}, factory)


class TestOpenCVStillCamera:
    """Tests for start / preview / snap / stop."""

    def test_implements_protocol(self):
        assert isinstance(OpenCVStillCamera({}), StillCamera)

    def test_start_applies_resolution(self, frame):
        capture = FakeCapture([frame])
        camera = make_camera(capture)

        assert camera.start()
        assert camera.is_active
        assert capture.props[cv2.CAP_PROP_FRAME_WIDTH] == 640
        assert capture.props[cv2.CAP_PROP_FRAME_HEIGHT] == 480
        assert capture.args == (0, cv2.CAP_ANY)

    def test_start_fails_when_device_unavailable(self):
        capture = FakeCapture([], opened=False)
        camera = make_camera(capture)

        assert not camera.start()
        assert not camera.is_active
        assert capture.released

    def test_snap_returns_owned_copy(self, frame):
        camera = make_camera(FakeCapture([frame]))
        camera.start()

        photo = camera.snap()

        assert photo is not frame
        np.testing.assert_array_equal(photo, frame)

    def test_snap_falls_back_to_last_preview(self, frame):
        camera = make_camera(FakeCapture([frame, None]))
        camera.start()

        assert camera.preview() is frame
        photo = camera.snap()

        np.testing.assert_array_equal(photo, frame)

    def test_snap_without_any_frame(self):
        camera = make_camera(FakeCapture([None]))
        camera.start()

        assert camera.snap() is None

    def test_snap_before_start(self):
        assert OpenCVStillCamera({}).snap() is None

    def test_preview_keeps_last_frame_on_dropped_read(self, frame):
        camera = make_camera(FakeCapture([frame, None]))
        camera.start()

        camera.preview()

        assert camera.preview() is frame

    def test_stop_releases_device(self, frame):
        capture = FakeCapture([frame])
        camera = make_camera(capture)
        camera.start()
        camera.preview()

        camera.stop()

        assert capture.released
        assert not camera.is_active
        assert camera.snap() is None

    def test_file_source_skips_backend(self, frame):
        capture = FakeCapture([frame])
        camera = make_camera(capture, {"source": "clip.mp4"})

        camera.start()

        assert capture.args == ("clip.mp4",)


class TestCameraFromConfig:
    """Tests for the platform factory."""

    def test_desktop_keeps_backend(self):
        camera = camera_from_config({"source": 1, "backend": "CAP_V4L2", "fps": 15})

        assert camera.backend_name == "CAP_V4L2"
        assert camera.preview_fps == 15.0

    def test_mobile_uses_default_backend(self):
        camera = camera_from_config({"backend": "CAP_DSHOW"}, platform_type="android")

        assert camera.source == 0
        assert camera.backend_name == "CAP_ANY"
