"""
Unit tests for the single-shot CaptureSession.
"""

import numpy as np
import pytest

from iseefood.core.capture import Captured, CaptureSession


class TestCaptureSession:
    """Tests for capture result delivery."""

    @pytest.fixture
    def results(self):
        return []

    @pytest.fixture
    def closes(self):
        return []

    @pytest.fixture
    def session(self, results, closes):
        return CaptureSession(on_result=results.append, on_close=lambda: closes.append(True))

    def test_deliver(self, session, results, closes, sample_image):
        assert session.deliver(sample_image)

        assert len(results) == 1
        assert isinstance(results[0], Captured)
        assert results[0].image is sample_image
        assert closes == [True]
        assert session.is_closed

    def test_cancel_does_not_call_back(self, session, results, closes):
        session.cancel()

        assert results == []
        assert closes == [True]

    def test_deliver_only_once(self, session, results, closes, sample_image):
        session.deliver(sample_image)
        assert not session.deliver(sample_image)
        session.cancel()

        assert len(results) == 1
        assert closes == [True]

    def test_deliver_after_cancel_ignored(self, session, results, closes, sample_image):
        session.cancel()

        assert not session.deliver(sample_image)
        assert results == []
        assert closes == [True]

    def test_missing_image_is_cancel(self, session, results, closes):
        assert not session.deliver(None)

        assert results == []
        assert closes == [True]

    def test_empty_image_is_cancel(self, session, results, closes):
        assert not session.deliver(np.zeros((0, 0, 3), dtype=np.uint8))

        assert results == []
        assert closes == [True]

    def test_close_happens_before_result(self, sample_image):
        order = []
        session = CaptureSession(
            on_result=lambda r: order.append("result"),
            on_close=lambda: order.append("close"),
        )

        session.deliver(sample_image)

        assert order == ["close", "result"]

    def test_without_close_callback(self, results, sample_image):
        session = CaptureSession(on_result=results.append)

        session.deliver(sample_image)

        assert len(results) == 1
