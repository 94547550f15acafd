"""
Unit tests for the headless classify command.
"""

import cv2
import pytest

import iseefood.__main__ as cli
from iseefood.core.config import Config


@pytest.fixture
def config(tmp_path, monkeypatch):
    monkeypatch.delenv("ISEEFOOD_ENV", raising=False)
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "default.yaml").write_text(
        "model:\n  path: models/missing.onnx\n  labels_path: models/missing.txt\n",
        encoding="utf-8",
    )
    return Config(config_dir)


@pytest.fixture
def image_path(tmp_path, sample_image):
    path = tmp_path / "lunch.png"
    cv2.imwrite(str(path), sample_image)
    return path


class TestRunClassify:
    """Tests for python -m iseefood --classify."""

    def test_hotdog(self, config, image_path, make_pipeline, hotdog_engine, monkeypatch, capsys):
        monkeypatch.setattr(cli, "build_pipeline", lambda cfg: make_pipeline(hotdog_engine))

        assert cli.run_classify(config, image_path) == 0

        out = capsys.readouterr().out
        assert "Hotdog!" in out
        assert "HOTDOG" in out
        assert "91.0%" in out

    def test_missing_model(self, config, image_path, capsys):
        assert cli.run_classify(config, image_path) == 1

        assert "MODEL_LOAD" in capsys.readouterr().err

    def test_unreadable_image(self, config, tmp_path, capsys):
        assert cli.run_classify(config, tmp_path / "nothing.jpg") == 1

        assert "CONVERSION" in capsys.readouterr().err
