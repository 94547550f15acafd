"""
Unit tests for Config.
"""

import os
from pathlib import Path

import pytest
import yaml

from iseefood.core.config import Config


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    for key in list(os.environ):
        if key.startswith("ISEEFOOD_"):
            monkeypatch.delenv(key, raising=False)

    default = {
        "capture": {"source": "camera", "crop_square": False},
        "model": {"path": "models/mobilenetv2-7.onnx", "top_k": 5},
        "logging": {"level": "INFO"},
    }
    (tmp_path / "default.yaml").write_text(yaml.safe_dump(default), encoding="utf-8")
    (tmp_path / "development.yaml").write_text(
        yaml.safe_dump({"capture": {"source": "library"}}), encoding="utf-8"
    )
    return tmp_path


class TestConfig:
    """Tests for hierarchical configuration."""

    def test_environment_file_overrides_default(self, config_dir):
        config = Config(config_dir)

        assert config.get("capture.source") == "library"
        assert config.get("capture.crop_square") is False
        assert config.get("model.top_k") == 5

    def test_other_environment(self, config_dir, monkeypatch):
        monkeypatch.setenv("ISEEFOOD_ENV", "production")
        config = Config(config_dir)

        assert config.env == "production"
        assert config.get("capture.source") == "camera"

    def test_env_var_override(self, config_dir, monkeypatch):
        monkeypatch.setenv("ISEEFOOD_MODEL_TOP_K", "3")
        config = Config(config_dir)

        assert config.get("model.top_k") == 3

    def test_env_var_with_underscored_key(self, config_dir, monkeypatch):
        monkeypatch.setenv("ISEEFOOD_CAPTURE_CROP_SQUARE", "true")
        config = Config(config_dir)

        assert config.get("capture.crop_square") is True
        assert "crop" not in config["capture"]

    def test_env_var_new_section(self, config_dir, monkeypatch):
        monkeypatch.setenv("ISEEFOOD_WORKER_SIZE", "4")
        config = Config(config_dir)

        assert config.get("worker.size") == 4

    def test_missing_key_default(self, config_dir):
        config = Config(config_dir)

        assert config.get("classification.hotdog_token", "hotdog") == "hotdog"
        assert config["classification"] == {}

    def test_reload_picks_up_env(self, config_dir, monkeypatch):
        config = Config(config_dir)
        monkeypatch.setenv("ISEEFOOD_CAPTURE_SOURCE", "camera")

        config.reload()

        assert config.get("capture.source") == "camera"

    def test_resolve_path_relative_to_project(self, config_dir):
        config = Config(config_dir)

        path = config.resolve_path("model.path")

        assert path == config_dir.parent / "models" / "mobilenetv2-7.onnx"

    def test_resolve_path_missing(self, config_dir):
        config = Config(config_dir)

        assert config.resolve_path("profile.avatar") is None
        assert config.resolve_path("profile.avatar", "/tmp/a.png") == Path("/tmp/a.png")

    def test_missing_directory(self, config_dir):
        config = Config(config_dir / "nope")

        assert config.as_dict == {}
        assert config.get("capture.source", "camera") == "camera"
