"""
Configuration loader with environment variable support.

Loads configuration from YAML files with hierarchical overrides:
1. config/default.yaml (base configuration)
2. config/{ISEEFOOD_ENV}.yaml (environment-specific)
3. Environment variables (ISEEFOOD_*)
"""

import os
from pathlib import Path
from typing import Any

import yaml

ENV_PREFIX = "ISEEFOOD_"


class Config:
    """
    Hierarchical configuration loader.

    Load order (later overrides earlier):
    1. default.yaml
    2. {ISEEFOOD_ENV}.yaml (development, production, etc.)
    3. Environment variables (ISEEFOOD_*)

    Usage:
        config = Config()
        source = config.get('capture.source', 'camera')
        # or
        source = config['capture']['source']
    """

    def __init__(self, config_dir: Path | None = None):
        """
        Initialize configuration loader.

        Args:
            config_dir: Path to configuration directory. Defaults to project config/
        """
        if config_dir is None:
            # Find config directory relative to this file
            config_dir = Path(__file__).parent.parent.parent.parent / "config"
        self.config_dir = Path(config_dir)
        self.env = os.getenv("ISEEFOOD_ENV", "development")
        self._config = self._load_config()

    def _load_config(self) -> dict[str, Any]:
        """Load and merge configuration files."""
        config: dict[str, Any] = {}

        default_path = self.config_dir / "default.yaml"
        if default_path.exists():
            with open(default_path, encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}

        env_path = self.config_dir / f"{self.env}.yaml"
        if env_path.exists():
            with open(env_path, encoding="utf-8") as f:
                env_config = yaml.safe_load(f) or {}
                config = self._deep_merge(config, env_config)

        return self._apply_env_overrides(config)

    def _deep_merge(self, base: dict, override: dict) -> dict:
        """Deep merge two dictionaries."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_overrides(self, config: dict) -> dict:
        """
        Apply ISEEFOOD_* environment variables.

        Example: ISEEFOOD_CAPTURE_SOURCE=library -> config['capture']['source'] = 'library'
                 ISEEFOOD_CAPTURE_CROP_SQUARE=true -> config['capture']['crop_square'] = True
        """
        for key, value in os.environ.items():
            if not key.startswith(ENV_PREFIX) or key == "ISEEFOOD_ENV":
                continue
            parts = key[len(ENV_PREFIX) :].lower().split("_")
            self._set_nested(config, self._resolve_path(config, parts), self._parse_value(value))
        return config

    def _resolve_path(self, config: dict, parts: list[str]) -> list[str]:
        """
        Group underscore-separated parts into existing config keys.

        Keys that already exist in the configuration win over a deeper split,
        so 'capture_crop_square' maps to ['capture', 'crop_square'].
        """
        path: list[str] = []
        node: Any = config
        i = 0
        while i < len(parts):
            match = None
            if isinstance(node, dict):
                for j in range(len(parts), i, -1):
                    candidate = "_".join(parts[i:j])
                    if candidate in node:
                        match = (candidate, j)
                        break
            if match is None:
                if i < len(parts) - 1 and isinstance(node, dict):
                    # Unknown key: keep splitting one level at a time
                    path.append(parts[i])
                    node = node.get(parts[i])
                    i += 1
                    continue
                path.append("_".join(parts[i:]))
                break
            key, i = match
            path.append(key)
            node = node[key]
        return path

    def _set_nested(self, d: dict, keys: list, value: Any) -> None:
        """Set a nested dictionary value."""
        for key in keys[:-1]:
            d = d.setdefault(key, {})
        d[keys[-1]] = value

    def _parse_value(self, value: str) -> Any:
        """Parse string value to appropriate type."""
        if value.lower() in ("true", "false"):
            return value.lower() == "true"
        try:
            return int(value)
        except ValueError:
            pass
        try:
            return float(value)
        except ValueError:
            pass
        return value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key: Dot-separated path like 'capture.source' or 'model.path'
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key.split(".")
        value: Any = self._config
        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default
            if value is None:
                return default
        return value

    def __getitem__(self, key: str) -> Any:
        """Get top-level configuration section."""
        return self._config.get(key, {})

    def resolve_path(self, key: str, default: str | None = None) -> Path | None:
        """
        Get a path setting, resolving relative paths against the project root.

        Args:
            key: Dot-separated config key holding a path
            default: Fallback path when the key is missing

        Returns:
            Absolute Path, or None when neither key nor default is set
        """
        value = self.get(key, default)
        if value is None:
            return None
        path = Path(value).expanduser()
        if not path.is_absolute():
            path = self.config_dir.parent / path
        return path

    @property
    def as_dict(self) -> dict[str, Any]:
        """Return configuration as dictionary."""
        return self._config.copy()

    def reload(self) -> None:
        """Reload configuration from files."""
        self.env = os.getenv("ISEEFOOD_ENV", self.env)
        self._config = self._load_config()
