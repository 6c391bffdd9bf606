"""
Settings - Configuration Manager

Layers (later wins):
- Built-in defaults (RunnerConfig field defaults)
- User file: $YRUN_CONFIG_HOME/settings.yaml, else
  $XDG_CONFIG_HOME/yrun/settings.yaml, else ~/.config/yrun/settings.yaml
- Explicit file: `--conf` flag or YRUN_CONF
- CLI flags of the current invocation (applied by the caller via
  RunnerConfig.model_copy(update=...))

Settings are read-only. Nothing is written back.

Example settings.yaml:

    logging:
      level: INFO
    runner:
      run_command: npm run
      ignore: [node_modules, dist]
"""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import ConfigError, ErrorCode

_DEFAULT_IGNORE = ["node_modules", "bower_components", "jspm_packages", ".git"]


class RunnerConfig(BaseModel):
    """Validated runner configuration (section `runner`)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    manifest_filename: str = "package.json"
    ignore: list[str] = Field(default_factory=lambda: list(_DEFAULT_IGNORE))
    run_command: str = "yarn run"
    command_separator: str = "&&"
    args_separator: str = "--"
    include_bin: bool = False
    max_label_width: int | None = Field(None, ge=20)

    @field_validator("manifest_filename")
    @classmethod
    def _plain_filename(cls, value: str) -> str:
        if not value or "/" in value or "\\" in value:
            raise ValueError("runner.manifest_filename must be a bare file name")
        return value

    @field_validator("run_command", "command_separator", "args_separator")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()

    @property
    def direct(self) -> bool:
        """True when script bodies run directly instead of through a runner."""
        return not self.run_command


def _user_settings_path() -> Path:
    home = os.environ.get("YRUN_CONFIG_HOME")
    if home:
        return Path(home) / "settings.yaml"
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "yrun" / "settings.yaml"


class Settings:
    """
    Settings singleton.

    `get("runner.run_command")` reads merged values with dot notation;
    `runner_config()` returns the validated RunnerConfig.
    """

    _instance: Settings | None = None
    _instance_lock = threading.Lock()
    _loaded: bool = False
    _conf_file: Path | None = None

    def __new__(cls) -> Settings:
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if not hasattr(self, "_data"):
            self._data: dict[str, Any] = {}
            self._sources: list[Path] = []

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            with self._instance_lock:
                if not self._loaded:
                    self._load()
                    self._loaded = True

    def _load(self) -> None:
        data: dict[str, Any] = {}
        sources: list[Path] = []

        user_path = _user_settings_path()
        if user_path.is_file():
            data = self._deep_merge(data, self._read_yaml(user_path))
            sources.append(user_path)

        conf = self._conf_file or (
            Path(os.environ["YRUN_CONF"]) if os.environ.get("YRUN_CONF") else None
        )
        if conf is not None:
            if not conf.is_file():
                raise ConfigError(
                    f"Configuration file not found: {conf}",
                    code=ErrorCode.CONFIG_NOT_FOUND,
                    details={"path": str(conf)},
                )
            data = self._deep_merge(data, self._read_yaml(conf))
            sources.append(conf)

        self._data = data
        self._sources = sources

    def _read_yaml(self, path: Path) -> dict[str, Any]:
        try:
            content = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read {path}: {e}", details={"path": str(path)}) from e
        if not isinstance(content, dict):
            raise ConfigError(f"{path} must contain a mapping", details={"path": str(path)})
        return content

    def _deep_merge(self, base: dict, override: dict) -> dict:
        """Recursive merge; override values replace base values."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    def get(self, key: str, default: Any = None) -> Any:
        """Get a setting value using dot notation (e.g., 'logging.level')."""
        self._ensure_loaded()
        value: Any = self._data
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def get_section(self, section: str) -> dict[str, Any]:
        self._ensure_loaded()
        value = self._data.get(section, {})
        return value if isinstance(value, dict) else {}

    def runner_config(self) -> RunnerConfig:
        """Validate the `runner` section into a RunnerConfig."""
        try:
            return RunnerConfig(**self.get_section("runner"))
        except ValidationError as e:
            raise ConfigError(f"Invalid runner configuration: {e}") from e

    def use_file(self, path: str | os.PathLike | None) -> None:
        """Point Settings at an explicit configuration file and reload."""
        type(self)._conf_file = Path(path).expanduser().resolve() if path else None
        self.reload()

    def reload(self) -> None:
        """Force reload settings."""
        with self._instance_lock:
            self._loaded = False
            self._load()
            self._loaded = True

    @property
    def sources(self) -> list[Path]:
        """Files that contributed to the merged settings, lowest precedence first."""
        self._ensure_loaded()
        return list(self._sources)


def get_settings() -> Settings:
    """Get the Settings singleton."""
    return Settings()


__all__ = [
    "RunnerConfig",
    "Settings",
    "get_settings",
]
