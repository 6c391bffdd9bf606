"""
conftest.py - Shared fixtures for yrun tests.

Provides isolated settings, quiet logging, and a manifest tree builder.
"""

from __future__ import annotations

import json
import os
from collections.abc import Callable
from pathlib import Path

import pytest

from yrun.config.logging import configure_logging
from yrun.config.settings import Settings


@pytest.fixture(autouse=True)
def quiet_logging():
    """Plain WARNING-level logging so debug records never reach stdout."""
    configure_logging(level="WARNING", colors=False, force=True)
    yield


@pytest.fixture(autouse=True)
def clean_settings(tmp_path_factory, monkeypatch):
    """Fresh Settings singleton pointed at an empty config home."""
    config_home = tmp_path_factory.mktemp("config-home")
    monkeypatch.setenv("YRUN_CONFIG_HOME", str(config_home))
    monkeypatch.delenv("YRUN_CONF", raising=False)
    Settings._instance = None
    Settings._conf_file = None
    settings = Settings()
    yield settings
    Settings._instance = None
    Settings._conf_file = None


@pytest.fixture
def config_home(clean_settings) -> Path:
    return Path(os.environ["YRUN_CONFIG_HOME"])


@pytest.fixture
def make_manifest(tmp_path) -> Callable[..., Path]:
    """Write a package.json under tmp_path.

    Usage:
        make_manifest("", {"test": "jest"})              # root manifest
        make_manifest("packages/api", {"build": "tsc"})
        make_manifest("broken", raw="{not json")
    """

    def _make(
        directory: str = "",
        scripts: dict[str, str] | None = None,
        raw: str | None = None,
        filename: str = "package.json",
    ) -> Path:
        target_dir = tmp_path / directory if directory else tmp_path
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / filename
        if raw is None:
            document = {"name": directory or "root", "version": "1.0.0"}
            if scripts is not None:
                document["scripts"] = scripts
            raw = json.dumps(document)
        path.write_text(raw, encoding="utf-8")
        return path

    return _make
