"""manifest.py - Manifest discovery and parsing.

A manifest is a JSON object whose `scripts` field maps script names to shell
commands (a package.json). Other fields are ignored.
"""

from __future__ import annotations

import json
import os
from collections.abc import Iterable, Iterator
from fnmatch import fnmatch
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..config.logging import get_logger
from ..errors import ErrorCode, ManifestError

logger = get_logger("yrun.core.manifest")

BIN_SOURCE = "node_modules/.bin"


class ManifestDocument(BaseModel):
    """The part of a manifest yrun cares about."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    scripts: dict[str, str] = Field(default_factory=dict)


def parse_manifest(text: str, path: str = "<string>") -> ManifestDocument:
    """Parse manifest text. Raises ManifestError on invalid JSON or shape."""
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestError(
            f"Invalid JSON in {path}: {e}",
            path=path,
            code=ErrorCode.MANIFEST_PARSE_ERROR,
        ) from e

    if not isinstance(raw, dict):
        raise ManifestError(
            f"{path} must contain a JSON object",
            path=path,
            code=ErrorCode.MANIFEST_SHAPE_ERROR,
        )
    if raw.get("scripts") is None:
        raw = {**raw, "scripts": {}}

    try:
        return ManifestDocument.model_validate(raw)
    except ValidationError as e:
        raise ManifestError(
            f"Invalid scripts in {path}: expected a mapping of names to command strings",
            path=path,
            code=ErrorCode.MANIFEST_SHAPE_ERROR,
            details={"errors": e.errors(include_url=False)},
        ) from e


def read_manifest(path: str | Path, root: str | Path | None = None) -> ManifestDocument:
    """Read and parse the manifest at `path` (relative to `root` when given)."""
    full_path = Path(root) / path if root is not None else Path(path)
    try:
        text = full_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"Cannot read {path}: {e}", path=str(path)) from e
    logger.debug("Read manifest", path=str(path))
    return parse_manifest(text, str(path))


def _ignored(name: str, ignore: Iterable[str]) -> bool:
    return any(fnmatch(name, pattern) for pattern in ignore)


def discover_manifests(
    root: str | Path,
    filename: str = "package.json",
    ignore: Iterable[str] = (),
) -> Iterator[str]:
    """Lazily yield manifest paths relative to `root`, as POSIX strings.

    Directories whose name matches one of the `ignore` globs are pruned and
    never descended into. Sibling directories are visited in name order.
    """
    root_path = Path(root)
    ignore = tuple(ignore)
    for dirpath, dirnames, filenames in os.walk(root_path):
        dirnames[:] = sorted(d for d in dirnames if not _ignored(d, ignore))
        if filename in filenames:
            yield (Path(dirpath) / filename).relative_to(root_path).as_posix()


def read_bin_scripts(root: str | Path) -> dict[str, str]:
    """Map each executable in `<root>/node_modules/.bin` to its relative path.

    Windows `.cmd` shims are skipped; their extensionless twins are listed.
    """
    bin_dir = Path(root) / BIN_SOURCE
    if not bin_dir.is_dir():
        return {}
    return {
        entry.name: f"{BIN_SOURCE}/{entry.name}"
        for entry in sorted(bin_dir.iterdir())
        if not entry.name.endswith(".cmd")
    }


__all__ = [
    "BIN_SOURCE",
    "ManifestDocument",
    "discover_manifests",
    "parse_manifest",
    "read_bin_scripts",
    "read_manifest",
]
