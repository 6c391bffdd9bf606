"""aggregator.py - Collect scripts from many manifests into one ordered list.

Ordering:
1. Shallower directories first (fewer path segments below the scan root).
2. At equal depth, directory path strings in descending order.
3. Remaining ties keep discovery order (stable sort).

The order depends only on manifest paths and contents, never on the order
in which concurrent reads complete.
"""

from __future__ import annotations

import asyncio
import inspect
import re
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path

from ..config.logging import get_logger
from ..config.settings import RunnerConfig
from .manifest import (
    BIN_SOURCE,
    ManifestDocument,
    discover_manifests,
    read_bin_scripts,
    read_manifest,
)

logger = get_logger("yrun.core.aggregator")

ManifestReader = Callable[[str], ManifestDocument] | Callable[[str], Awaitable[ManifestDocument]]

_SEPARATORS = re.compile(r"[\\/]")


@dataclass(frozen=True, slots=True)
class ScriptEntry:
    """One named command declared by one manifest."""

    name: str
    command: str
    source_dir: tuple[str, ...]
    source_path: str

    @property
    def depth(self) -> int:
        return len(self.source_dir)

    @property
    def dir_path(self) -> str:
        return "/".join(self.source_dir)


def directory_segments(manifest_path: str) -> tuple[str, ...]:
    """Segments of the manifest's containing directory; either slash splits."""
    parts = _SEPARATORS.split(manifest_path)[:-1]
    return tuple(part for part in parts if part and part != ".")


def entries_from_manifest(path: str, document: ManifestDocument) -> list[ScriptEntry]:
    source_dir = directory_segments(path)
    return [
        ScriptEntry(name=name, command=command, source_dir=source_dir, source_path=path)
        for name, command in document.scripts.items()
        if name
    ]


def bin_entries(scripts: Mapping[str, str], shadowed: Iterable[str] = ()) -> list[ScriptEntry]:
    """Depth-0 entries for local binaries, minus names in `shadowed`."""
    skip = set(shadowed)
    return [
        ScriptEntry(name=name, command=command, source_dir=(), source_path=BIN_SOURCE)
        for name, command in scripts.items()
        if name not in skip
    ]


def sort_entries(entries: Iterable[ScriptEntry]) -> list[ScriptEntry]:
    """Depth ascending, then directory path descending; stable otherwise."""
    by_dir = sorted(entries, key=lambda entry: entry.dir_path, reverse=True)
    return sorted(by_dir, key=lambda entry: entry.depth)


def _unique(paths: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(paths))


def aggregate(
    manifest_paths: Iterable[str],
    read: Callable[[str], ManifestDocument],
    extra: Iterable[ScriptEntry] = (),
) -> list[ScriptEntry]:
    """Read every manifest once and return the ordered entry list.

    Failures raised by `read` propagate; nothing is skipped silently.
    """
    entries: list[ScriptEntry] = []
    for path in _unique(manifest_paths):
        entries.extend(entries_from_manifest(path, read(path)))
    entries.extend(extra)
    return sort_entries(entries)


async def aggregate_async(
    manifest_paths: Iterable[str],
    read: ManifestReader,
    extra: Iterable[ScriptEntry] = (),
) -> list[ScriptEntry]:
    """Like `aggregate`, with all manifests read concurrently.

    Blocking readers run in worker threads; coroutine readers are awaited.
    """
    paths = _unique(manifest_paths)

    async def _fetch(path: str) -> ManifestDocument:
        if inspect.iscoroutinefunction(read):
            return await read(path)
        return await asyncio.to_thread(read, path)

    documents = await asyncio.gather(*(_fetch(path) for path in paths))

    entries: list[ScriptEntry] = []
    for path, document in zip(paths, documents):
        entries.extend(entries_from_manifest(path, document))
    entries.extend(extra)
    return sort_entries(entries)


@dataclass
class ScriptIndex:
    """Result of scanning a directory tree."""

    root: Path
    manifests: list[str] = field(default_factory=list)
    entries: list[ScriptEntry] = field(default_factory=list)


async def collect_scripts(root: str | Path, config: RunnerConfig) -> ScriptIndex:
    """Discover manifests under `root` and aggregate their scripts."""
    root_path = Path(root)
    manifests = list(discover_manifests(root_path, config.manifest_filename, config.ignore))
    logger.debug("Discovered manifests", root=str(root_path), count=len(manifests))
    if not manifests:
        return ScriptIndex(root=root_path)

    reader = partial(read_manifest, root=root_path)
    entries = await aggregate_async(manifests, reader)

    if config.include_bin:
        root_names = {e.name for e in entries if e.source_path == config.manifest_filename}
        extra = bin_entries(read_bin_scripts(root_path), shadowed=root_names)
        entries = sort_entries([*entries, *extra])

    logger.debug("Aggregated scripts", manifests=len(manifests), entries=len(entries))
    return ScriptIndex(root=root_path, manifests=manifests, entries=entries)


__all__ = [
    "ManifestReader",
    "ScriptEntry",
    "ScriptIndex",
    "aggregate",
    "aggregate_async",
    "bin_entries",
    "collect_scripts",
    "directory_segments",
    "entries_from_manifest",
    "sort_entries",
]
