"""
yrun.core - Script discovery, ranking, filtering, and command normalization.

Modules:
- manifest.py: manifest discovery and parsing
- aggregator.py: ordered ScriptEntry list across manifests
- matcher.py: word-boundary fuzzy filter
- normalizer.py: back-slash path rewriting for Windows shells
"""

from .aggregator import ScriptEntry, ScriptIndex, aggregate, aggregate_async, collect_scripts
from .manifest import ManifestDocument, discover_manifests, read_manifest
from .matcher import filter_matches, matches
from .normalizer import normalize, normalize_for_host, uses_backslash_paths

__all__ = [
    "ManifestDocument",
    "ScriptEntry",
    "ScriptIndex",
    "aggregate",
    "aggregate_async",
    "collect_scripts",
    "discover_manifests",
    "filter_matches",
    "matches",
    "normalize",
    "normalize_for_host",
    "read_manifest",
    "uses_backslash_paths",
]
