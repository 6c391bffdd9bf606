"""Tests for manifest discovery and parsing."""

from __future__ import annotations

import pytest

from yrun.core.manifest import (
    ManifestDocument,
    discover_manifests,
    parse_manifest,
    read_bin_scripts,
    read_manifest,
)
from yrun.errors import ErrorCode, ManifestError


class TestParseManifest:
    def test_reads_scripts_in_declaration_order(self):
        doc = parse_manifest('{"name": "x", "scripts": {"test": "jest", "build": "tsc"}}')
        assert list(doc.scripts.items()) == [("test", "jest"), ("build", "tsc")]

    def test_missing_or_null_scripts_is_empty(self):
        assert parse_manifest('{"name": "x"}').scripts == {}
        assert parse_manifest('{"scripts": null}').scripts == {}

    def test_invalid_json(self):
        with pytest.raises(ManifestError) as exc_info:
            parse_manifest("{nope", "pkg/package.json")
        assert exc_info.value.code == ErrorCode.MANIFEST_PARSE_ERROR
        assert exc_info.value.path == "pkg/package.json"

    @pytest.mark.parametrize(
        "text",
        ["[]", '"scripts"', '{"scripts": ["a"]}', '{"scripts": {"a": 1}}'],
    )
    def test_wrong_shape(self, text):
        with pytest.raises(ManifestError) as exc_info:
            parse_manifest(text)
        assert exc_info.value.code == ErrorCode.MANIFEST_SHAPE_ERROR

    def test_document_is_frozen(self):
        doc = ManifestDocument(scripts={"a": "b"})
        with pytest.raises(Exception):
            doc.scripts = {}


class TestReadManifest:
    def test_reads_relative_to_root(self, tmp_path, make_manifest):
        make_manifest("packages/api", {"build": "tsc"})
        doc = read_manifest("packages/api/package.json", root=tmp_path)
        assert doc.scripts == {"build": "tsc"}

    def test_missing_file_is_a_manifest_error(self, tmp_path):
        with pytest.raises(ManifestError) as exc_info:
            read_manifest("nowhere/package.json", root=tmp_path)
        assert exc_info.value.code == ErrorCode.MANIFEST_READ_ERROR


class TestDiscoverManifests:
    def test_finds_nested_manifests(self, tmp_path, make_manifest):
        make_manifest("", {})
        make_manifest("b", {})
        make_manifest("a", {})
        make_manifest("a/deep", {})
        found = list(discover_manifests(tmp_path))
        assert found[0] == "package.json"
        assert sorted(found) == sorted(
            ["package.json", "a/package.json", "a/deep/package.json", "b/package.json"]
        )

    def test_prunes_ignored_directories(self, tmp_path, make_manifest):
        make_manifest("", {})
        make_manifest("node_modules/left-pad", {})
        make_manifest("packages/x/node_modules/y", {})
        make_manifest("packages/x", {})
        found = list(discover_manifests(tmp_path, ignore=["node_modules"]))
        assert sorted(found) == ["package.json", "packages/x/package.json"]

    def test_ignore_patterns_are_globs(self, tmp_path, make_manifest):
        make_manifest("build-output", {})
        make_manifest("src", {})
        assert list(discover_manifests(tmp_path, ignore=["build-*"])) == ["src/package.json"]

    def test_custom_filename(self, tmp_path, make_manifest):
        make_manifest("", {}, filename="other.json")
        assert list(discover_manifests(tmp_path, filename="other.json")) == ["other.json"]

    def test_is_lazy(self, tmp_path):
        iterator = discover_manifests(tmp_path / "missing")
        assert iter(iterator) is iterator

    def test_empty_tree(self, tmp_path):
        assert list(discover_manifests(tmp_path)) == []


class TestBinScripts:
    def test_lists_binaries_without_cmd_shims(self, tmp_path):
        bin_dir = tmp_path / "node_modules" / ".bin"
        bin_dir.mkdir(parents=True)
        for name in ("jest", "jest.cmd", "tsc"):
            (bin_dir / name).write_text("")
        assert read_bin_scripts(tmp_path) == {
            "jest": "node_modules/.bin/jest",
            "tsc": "node_modules/.bin/tsc",
        }

    def test_no_bin_directory(self, tmp_path):
        assert read_bin_scripts(tmp_path) == {}
