"""
Tests for yrun.cli.console module.

Verifies picker label rendering and the user-facing empty-state messages.
"""

import io
from unittest.mock import patch

from rich.console import Console

from yrun.cli.console import (
    ELLIPSIS,
    print_error,
    print_no_manifest,
    print_no_scripts,
    render_label,
    terminal_label_width,
    truncate,
)
from yrun.config.logging import Colors
from yrun.core.aggregator import ScriptEntry

ROOT = ScriptEntry("test", "jest --ci", (), "package.json")
NESTED = ScriptEntry("build", "tsc -p tsconfig.build.json", ("packages", "api"), "packages/api/package.json")


class TestTruncate:
    def test_short_text_is_unchanged(self):
        assert truncate("jest", 10) == "jest"

    def test_long_text_gets_ellipsis(self):
        assert truncate("abcdefghij", 5) == "abcd" + ELLIPSIS
        assert len(truncate("abcdefghij", 5)) == 5

    def test_whitespace_is_collapsed(self):
        assert truncate("a\n  b\tc", 20) == "a b c"

    def test_zero_width(self):
        assert truncate("abc", 0) == ""


class TestRenderLabel:
    def test_plain_root_label(self):
        assert render_label(ROOT, 6, 0, 80, colors=False) == "test  (jest --ci)"

    def test_plain_nested_label(self):
        label = render_label(NESTED, 7, 14, 80, colors=False)
        assert label == "packages/api/ build  (tsc -p tsconfig.build.json)"

    def test_long_command_is_cut_to_width(self):
        label = render_label(NESTED, 7, 14, 40, colors=False)
        assert len(label) == 40
        assert label.endswith(ELLIPSIS + ")")

    def test_narrow_width_drops_preview(self):
        label = render_label(NESTED, 7, 14, 22, colors=False)
        assert "(" not in label
        assert len(label) <= 22

    def test_colored_label_wraps_columns(self):
        label = render_label(NESTED, 7, 14, 80, colors=True)
        assert label.startswith(Colors.CYAN + "packages/api/")
        assert Colors.BOLD + "build" in label
        assert label.endswith(Colors.RESET)

    def test_terminal_width_has_floor(self):
        assert terminal_label_width() >= 20


class TestMessages:
    def test_no_manifest(self, capsys):
        print_no_manifest("package.json")
        assert capsys.readouterr().out == "yrun: can not find package.json in current directory.\n"

    def test_no_scripts(self, capsys):
        print_no_scripts("package.json")
        assert capsys.readouterr().out == "yrun: no scripts to execute in package.json.\n"

    def test_error_goes_to_err_console(self):
        stderr_capture = io.StringIO()
        console = Console(file=stderr_capture, width=80)
        with patch("yrun.cli.console.err_console", console):
            print_error("[4002] Invalid JSON", title="Manifest")
        output = stderr_capture.getvalue()
        assert "Manifest" in output
        assert "Invalid JSON" in output
