"""
test_settings.py - Settings layering and RunnerConfig validation

Covers:
- defaults with no settings files
- user settings file under YRUN_CONFIG_HOME
- explicit file via use_file / YRUN_CONF, merged over the user file
- invalid files and values raise ConfigError
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from yrun.config.settings import RunnerConfig, Settings, get_settings
from yrun.errors import ConfigError, ErrorCode


class TestRunnerConfig:
    def test_defaults(self):
        config = RunnerConfig()
        assert config.manifest_filename == "package.json"
        assert config.ignore == ["node_modules", "bower_components", "jspm_packages", ".git"]
        assert config.run_command == "yarn run"
        assert config.command_separator == "&&"
        assert config.args_separator == "--"
        assert config.include_bin is False
        assert config.direct is False

    def test_runner_is_stripped(self):
        assert RunnerConfig(run_command="  npm run ").run_command == "npm run"
        assert RunnerConfig(run_command="   ").direct is True

    @pytest.mark.parametrize("filename", ["", "a/package.json", "a\\package.json"])
    def test_manifest_filename_must_be_bare(self, filename):
        with pytest.raises(ValidationError):
            RunnerConfig(manifest_filename=filename)

    def test_unknown_keys_rejected(self):
        with pytest.raises(ValidationError):
            RunnerConfig(runner="npm")

    def test_label_width_floor(self):
        with pytest.raises(ValidationError):
            RunnerConfig(max_label_width=5)

    def test_frozen(self):
        config = RunnerConfig()
        with pytest.raises(ValidationError):
            config.run_command = "npm run"


class TestSettings:
    def test_singleton(self):
        assert Settings() is Settings()
        assert get_settings() is Settings()

    def test_defaults_without_files(self, clean_settings):
        assert clean_settings.sources == []
        assert clean_settings.get("runner.run_command") is None
        assert clean_settings.runner_config() == RunnerConfig()

    def test_user_file(self, clean_settings, config_home):
        path = config_home / "settings.yaml"
        path.write_text("logging:\n  level: INFO\nrunner:\n  run_command: npm run\n")
        clean_settings.reload()
        assert clean_settings.sources == [path]
        assert get_settings().get("logging.level") == "INFO"
        assert clean_settings.runner_config().run_command == "npm run"

    def test_explicit_file_overrides_user_file(self, clean_settings, config_home, tmp_path):
        (config_home / "settings.yaml").write_text(
            "runner:\n  run_command: npm run\n  include_bin: true\n"
        )
        explicit = tmp_path / "project.yaml"
        explicit.write_text("runner:\n  run_command: pnpm run\n")
        clean_settings.use_file(explicit)

        config = clean_settings.runner_config()
        assert config.run_command == "pnpm run"
        assert config.include_bin is True
        assert clean_settings.sources[-1] == explicit.resolve()

    def test_env_var_names_explicit_file(self, clean_settings, tmp_path, monkeypatch):
        explicit = tmp_path / "env.yaml"
        explicit.write_text("runner:\n  args_separator: '--'\n  command_separator: ';'\n")
        monkeypatch.setenv("YRUN_CONF", str(explicit))
        clean_settings.reload()
        assert clean_settings.runner_config().command_separator == ";"

    def test_missing_explicit_file(self, clean_settings, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            clean_settings.use_file(tmp_path / "absent.yaml")
        assert exc_info.value.code == ErrorCode.CONFIG_NOT_FOUND

    @pytest.mark.parametrize("content", ["- a\n- b\n", "runner: [unclosed\n"])
    def test_unreadable_file(self, clean_settings, config_home, content):
        (config_home / "settings.yaml").write_text(content)
        with pytest.raises(ConfigError):
            clean_settings.reload()

    def test_invalid_runner_values(self, clean_settings, config_home):
        (config_home / "settings.yaml").write_text("runner:\n  include_bin: maybe-not\n")
        clean_settings.reload()
        with pytest.raises(ConfigError) as exc_info:
            clean_settings.runner_config()
        assert exc_info.value.code == ErrorCode.INVALID_CONFIG

    def test_get_section_and_default(self, clean_settings, config_home):
        (config_home / "settings.yaml").write_text("runner:\n  ignore: [dist]\n")
        clean_settings.reload()
        assert clean_settings.get_section("runner") == {"ignore": ["dist"]}
        assert clean_settings.get_section("missing") == {}
        assert clean_settings.get("runner.nope", "fallback") == "fallback"
