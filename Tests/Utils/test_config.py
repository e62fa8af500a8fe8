"""
Tests for configuration loading and accessors.
"""
from pathlib import Path

import pytest

from ai_chat import config


@pytest.fixture
def config_file(isolate_test_environment):
    """Path the loader uses inside the isolated environment."""
    return isolate_test_environment / "config" / "config.toml"


class TestLoading:

    def test_creates_default_file(self, config_file):
        assert not config_file.exists()
        loaded = config.load_cli_config_and_ensure_existence()
        assert config_file.is_file()
        assert loaded["general"]["default_provider"] == "openai"
        assert loaded["general"]["context_limit"] == 10

    def test_partial_file_merged_over_defaults(self, config_file):
        config_file.parent.mkdir(parents=True)
        config_file.write_text('[general]\ndefault_provider = "claude"\n', encoding="utf-8")

        loaded = config.load_cli_config_and_ensure_existence(force_reload=True)

        assert loaded["general"]["default_provider"] == "claude"
        assert loaded["general"]["autosave_interval"] == 1
        assert loaded["api_settings"]["claude"]["max_tokens"] == 1000

    def test_invalid_file_falls_back_to_defaults(self, config_file):
        config_file.parent.mkdir(parents=True)
        config_file.write_text("[general\nbroken", encoding="utf-8")
        loaded = config.load_cli_config_and_ensure_existence(force_reload=True)
        assert loaded == config.DEFAULT_CONFIG

    def test_cached_until_forced(self, config_file):
        config.load_cli_config_and_ensure_existence()
        config_file.write_text('[general]\ndefault_provider = "grok"\n', encoding="utf-8")
        assert config.get_cli_setting("general", "default_provider") == "openai"
        config.load_cli_config_and_ensure_existence(force_reload=True)
        assert config.get_cli_setting("general", "default_provider") == "grok"

    def test_set_config_path_overrides_env(self, isolated_temp_dir, config_file):
        custom = isolated_temp_dir / "custom.toml"
        custom.write_text('[general]\nlog_level = "DEBUG"\n', encoding="utf-8")

        config.set_config_path(custom)

        assert config.get_config_path() == custom
        assert config.get_cli_setting("general", "log_level") == "DEBUG"
        assert not config_file.exists()

    def test_default_path_without_env(self, monkeypatch):
        monkeypatch.delenv(config.CONFIG_PATH_ENV_VAR)
        assert config.get_config_path() == config.DEFAULT_CONFIG_PATH


class TestAccessors:

    def test_get_cli_setting_default(self):
        assert config.get_cli_setting("general", "missing", "fallback") == "fallback"
        assert config.get_cli_setting("no_such_section", "key", 5) == 5

    def test_api_settings(self):
        assert config.get_api_settings("gemini")["base_url"].startswith("https://generativelanguage")
        assert config.get_api_settings("llama") == {}
        assert set(config.get_api_settings()) == {"openai", "claude", "gemini", "grok"}

    def test_api_key_env_first(self, monkeypatch, config_file):
        config_file.parent.mkdir(parents=True)
        config_file.write_text('[api_settings.grok]\napi_key = "from-file"\n', encoding="utf-8")
        assert config.get_api_key("grok", "GROK_API_KEY") == "from-file"
        monkeypatch.setenv("GROK_API_KEY", "from-env")
        assert config.get_api_key("grok", "GROK_API_KEY") == "from-env"

    def test_api_key_missing(self):
        assert config.get_api_key("openai", "OPENAI_API_KEY") is None

    def test_history_dir_expands_user(self, config_file):
        config_file.parent.mkdir(parents=True)
        config_file.write_text('[general]\nhistory_dir = "~/chats"\n', encoding="utf-8")
        assert config.get_history_dir() == Path("~/chats").expanduser()

    def test_log_file_parent_created(self, isolated_temp_dir, config_file):
        log_file = isolated_temp_dir / "logs" / "app.log"
        config_file.parent.mkdir(parents=True)
        config_file.write_text(f'[general]\nlog_file = "{log_file.as_posix()}"\n', encoding="utf-8")
        assert config.get_cli_log_file_path() == log_file
        assert log_file.parent.is_dir()

    @pytest.mark.parametrize("value, expected", [
        ("25", 25),
        ("0", 10),
        ('"lots"', 10),
    ])
    def test_int_setting(self, config_file, value, expected):
        config_file.parent.mkdir(parents=True)
        config_file.write_text(f"[general]\ncontext_limit = {value}\n", encoding="utf-8")
        assert config.get_int_setting("general", "context_limit", 10) == expected


def test_deep_merge_does_not_mutate_base():
    base = {"a": {"b": 1, "c": 2}}
    merged = config.deep_merge_dicts(base, {"a": {"b": 5}, "d": 3})
    assert merged == {"a": {"b": 5, "c": 2}, "d": 3}
    assert base == {"a": {"b": 1, "c": 2}}
