"""
Tests for settings loading.
"""

import pytest
from monkey import Settings, ConfigError, load_settings
from monkey.config import settings_from_env, settings_from_mapping


def write_config(tmp_path, text):
    path = tmp_path / "monkey.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestDefaults:
    """Test built-in defaults."""

    def test_defaults(self):
        """Defaults apply when nothing is configured."""
        settings = load_settings(environ={})
        assert settings == Settings()
        assert settings.prompt == ">> "
        assert settings.show_source is True
        assert settings.max_errors == 20
        assert settings.log_level == "WARNING"
        assert settings.recursion_limit is None


class TestConfigFile:
    """Test YAML configuration files."""

    def test_load_file(self, tmp_path):
        """Values from the file override defaults."""
        path = write_config(tmp_path, """
prompt: "monkey> "
show_source: false
max_errors: 5
log_level: info
recursion_limit: 5000
""")
        settings = load_settings(path, environ={})
        assert settings.prompt == "monkey> "
        assert settings.show_source is False
        assert settings.max_errors == 5
        assert settings.log_level == "INFO"
        assert settings.recursion_limit == 5000

    def test_empty_file(self, tmp_path):
        """An empty file means defaults."""
        path = write_config(tmp_path, "")
        assert load_settings(path, environ={}) == Settings()

    def test_config_env_var(self, tmp_path):
        """MONKEY_CONFIG names the default file."""
        path = write_config(tmp_path, "max_errors: 3\n")
        settings = load_settings(environ={"MONKEY_CONFIG": str(path)})
        assert settings.max_errors == 3

    def test_missing_file(self, tmp_path):
        """A missing file is a configuration error."""
        with pytest.raises(ConfigError):
            load_settings(tmp_path / "nope.yaml", environ={})

    def test_not_a_mapping(self, tmp_path):
        """The top level must be a mapping."""
        path = write_config(tmp_path, "- a\n- b\n")
        with pytest.raises(ConfigError) as exc_info:
            load_settings(path, environ={})
        assert "mapping" in exc_info.value.diagnostic.message

    def test_unknown_keys(self, tmp_path):
        """Unknown keys are rejected."""
        path = write_config(tmp_path, "colour: blue\n")
        with pytest.raises(ConfigError) as exc_info:
            load_settings(path, environ={})
        assert exc_info.value.diagnostic.message == "unknown configuration keys: colour"
        assert exc_info.value.diagnostic.code == "E501"

    def test_invalid_yaml(self, tmp_path):
        """Malformed YAML is a configuration error."""
        path = write_config(tmp_path, "prompt: [unclosed\n")
        with pytest.raises(ConfigError):
            load_settings(path, environ={})

    @pytest.mark.parametrize("text", [
        "max_errors: 0\n",
        "max_errors: many\n",
        "max_errors: true\n",
        "show_source: maybe\n",
        "log_level: LOUD\n",
        "prompt: 5\n",
        "recursion_limit: -1\n",
    ])
    def test_invalid_values(self, tmp_path, text):
        """Bad values are rejected."""
        path = write_config(tmp_path, text)
        with pytest.raises(ConfigError):
            load_settings(path, environ={})


class TestEnvironment:
    """Test MONKEY_* environment overrides."""

    def test_env_overrides(self):
        """Environment variables override defaults."""
        settings = settings_from_env(Settings(), {
            "MONKEY_PROMPT": "? ",
            "MONKEY_SHOW_SOURCE": "no",
            "MONKEY_MAX_ERRORS": "7",
            "MONKEY_LOG_LEVEL": "debug",
            "MONKEY_RECURSION_LIMIT": "3000",
        })
        assert settings == Settings(
            prompt="? ",
            show_source=False,
            max_errors=7,
            log_level="DEBUG",
            recursion_limit=3000,
        )

    def test_env_beats_file(self, tmp_path):
        """Environment variables are applied after the file."""
        path = write_config(tmp_path, "max_errors: 5\nprompt: 'file> '\n")
        settings = load_settings(path, environ={"MONKEY_MAX_ERRORS": "9"})
        assert settings.max_errors == 9
        assert settings.prompt == "file> "

    def test_invalid_env_value(self):
        """Bad environment values are rejected."""
        with pytest.raises(ConfigError):
            settings_from_env(Settings(), {"MONKEY_MAX_ERRORS": "lots"})

    def test_empty_recursion_limit(self):
        """An empty recursion limit keeps the host default."""
        settings = settings_from_env(Settings(recursion_limit=10), {"MONKEY_RECURSION_LIMIT": ""})
        assert settings.recursion_limit is None


class TestMapping:
    """Test applying mappings directly."""

    def test_partial_override(self):
        """Unmentioned settings keep their base values."""
        base = Settings(prompt="$ ")
        settings = settings_from_mapping({"max_errors": 2}, base)
        assert settings.prompt == "$ "
        assert settings.max_errors == 2
