"""Tests for pipe_gpt.core.config."""

import logging
from pathlib import Path

from pipe_gpt.core.config import (
    DEFAULT_TOP_P,
    DEFAULTS,
    config_path,
    load_config,
    resolve_settings,
)


class TestConfigPath:
    def test_env_override(self, tmp_path: Path, monkeypatch):
        custom = tmp_path / "custom.yaml"
        monkeypatch.setenv("PIPE_GPT_CONFIG", str(custom))
        assert config_path() == custom

    def test_default_location(self, monkeypatch):
        monkeypatch.delenv("PIPE_GPT_CONFIG", raising=False)
        path = config_path()
        assert path.name == "config.yaml"
        assert path.parent.name == "pipe-gpt"


class TestLoadConfig:
    def test_returns_defaults_when_no_file(self, tmp_path: Path):
        config = load_config(tmp_path / "nonexistent.yaml")
        assert config == DEFAULTS

    def test_partial_override(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("model: gpt-4o\nmax_tokens: 8192\n")

        config = load_config(config_file)
        assert config["model"] == "gpt-4o"
        assert config["max_tokens"] == 8192
        # Defaults preserved for unset keys
        assert config["api_url"] == DEFAULTS["api_url"]
        assert config["temperature"] == 0.6

    def test_full_override(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "api_url: http://localhost:8080/v1\n"
            "model: local\n"
            "max_tokens: 100\n"
            "temperature: 1\n"
        )

        config = load_config(config_file)
        assert config == {
            "api_url": "http://localhost:8080/v1",
            "model": "local",
            "max_tokens": 100,
            "temperature": 1.0,
        }

    def test_non_numeric_max_tokens_gives_all_defaults(self, tmp_path: Path, caplog):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("model: gpt-4o\nmax_tokens: lots\n")

        with caplog.at_level(logging.WARNING, logger="pipe_gpt.core.config"):
            config = load_config(config_file)

        assert config == DEFAULTS
        assert "using defaults" in caplog.text

    def test_boolean_max_tokens_rejected(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("max_tokens: true\n")
        assert load_config(config_file) == DEFAULTS

    def test_non_positive_max_tokens_rejected(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("max_tokens: 0\n")
        assert load_config(config_file) == DEFAULTS

    def test_handles_empty_file(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")
        assert load_config(config_file) == DEFAULTS

    def test_handles_corrupt_yaml(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(": : : invalid yaml [[[")

        # Should fall back to defaults without crashing
        assert load_config(config_file) == DEFAULTS

    def test_handles_non_mapping(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- model\n- max_tokens\n")
        assert load_config(config_file) == DEFAULTS

    def test_unknown_keys_ignored(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("model: gpt-4o\ncolour: blue\n")

        config = load_config(config_file)
        assert config["model"] == "gpt-4o"
        assert "colour" not in config

    def test_uses_env_path_when_none(self, tmp_path: Path, monkeypatch):
        config_file = tmp_path / "env.yaml"
        config_file.write_text("model: from-env\n")
        monkeypatch.setenv("PIPE_GPT_CONFIG", str(config_file))

        assert load_config()["model"] == "from-env"

    def test_does_not_mutate_defaults(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("model: gpt-4o\n")
        load_config(config_file)
        assert DEFAULTS["model"] == "gpt-4"


class TestResolveSettings:
    def test_defaults(self):
        settings = resolve_settings(dict(DEFAULTS))
        assert settings.api_url == "https://api.openai.com/v1"
        assert settings.model == "gpt-4"
        assert settings.max_tokens == 4096
        assert settings.temperature == 0.6
        assert settings.top_p == DEFAULT_TOP_P
        assert settings.stream is False
        assert settings.render_markdown is False

    def test_cli_overrides_config(self):
        config = {**DEFAULTS, "max_tokens": 8192, "temperature": 0.2}
        settings = resolve_settings(config, max_tokens=100, temperature=0.9, top_p=0.5)
        assert settings.max_tokens == 100
        assert settings.temperature == 0.9
        assert settings.top_p == 0.5

    def test_config_used_when_flags_absent(self):
        config = {**DEFAULTS, "model": "gpt-4o", "max_tokens": 8192}
        settings = resolve_settings(config)
        assert settings.model == "gpt-4o"
        assert settings.max_tokens == 8192

    def test_zero_temperature_is_an_override(self):
        settings = resolve_settings(dict(DEFAULTS), temperature=0.0)
        assert settings.temperature == 0.0

    def test_markdown_flag(self):
        assert resolve_settings(dict(DEFAULTS), render_markdown=True).render_markdown is True


class TestApiUrlValidation:
    def test_unparsable_api_url_gives_all_defaults(self, tmp_path: Path, caplog):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("api_url: 'http://[::1'\nmodel: gpt-4o\n")

        with caplog.at_level(logging.WARNING, logger="pipe_gpt.core.config"):
            config = load_config(config_file)

        assert config == DEFAULTS
        assert "using defaults" in caplog.text

    def test_api_url_without_http_scheme_rejected(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("api_url: ftp://example.com/v1\n")
        assert load_config(config_file) == DEFAULTS

    def test_api_url_without_host_rejected(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("api_url: not a url\n")
        assert load_config(config_file) == DEFAULTS
