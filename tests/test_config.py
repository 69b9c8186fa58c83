"""Tests for configuration and persona loading."""

from __future__ import annotations

import os

import pytest

from product_advisor.core.config import load_config, resolve_config_dir
from product_advisor.core.errors import ConfigError
from product_advisor.core.persona import load_persona

ENV_VARS = (
    "ADVISOR_RELAY_URL",
    "OPENAI_API_KEY",
    "ADVISOR_PROVIDER_URL",
    "ADVISOR_MODEL",
    "ADVISOR_MAX_TOKENS",
    "ADVISOR_REQUEST_TIMEOUT",
    "ADVISOR_STORAGE_PATH",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
    # load_dotenv writes straight into os.environ
    for name in ENV_VARS:
        os.environ.pop(name, None)


class TestLoadConfig:
    def test_defaults_without_config_dir(self, tmp_path):
        config = load_config(tmp_path / "missing")

        assert config.transport.relay_url is None
        assert config.transport.api_key is None
        assert config.transport.model == "gpt-4o"
        assert config.transport.max_tokens == 300
        assert config.storage_path == (tmp_path / "missing").resolve() / "conversation.json"
        assert config.log_level == "WARNING"

    def test_reads_env_file(self, tmp_path):
        (tmp_path / ".env").write_text(
            "ADVISOR_RELAY_URL=https://relay.example.test/\n"
            "ADVISOR_MAX_TOKENS=120\n"
            "ADVISOR_REQUEST_TIMEOUT=7.5\n"
            "LOG_LEVEL=debug\n",
            encoding="utf-8",
        )

        config = load_config(tmp_path)

        assert config.transport.relay_url == "https://relay.example.test/"
        assert config.transport.max_tokens == 120
        assert config.transport.timeout == 7.5
        assert config.log_level == "DEBUG"

    def test_shell_environment_wins_over_env_file(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("ADVISOR_MODEL=from-file\n", encoding="utf-8")
        monkeypatch.setenv("ADVISOR_MODEL", "from-shell")

        assert load_config(tmp_path).transport.model == "from-shell"

    def test_storage_path_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ADVISOR_STORAGE_PATH", str(tmp_path / "state.json"))
        assert load_config(tmp_path).storage_path == tmp_path / "state.json"

    @pytest.mark.parametrize("value", ["abc", "0", "-5"])
    def test_invalid_max_tokens(self, tmp_path, monkeypatch, value):
        monkeypatch.setenv("ADVISOR_MAX_TOKENS", value)
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_config_dir_must_be_directory(self, tmp_path):
        target = tmp_path / "file.txt"
        target.write_text("x", encoding="utf-8")
        with pytest.raises(ConfigError):
            resolve_config_dir(target)


class TestPersona:
    def test_packaged_persona(self):
        persona = load_persona()

        assert "hello" in persona.lexicon.greetings
        assert "shampoo" in persona.lexicon.topic_keywords
        assert persona.name_ack("Alex").startswith("Nice to meet you, Alex!")
        assert persona.system_prompt

    def test_override_file(self, tmp_path):
        override = tmp_path / "persona.yaml"
        override.write_text(
            "refusal_reply: Solo puedo hablar de belleza.\n"
            "lexicon:\n"
            "  greetings: [hola, Buenos Dias]\n",
            encoding="utf-8",
        )

        persona = load_persona(override)

        assert persona.refusal_reply == "Solo puedo hablar de belleza."
        assert persona.lexicon.greetings == ("hola", "buenos dias")
        assert "shampoo" in persona.lexicon.topic_keywords

    def test_override_is_used_by_load_config(self, tmp_path):
        (tmp_path / "persona.yaml").write_text("apology_reply: Oops.\n", encoding="utf-8")
        assert load_config(tmp_path).persona.apology_reply == "Oops."

    def test_invalid_yaml(self, tmp_path):
        override = tmp_path / "persona.yaml"
        override.write_text("lexicon: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_persona(override)

    def test_template_requires_placeholder(self, tmp_path):
        override = tmp_path / "persona.yaml"
        override.write_text("name_ack_template: Hello there\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_persona(override)

    @pytest.mark.parametrize("template", ["Hi {name} {emoji}", "Hi {name} {0}", "Hi {name} {"])
    def test_template_with_unknown_fields(self, tmp_path, template):
        override = tmp_path / "persona.yaml"
        override.write_text(f'name_ack_template: "{template}"\n', encoding="utf-8")
        with pytest.raises(ConfigError):
            load_persona(override)

    def test_lexicon_must_be_list(self, tmp_path):
        override = tmp_path / "persona.yaml"
        override.write_text("lexicon:\n  topic_keywords: shampoo\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_persona(override)
