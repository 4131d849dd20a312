"""
tests/unit/test_config.py — Settings Tests

Covers:
  - defaults match the documented model / limits
  - field validators reject bad provider, temperature, tokens, log level, cap
  - validate_all() raises ConfigError with a numbered list
  - validate_all() catches a missing API key for the chosen provider
  - UIBUILDER_CONFIG env var is respected by load_settings()
  - Explicit config_path argument takes priority over env var
"""

from __future__ import annotations

import textwrap

import pytest
from pydantic import ValidationError


# ── Helpers ───────────────────────────────────────────────────────────────────

def _make_settings(**overrides):
    """Build a Settings object from keyword overrides (no YAML file needed)."""
    from uibuilder.config.settings import Settings
    return Settings(**overrides)


def _make_llm_cfg(**kwargs):
    from uibuilder.config.settings import LLMConfig
    return LLMConfig(**kwargs)


def _write_yaml(path, body: str):
    path.write_text(textwrap.dedent(body), encoding="utf-8")
    return path


# ── Defaults ──────────────────────────────────────────────────────────────────

class TestDefaults:
    def test_llm_defaults(self):
        s = _make_settings()
        assert s.llm.provider == "openrouter"
        assert s.llm.model == "arcee-ai/trinity-large-preview:free"
        assert s.llm.temperature == 0.7
        assert s.llm.max_tokens == 4000
        assert s.llm.app_name == "AI UI Builder"

    def test_history_defaults(self):
        s = _make_settings()
        assert s.history.max_versions == 20
        assert s.history.store_path == "./data/versions.json"

    def test_log_level_normalised(self):
        s = _make_settings(logging={"level": "debug"})
        assert s.log_level == "DEBUG"

    def test_api_key_from_env(self, monkeypatch):
        monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-env")
        s = _make_settings()
        assert s.api_key_for("openrouter") == "sk-or-env"
        assert s.api_key_for("openai") is None

    def test_nested_env_override(self, monkeypatch):
        monkeypatch.setenv("LLM__MODEL", "openai/gpt-4o-mini")
        assert _make_settings().llm.model == "openai/gpt-4o-mini"


# ── Field validators ──────────────────────────────────────────────────────────

class TestFieldValidators:
    def test_provider_case_insensitive(self):
        assert _make_llm_cfg(provider="OpenAI").provider == "openai"

    def test_unknown_provider_rejected(self):
        with pytest.raises(ValidationError, match="not supported"):
            _make_llm_cfg(provider="bytez")

    @pytest.mark.parametrize("temperature", [-0.1, 2.5])
    def test_temperature_range(self, temperature):
        with pytest.raises(ValidationError):
            _make_llm_cfg(temperature=temperature)

    def test_max_tokens_positive(self):
        with pytest.raises(ValidationError):
            _make_llm_cfg(max_tokens=0)

    def test_timeout_positive(self):
        with pytest.raises(ValidationError):
            _make_llm_cfg(timeout_seconds=0)

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            _make_settings(logging={"level": "VERBOSE"})

    def test_max_versions_positive(self):
        with pytest.raises(ValidationError):
            _make_settings(history={"max_versions": 0})


# ── validate_all ─────────────────────────────────────────────────────────────

class TestValidateAll:
    def test_passes_with_key(self):
        _make_settings(OPENROUTER_API_KEY="sk-or-test").validate_all()

    def test_missing_openrouter_key(self):
        from uibuilder.config.settings import ConfigError
        with pytest.raises(ConfigError, match="OPENROUTER_API_KEY"):
            _make_settings().validate_all()

    def test_missing_openai_key(self):
        from uibuilder.config.settings import ConfigError
        s = _make_settings(OPENROUTER_API_KEY="sk-or-test", llm={"provider": "openai"})
        with pytest.raises(ConfigError, match="OPENAI_API_KEY"):
            s.validate_all()

    def test_numbered_list_of_every_problem(self):
        from uibuilder.config.settings import ConfigError
        s = _make_settings(llm={"model": "  "})
        with pytest.raises(ConfigError) as exc_info:
            s.validate_all()
        message = str(exc_info.value)
        assert "2 configuration problem(s)" in message
        assert "  1. " in message
        assert "  2. " in message
        assert "llm.model must not be empty" in message

    def test_store_path_under_a_file(self, tmp_path):
        from uibuilder.config.settings import ConfigError
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("")
        s = _make_settings(
            OPENROUTER_API_KEY="sk-or-test",
            history={"store_path": str(blocker / "versions.json")},
        )
        with pytest.raises(ConfigError, match="not a directory"):
            s.validate_all()

    def test_config_error_is_a_uibuilder_error(self):
        from uibuilder.config.settings import ConfigError
        from uibuilder.exceptions import UIBuilderError
        assert issubclass(ConfigError, UIBuilderError)


# ── load_settings ─────────────────────────────────────────────────────────────

class TestLoadSettings:
    def test_loads_yaml_sections(self, tmp_path):
        from uibuilder.config.settings import load_settings
        path = _write_yaml(tmp_path / "config.yaml", """
            llm:
              model: custom/model
              temperature: 0.3
            history:
              max_versions: 5
            unrelated:
              key: ignored
        """)
        s = load_settings(path)
        assert s.llm.model == "custom/model"
        assert s.llm.temperature == 0.3
        assert s.history.max_versions == 5

    def test_missing_file_uses_defaults(self, tmp_path):
        from uibuilder.config.settings import load_settings
        s = load_settings(tmp_path / "absent.yaml")
        assert s.llm.model == "arcee-ai/trinity-large-preview:free"

    def test_env_var_config_path(self, tmp_path, monkeypatch):
        from uibuilder.config.settings import load_settings
        path = _write_yaml(tmp_path / "env.yaml", """
            llm:
              model: from/env-config
        """)
        monkeypatch.setenv("UIBUILDER_CONFIG", str(path))
        assert load_settings().llm.model == "from/env-config"

    def test_explicit_path_beats_env_var(self, tmp_path, monkeypatch):
        from uibuilder.config.settings import load_settings
        env_path = _write_yaml(tmp_path / "env.yaml", "llm:\n  model: from/env\n")
        arg_path = _write_yaml(tmp_path / "arg.yaml", "llm:\n  model: from/arg\n")
        monkeypatch.setenv("UIBUILDER_CONFIG", str(env_path))
        assert load_settings(arg_path).llm.model == "from/arg"

    def test_invalid_yaml_value_raises(self, tmp_path):
        from uibuilder.config.settings import load_settings
        path = _write_yaml(tmp_path / "bad.yaml", "llm:\n  provider: nope\n")
        with pytest.raises(ValidationError):
            load_settings(path)

    def test_get_settings_returns_loaded_singleton(self, tmp_path):
        from uibuilder.config.settings import get_settings, load_settings
        path = _write_yaml(tmp_path / "config.yaml", "llm:\n  model: singleton/model\n")
        loaded = load_settings(path)
        assert get_settings() is loaded
