"""Tests for models.yaml configuration loading and ModelConfig merging."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from mini_agent.config import ModelConfig, _load_models_yaml, get_model_config, settings


@pytest.fixture(autouse=True)
def _reset_cache():
    """Reset the module-level YAML cache before each test."""
    import mini_agent.config as cfg
    cfg._models_config_cache = None
    yield
    cfg._models_config_cache = None


# ---------------------------------------------------------------------------
# ModelConfig dataclass
# ---------------------------------------------------------------------------

def test_model_config_defaults():
    mc = ModelConfig()
    assert mc.model == ""
    assert mc.temperature is None
    assert mc.max_tokens is None
    assert mc.base_url == ""


# ---------------------------------------------------------------------------
# _load_models_yaml
# ---------------------------------------------------------------------------

def test_load_yaml_missing_file(tmp_path):
    with patch.dict("os.environ", {"MODELS_CONFIG_PATH": str(tmp_path / "nope.yaml")}):
        result = _load_models_yaml()
    assert result == {}


def test_load_yaml_valid_file(tmp_path):
    yaml_file = tmp_path / "models.yaml"
    yaml_file.write_text(
        "default:\n"
        "  model: google/gemini-flash-1.5\n"
        "  temperature: 0.3\n"
    )
    with patch.dict("os.environ", {"MODELS_CONFIG_PATH": str(yaml_file)}):
        result = _load_models_yaml()
    assert result["default"]["model"] == "google/gemini-flash-1.5"
    assert result["default"]["temperature"] == 0.3


def test_load_yaml_empty_file(tmp_path):
    yaml_file = tmp_path / "models.yaml"
    yaml_file.write_text("")
    with patch.dict("os.environ", {"MODELS_CONFIG_PATH": str(yaml_file)}):
        result = _load_models_yaml()
    assert result == {}


def test_load_yaml_caches_result(tmp_path):
    """Second call returns cached dict without re-reading."""
    yaml_file = tmp_path / "models.yaml"
    yaml_file.write_text("default:\n  model: m1\n")
    with patch.dict("os.environ", {"MODELS_CONFIG_PATH": str(yaml_file)}):
        first = _load_models_yaml()
        yaml_file.write_text("default:\n  model: m2\n")
        second = _load_models_yaml()
    assert first is second
    assert first["default"]["model"] == "m1"


# ---------------------------------------------------------------------------
# get_model_config
# ---------------------------------------------------------------------------

def test_get_model_config_no_yaml_falls_back_to_settings(tmp_path):
    with patch.dict("os.environ", {"MODELS_CONFIG_PATH": str(tmp_path / "missing.yaml")}):
        mc = get_model_config("react")
    assert mc.model == settings.llm_model
    assert mc.temperature == settings.llm_temperature
    assert mc.base_url == settings.llm_base_url
    assert mc.max_tokens is None


YAML_WITH_AGENTS = (
    "default:\n"
    "  model: openai/gpt-4.1-mini\n"
    "  temperature: 0.2\n"
    "  base_url: https://openrouter.ai/api/v1\n"
    "agents:\n"
    "  react:\n"
    "    model: google/gemini-2.0-flash\n"
    "    max_tokens: 2048\n"
)


def test_agent_override_merges_with_default(tmp_path):
    (tmp_path / "m.yaml").write_text(YAML_WITH_AGENTS)
    with patch.dict("os.environ", {"MODELS_CONFIG_PATH": str(tmp_path / "m.yaml")}):
        mc = get_model_config("react")
    assert mc.model == "google/gemini-2.0-flash"
    assert mc.max_tokens == 2048
    # inherited from default
    assert mc.temperature == 0.2
    assert mc.base_url == "https://openrouter.ai/api/v1"


def test_agent_not_overridden_gets_default(tmp_path):
    (tmp_path / "m.yaml").write_text(YAML_WITH_AGENTS)
    with patch.dict("os.environ", {"MODELS_CONFIG_PATH": str(tmp_path / "m.yaml")}):
        mc = get_model_config("other")
    assert mc.model == "openai/gpt-4.1-mini"
    assert mc.max_tokens is None


def test_null_temperature_in_yaml(tmp_path):
    (tmp_path / "m.yaml").write_text("default:\n  model: m\n  temperature: null\n")
    with patch.dict("os.environ", {"MODELS_CONFIG_PATH": str(tmp_path / "m.yaml")}):
        mc = get_model_config()
    assert mc.temperature is None


def test_yaml_no_default_section(tmp_path):
    """YAML with only agents section — default fields come from Settings."""
    (tmp_path / "m.yaml").write_text("agents:\n  react:\n    model: openai/gpt-4.1\n")
    with patch.dict("os.environ", {"MODELS_CONFIG_PATH": str(tmp_path / "m.yaml")}):
        mc = get_model_config("react")
    assert mc.model == "openai/gpt-4.1"
    assert mc.base_url == settings.llm_base_url
