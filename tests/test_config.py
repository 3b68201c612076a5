# tests/test_config.py
"""Tests for configuration loading."""

import os

import pytest

from circuitrag.config import (
    DEFAULT_DATA_DIR,
    DEFAULT_LLM_MODEL,
    CircuitRAGConfig,
    ConfigError,
    build_settings,
    find_config_file,
    get_circuitrag_config,
    get_settings_from_env,
    load_config,
    load_env_file,
    resolve_data_dir,
    validate_config,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("CIRCUITRAG_"):
            monkeypatch.delenv(key)


class TestLoadEnvFile:
    def test_sets_missing_variables(self, tmp_path, monkeypatch):
        monkeypatch.delenv("CIRCUITRAG_TEST_KEY", raising=False)
        monkeypatch.setenv("CIRCUITRAG_TEST_KEPT", "original")
        env = tmp_path / ".env"
        env.write_text(
            "# comment\n\nCIRCUITRAG_TEST_KEY=\"sk-123\"\nCIRCUITRAG_TEST_KEPT=new\nnoise\n",
            encoding="utf-8",
        )

        load_env_file(env)

        assert os.environ["CIRCUITRAG_TEST_KEY"] == "sk-123"
        assert os.environ["CIRCUITRAG_TEST_KEPT"] == "original"
        monkeypatch.delenv("CIRCUITRAG_TEST_KEY")

    def test_missing_file_is_ignored(self, tmp_path):
        load_env_file(tmp_path / "nope.env")


class TestFindConfigFile:
    def test_finds_in_parent(self, tmp_path):
        (tmp_path / "circuitrag.yaml").write_text("provider: litellm\n", encoding="utf-8")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_config_file(nested) == tmp_path / "circuitrag.yaml"

    def test_load_config_explicit_path(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("llm_model: openai/gpt-4o-mini\n", encoding="utf-8")

        assert load_config(path) == {"llm_model": "openai/gpt-4o-mini"}

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "circuitrag.yaml"
        path.write_text("", encoding="utf-8")

        assert load_config(path) == {}

    def test_missing_explicit_path_is_config_error(self, tmp_path):
        config = load_config(tmp_path / "missing.yaml")

        assert isinstance(config, ConfigError)
        assert "not found" in config.message
        assert config.suggestion

    def test_malformed_yaml_is_config_error(self, tmp_path):
        path = tmp_path / "circuitrag.yaml"
        path.write_text("settings: [unclosed\n", encoding="utf-8")

        config = load_config(path)

        assert isinstance(config, ConfigError)
        assert config.message.startswith("Invalid YAML")

    def test_non_mapping_yaml_is_config_error(self, tmp_path):
        path = tmp_path / "circuitrag.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")

        assert isinstance(load_config(path), ConfigError)


class TestValidateConfig:
    def test_valid(self):
        assert validate_config({"provider": "litellm", "settings": {"default_limit": 5}}) == []

    def test_unknown_keys(self):
        warnings = validate_config({"providr": "x", "settings": {"chunk": 1}})

        assert warnings == [
            "Unknown config keys in config: providr",
            "Unknown settings keys: chunk",
        ]


class TestBuildSettings:
    def test_env_wins_over_yaml(self):
        settings = build_settings(
            {"settings": {"default_limit": 3, "overlap_size": 100}},
            env_settings={"default_limit": 9},
        )

        assert settings.default_limit == 9
        assert settings.overlap_size == 100
        assert settings.max_chunk_size == 1500

    def test_unknown_yaml_keys_ignored(self):
        assert build_settings({"settings": {"bogus": 1}}, env_settings={}).default_limit == 7

    def test_invalid_values_raise(self):
        with pytest.raises(ValueError):
            build_settings({"settings": {"overlap_size": 5000}}, env_settings={})

    def test_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("CIRCUITRAG_DEFAULT_LIMIT", "4")
        monkeypatch.setenv("CIRCUITRAG_SIMILARITY_THRESHOLD", "0.7")
        monkeypatch.setenv("CIRCUITRAG_MAX_TOKENS", "lots")
        monkeypatch.setenv("CIRCUITRAG_DEFAULT_LANGUAGE", "EN")
        monkeypatch.setenv("CIRCUITRAG_EXTERNAL_SEARCH", "no")

        assert get_settings_from_env() == {
            "default_limit": 4,
            "similarity_threshold": 0.7,
            "default_language": "en",
            "external_search_enabled": False,
        }


class TestResolveDataDir:
    def test_precedence(self, monkeypatch):
        assert resolve_data_dir(None, {}) == DEFAULT_DATA_DIR
        assert resolve_data_dir(None, {"data_dir": "cfg"}) == "cfg"
        monkeypatch.setenv("CIRCUITRAG_DATA_DIR", "env")
        assert resolve_data_dir(None, {"data_dir": "cfg"}) == "env"
        assert resolve_data_dir("arg", {"data_dir": "cfg"}) == "arg"


class TestGetCircuitragConfig:
    def test_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        config = get_circuitrag_config()

        assert isinstance(config, CircuitRAGConfig)
        assert config.provider == "litellm"
        assert config.llm_model == DEFAULT_LLM_MODEL
        assert config.use_vector_index is True
        assert config.searx_instances is None

    def test_yaml_and_env(self, tmp_path, monkeypatch):
        path = tmp_path / "circuitrag.yaml"
        path.write_text(
            "llm_model: anthropic/claude-3-7-sonnet-20250219\n"
            "data_dir: ./dados\n"
            "behavior_instructions: Seja breve.\n"
            "use_vector_index: false\n"
            "searx_instances:\n  - https://searx.local\n"
            "settings:\n  default_limit: 5\n",
            encoding="utf-8",
        )
        monkeypatch.setenv("CIRCUITRAG_EMBEDDING_MODEL", "openai/text-embedding-3-large")
        monkeypatch.setenv("CIRCUITRAG_LLM_API_KEY", "sk-llm")

        config = get_circuitrag_config(config_path=path)

        assert isinstance(config, CircuitRAGConfig)
        assert config.llm_model == "anthropic/claude-3-7-sonnet-20250219"
        assert config.embedding_model == "openai/text-embedding-3-large"
        assert config.data_dir == "./dados"
        assert config.behavior_instructions == "Seja breve."
        assert config.use_vector_index is False
        assert config.searx_instances == ("https://searx.local",)
        assert config.settings.default_limit == 5
        assert config.llm_api_key == "sk-llm"

    def test_unknown_provider(self, tmp_path):
        path = tmp_path / "circuitrag.yaml"
        path.write_text("provider: ollama\n", encoding="utf-8")

        config = get_circuitrag_config(config_path=path)

        assert isinstance(config, ConfigError)
        assert "ollama" in config.message

    def test_invalid_settings(self, tmp_path):
        path = tmp_path / "circuitrag.yaml"
        path.write_text("settings:\n  default_language: de\n", encoding="utf-8")

        config = get_circuitrag_config(config_path=path)

        assert isinstance(config, ConfigError)
        assert config.message.startswith("Invalid settings")

    def test_missing_config_file(self, tmp_path):
        config = get_circuitrag_config(config_path=tmp_path / "missing.yaml")

        assert isinstance(config, ConfigError)
        assert "missing.yaml" in config.message
