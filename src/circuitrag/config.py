# src/circuitrag/config.py
"""Configuration loading utilities for circuitrag.

This module provides configuration loading that can be used by:
- CLI commands
- External applications using circuitrag as a library

It handles:
- Finding and loading circuitrag.yaml config files
- Loading .env files for API keys
- Building Settings objects from multiple sources
- Creating CircuitRAG instances from configuration
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

if TYPE_CHECKING:
    from circuitrag.circuitrag import CircuitRAG
    from circuitrag.configuration import StoreBundle
    from circuitrag.settings import Settings

# Default paths
DEFAULT_DATA_DIR = "./circuitrag_data"
CONFIG_FILES = ["circuitrag.yaml", "circuitrag.yml", ".circuitragrc"]
ENV_FILE = ".env"

DEFAULT_LLM_MODEL = "openai/gpt-4o"
DEFAULT_EMBEDDING_MODEL = "openai/text-embedding-3-small"


@dataclass
class ConfigError:
    """Error during configuration loading."""

    message: str
    suggestion: str | None = None


def load_env_file(env_path: str | Path = ENV_FILE) -> None:
    """Load environment variables from .env file if it exists.

    Existing environment variables are never overridden.

    Args:
        env_path: Path to .env file (default: .env in current directory)
    """
    path = Path(env_path)
    if not path.exists():
        return

    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip().strip('"').strip("'")
                if key not in os.environ:
                    os.environ[key] = value


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find configuration file in current directory or parent directories.

    Args:
        start_dir: Directory to start searching from (default: cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    current = start_dir or Path.cwd()
    for _ in range(10):  # Limit search depth
        for config_name in CONFIG_FILES:
            config_path = current / config_name
            if config_path.exists():
                return config_path
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


VALID_ROOT_KEYS = {
    "provider",
    "llm_model",
    "embedding_model",
    "data_dir",
    "behavior_instructions",
    "use_vector_index",
    "searx_instances",
    "settings",
}


def valid_settings_keys() -> set[str]:
    from circuitrag.settings import Settings

    return set(Settings.model_fields)


def validate_config(config: dict[str, Any], config_path: Path | None = None) -> list[str]:
    """Validate config and return warnings about unknown keys.

    Args:
        config: The loaded configuration dictionary
        config_path: Path to config file (for error messages)

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []

    unknown_root = set(config.keys()) - VALID_ROOT_KEYS
    if unknown_root:
        path_str = str(config_path) if config_path else "config"
        warnings.append(f"Unknown config keys in {path_str}: {', '.join(sorted(unknown_root))}")

    settings = config.get("settings", {})
    if isinstance(settings, dict):
        unknown_settings = set(settings.keys()) - valid_settings_keys()
        if unknown_settings:
            warnings.append(f"Unknown settings keys: {', '.join(sorted(unknown_settings))}")

    return warnings


def load_config(config_path: Path | str | None = None) -> dict[str, Any] | ConfigError:
    """Load configuration from YAML file.

    Args:
        config_path: Explicit path to config file, or None to search

    Returns:
        Configuration dictionary (empty if no config found), or ConfigError
        if an explicit path is missing or the file is not a YAML mapping
    """
    config_path = Path(config_path) if config_path is not None else find_config_file()

    if config_path is None:
        return {}

    try:
        with open(config_path, encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except FileNotFoundError:
        return ConfigError(
            message=f"Config file not found: {config_path}",
            suggestion="Check the --config path or remove it to search for circuitrag.yaml",
        )
    except yaml.YAMLError as e:
        return ConfigError(
            message=f"Invalid YAML in {config_path}: {e}",
            suggestion="Fix the syntax error and try again",
        )

    if not isinstance(config, dict):
        return ConfigError(
            message=f"Config file {config_path} must contain a mapping of keys",
            suggestion="Use 'key: value' pairs at the top level",
        )
    return config


def _safe_int(value: str | None) -> int | None:
    """Parse int from string, returning None on invalid value."""
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _safe_float(value: str | None) -> float | None:
    """Parse float from string, returning None on invalid value."""
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _parse_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


def get_settings_from_env() -> dict[str, Any]:
    """Read behavioral settings from CIRCUITRAG_* environment variables.

    Returns values that were explicitly set (not defaults), to allow proper
    precedence: YAML settings are used unless overridden by env vars.

    Returns:
        Dictionary of setting name -> value for explicitly set env vars
    """
    result: dict[str, Any] = {}

    int_settings = {
        "CIRCUITRAG_MAX_CHUNK_SIZE": "max_chunk_size",
        "CIRCUITRAG_OVERLAP_SIZE": "overlap_size",
        "CIRCUITRAG_DEFAULT_LIMIT": "default_limit",
        "CIRCUITRAG_MAX_TOKENS": "max_tokens",
        "CIRCUITRAG_NUM_RETRIES": "num_retries",
    }
    for env_key, settings_key in int_settings.items():
        if (val := _safe_int(os.environ.get(env_key))) is not None:
            result[settings_key] = val

    float_settings = {
        "CIRCUITRAG_SIMILARITY_THRESHOLD": "similarity_threshold",
        "CIRCUITRAG_TEMPERATURE": "temperature",
    }
    for env_key, settings_key in float_settings.items():
        if (fval := _safe_float(os.environ.get(env_key))) is not None:
            result[settings_key] = fval

    if os.environ.get("CIRCUITRAG_DEFAULT_LANGUAGE"):
        result["default_language"] = os.environ["CIRCUITRAG_DEFAULT_LANGUAGE"].lower()
    if "CIRCUITRAG_EXTERNAL_SEARCH" in os.environ:
        result["external_search_enabled"] = _parse_bool(os.environ["CIRCUITRAG_EXTERNAL_SEARCH"])

    return result


def get_settings_from_yaml(config: dict[str, Any]) -> dict[str, Any]:
    """Extract settings from the 'settings:' section of a YAML config.

    Unknown keys are left out (validate_config reports them).
    """
    yaml_settings = config.get("settings", {}) or {}
    if not isinstance(yaml_settings, dict):
        return {}
    known = valid_settings_keys()
    return {key: value for key, value in yaml_settings.items() if key in known}


def build_settings(
    config: dict[str, Any] | None = None,
    env_settings: dict[str, Any] | None = None,
) -> Settings:
    """Build Settings object from YAML config and env vars.

    Precedence (highest to lowest):
    1. Environment variables (for CI/CD override)
    2. YAML settings: section
    3. Settings class defaults

    Args:
        config: YAML configuration dictionary
        env_settings: Environment variable overrides (if None, reads from env)

    Returns:
        Configured Settings instance
    """
    from circuitrag.settings import Settings

    config = config or {}
    yaml_settings = get_settings_from_yaml(config)
    env_settings = env_settings if env_settings is not None else get_settings_from_env()

    return Settings(**{**yaml_settings, **env_settings})


def get_stores(data_dir: str | Path) -> StoreBundle:
    """Get store instances for read-only operations (status, delete).

    This doesn't require provider configuration since it only accesses stores.
    """
    from circuitrag.configuration import LocalStorage

    return LocalStorage(str(data_dir)).build_stores()


def resolve_data_dir(data_dir: str | None, config: dict[str, Any]) -> str:
    """Data directory from, in order: argument, CIRCUITRAG_DATA_DIR, config file, default."""
    return str(
        data_dir
        or os.environ.get("CIRCUITRAG_DATA_DIR")
        or config.get("data_dir")
        or DEFAULT_DATA_DIR
    )


@dataclass
class CircuitRAGConfig:
    """Configuration for creating a CircuitRAG instance."""

    provider: str
    llm_model: str
    embedding_model: str
    data_dir: str
    settings: Settings
    llm_api_key: str | None = None
    embedding_api_key: str | None = None
    behavior_instructions: str | None = None
    use_vector_index: bool = True
    searx_instances: tuple[str, ...] | None = None


def get_circuitrag_config(
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> CircuitRAGConfig | ConfigError:
    """Get configuration for creating a CircuitRAG instance.

    This extracts configuration without creating the instance, allowing
    the caller to handle errors and missing values appropriately.

    Args:
        data_dir: Override data directory
        config_path: Override config file path

    Returns:
        CircuitRAGConfig with all settings, or ConfigError if invalid
    """
    config = load_config(config_path)
    if isinstance(config, ConfigError):
        return config
    effective_data_dir = resolve_data_dir(data_dir, config)
    provider = config.get("provider", "litellm")

    if provider != "litellm":
        return ConfigError(
            message=f"Unknown provider '{provider}'",
            suggestion="Supported providers: litellm",
        )

    try:
        settings = build_settings(config, get_settings_from_env())
    except ValueError as e:
        return ConfigError(
            message=f"Invalid settings: {e}",
            suggestion="Check the settings section of circuitrag.yaml and CIRCUITRAG_* variables",
        )

    llm_model = (
        os.environ.get("CIRCUITRAG_LLM_MODEL") or config.get("llm_model") or DEFAULT_LLM_MODEL
    )
    embedding_model = (
        os.environ.get("CIRCUITRAG_EMBEDDING_MODEL")
        or config.get("embedding_model")
        or DEFAULT_EMBEDDING_MODEL
    )
    behavior_instructions = os.environ.get("CIRCUITRAG_BEHAVIOR_INSTRUCTIONS") or config.get(
        "behavior_instructions"
    )
    searx = config.get("searx_instances")

    return CircuitRAGConfig(
        provider=provider,
        llm_model=llm_model,
        embedding_model=embedding_model,
        data_dir=effective_data_dir,
        settings=settings,
        llm_api_key=os.environ.get("CIRCUITRAG_LLM_API_KEY"),
        embedding_api_key=os.environ.get("CIRCUITRAG_EMBEDDING_API_KEY"),
        behavior_instructions=behavior_instructions or None,
        use_vector_index=bool(config.get("use_vector_index", True)),
        searx_instances=tuple(searx) if searx is not None else None,
    )


def create_circuitrag(config: CircuitRAGConfig) -> CircuitRAG:
    """Create a CircuitRAG instance from configuration."""
    from circuitrag.circuitrag import CircuitRAG
    from circuitrag.configuration import LiteLLMProvider, LocalStorage

    if config.provider != "litellm":
        raise ValueError(f"Unknown provider: {config.provider}")

    return CircuitRAG(
        provider=LiteLLMProvider(
            llm=config.llm_model,
            embedding=config.embedding_model,
            llm_api_key=config.llm_api_key,
            embedding_api_key=config.embedding_api_key,
            searx_instances=config.searx_instances,
        ),
        storage=LocalStorage(config.data_dir, use_vector_index=config.use_vector_index),
        settings=config.settings,
        behavior_instructions=config.behavior_instructions,
    )


def get_circuitrag(
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> CircuitRAG | ConfigError:
    """Create a CircuitRAG instance based on configuration.

    This is a convenience function that combines get_circuitrag_config and
    create_circuitrag. For more control, use those functions separately.

    Args:
        data_dir: Override data directory
        config_path: Override config file path

    Returns:
        Configured CircuitRAG instance, or ConfigError if configuration is invalid
    """
    config = get_circuitrag_config(data_dir, config_path)
    if isinstance(config, ConfigError):
        return config
    return create_circuitrag(config)
