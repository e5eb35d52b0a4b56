"""Configuration manager for loading and managing configuration.

This module provides the main configuration loading and management functionality,
including support for JSON configuration files, environment variable overrides,
and configuration validation.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from pio_mapper.config.defaults import DEFAULT_CONFIG, DEFAULT_CONFIG_PATH
from pio_mapper.config.schema import BackendConfig, Config, LoggingConfig
from pio_mapper.terminology.resolver import TerminologyResolver
from pio_mapper.transport.backend_client import DocumentBackendClient
from pio_mapper.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Environment variable prefix for all configuration overrides
ENV_PREFIX = "PIO_MAPPER_"


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file and environment variables.

    Configuration is loaded with the following precedence (highest to lowest):
    1. CLI arguments (handled by caller)
    2. Environment variables (PIO_MAPPER_* prefix)
    3. Configuration file (JSON)
    4. Default values

    Args:
        config_path: Path to configuration file. If None, uses ./config/config.json

    Returns:
        Validated Config instance

    Raises:
        ConfigurationError: If configuration is invalid or malformed

    Example:
        >>> config = load_config(Path("custom/config.json"))
        >>> config.backend.enabled
        False
    """
    # Load .env file if present in project root
    load_dotenv()

    if config_path is None:
        config_path = Path(DEFAULT_CONFIG_PATH)

    config_dict = _load_config_file(config_path)
    config_dict = _apply_env_overrides(config_dict)

    try:
        return Config(**config_dict)
    except ValidationError as e:
        raise ConfigurationError(
            f"Configuration validation failed:\n{e}\n\n"
            f"Fix: Check your configuration file at {config_path} and ensure all "
            f"values match the expected format."
        ) from e


def _load_config_file(config_path: Path) -> dict[str, Any]:
    """Load configuration file or return defaults.

    Raises:
        ConfigurationError: If JSON is malformed or the file cannot be read
    """
    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config_dict = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in config file: {config_path}\n"
                f"Error: {e}\n"
                f"Fix: Check JSON syntax at line {e.lineno}, column {e.colno}"
            ) from e
        except OSError as e:
            raise ConfigurationError(
                f"Failed to read config file: {config_path}\n"
                f"Error: {e}\n"
                f"Fix: Check file permissions and path"
            ) from e
        if not isinstance(config_dict, dict):
            raise ConfigurationError(
                f"Config file {config_path} must contain a JSON object\n"
                f"Fix: Wrap the sections in {{ ... }}"
            )
        logger.info(f"Loaded configuration from {config_path}")
        return config_dict

    logger.info(f"Config file not found: {config_path}. Using default configuration.")
    # Deep copy so callers cannot mutate the defaults
    return json.loads(json.dumps(DEFAULT_CONFIG))


def _apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides with PIO_MAPPER_ prefix.

    Environment variables follow the pattern: PIO_MAPPER_<FIELD>
    For example: PIO_MAPPER_BACKEND_URL, PIO_MAPPER_LOG_LEVEL

    Args:
        config_dict: Configuration dictionary to update

    Returns:
        Updated configuration dictionary with environment overrides applied
    """
    # Terminology section
    if value_set_file := os.getenv(f"{ENV_PREFIX}VALUE_SET_FILE"):
        config_dict.setdefault("terminology", {})["value_set_file"] = value_set_file
        logger.debug("Override: value_set_file from environment")

    # Backend section
    if backend_enabled := os.getenv(f"{ENV_PREFIX}BACKEND_ENABLED"):
        config_dict.setdefault("backend", {})["enabled"] = _parse_bool(backend_enabled)
        logger.debug("Override: backend enabled from environment")

    if backend_url := os.getenv(f"{ENV_PREFIX}BACKEND_URL"):
        config_dict.setdefault("backend", {})["base_url"] = backend_url
        logger.debug("Override: backend base_url from environment")

    if verify_tls := os.getenv(f"{ENV_PREFIX}VERIFY_TLS"):
        config_dict.setdefault("backend", {})["verify_tls"] = _parse_bool(verify_tls)
        logger.debug("Override: verify_tls from environment")

    if connect_timeout := os.getenv(f"{ENV_PREFIX}TIMEOUT_CONNECT"):
        config_dict.setdefault("backend", {})["connect_timeout"] = float(connect_timeout)
        logger.debug("Override: connect_timeout from environment")

    if read_timeout := os.getenv(f"{ENV_PREFIX}TIMEOUT_READ"):
        config_dict.setdefault("backend", {})["read_timeout"] = float(read_timeout)
        logger.debug("Override: read_timeout from environment")

    if max_retries := os.getenv(f"{ENV_PREFIX}MAX_RETRIES"):
        config_dict.setdefault("backend", {})["max_retries"] = int(max_retries)
        logger.debug("Override: max_retries from environment")

    if backoff_factor := os.getenv(f"{ENV_PREFIX}BACKOFF_FACTOR"):
        config_dict.setdefault("backend", {})["backoff_factor"] = float(backoff_factor)
        logger.debug("Override: backoff_factor from environment")

    # Logging section
    if log_level := os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config_dict.setdefault("logging", {})["level"] = log_level
        logger.debug("Override: log_level from environment")

    if log_file := os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config_dict.setdefault("logging", {})["log_file"] = log_file
        logger.debug("Override: log_file from environment")

    if redact_pii := os.getenv(f"{ENV_PREFIX}REDACT_PII"):
        config_dict.setdefault("logging", {})["redact_pii"] = _parse_bool(redact_pii)
        logger.debug("Override: redact_pii from environment")

    return _apply_operation_logging_env_overrides(config_dict)


def _apply_operation_logging_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """Apply per-area logging overrides (PIO_MAPPER_OP_LOG_<AREA>_LEVEL)."""
    for area in ("converters", "terminology", "backend"):
        if level := os.getenv(f"{ENV_PREFIX}OP_LOG_{area.upper()}_LEVEL"):
            config_dict.setdefault("operation_logging", {})[f"{area}_log_level"] = level
            logger.debug(f"Override: {area}_log_level from environment")
    return config_dict


def _parse_bool(value: str) -> bool:
    """Parse boolean value from string (case-insensitive)."""
    return value.lower() in ("true", "1", "yes", "on")


def get_backend_config(config: Config) -> BackendConfig:
    return config.backend


def get_logging_config(config: Config) -> LoggingConfig:
    return config.logging


def build_resolver(config: Config) -> TerminologyResolver:
    """Build the terminology resolver described by the configuration.

    The backend client is only attached when ``backend.enabled`` is set;
    otherwise unresolved custom codes stay unresolved.

    Args:
        config: Configuration instance

    Returns:
        TerminologyResolver over the configured value set table

    Raises:
        ConfigurationError: If the value set file cannot be loaded

    Example:
        >>> resolver = build_resolver(load_config())
    """
    backend = None
    if config.backend.enabled:
        backend = DocumentBackendClient.from_config(config.backend)
        logger.info(f"Backend fallback enabled: {config.backend.base_url}")
    return TerminologyResolver.from_file(config.terminology.value_set_file, backend=backend)
