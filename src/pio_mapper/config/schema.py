"""Configuration schema models using pydantic.

This module defines the configuration structure and validation rules using pydantic.
All configuration values are validated according to the schema defined here.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _validate_level(v: str) -> str:
    v_upper = v.upper()
    if v_upper not in VALID_LOG_LEVELS:
        raise ValueError(f"Invalid log level: {v}. Must be one of: {', '.join(VALID_LOG_LEVELS)}")
    return v_upper


class TerminologyConfig(BaseModel):
    """Configuration for the terminology lookup tables.

    Attributes:
        value_set_file: JSON value set table to use instead of the bundled one
    """

    value_set_file: Optional[Path] = Field(
        default=None,
        description="Value set lookup table (bundled table if unset)",
    )


class BackendConfig(BaseModel):
    """Configuration for the document backend used as terminology fallback.

    Attributes:
        enabled: Whether unresolved codes are looked up in the backend
        base_url: Backend API URL
        connect_timeout: Connection timeout in seconds
        read_timeout: Read timeout in seconds
        max_retries: Maximum retry attempts for failed requests
        backoff_factor: Exponential backoff factor for retries
        verify_tls: Whether to verify TLS certificates
    """

    enabled: bool = False
    base_url: str = Field(default="http://localhost:8080/api/", description="Backend API URL")
    connect_timeout: float = Field(default=5.0, gt=0, description="Connection timeout in seconds")
    read_timeout: float = Field(default=30.0, gt=0, description="Read timeout in seconds")
    max_retries: int = Field(default=3, ge=0, description="Maximum retry attempts")
    backoff_factor: float = Field(default=0.3, ge=0.0, description="Exponential backoff factor")
    verify_tls: bool = True

    @field_validator("base_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate URL is valid HTTP/HTTPS.

        Raises:
            ValueError: If URL does not start with http:// or https://
        """
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Invalid URL: {v}. Must start with http:// or https://")
        return v


class LoggingConfig(BaseModel):
    """Configuration for logging.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file
        redact_pii: Whether to redact PII from logs
    """

    level: str = Field(default="INFO", description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL")
    log_file: Path = Field(default=Path("logs/pio-mapper.log"), description="Log file path")
    redact_pii: bool = Field(default=False, description="Redact PII from logs")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return _validate_level(v)


class OperationLoggingConfig(BaseModel):
    """Per-area logging configuration.

    Attributes:
        converters_log_level: Log level of the resource converters
        terminology_log_level: Log level of value set lookups
        backend_log_level: Log level of backend requests

    Example:
        >>> OperationLoggingConfig(converters_log_level="DEBUG").converters_log_level
        'DEBUG'
    """

    converters_log_level: str = Field(default="INFO", description="Log level for converters")
    terminology_log_level: str = Field(default="INFO", description="Log level for terminology")
    backend_log_level: str = Field(default="WARNING", description="Log level for backend requests")

    @field_validator("converters_log_level", "terminology_log_level", "backend_log_level")
    @classmethod
    def validate_operation_log_level(cls, v: str) -> str:
        return _validate_level(v)


class Config(BaseModel):
    """Root configuration model.

    Attributes:
        terminology: Value set table configuration
        backend: Document backend configuration
        logging: Logging configuration
        operation_logging: Per-area logging configuration

    Example:
        >>> config = Config(backend=BackendConfig(enabled=True, base_url="https://pio.example.de/api/"))
        >>> config.backend.max_retries
        3
    """

    terminology: TerminologyConfig = TerminologyConfig()
    backend: BackendConfig = BackendConfig()
    logging: LoggingConfig = LoggingConfig()
    operation_logging: OperationLoggingConfig = OperationLoggingConfig()
