"""Configuration management for httpbin-action using Pydantic models."""

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILE_NAME = ".httpbin-action.json"


class OutputFormat(str, Enum):
    """Output format types."""
    TABLE = "table"
    JSON = "json"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class ValidationConfig(BaseModel):
    """Validation configuration section."""
    # Collect every violation instead of stopping at the first one.
    # The verdict is the same either way.
    report_all: bool = Field(alias="reportAll", default=False)

    model_config = ConfigDict(populate_by_name=True)


class OutputConfig(BaseModel):
    """Output configuration section."""
    format: OutputFormat = OutputFormat.TABLE

    model_config = ConfigDict(use_enum_values=True)


class GithubConfig(BaseModel):
    """GitHub Actions wiring section."""
    annotations: bool = True
    output_name: str = Field(alias="outputName", default="docker-run-args")

    @field_validator("output_name")
    @classmethod
    def validate_output_name(cls, v):
        if not v or any(ch in v for ch in "=\r\n"):
            raise ValueError(f"output_name must be a non-empty single-line name without '=', got: {v!r}")
        return v

    model_config = ConfigDict(populate_by_name=True)


class EnvironmentConfig(BaseModel):
    """Prerequisite check configuration section."""
    required_tools: list[str] = Field(alias="requiredTools", default_factory=lambda: ["docker", "curl"])
    optional_tools: list[str] = Field(alias="optionalTools", default_factory=lambda: ["mkcert", "act"])

    model_config = ConfigDict(populate_by_name=True)


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.WARN

    model_config = ConfigDict(use_enum_values=True)


class ActionConfig(BaseModel):
    """Complete httpbin-action configuration model."""
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    github: GithubConfig = Field(default_factory=GithubConfig)
    environment: EnvironmentConfig = Field(default_factory=EnvironmentConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


def load_config(config_path: str | Path | None = None) -> ActionConfig:
    """Load configuration from file with fallback to defaults.

    Args:
        config_path: Optional path to configuration file. If None, searches
                    current directory and parents for .httpbin-action.json

    Returns:
        ActionConfig: Loaded and validated configuration

    Raises:
        ValueError: If configuration is invalid
    """
    if config_path is None:
        config_path = find_config_file()
    else:
        config_path = Path(config_path)

    if config_path and config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                config_data = json.load(f)
            return ActionConfig(**config_data)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in config file {config_path}: {e}")
        except Exception as e:
            raise ValueError(f"Failed to load config from {config_path}: {e}")
    else:
        return create_default_config()


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find .httpbin-action.json by searching up the directory tree.

    Args:
        start_dir: Directory to start search from (default: current directory)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = Path(start_dir).resolve()

    while True:
        config_file = current / CONFIG_FILE_NAME
        if config_file.exists():
            return config_file

        parent = current.parent
        if parent == current:  # Reached root directory
            break
        current = parent

    return None


def create_default_config() -> ActionConfig:
    """Create default configuration."""
    return ActionConfig()
