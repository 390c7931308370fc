"""
Configuration Management.

Loads built-in defaults from the YAML files in the settings directory.
No hardcoded connection values in code. Defaults come from these files,
and command-line options override them per invocation.

Settings directory:
    call_api_check/settings/ (shipped with the package), or the directory
    named by the CALL_API_CHECK_CONFIG_DIR environment variable.

Settings (YAML):
    application.yaml   - Daemon scheme, host, port, checker path, timeouts
    logging.yaml       - Logging configuration
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from call_api_check.core.config_schema import ApplicationSchema, LoggingSchema
from call_api_check.core.exceptions import ConfigurationError

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent.parent / "settings"


class Settings(BaseSettings):
    """Environment overrides. Only the location of the settings directory."""

    config_dir: Path | None = None

    model_config = SettingsConfigDict(
        env_prefix="CALL_API_CHECK_",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached environment settings."""
    return Settings()


def get_config_dir() -> Path:
    """Return the directory holding the YAML settings files."""
    return get_settings().config_dir or DEFAULT_CONFIG_DIR


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from the settings directory."""
    config_path = get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    try:
        raw = load_yaml_config(filename)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot read {filename}: {e}") from e
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Properties return typed Pydantic model instances with attribute access.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings (daemon connection, timeouts)."""
        return self._application

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()
