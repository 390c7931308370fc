"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML config file.
Used by AppConfig to validate configuration at load time. If a YAML file
has missing keys, wrong types, or unknown fields, a clear error is raised
at startup instead of a cryptic KeyError deep in the request path.

Each top-level class corresponds to one file in the settings directory:
    ApplicationSchema  → application.yaml
    LoggingSchema      → logging.yaml
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class DaemonSchema(_StrictBase):
    scheme: Literal["http", "https"]
    host: str = Field(min_length=1)
    port: int = Field(ge=1, le=65535)
    checker_path: str = Field(pattern=r"^/")


class TimeoutsSchema(_StrictBase):
    check: float = Field(gt=0)


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    daemon: DaemonSchema
    timeouts: TimeoutsSchema

    def endpoint_for(self, host: str | None = None, port: int | None = None) -> str:
        """
        Base URL for the daemon, with host and port falling back to the
        configured ones. IPv6 literals are wrapped in brackets.
        """
        host = host or self.daemon.host
        if ":" in host and not host.startswith("["):
            host = f"[{host}]"
        return f"{self.daemon.scheme}://{host}:{port or self.daemon.port}"


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class LoggingHandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    format: Literal["console", "json"]
    handlers: LoggingHandlersSchema
