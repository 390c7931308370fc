"""
Tool Options Schema.

Connection options for a single invocation, built once from the leading
command-line flags and the configured defaults.
"""

from typing import Literal

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ToolOptions(BaseModel):
    """
    Transport configuration consumed by the daemon client.

    insecure disables TLS certificate validation. It is the only TLS
    setting and is read by nothing except DaemonClient.
    """

    model_config = ConfigDict(frozen=True)

    endpoint: str
    timeout: float = Field(gt=0)
    insecure: bool = False
    log_level: Literal["DEBUG", "INFO"] | None = None

    @field_validator("endpoint")
    @classmethod
    def _validate_endpoint(cls, value: str) -> str:
        try:
            url = httpx.URL(value)
        except httpx.InvalidURL as e:
            raise ValueError(f"invalid endpoint URL '{value}': {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError(f"endpoint must be an http(s) URL with a host, got '{value}'")
        return value.rstrip("/")
