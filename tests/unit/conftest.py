"""
Unit Test Fixtures.

Fixtures for unit tests. The daemon is replaced by httpx.MockTransport.
Unit tests should be fast and isolated, never opening a socket.
"""

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from call_api_check.schemas.options import ToolOptions


# =============================================================================
# Option Fixtures
# =============================================================================


@pytest.fixture
def tool_options() -> ToolOptions:
    """Options pointing at a daemon that only exists inside MockTransport."""
    return ToolOptions(endpoint="https://daemon.test:5668", timeout=5.0)


# =============================================================================
# HTTP Mock Fixtures
# =============================================================================


class RecordingDaemon:
    """
    Fake daemon behind an httpx.MockTransport.

    Records every request and answers with a fixed status and body, or
    raises the configured exception.

    Usage:
        def test_call(daemon):
            daemon.respond(200, {"Invoke-Foo": {"exitcode": 0, "checkresult": "ok"}})
            client = DaemonClient(options, transport=daemon.transport)
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.content: bytes = b"{}"
        self.error: Exception | None = None
        self.transport = httpx.MockTransport(self._handle)

    def respond(self, status_code: int, body: Any = None, raw: bytes | None = None) -> None:
        self.status_code = status_code
        self.content = raw if raw is not None else json.dumps(body).encode("utf-8")

    def fail(self, error: Exception) -> None:
        self.error = error

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(
            self.status_code,
            content=self.content,
            headers={"Content-Type": "application/json"},
        )

    @property
    def last_body(self) -> Any:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def daemon() -> RecordingDaemon:
    """Provide a fresh RecordingDaemon."""
    return RecordingDaemon()


@pytest.fixture
def checker_response() -> Callable[..., dict[str, Any]]:
    """Build a response body in the daemon's keyed layout."""

    def _build(
        command: str = "Invoke-IcingaCheckCPU",
        exitcode: Any = 0,
        checkresult: str = "[OK] CPU Load",
        perfdata: Any = None,
    ) -> dict[str, Any]:
        result: dict[str, Any] = {"exitcode": exitcode, "checkresult": checkresult}
        if perfdata is not None:
            result["perfdata"] = perfdata
        return {command: result}

    return _build
