"""
HTTP Client for the REST daemon.

Sends one check request to the daemon and turns the answer into a
CheckResult. There is exactly one request per process and no retry.
"""

import json
import time
from typing import Any

import httpx

from call_api_check.core.exceptions import ProtocolError, TransportError
from call_api_check.core.logging import get_logger, log_with_source
from call_api_check.plugin.request import CheckRequest
from call_api_check.plugin.response import interpret_response
from call_api_check.schemas.options import ToolOptions
from call_api_check.schemas.result import CheckResult

logger = get_logger(__name__)

USER_AGENT = "call-api-check/0.1.0"


class DaemonClient:
    """
    HTTP client for check execution against the REST daemon.

    Features:
    - Base URL, timeout and TLS trust taken from ToolOptions
    - Certificate validation skipped only when options.insecure is set
    - Environment proxy and CA variables ignored
    - Connection, TLS, timeout and HTTP status failures raised as TransportError

    Usage:
        with DaemonClient(options) as client:
            result = client.execute(encode_request(invocation))
    """

    def __init__(
        self,
        options: ToolOptions,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the daemon client.

        Args:
            options: Endpoint, timeout and TLS trust policy for this invocation.
            transport: Optional httpx transport, used by tests.
        """
        self.options = options
        self._transport = transport
        self._client: httpx.Client | None = None

    def _get_client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            if self.options.insecure:
                log_with_source(
                    logger,
                    "client",
                    "debug",
                    "TLS certificate validation disabled",
                    endpoint=self.options.endpoint,
                )
            self._client = httpx.Client(
                base_url=self.options.endpoint,
                timeout=httpx.Timeout(self.options.timeout),
                verify=not self.options.insecure,
                trust_env=False,
                transport=self._transport,
                headers={
                    "Accept": "application/json",
                    "User-Agent": USER_AGENT,
                },
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            self._client.close()
            self._client = None

    def __enter__(self) -> "DaemonClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _timed_out(self) -> TransportError:
        log_with_source(
            logger, "client", "error", "Daemon request timed out",
            timeout=self.options.timeout,
        )
        return TransportError(
            f"Request to {self.options.endpoint} timed out after {self.options.timeout:g}s"
        )

    def send(self, request: CheckRequest) -> bytes:
        """
        Send the check request and return the body of the 2xx response.

        options.timeout bounds the whole exchange, not each phase. The
        deadline is checked once the headers arrive and after every body
        chunk, so a daemon that trickles bytes is cut off at the deadline.
        A single stalled read still ends at the httpx read timeout.

        Raises:
            TransportError: On connection failure, TLS failure, timeout,
                or a non-2xx status
        """
        client = self._get_client()
        deadline = time.monotonic() + self.options.timeout

        log_with_source(
            logger,
            "client",
            "debug",
            "Daemon request",
            method=request.method,
            path=request.path,
            command=request.identifier,
        )

        try:
            with client.stream(
                request.method,
                request.path,
                params=request.params,
                content=request.content(),
                headers={"Content-Type": "application/json"},
                timeout=httpx.Timeout(self.options.timeout),
            ) as response:
                log_with_source(
                    logger,
                    "client",
                    "debug",
                    "Daemon response",
                    status_code=response.status_code,
                )
                if time.monotonic() >= deadline:
                    raise self._timed_out()
                if not response.is_success:
                    raise TransportError(
                        f"Daemon returned HTTP {response.status_code} {response.reason_phrase}".rstrip(),
                        status_code=response.status_code,
                    )

                chunks = []
                for chunk in response.iter_bytes():
                    chunks.append(chunk)
                    if time.monotonic() >= deadline:
                        raise self._timed_out()
        except httpx.TimeoutException as e:
            raise self._timed_out() from e
        except httpx.HTTPError as e:
            log_with_source(
                logger, "client", "error", "Daemon request failed",
                endpoint=self.options.endpoint, error=str(e),
            )
            raise TransportError(
                f"Request to {self.options.endpoint} failed: {str(e) or type(e).__name__}"
            ) from e

        return b"".join(chunks)

    def execute(self, request: CheckRequest) -> CheckResult:
        """
        Run one check on the daemon.

        Returns:
            CheckResult decoded from the response

        Raises:
            TransportError: If the exchange fails
            ProtocolError: If the response is not a valid check result
        """
        content = self.send(request)
        try:
            body = json.loads(content)
        except ValueError as e:
            raise ProtocolError("Response body is not valid JSON") from e
        return interpret_response(body, request.identifier)
