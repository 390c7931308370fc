"""
Integration Test Fixtures.

Fixtures for integration tests - a real HTTP daemon on a loopback socket.
The CLI under test runs as a subprocess and talks to it over the network.
"""

import json
import shutil
import socket
import ssl
import subprocess
import sys
import threading
from collections.abc import Generator
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any
from urllib.parse import parse_qs, urlsplit

import pytest

PROJECT_ROOT = Path(__file__).parent.parent.parent


# =============================================================================
# Fake Daemon
# =============================================================================


class FakeDaemon:
    """
    Minimal stand-in for the REST daemon.

    Every request is recorded. The answer is a fixed status and JSON body
    set through respond().

    Usage:
        def test_check(fake_daemon):
            fake_daemon.respond(200, {"Invoke-Foo": {"exitcode": 0, "checkresult": "[OK]"}})
            run_cli("--endpoint", fake_daemon.endpoint, "-c", "Invoke-Foo", "--")
    """

    def __init__(self, tls_context: ssl.SSLContext | None = None) -> None:
        self.requests: list[dict[str, Any]] = []
        self.status_code = 200
        self.body: bytes = b"{}"
        self._server = ThreadingHTTPServer(("127.0.0.1", 0), self._handler_class())
        if tls_context is not None:
            self._server.socket = tls_context.wrap_socket(self._server.socket, server_side=True)
        self.scheme = "https" if tls_context is not None else "http"
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)

    @property
    def endpoint(self) -> str:
        host, port = self._server.server_address[:2]
        return f"{self.scheme}://{host}:{port}"

    def respond(self, status_code: int, body: Any) -> None:
        self.status_code = status_code
        self.body = json.dumps(body).encode("utf-8")

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._server.shutdown()
        self._server.server_close()

    def _handler_class(self) -> type[BaseHTTPRequestHandler]:
        daemon = self

        class Handler(BaseHTTPRequestHandler):
            def do_POST(self) -> None:
                length = int(self.headers.get("Content-Length", 0))
                raw = self.rfile.read(length)
                url = urlsplit(self.path)
                daemon.requests.append({
                    "path": url.path,
                    "query": parse_qs(url.query),
                    "headers": dict(self.headers),
                    "body": json.loads(raw) if raw else None,
                })
                self.send_response(daemon.status_code)
                self.send_header("Content-Type", "application/json")
                self.send_header("Content-Length", str(len(daemon.body)))
                self.end_headers()
                self.wfile.write(daemon.body)

            def log_message(self, format: str, *args: Any) -> None:
                pass

        return Handler


@pytest.fixture
def fake_daemon() -> Generator[FakeDaemon, None, None]:
    """Plain HTTP fake daemon on a random loopback port."""
    daemon = FakeDaemon()
    daemon.start()
    yield daemon
    daemon.stop()


@pytest.fixture(scope="session")
def self_signed_cert(tmp_path_factory: pytest.TempPathFactory) -> tuple[Path, Path]:
    """Generate a throwaway self-signed certificate for 127.0.0.1."""
    if shutil.which("openssl") is None:
        pytest.skip("openssl is not available")

    directory = tmp_path_factory.mktemp("tls")
    cert = directory / "cert.pem"
    key = directory / "key.pem"
    subprocess.run(
        [
            "openssl", "req", "-x509", "-newkey", "rsa:2048", "-nodes",
            "-keyout", str(key), "-out", str(cert),
            "-days", "1", "-subj", "/CN=127.0.0.1",
        ],
        check=True,
        capture_output=True,
    )
    return cert, key


@pytest.fixture
def tls_daemon(self_signed_cert: tuple[Path, Path]) -> Generator[FakeDaemon, None, None]:
    """HTTPS fake daemon presenting a certificate no client trusts."""
    cert, key = self_signed_cert
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.load_cert_chain(certfile=str(cert), keyfile=str(key))

    daemon = FakeDaemon(tls_context=context)
    daemon.start()
    yield daemon
    daemon.stop()


@pytest.fixture
def silent_endpoint() -> Generator[str, None, None]:
    """A listening socket that accepts connections and never answers."""
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(8)
    host, port = server.getsockname()
    yield f"http://{host}:{port}"
    server.close()


@pytest.fixture
def trickling_endpoint() -> Generator[str, None, None]:
    """
    A server that sends response headers, then one body byte every 0.5 s
    for 6 s. Each read finishes well within any per-read timeout.
    """
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(8)
    stop = threading.Event()

    def serve() -> None:
        try:
            conn, _ = server.accept()
        except OSError:
            return
        with conn:
            try:
                conn.recv(65536)
                conn.sendall(
                    b"HTTP/1.1 200 OK\r\n"
                    b"Content-Type: application/json\r\n"
                    b"Content-Length: 12\r\n\r\n"
                )
                for _ in range(12):
                    if stop.wait(0.5):
                        return
                    conn.sendall(b" ")
            except OSError:
                return

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()
    host, port = server.getsockname()
    yield f"http://{host}:{port}"
    stop.set()
    server.close()


# =============================================================================
# CLI Runner
# =============================================================================


def run_cli(*args: str, timeout: float = 30) -> subprocess.CompletedProcess[str]:
    """Run `python run.py` from the project root."""
    return subprocess.run(
        [sys.executable, "run.py", *args],
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
        timeout=timeout,
    )


@pytest.fixture
def cli():
    """Provide the run.py subprocess runner."""
    return run_cli
