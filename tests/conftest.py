"""Shared test fixtures for bearertoken.

Provides output-state isolation, an isolated environment without
``BEARER_*`` variables or a stray ``.bearer.cfg``, and a local token
endpoint served from a background thread.
"""

from __future__ import annotations

import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any, Iterator, Optional

import pytest
from typer.testing import CliRunner

from bearertoken.output import OutputManager, reset_output, set_output


ISOLATED_ENV_VARS = (
    "BEARER_CLIENT_ID",
    "BEARER_CLIENT_SECRET",
    "BEARER_AUTH_URL",
    "HTTP_PROXY",
    "HTTPS_PROXY",
    "ALL_PROXY",
    "http_proxy",
    "https_proxy",
    "all_proxy",
)


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> Iterator[None]:
    """Reset the global OutputManager after every test.

    The OutputManager's Rich console holds the ``sys.stderr`` it was created
    with. When CliRunner or capsys swaps the streams and the test ends, the
    reference goes stale, so a fresh manager is created on next use.
    """
    yield
    reset_output()


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a colourless OutputManager writing to the current streams."""
    output = OutputManager(no_color=True)
    set_output(output)
    return output


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run every test in an empty directory with no ``BEARER_*`` or proxy variables."""
    for var in ISOLATED_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def runner() -> CliRunner:
    """Typer CLI test runner."""
    return CliRunner()


# ---------------------------------------------------------------------------
# Local token endpoint
# ---------------------------------------------------------------------------


class _TokenHandler(BaseHTTPRequestHandler):
    server: "TokenServer"

    def do_GET(self) -> None:  # noqa: N802
        self.server.requests.append(self.path)
        body = self.server.body.encode("utf-8")
        self.send_response(self.server.status)
        if self.server.content_type is not None:
            self.send_header("Content-Type", self.server.content_type)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: Any) -> None:
        pass  # Suppress default logging


class TokenServer(ThreadingHTTPServer):
    """Token endpoint answering every GET with a configurable response."""

    daemon_threads = True

    def __init__(self) -> None:
        super().__init__(("127.0.0.1", 0), _TokenHandler)
        self.status = 200
        self.content_type: Optional[str] = "application/json"
        self.body = '{"access_token":"abc123","expires_in":3600}'
        self.requests: list[str] = []

    @property
    def port(self) -> int:
        return self.server_address[1]

    @property
    def url(self) -> str:
        return f"http://127.0.0.1:{self.port}/token"

    def respond(
        self,
        status: int = 200,
        content_type: Optional[str] = "application/json",
        body: str = "",
    ) -> None:
        self.status = status
        self.content_type = content_type
        self.body = body


@pytest.fixture
def token_server() -> Iterator[TokenServer]:
    """Start a :class:`TokenServer` on a free port for the test's duration."""
    server = TokenServer()
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield server
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)
