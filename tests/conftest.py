"""Shared test fixtures for httphook.

Provides isolation of process-wide state (hook chain, shared transport
client, output manager, ``HTTPHOOK_*`` environment), stub transports built
on :class:`httpx.MockTransport`, and a threaded local HTTP server for tests
that need real sockets.
"""

from __future__ import annotations

import json
import threading
import time
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Callable, Iterator

import httpx
import pytest

from httphook.hooks.chain import reset_hook_chain
from httphook.output import reset_output
from httphook.transport.client import reset_transport_client


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_process_state() -> Iterator[None]:
    """Give every test an empty hook chain and no shared client."""
    reset_hook_chain()
    reset_transport_client()
    yield
    reset_hook_chain()
    reset_transport_client()
    reset_output()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Clear ``HTTPHOOK_*`` variables and run from an empty directory.

    Returns:
        The tmp_path root, so tests can drop an ``httphook.json`` there.
    """
    for var in [
        "HTTPHOOK_TIMEOUT",
        "HTTPHOOK_CONNECT_TIMEOUT",
        "HTTPHOOK_IDLE_TIMEOUT",
        "HTTPHOOK_MAX_IDLE_CONNS",
        "HTTPHOOK_VERIFY_SSL",
        "HTTPHOOK_STRICT_JSON",
    ]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Stub transports
# ---------------------------------------------------------------------------


class CountingTransport(httpx.MockTransport):
    """MockTransport that records every request it receives."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []
        self._lock = threading.Lock()

        def _record(request: httpx.Request) -> httpx.Response:
            with self._lock:
                self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    @property
    def calls(self) -> int:
        return len(self.requests)


@pytest.fixture
def make_client() -> Iterator[Callable[..., tuple[httpx.Client, CountingTransport]]]:
    """Factory for clients backed by a :class:`CountingTransport`.

    Clients created through the factory are closed after the test.
    """
    created: list[httpx.Client] = []

    def _make(
        handler: Callable[[httpx.Request], httpx.Response],
        **client_kwargs,
    ) -> tuple[httpx.Client, CountingTransport]:
        transport = CountingTransport(handler)
        client = httpx.Client(transport=transport, **client_kwargs)
        created.append(client)
        return client, transport

    yield _make
    for client in created:
        client.close()


@pytest.fixture
def ok_handler() -> Callable[[httpx.Request], httpx.Response]:
    """Handler answering every request with ``200 {"ok": true}``."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            content=b'{"ok": true}',
            headers={"content-type": "application/json"},
        )

    return handler


# ---------------------------------------------------------------------------
# Local HTTP server
# ---------------------------------------------------------------------------

STUB_OK_BODY = b'{"id": 1, "title": "caf\xc3\xa9"}\n'
STUB_MISSING_BODY = b"no such resource"
STUB_SLOW_CHUNKS = 10
STUB_SLOW_INTERVAL = 0.2


class _StubHandler(BaseHTTPRequestHandler):
    """Routes used by the server-backed tests."""

    def log_message(self, format: str, *args) -> None:  # noqa: A002
        pass

    def _reply(self, status: int, body: bytes, content_type: str = "application/json") -> None:
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.send_header("X-Stub", "yes")
        self.end_headers()
        self.wfile.write(body)

    def _reply_slowly(self) -> None:
        self.send_response(200)
        self.send_header("Content-Type", "text/plain")
        self.send_header("Content-Length", str(STUB_SLOW_CHUNKS))
        self.end_headers()
        try:
            for _ in range(STUB_SLOW_CHUNKS):
                self.wfile.write(b"x")
                self.wfile.flush()
                time.sleep(STUB_SLOW_INTERVAL)
        except (BrokenPipeError, ConnectionResetError):
            # Client gave up.
            pass

    def do_GET(self) -> None:  # noqa: N802
        if self.path.startswith("/slow"):
            self._reply_slowly()
        elif self.path.startswith("/ok"):
            self._reply(200, STUB_OK_BODY)
        elif self.path.startswith("/created"):
            self._reply(201, b'{"created": true}')
        else:
            self._reply(404, STUB_MISSING_BODY, "text/plain")

    def do_DELETE(self) -> None:  # noqa: N802
        self._reply(200, json.dumps({"deleted": self.path}).encode())

    def _echo(self) -> None:
        length = int(self.headers.get("Content-Length") or 0)
        payload = self.rfile.read(length)
        echoed = {
            "method": self.command,
            "path": self.path,
            "content_type": self.headers.get("Content-Type"),
            "body": payload.decode("utf-8"),
        }
        self._reply(200, json.dumps(echoed).encode())

    do_POST = _echo  # noqa: N815
    do_PUT = _echo  # noqa: N815
    do_PATCH = _echo  # noqa: N815


@dataclass
class StubServer:
    """Address of the running stub server and the bodies it serves."""

    url: str
    ok_body: bytes = STUB_OK_BODY
    missing_body: bytes = STUB_MISSING_BODY


@pytest.fixture
def stub_server() -> Iterator[StubServer]:
    """Run a threaded HTTP server on a free localhost port.

    Routes: ``GET /ok`` (200), ``GET /created`` (201), ``GET /slow`` (200,
    one byte every 0.2 s), any other GET (404),
    ``DELETE`` (200) and ``POST/PUT/PATCH`` (200, echoes the request).
    """
    server = ThreadingHTTPServer(("127.0.0.1", 0), _StubHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address[:2]
    try:
        yield StubServer(url=f"http://{host}:{port}")
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)
