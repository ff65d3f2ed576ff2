"""Tests for the module-level request functions and the process-wide state."""

from __future__ import annotations

import json
import socket
import time

import httpx
import pytest

import httphook
from httphook.exceptions import HookAbortError, NonSuccessStatusError
from httphook.models import ClientConfig
from httphook.transport.client import create_transport_client


class HeaderHook(httphook.Hook):
    def before(self, ctx, request):
        request.headers["X-Hooked"] = "1"
        return ctx


class TestModuleFunctions:
    def test_get_uses_shared_client(self, make_client, ok_handler) -> None:
        client, transport = make_client(ok_handler)
        httphook.set_transport_client(client)

        code, _, body, err = httphook.get("http://api.test/users", params={"page": "2"})

        assert (code, body, err) == (200, b'{"ok": true}', None)
        assert str(transport.requests[0].url) == "http://api.test/users?page=2"

    def test_added_hook_applies_to_every_call(self, make_client, ok_handler) -> None:
        client, transport = make_client(ok_handler)
        httphook.set_transport_client(client)
        httphook.add_hook(HeaderHook())

        httphook.get("http://api.test/a")
        httphook.post("http://api.test/b", body={"x": 1})

        assert [r.headers.get("x-hooked") for r in transport.requests] == ["1", "1"]

    def test_hook_abort_through_module_api(self, make_client, ok_handler) -> None:
        class Deny(httphook.Hook):
            def before(self, ctx, request):
                raise HookAbortError("denied")

        client, transport = make_client(ok_handler)
        httphook.set_transport_client(client)
        httphook.add_hook(Deny())

        result = httphook.delete("http://api.test/a")

        assert isinstance(result.error, HookAbortError)
        assert transport.calls == 0

    @pytest.mark.parametrize("name", ["put", "patch"])
    def test_body_methods(self, make_client, ok_handler, name: str) -> None:
        client, transport = make_client(ok_handler)
        httphook.set_transport_client(client)

        getattr(httphook, name)("http://api.test/a", body={"v": True})

        assert transport.requests[0].content == b'{"v":true}'

    def test_context_is_forwarded(self, make_client, ok_handler) -> None:
        client, transport = make_client(ok_handler)
        httphook.set_transport_client(client)
        ctx, cancel = httphook.CallContext.background().with_cancel()
        cancel()

        result = httphook.get("http://api.test/", ctx=ctx)

        assert isinstance(result.error, httphook.CallCancelledError)
        assert transport.calls == 0


# ---------------------------------------------------------------------------
# Real sockets
# ---------------------------------------------------------------------------


@pytest.fixture
def live_client():
    client = create_transport_client(ClientConfig(trust_env=False))
    httphook.set_transport_client(client)
    return client


class TestAgainstLocalServer:
    def test_ok_returns_exact_bytes(self, stub_server, live_client) -> None:
        code, headers, body, err = httphook.get(f"{stub_server.url}/ok")

        assert err is None
        assert code == 200
        assert body == stub_server.ok_body
        assert headers["x-stub"] == "yes"

    def test_not_found(self, stub_server, live_client) -> None:
        code, headers, body, err = httphook.get(f"{stub_server.url}/missing")

        assert code == 404
        assert body is None
        assert headers["x-stub"] == "yes"
        assert isinstance(err, NonSuccessStatusError)
        assert "404" in str(err)
        assert stub_server.missing_body.decode() in str(err)

    def test_created_is_not_success(self, stub_server, live_client) -> None:
        result = httphook.get(f"{stub_server.url}/created")

        assert result.status_code == 201
        assert isinstance(result.error, NonSuccessStatusError)

    def test_post_echo(self, stub_server, live_client) -> None:
        code, _, body, err = httphook.post(
            f"{stub_server.url}/items", params={"b": "2", "a": "1"}, body={"name": "café"}
        )

        assert (code, err) == (200, None)
        echoed = json.loads(body)
        assert echoed["method"] == "POST"
        assert echoed["path"] == "/items?a=1&b=2"
        assert echoed["content_type"] == "application/json"
        assert json.loads(echoed["body"]) == {"name": "café"}

    def test_delete(self, stub_server, live_client) -> None:
        code, _, body, err = httphook.delete(f"{stub_server.url}/items/3")

        assert (code, err) == (200, None)
        assert json.loads(body) == {"deleted": "/items/3"}

    def test_deadline_cuts_off_slow_body(self, stub_server, live_client) -> None:
        ctx = httphook.CallContext.background().with_timeout(0.5)

        started = time.monotonic()
        code, headers, body, err = httphook.get(f"{stub_server.url}/slow", ctx=ctx)
        elapsed = time.monotonic() - started

        assert isinstance(err, httphook.DeadlineExceededError)
        assert code == 200
        assert body is None
        assert elapsed < 1.5

    def test_slow_body_within_deadline(self, stub_server, live_client) -> None:
        ctx = httphook.CallContext.background().with_timeout(10)

        result = httphook.get(f"{stub_server.url}/slow", ctx=ctx)

        assert result.error is None
        assert result.body == b"x" * 10

    def test_connection_refused(self, live_client) -> None:
        # Bind and release a port so nothing is listening on it.
        with socket.socket() as sock:
            sock.bind(("127.0.0.1", 0))
            port = sock.getsockname()[1]

        result = httphook.get(f"http://127.0.0.1:{port}/")

        assert result.status_code == -1
        assert isinstance(result.error, httphook.TransportError)
        assert isinstance(result.error.__cause__, httpx.ConnectError)
