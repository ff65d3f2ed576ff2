"""Tests for the httphook command line."""

from __future__ import annotations

import json
from unittest.mock import patch

import httpx
import pytest
from typer.testing import CliRunner

from httphook import __version__
from httphook.app import app
from httphook.exit_codes import (
    EXIT_REQUEST_BUILD_ERROR,
    EXIT_STATUS_ERROR,
    EXIT_SUCCESS,
    EXIT_TRANSPORT_ERROR,
)

runner = CliRunner()

BASE_ARGS = ["--plain", "--no-color"]


def _handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/missing":
        return httpx.Response(404, content=b"no such resource")
    if request.url.path == "/down":
        raise httpx.ConnectError("connection refused", request=request)
    payload = {
        "method": request.method,
        "url": str(request.url),
        "body": request.content.decode(),
    }
    return httpx.Response(200, json=payload)


@pytest.fixture
def mock_transport(make_client):
    """Route the CLI's transport client through :func:`_handler`."""
    client, transport = make_client(_handler)
    with patch("httphook.app.create_transport_client", return_value=client):
        yield transport


class TestVersion:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"httphook {__version__}" in result.output


class TestRequests:
    def test_get_prints_body(self, mock_transport) -> None:
        result = runner.invoke(
            app, [*BASE_ARGS, "get", "http://api.test/users", "-Q", "page=2", "-Q", "a=1"]
        )

        assert result.exit_code == EXIT_SUCCESS
        assert "HTTP 200" in result.output
        assert '"url": "http://api.test/users?a=1&page=2"' in result.output

    def test_post_sends_json_body(self, mock_transport) -> None:
        result = runner.invoke(
            app, [*BASE_ARGS, "post", "http://api.test/users", "-d", '{"name": "Alice"}']
        )

        assert result.exit_code == EXIT_SUCCESS
        sent = mock_transport.requests[0]
        assert json.loads(sent.content) == {"name": "Alice"}
        assert sent.headers["content-type"] == "application/json"

    def test_headers_are_sent(self, mock_transport) -> None:
        result = runner.invoke(
            app, [*BASE_ARGS, "delete", "http://api.test/users/1", "-H", "X-Trace: abc"]
        )

        assert result.exit_code == EXIT_SUCCESS
        assert mock_transport.requests[0].headers["x-trace"] == "abc"

    @pytest.mark.parametrize("command", ["put", "patch"])
    def test_put_and_patch(self, mock_transport, command: str) -> None:
        result = runner.invoke(app, [*BASE_ARGS, command, "http://api.test/x", "-d", "[1]"])

        assert result.exit_code == EXIT_SUCCESS
        assert mock_transport.requests[0].method == command.upper()

    def test_quiet_hides_status_line(self, mock_transport) -> None:
        result = runner.invoke(app, [*BASE_ARGS, "--quiet", "get", "http://api.test/"])

        assert result.exit_code == EXIT_SUCCESS
        assert "HTTP 200" not in result.output

    def test_timeout_bounds_request(self, mock_transport) -> None:
        result = runner.invoke(app, [*BASE_ARGS, "--timeout", "2", "get", "http://api.test/"])

        assert result.exit_code == EXIT_SUCCESS
        timeout = mock_transport.requests[0].extensions["timeout"]
        assert all(value <= 2 for value in timeout.values())


class TestFailures:
    def test_non_success_status(self, mock_transport) -> None:
        result = runner.invoke(app, [*BASE_ARGS, "get", "http://api.test/missing"])

        assert result.exit_code == EXIT_STATUS_ERROR
        assert "HTTP 404" in result.output
        assert "no such resource" in result.output

    def test_transport_error(self, mock_transport) -> None:
        result = runner.invoke(app, [*BASE_ARGS, "get", "http://api.test/down"])

        assert result.exit_code == EXIT_TRANSPORT_ERROR
        assert "connection refused" in result.output

    def test_invalid_url(self, mock_transport) -> None:
        result = runner.invoke(app, [*BASE_ARGS, "get", "http://api.test:port/"])

        assert result.exit_code == EXIT_REQUEST_BUILD_ERROR
        assert mock_transport.calls == 0

    def test_malformed_header(self, mock_transport) -> None:
        result = runner.invoke(app, [*BASE_ARGS, "get", "http://api.test/", "-H", "no-colon"])

        assert result.exit_code == EXIT_REQUEST_BUILD_ERROR
        assert "Invalid header" in result.output

    def test_malformed_query(self, mock_transport) -> None:
        result = runner.invoke(app, [*BASE_ARGS, "get", "http://api.test/", "-Q", "novalue"])

        assert result.exit_code == EXIT_REQUEST_BUILD_ERROR

    def test_invalid_json_body(self, mock_transport) -> None:
        result = runner.invoke(app, [*BASE_ARGS, "post", "http://api.test/", "-d", "{oops"])

        assert result.exit_code == EXIT_REQUEST_BUILD_ERROR
        assert "not valid JSON" in result.output
        assert mock_transport.calls == 0

    def test_bad_config_file(self, isolated_env, mock_transport) -> None:
        (isolated_env / "httphook.json").write_text("[]", encoding="utf-8")

        result = runner.invoke(app, [*BASE_ARGS, "get", "http://api.test/"])

        assert result.exit_code == 1
        assert mock_transport.calls == 0
