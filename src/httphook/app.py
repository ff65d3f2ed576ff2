"""Typer command line for sending one request through the hook chain.

Usage::

    httphook get https://api.example.com/users -Q page=2 -H "Accept: application/json"
    httphook post https://api.example.com/users -d '{"name": "Alice"}'

Hooks registered in the ``httphook.hooks`` entry-point group are loaded
before the request is sent. The status line goes to stderr and the response
body to stdout. The exit code is ``0`` for HTTP 200 and the error's
``exit_code`` otherwise (see :mod:`httphook.exit_codes`).
"""

from __future__ import annotations

import json
import logging
import signal
import sys
from typing import Any, Optional

import typer

from httphook import __version__
from httphook.client.dispatcher import Dispatcher
from httphook.config import resolve_config
from httphook.context import CallContext
from httphook.exceptions import ConfigError, HookLoadError, HttpHookError, RequestBuildError
from httphook.exit_codes import EXIT_GENERIC_FAILURE, EXIT_SUCCESS
from httphook.hooks.chain import HookChain
from httphook.hooks.manager import HookManager
from httphook.models import HTTPMethod
from httphook.output import OutputFormat, OutputManager, get_output, set_output
from httphook.transport.client import create_transport_client


app = typer.Typer(
    name="httphook",
    help="Send HTTP requests through the httphook hook chain.",
    no_args_is_help=True,
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"httphook {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress the status line."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", "-t", help="Deadline for the whole call, in seconds."
    ),
) -> None:
    """Install the output manager and logging, and keep shared options on ``ctx.obj``."""
    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    ctx.ensure_object(dict)
    ctx.obj["timeout"] = timeout


# ------------------------------------------------------------------ #
# Argument parsing
# ------------------------------------------------------------------ #


def _parse_headers(values: Optional[list[str]]) -> Optional[dict[str, str]]:
    """Parse ``Name: value`` strings."""
    if not values:
        return None
    headers: dict[str, str] = {}
    for item in values:
        name, sep, value = item.partition(":")
        if not sep or not name.strip():
            raise RequestBuildError(f"Invalid header {item!r}, expected 'Name: value'")
        headers[name.strip()] = value.strip()
    return headers


def _parse_params(values: Optional[list[str]]) -> Optional[dict[str, str]]:
    """Parse ``key=value`` strings."""
    if not values:
        return None
    params: dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise RequestBuildError(f"Invalid query parameter {item!r}, expected 'key=value'")
        params[key] = value
    return params


def _parse_body(data: Optional[str]) -> Any:  # noqa: ANN401
    """Parse *data* as JSON; ``None`` stays ``None``."""
    if data is None:
        return None
    try:
        return json.loads(data)
    except ValueError as exc:
        raise RequestBuildError(f"Request body is not valid JSON: {exc}") from exc


# ------------------------------------------------------------------ #
# Request execution
# ------------------------------------------------------------------ #


def _send(
    ctx: typer.Context,
    method: HTTPMethod,
    url: str,
    header: Optional[list[str]],
    query: Optional[list[str]],
    data: Optional[str],
) -> None:
    output = get_output()
    try:
        headers = _parse_headers(header)
        params = _parse_params(query)
        body = _parse_body(data)
        config = resolve_config()
    except (RequestBuildError, ConfigError) as exc:
        output.error(str(exc))
        raise typer.Exit(exc.exit_code)

    chain = HookChain()
    try:
        loaded = HookManager(chain).discover(config.hooks)
    except HookLoadError as exc:
        output.error(str(exc))
        raise typer.Exit(exc.exit_code)
    if loaded:
        output.debug(f"Loaded hooks: {', '.join(loaded)}")

    call_ctx = CallContext.background()
    timeout = (ctx.obj or {}).get("timeout")
    if timeout is not None:
        call_ctx = call_ctx.with_timeout(timeout)

    with create_transport_client(config) as client:
        dispatcher = Dispatcher(client=client, chain=chain, config=config)
        code, resp_headers, resp_body, err = dispatcher.request(
            method, url, headers, params, body, ctx=call_ctx
        )

    if code > 0:
        output.info(f"HTTP {code}")
    if err is not None:
        output.error(str(err))
        exit_code = err.exit_code if isinstance(err, HttpHookError) else EXIT_GENERIC_FAILURE
        raise typer.Exit(exit_code)

    content_type = resp_headers.get("content-type", "") if resp_headers is not None else ""
    output.format_body(resp_body or b"", content_type)
    raise typer.Exit(EXIT_SUCCESS)


_HEADER_OPTION = typer.Option(None, "--header", "-H", help="Request header 'Name: value'. Repeatable.")
_QUERY_OPTION = typer.Option(None, "--query", "-Q", help="Query parameter 'key=value'. Repeatable.")
_DATA_OPTION = typer.Option(None, "--data", "-d", help="JSON request body.")


@app.command("get")
def get_command(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Request URL."),
    header: Optional[list[str]] = _HEADER_OPTION,
    query: Optional[list[str]] = _QUERY_OPTION,
) -> None:
    """Send a GET request."""
    _send(ctx, HTTPMethod.GET, url, header, query, None)


@app.command("post")
def post_command(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Request URL."),
    header: Optional[list[str]] = _HEADER_OPTION,
    query: Optional[list[str]] = _QUERY_OPTION,
    data: Optional[str] = _DATA_OPTION,
) -> None:
    """Send a POST request with a JSON body."""
    _send(ctx, HTTPMethod.POST, url, header, query, data)


@app.command("put")
def put_command(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Request URL."),
    header: Optional[list[str]] = _HEADER_OPTION,
    query: Optional[list[str]] = _QUERY_OPTION,
    data: Optional[str] = _DATA_OPTION,
) -> None:
    """Send a PUT request with a JSON body."""
    _send(ctx, HTTPMethod.PUT, url, header, query, data)


@app.command("patch")
def patch_command(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Request URL."),
    header: Optional[list[str]] = _HEADER_OPTION,
    query: Optional[list[str]] = _QUERY_OPTION,
    data: Optional[str] = _DATA_OPTION,
) -> None:
    """Send a PATCH request with a JSON body."""
    _send(ctx, HTTPMethod.PATCH, url, header, query, data)


@app.command("delete")
def delete_command(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Request URL."),
    header: Optional[list[str]] = _HEADER_OPTION,
    query: Optional[list[str]] = _QUERY_OPTION,
) -> None:
    """Send a DELETE request."""
    _send(ctx, HTTPMethod.DELETE, url, header, query, None)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """Console-script entry point."""
    _setup_signal_handlers()
    app()
