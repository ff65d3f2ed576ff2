"""Module-level request functions backed by the process-wide client and hooks.

These are thin wrappers around a :class:`~httphook.client.Dispatcher` that
uses the shared transport client and the process-wide hook chain, so
:func:`~httphook.hooks.add_hook` and
:func:`~httphook.transport.set_transport_client` apply to every call made
through them.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from httphook.client.dispatcher import Dispatcher
from httphook.client.response import CallResult
from httphook.context import CallContext

_dispatcher = Dispatcher()


def get(
    url: str,
    headers: Optional[Mapping[str, str]] = None,
    params: Optional[Mapping[str, str]] = None,
    *,
    ctx: Optional[CallContext] = None,
) -> CallResult:
    """Send a GET request."""
    return _dispatcher.get(url, headers, params, ctx=ctx)


def post(
    url: str,
    headers: Optional[Mapping[str, str]] = None,
    params: Optional[Mapping[str, str]] = None,
    body: Any = None,
    *,
    ctx: Optional[CallContext] = None,
) -> CallResult:
    """Send a POST request with *body* encoded as JSON."""
    return _dispatcher.post(url, headers, params, body, ctx=ctx)


def put(
    url: str,
    headers: Optional[Mapping[str, str]] = None,
    params: Optional[Mapping[str, str]] = None,
    body: Any = None,
    *,
    ctx: Optional[CallContext] = None,
) -> CallResult:
    """Send a PUT request with *body* encoded as JSON."""
    return _dispatcher.put(url, headers, params, body, ctx=ctx)


def patch(
    url: str,
    headers: Optional[Mapping[str, str]] = None,
    params: Optional[Mapping[str, str]] = None,
    body: Any = None,
    *,
    ctx: Optional[CallContext] = None,
) -> CallResult:
    """Send a PATCH request with *body* encoded as JSON."""
    return _dispatcher.patch(url, headers, params, body, ctx=ctx)


def delete(
    url: str,
    headers: Optional[Mapping[str, str]] = None,
    params: Optional[Mapping[str, str]] = None,
    body: Any = None,
    *,
    ctx: Optional[CallContext] = None,
) -> CallResult:
    """Send a DELETE request. *body* is accepted for symmetry but never sent."""
    return _dispatcher.delete(url, headers, params, body, ctx=ctx)
