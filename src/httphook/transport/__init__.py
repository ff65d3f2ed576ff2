"""Transport layer: URL resolution, header conversion, request building, shared client.

Functions:
    :func:`resolve_url` -- merge query parameters into a URL.
    :func:`to_transport_headers` -- plain mapping to :class:`httpx.Headers`.
    :func:`build_request` -- method, URL, headers and body to :class:`httpx.Request`.
    :func:`get_transport_client` / :func:`set_transport_client` -- the
    process-wide pooled :class:`httpx.Client`.
"""

from httphook.transport.builder import build_request
from httphook.transport.client import (
    create_transport_client,
    get_transport_client,
    reset_transport_client,
    set_transport_client,
)
from httphook.transport.headers import to_transport_headers
from httphook.transport.url import resolve_url

__all__ = [
    "build_request",
    "create_transport_client",
    "get_transport_client",
    "reset_transport_client",
    "resolve_url",
    "set_transport_client",
    "to_transport_headers",
]
