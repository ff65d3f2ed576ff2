"""Construction of :class:`httpx.Request` objects from caller intent.

POST, PUT and PATCH bodies are JSON encoded, including ``None`` which becomes
``null``. A body that cannot be encoded is sent empty and a warning is logged,
unless *strict_json* is set, in which case :class:`BodyEncodeError` is raised.
GET and DELETE never carry a body.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional, Union

import httpx

from httphook.exceptions import BodyEncodeError, RequestBuildError
from httphook.models import HTTPMethod
from httphook.transport.headers import to_transport_headers
from httphook.transport.url import resolve_url

logger = logging.getLogger(__name__)


def encode_json_body(body: Any, strict: bool = False) -> bytes:
    """Encode *body* as compact UTF-8 JSON.

    Raises:
        BodyEncodeError: If encoding fails and *strict* is set.
    """
    try:
        return json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        if strict:
            raise BodyEncodeError(f"Cannot encode request body as JSON: {exc}") from exc
        logger.warning("Request body is not JSON serialisable, sending empty body: %s", exc)
        return b""


def build_request(
    method: Union[HTTPMethod, str],
    url: str,
    headers: Optional[Mapping[str, str]] = None,
    params: Optional[Mapping[str, str]] = None,
    body: Any = None,
    *,
    strict_json: bool = False,
) -> httpx.Request:
    """Build the transport-level request for one call.

    Args:
        method: One of GET, POST, PUT, PATCH, DELETE (case-insensitive).
        url: Absolute URL or scheme-less reference.
        headers: Request headers; attached only when not ``None``.
        params: Query parameters merged into *url*.
        body: JSON-serialisable body for POST, PUT and PATCH.
        strict_json: Raise instead of sending an empty body when *body*
            cannot be encoded.

    Returns:
        The :class:`httpx.Request`, not yet sent.

    Raises:
        UrlParseError: If *url* is not a valid URL reference.
        BodyEncodeError: If *body* cannot be encoded and *strict_json* is set.
        RequestBuildError: If the method is unsupported or httpx rejects the URL.
    """
    try:
        http_method = HTTPMethod(method.upper() if isinstance(method, str) else method)
    except ValueError:
        raise RequestBuildError(f"Unsupported HTTP method: {method!r}") from None

    resolved = resolve_url(url, params)

    request_headers: Optional[httpx.Headers] = None
    if headers is not None:
        request_headers = to_transport_headers(headers)

    content: Optional[bytes] = None
    if http_method.has_body:
        content = encode_json_body(body, strict=strict_json)
        if content:
            if request_headers is None:
                request_headers = httpx.Headers()
            request_headers.setdefault("Content-Type", "application/json")

    try:
        return httpx.Request(
            http_method.value,
            resolved,
            headers=request_headers,
            content=content,
        )
    except (httpx.InvalidURL, TypeError, ValueError) as exc:
        raise RequestBuildError(f"Cannot build {http_method.value} request for {resolved!r}: {exc}") from exc
