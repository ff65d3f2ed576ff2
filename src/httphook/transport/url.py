"""Query-parameter merging for request URLs.

:func:`resolve_url` takes a URL (absolute, or a bare host-like reference such
as ``www.example.com``) and a mapping of query parameters, sets each
parameter on the existing query string and re-serialises the URL.

Keys in the resulting query are sorted lexicographically, so identical inputs
always produce identical URLs regardless of mapping order. Values are
percent-encoded with :func:`urllib.parse.urlencode`, which escapes every
character outside the unreserved set (``{`` becomes ``%7B``, ``"`` becomes
``%22``). Escapes already in the URL keep their exact bytes, even when
they are not UTF-8; new keys and values are encoded as UTF-8.
"""

from __future__ import annotations

import re
from typing import Mapping, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from httphook.exceptions import UrlParseError

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _validate(url: str) -> None:
    """Reject strings that are not syntactically valid URL references."""
    if _CONTROL_CHARS.search(url):
        raise UrlParseError(f"invalid control character in URL: {url!r}")
    match = _BAD_ESCAPE.search(url)
    if match:
        raise UrlParseError(
            f"invalid URL escape {url[match.start():match.start() + 3]!r} in {url!r}"
        )


def _as_bytes_text(text: str) -> str:
    """Map *text* to its UTF-8 bytes, one latin-1 character per byte."""
    return text.encode("utf-8").decode("latin-1")


def resolve_url(url: str, params: Optional[Mapping[str, str]] = None) -> str:
    """Merge *params* into the query string of *url*.

    Each key in *params* replaces every existing value for that key; keys not
    mentioned are left untouched.

    Args:
        url: Absolute URL or scheme-less reference.
        params: Query parameters to set. ``None`` or empty leaves the query
            as-is (re-encoded in canonical order).

    Returns:
        The re-serialised URL.

    Raises:
        UrlParseError: If *url* is not a valid URL reference.
    """
    _validate(url)
    try:
        parts = urlsplit(url)
        # Accessing ``port`` validates it.
        parts.port
    except ValueError as exc:
        raise UrlParseError(f"invalid URL {url!r}: {exc}") from exc

    if not parts.scheme and not parts.netloc:
        first_segment = parts.path.split("/", 1)[0]
        if ":" in first_segment:
            raise UrlParseError(
                f"invalid URL {url!r}: first path segment cannot contain a colon"
            )

    # The query is handled as latin-1 text so every decoded character stands
    # for one raw byte: existing escapes survive even when not UTF-8, and
    # sorting orders keys by their bytes.
    query: dict[str, list[str]] = {}
    for key, value in parse_qsl(
        _as_bytes_text(parts.query), keep_blank_values=True, encoding="latin-1"
    ):
        query.setdefault(key, []).append(value)
    for key, value in (params or {}).items():
        query[_as_bytes_text(key)] = [_as_bytes_text(value)]

    encoded = urlencode(
        [(key, value) for key in sorted(query) for value in query[key]],
        encoding="latin-1",
    )
    return urlunsplit((parts.scheme, parts.netloc, parts.path, encoded, parts.fragment))
