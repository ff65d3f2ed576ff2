"""Conversion of plain header mappings into :class:`httpx.Headers`."""

from __future__ import annotations

from typing import Mapping, Optional

import httpx


def to_transport_headers(headers: Optional[Mapping[str, str]]) -> httpx.Headers:
    """Build an :class:`httpx.Headers` with one value per key.

    Names are matched case-insensitively, so ``{"X-Id": "1", "x-id": "2"}``
    leaves a single ``x-id: 2`` entry. ``None`` yields empty headers.
    """
    result = httpx.Headers()
    for name, value in (headers or {}).items():
        result[name] = value
    return result
