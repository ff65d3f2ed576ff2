"""Normalisation of transport responses into :class:`CallResult`.

Only HTTP 200 counts as success. Any other status is reported as a
:class:`~httphook.exceptions.NonSuccessStatusError` that embeds the status
code and the response body text, while the code and headers are still
returned for diagnostics.
"""

from __future__ import annotations

import logging
from typing import NamedTuple, Optional

import httpx

from httphook.context import CallContext
from httphook.exceptions import BodyReadError, NonSuccessStatusError, TransportError

logger = logging.getLogger(__name__)

_READ_ERRORS = (httpx.HTTPError, httpx.StreamError, OSError)


class CallResult(NamedTuple):
    """Outcome of one call: ``(status_code, headers, body, error)``.

    Unpacks like a plain tuple::

        code, headers, body, err = httphook.get(url)

    Callers must not trust ``status_code``, ``headers`` or ``body`` for
    success-path logic whenever ``error`` is set.
    """

    status_code: int
    headers: Optional[httpx.Headers]
    body: Optional[bytes]
    error: Optional[Exception]

    @classmethod
    def failed(cls, error: Optional[Exception]) -> CallResult:
        """Result for a call that produced no usable response."""
        return cls(-1, None, None, error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> CallResult:
        """Raise :attr:`error` if set, otherwise return ``self``."""
        if self.error is not None:
            raise self.error
        return self


def _read_body(response: httpx.Response, ctx: Optional[CallContext]) -> bytes:
    """Read the whole body, checking *ctx* after every chunk.

    Raises:
        TransportError: The context was cancelled or its deadline passed
            before the body was complete.
    """
    if ctx is None:
        return response.read()
    chunks: list[bytes] = []
    for chunk in response.iter_bytes():
        chunks.append(chunk)
        err = ctx.error()
        if err is not None:
            raise err
    return b"".join(chunks)


def parse_response(
    response: Optional[httpx.Response],
    transport_error: Optional[Exception] = None,
    ctx: Optional[CallContext] = None,
) -> CallResult:
    """Read and classify a response.

    The response is always closed before returning; a failure to close is
    logged and otherwise ignored.

    Args:
        response: The (possibly streaming) response, or ``None``.
        transport_error: The error raised by the transport, if any.
        ctx: Call context whose deadline and cancellation bound the body
            read. ``None`` reads without a bound.

    Returns:
        * ``(-1, None, None, transport_error)`` when no response was obtained.
        * ``(code, headers, None, NonSuccessStatusError)`` for any status
          other than 200.
        * ``(200, headers, None, BodyReadError)`` when the body cannot be read.
        * ``(200, headers, None, DeadlineExceededError)`` (or
          ``CallCancelledError``) when *ctx* ends during the read.
        * ``(200, headers, body_bytes, None)`` otherwise.
    """
    if transport_error is not None and response is None:
        logger.debug("Error sending request: %s", transport_error)
        return CallResult.failed(transport_error)
    if response is None:
        logger.debug("No response and no error from transport")
        return CallResult.failed(None)

    try:
        code = response.status_code
        headers = response.headers

        if code != httpx.codes.OK:
            try:
                body_text = _read_body(response, ctx).decode(
                    response.encoding or "utf-8", errors="replace"
                )
            except (*_READ_ERRORS, TransportError):
                body_text = ""
            return CallResult(code, headers, None, NonSuccessStatusError(code, body_text))

        try:
            body = _read_body(response, ctx)
        except TransportError as exc:
            logger.debug("Stopped reading response body: %s", exc)
            return CallResult(code, headers, None, exc)
        except _READ_ERRORS as exc:
            logger.debug("Couldn't read response body: %s", exc)
            err = BodyReadError(f"Couldn't read response body: {exc}")
            err.__cause__ = exc
            return CallResult(code, headers, None, err)

        return CallResult(code, headers, body, None)
    finally:
        try:
            response.close()
        except Exception as exc:
            logger.warning("Response close error: %s", exc)
