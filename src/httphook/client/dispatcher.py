"""Request dispatch with before/after hooks around the shared client.

This module provides :class:`Dispatcher`, which sends built requests through
a pooled :class:`httpx.Client` and wraps every call in a
:class:`~httphook.hooks.chain.HookChain`:

1. **Before hooks** -- in registration order, from the snapshot of the chain
   taken when the call starts. An exception aborts the call before anything
   is sent and becomes the call's error.
2. **Transport** -- one attempt, no retries. The per-request timeout is
   bounded by the call context's deadline; a cancelled or expired context
   fails the call without sending.
3. **Response parsing** -- see :func:`~httphook.client.response.parse_response`.
   The body is read against the same deadline. Skipped when the transport
   failed.
4. **After hooks** -- the same hooks in the same order, with the response
   snapshot or the transport failure. An exception replaces the whole
   result with ``(-1, None, None, error)``.

Errors never escape :meth:`Dispatcher.dispatch`; they are returned in
:attr:`CallResult.error`.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

import httpx
from pydantic import ValidationError

from httphook.client.response import CallResult, parse_response
from httphook.config import resolve_config
from httphook.context import CallContext
from httphook.exceptions import HttpHookError, RequestBuildError, TimeoutError_, TransportError
from httphook.hooks.chain import HookChain, get_hook_chain
from httphook.models import ClientConfig, HTTPMethod, RequestIntent
from httphook.transport.builder import build_request
from httphook.transport.client import get_transport_client

logger = logging.getLogger(__name__)


def _bounded_timeout(timeout: httpx.Timeout, remaining: Optional[float]) -> httpx.Timeout:
    """Cap each phase of *timeout* at *remaining* seconds."""
    if remaining is None:
        return timeout

    def cap(value: Optional[float]) -> float:
        return remaining if value is None else min(value, remaining)

    return httpx.Timeout(
        connect=cap(timeout.connect),
        read=cap(timeout.read),
        write=cap(timeout.write),
        pool=cap(timeout.pool),
    )


class Dispatcher:
    """Sends requests through a shared client with a hook chain around each call.

    Safe to share across threads: it holds no per-call state.

    Args:
        client: Transport client. ``None`` uses the process-wide client
            from :func:`~httphook.transport.client.get_transport_client`,
            looked up on every call so :func:`set_transport_client` takes
            effect immediately.
        chain: Hook chain. ``None`` uses the process-wide chain.
        config: Request building settings. ``None`` resolves them from the
            environment on first use.

    Example::

        dispatcher = Dispatcher(chain=HookChain([TimingHook()]))
        code, headers, body, err = dispatcher.get(
            "https://api.example.com/users", params={"page": "2"}
        )
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        chain: Optional[HookChain] = None,
        config: Optional[ClientConfig] = None,
    ) -> None:
        self._client = client
        self._chain = chain
        self._config = config

    @property
    def client(self) -> httpx.Client:
        return self._client if self._client is not None else get_transport_client()

    @property
    def chain(self) -> HookChain:
        return self._chain if self._chain is not None else get_hook_chain()

    @property
    def config(self) -> ClientConfig:
        if self._config is None:
            self._config = resolve_config()
        return self._config

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    def request(
        self,
        method: Union[HTTPMethod, str],
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        params: Optional[Mapping[str, str]] = None,
        body: Any = None,
        *,
        ctx: Optional[CallContext] = None,
    ) -> CallResult:
        """Build a request and dispatch it.

        Args:
            method: GET, POST, PUT, PATCH or DELETE.
            url: Absolute URL or scheme-less reference.
            headers: Request headers.
            params: Query parameters merged into *url*.
            body: JSON-serialisable body (POST, PUT and PATCH only).
            ctx: Call context carrying values, deadline and cancellation.

        Returns:
            The :class:`CallResult`. A request that cannot be built returns
            ``(0, None, None, error)`` without running any hook.
        """
        try:
            intent = RequestIntent(
                method=method.upper() if isinstance(method, str) else method,
                url=url,
                headers=dict(headers) if headers is not None else None,
                params=dict(params) if params is not None else None,
                body=body,
            )
            http_request = build_request(
                intent.method,
                intent.url,
                intent.headers,
                intent.params,
                intent.body,
                strict_json=self.config.strict_json_body,
            )
        except HttpHookError as exc:
            logger.debug("Cannot build %s request for %s: %s", method, url, exc)
            return CallResult(0, None, None, exc)
        except ValidationError as exc:
            err = RequestBuildError(f"Invalid request: {exc}")
            err.__cause__ = exc
            return CallResult(0, None, None, err)

        return self.dispatch(http_request, ctx=ctx)

    def get(
        self,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        params: Optional[Mapping[str, str]] = None,
        *,
        ctx: Optional[CallContext] = None,
    ) -> CallResult:
        """Send a GET request."""
        return self.request(HTTPMethod.GET, url, headers, params, ctx=ctx)

    def post(
        self,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        params: Optional[Mapping[str, str]] = None,
        body: Any = None,
        *,
        ctx: Optional[CallContext] = None,
    ) -> CallResult:
        """Send a POST request with a JSON body."""
        return self.request(HTTPMethod.POST, url, headers, params, body, ctx=ctx)

    def put(
        self,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        params: Optional[Mapping[str, str]] = None,
        body: Any = None,
        *,
        ctx: Optional[CallContext] = None,
    ) -> CallResult:
        """Send a PUT request with a JSON body."""
        return self.request(HTTPMethod.PUT, url, headers, params, body, ctx=ctx)

    def patch(
        self,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        params: Optional[Mapping[str, str]] = None,
        body: Any = None,
        *,
        ctx: Optional[CallContext] = None,
    ) -> CallResult:
        """Send a PATCH request with a JSON body."""
        return self.request(HTTPMethod.PATCH, url, headers, params, body, ctx=ctx)

    def delete(
        self,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        params: Optional[Mapping[str, str]] = None,
        body: Any = None,
        *,
        ctx: Optional[CallContext] = None,
    ) -> CallResult:
        """Send a DELETE request. *body* is accepted but never sent."""
        return self.request(HTTPMethod.DELETE, url, headers, params, body, ctx=ctx)

    # ------------------------------------------------------------------ #
    # Dispatch
    # ------------------------------------------------------------------ #

    def dispatch(
        self,
        request: httpx.Request,
        ctx: Optional[CallContext] = None,
    ) -> CallResult:
        """Run the hook chain around one transport call.

        Args:
            request: A built request.
            ctx: Call context; a fresh background context when ``None``.

        Returns:
            The final :class:`CallResult`.
        """
        if ctx is None:
            ctx = CallContext.background()
        chain = self.chain
        hooks = chain.hooks

        try:
            ctx = chain.run_before(ctx, request, hooks)
        except Exception as exc:
            logger.debug("Before hook aborted %s %s: %s", request.method, request.url, exc)
            return CallResult.failed(exc)

        result = self._send(ctx, request)

        try:
            chain.run_after(
                ctx, result.status_code, result.headers, result.body, result.error, hooks
            )
        except Exception as exc:
            logger.debug("After hook aborted %s %s: %s", request.method, request.url, exc)
            return CallResult.failed(exc)

        return result

    def _send(self, ctx: CallContext, request: httpx.Request) -> CallResult:
        """Send *request* once and parse the response."""
        err = ctx.error()
        if err is not None:
            return CallResult.failed(err)

        client = self.client
        timeout = _bounded_timeout(client.timeout, ctx.remaining())
        request.extensions = {**request.extensions, "timeout": timeout.as_dict()}

        logger.debug("%s %s", request.method, request.url)
        try:
            response = client.send(request, stream=True)
        except httpx.TimeoutException as exc:
            return parse_response(None, self._wrap_transport_error(TimeoutError_, exc))
        except httpx.RequestError as exc:
            return parse_response(None, self._wrap_transport_error(TransportError, exc))
        except RuntimeError as exc:
            # Raised by httpx for a closed client.
            return parse_response(None, self._wrap_transport_error(TransportError, exc))

        result = parse_response(response, ctx=ctx)
        logger.debug("%s %s -> %s", request.method, request.url, result.status_code)
        return result

    @staticmethod
    def _wrap_transport_error(
        error_cls: type[TransportError], exc: Exception
    ) -> TransportError:
        err = error_cls(f"{type(exc).__name__}: {exc}")
        err.__cause__ = exc
        return err
