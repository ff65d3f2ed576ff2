"""httphook -- request dispatch with before/after hooks over a shared httpx client.

Builds requests (method, URL, query parameters, headers, JSON body), sends
them through one pooled :class:`httpx.Client`, runs an ordered hook chain
around each call and returns a :class:`CallResult`
``(status_code, headers, body, error)``. Only HTTP 200 counts as success.

Typical usage::

    import httphook

    httphook.add_hook(TimingHook())
    code, headers, body, err = httphook.get(
        "https://api.example.com/users", params={"page": "2"}
    )

Modules:
    api: Module-level get/post/put/patch/delete.
    client: Dispatcher and response normalisation.
    hooks: Hook base class, chain and entry-point discovery.
    transport: URL resolution, header conversion, request building, shared client.
    context: Per-call context with values, deadline and cancellation.
    models: Pydantic models for configuration and request intent.
    config: Configuration precedence resolution.
    exceptions: Error kinds with exit-code mapping.
    app: Typer command line entry point.
"""

__version__ = "0.1.0"

from httphook.api import delete, get, patch, post, put
from httphook.client import CallResult, Dispatcher
from httphook.context import CallContext
from httphook.exceptions import (
    BodyEncodeError,
    BodyReadError,
    CallCancelledError,
    DeadlineExceededError,
    HookAbortError,
    HttpHookError,
    NonSuccessStatusError,
    RequestBuildError,
    TimeoutError_,
    TransportError,
    UrlParseError,
)
from httphook.hooks import Hook, HookChain, add_hook
from httphook.transport import get_transport_client, set_transport_client

__all__ = [
    "BodyEncodeError",
    "BodyReadError",
    "CallCancelledError",
    "CallContext",
    "CallResult",
    "DeadlineExceededError",
    "Dispatcher",
    "Hook",
    "HookAbortError",
    "HookChain",
    "HttpHookError",
    "NonSuccessStatusError",
    "RequestBuildError",
    "TimeoutError_",
    "TransportError",
    "UrlParseError",
    "add_hook",
    "delete",
    "get",
    "get_transport_client",
    "patch",
    "post",
    "put",
    "set_transport_client",
]
