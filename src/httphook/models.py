"""Pydantic models shared across httphook modules.

The models fall into two groups:

**Configuration models** -- resolved by :func:`~httphook.config.resolve_config`
from keyword overrides, environment variables and ``./httphook.json``:
    :class:`HooksConfig` and :class:`ClientConfig`.

**Request models** -- built once per call by the dispatcher:
    :class:`HTTPMethod` and :class:`RequestIntent`.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


class HooksConfig(BaseModel):
    """Explicit allow/deny lists for hooks discovered through entry points."""

    enabled: list[str] = Field(default_factory=list)
    disabled: list[str] = Field(default_factory=list)


class ClientConfig(BaseModel):
    """Settings for the shared transport client and request building.

    Defaults mirror a long-lived pooled client: a 20 s request timeout, a
    30 s connect timeout, 90 s idle expiry and up to 100 idle connections.
    """

    timeout: float = Field(default=20.0, gt=0, description="Overall request timeout in seconds")
    connect_timeout: float = Field(default=30.0, gt=0, description="Connect timeout in seconds")
    idle_timeout: float = Field(default=90.0, gt=0, description="Idle pooled connection expiry in seconds")
    max_idle_conns: int = Field(default=100, ge=0, description="Max idle pooled connections")
    max_idle_conns_per_host: int = Field(default=100, ge=0, description="Max idle pooled connections per host")
    follow_redirects: bool = Field(default=True, description="Follow HTTP redirects")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    trust_env: bool = Field(default=True, description="Read proxy settings from the environment")
    strict_json_body: bool = Field(
        default=False,
        description="Fail the call when a request body cannot be JSON encoded "
        "instead of sending an empty body",
    )
    hooks: HooksConfig = Field(default_factory=HooksConfig)


# --- Request ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods supported by the dispatcher."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @property
    def has_body(self) -> bool:
        """Whether requests with this method carry a JSON body."""
        return self in (HTTPMethod.POST, HTTPMethod.PUT, HTTPMethod.PATCH)


class RequestIntent(BaseModel):
    """Everything a caller asked for, frozen once the call starts.

    ``body`` is any JSON-serialisable value; it is ignored for GET and DELETE.
    """

    model_config = ConfigDict(frozen=True)

    method: HTTPMethod
    url: str
    headers: Optional[dict[str, str]] = None
    params: Optional[dict[str, str]] = None
    body: Any = None
