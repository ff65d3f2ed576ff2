"""The process-wide pooled :class:`httpx.Client`.

One client is shared by every call in the process so connections are
re-used. It is created lazily from :func:`~httphook.config.resolve_config`
on first use and can be replaced wholesale with :func:`set_transport_client`.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

import httpx

from httphook.config import resolve_config
from httphook.models import ClientConfig

logger = logging.getLogger(__name__)

_client: Optional[httpx.Client] = None
_client_lock = threading.Lock()


def create_transport_client(config: Optional[ClientConfig] = None) -> httpx.Client:
    """Create a connection-pooling client from *config*.

    ``max_idle_conns_per_host`` cannot be expressed separately in httpx, whose
    keep-alive pool is global, so the smaller of the two idle limits is used.
    Proxies are taken from the environment unless ``trust_env`` is off.

    Args:
        config: Client settings; resolved from the environment when ``None``.

    Returns:
        A new :class:`httpx.Client`. The caller owns it.
    """
    if config is None:
        config = resolve_config()

    limits = httpx.Limits(
        max_connections=None,
        max_keepalive_connections=min(config.max_idle_conns, config.max_idle_conns_per_host),
        keepalive_expiry=config.idle_timeout,
    )
    timeout = httpx.Timeout(config.timeout, connect=config.connect_timeout)
    return httpx.Client(
        timeout=timeout,
        limits=limits,
        verify=config.verify_ssl,
        follow_redirects=config.follow_redirects,
        trust_env=config.trust_env,
    )


def get_transport_client() -> httpx.Client:
    """Return the shared client, creating it on first access."""
    global _client
    if _client is None:
        with _client_lock:
            if _client is None:
                _client = create_transport_client()
                logger.debug("Created shared transport client")
    return _client


def set_transport_client(client: httpx.Client) -> None:
    """Replace the shared client.

    The previous client is not closed: callers that are mid-request keep
    using it until they finish.
    """
    global _client
    with _client_lock:
        _client = client


def reset_transport_client() -> None:
    """Close and forget the shared client. Primarily useful in tests."""
    global _client
    with _client_lock:
        if _client is not None:
            _client.close()
        _client = None
