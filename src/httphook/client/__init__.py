"""Dispatch layer for httphook.

:class:`Dispatcher` sends requests through the shared pooled client with the
hook chain around each call, and :class:`CallResult` is the normalised
``(status_code, headers, body, error)`` outcome.

Example::

    from httphook.client import Dispatcher

    result = Dispatcher().get("https://api.example.com/users")
    if result.ok:
        print(result.body)
"""

from httphook.client.dispatcher import Dispatcher
from httphook.client.response import CallResult, parse_response

__all__ = ["CallResult", "Dispatcher", "parse_response"]
