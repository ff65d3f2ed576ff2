"""Per-call context threaded through the hook chain and the transport call.

A :class:`CallContext` is an immutable key/value carrier with an optional
deadline and cancellation signal. Deriving a context never mutates the
parent, so values attached by hooks during one call are invisible to any
other call, even one running concurrently on another thread.

Example::

    ctx, cancel = CallContext.background().with_timeout(5).with_cancel()
    ctx = ctx.with_value("request-id", "abc123")
    result = dispatcher.get("https://api.example.com/users", ctx=ctx)
"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Hashable, Optional

from httphook.exceptions import CallCancelledError, DeadlineExceededError, TransportError

_MISSING = object()


class CallContext:
    """Immutable call-scoped context.

    Lookups walk from the newest derived context back to the root, so a value
    set later shadows an earlier one with the same key. Deadlines only ever
    shrink when deriving: a child cannot outlive its parent.

    Args:
        parent: The context this one is derived from.
        key: Key stored by this node, if any.
        value: Value stored under *key*.
        deadline: Absolute :func:`time.monotonic` deadline.
        cancel_event: Event that marks this context (and its children) cancelled.
    """

    __slots__ = ("_parent", "_key", "_value", "_deadline", "_cancel_events")

    def __init__(
        self,
        parent: Optional[CallContext] = None,
        key: Any = _MISSING,
        value: Any = None,
        deadline: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        self._parent = parent
        self._key = key
        self._value = value

        inherited = parent._deadline if parent is not None else None
        if inherited is not None and (deadline is None or inherited < deadline):
            deadline = inherited
        self._deadline = deadline

        events: tuple[threading.Event, ...] = parent._cancel_events if parent is not None else ()
        if cancel_event is not None:
            events = events + (cancel_event,)
        self._cancel_events = events

    @classmethod
    def background(cls) -> CallContext:
        """Return an empty root context with no deadline and no cancellation."""
        return cls()

    # ------------------------------------------------------------------ #
    # Values
    # ------------------------------------------------------------------ #

    def with_value(self, key: Hashable, value: Any) -> CallContext:
        """Return a child context carrying *value* under *key*."""
        return CallContext(self, key=key, value=value)

    def value(self, key: Hashable, default: Any = None) -> Any:
        """Return the value stored under *key* by this context or an ancestor."""
        node: Optional[CallContext] = self
        while node is not None:
            if node._key is not _MISSING and node._key == key:
                return node._value
            node = node._parent
        return default

    # ------------------------------------------------------------------ #
    # Deadlines and cancellation
    # ------------------------------------------------------------------ #

    @property
    def deadline(self) -> Optional[float]:
        """Absolute :func:`time.monotonic` deadline, or ``None``."""
        return self._deadline

    def with_deadline(self, deadline: float) -> CallContext:
        """Return a child context that expires at the monotonic time *deadline*."""
        return CallContext(self, deadline=deadline)

    def with_timeout(self, seconds: float) -> CallContext:
        """Return a child context that expires *seconds* from now."""
        return self.with_deadline(time.monotonic() + seconds)

    def with_cancel(self) -> tuple[CallContext, Callable[[], None]]:
        """Return a child context and the function that cancels it."""
        event = threading.Event()
        return CallContext(self, cancel_event=event), event.set

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline (never negative), or ``None``."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def cancelled(self) -> bool:
        return any(event.is_set() for event in self._cancel_events)

    def error(self) -> Optional[TransportError]:
        """Return why this context is done, or ``None`` while it is still live."""
        if self.cancelled():
            return CallCancelledError("call context cancelled")
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return DeadlineExceededError("call context deadline exceeded")
        return None
