"""Ordered hook chain shared by every call of a dispatcher."""

from __future__ import annotations

import logging
import threading
from typing import Optional

import httpx

from httphook.context import CallContext
from httphook.hooks.base import Hook

logger = logging.getLogger(__name__)


class HookChain:
    """Append-only, ordered list of hooks.

    Both stages run hooks in registration order, each receiving the context
    returned by the previous one. A hook returning anything other than a
    :class:`CallContext` leaves the context unchanged. An exception raised
    by a hook stops the stage and propagates to the caller.

    Registration publishes a new immutable snapshot under a lock, so calls
    already running keep iterating the snapshot they started with.
    """

    def __init__(self, hooks: Optional[list[Hook]] = None) -> None:
        self._hooks: tuple[Hook, ...] = tuple(hooks or ())
        self._lock = threading.Lock()

    def add(self, hook: Hook) -> None:
        """Append *hook* to the end of the chain."""
        with self._lock:
            self._hooks = self._hooks + (hook,)
        logger.debug("Registered hook: %s", hook.name)

    @property
    def hooks(self) -> tuple[Hook, ...]:
        """Current snapshot of registered hooks."""
        return self._hooks

    def __len__(self) -> int:
        return len(self._hooks)

    def run_before(
        self,
        ctx: CallContext,
        request: httpx.Request,
        hooks: Optional[tuple[Hook, ...]] = None,
    ) -> CallContext:
        """Run every ``before`` hook.

        A context that becomes cancelled or expires while a hook runs is
        noticed once that hook returns, and its error is raised.

        Args:
            ctx: Context for the first hook.
            request: The request about to be sent.
            hooks: Snapshot to run; the current one when ``None``. Pass the
                same snapshot to :meth:`run_after` so both stages see the
                same hooks.

        Raises:
            Exception: Whatever a hook raised, or the context's error.
        """
        for hook in self._hooks if hooks is None else hooks:
            logger.debug("Running before hook %s", hook.name)
            result = hook.before(ctx, request)
            if isinstance(result, CallContext):
                ctx = result
            err = ctx.error()
            if err is not None:
                raise err
        return ctx

    def run_after(
        self,
        ctx: CallContext,
        status_code: int,
        headers: Optional[httpx.Headers],
        body: Optional[bytes],
        error: Optional[Exception],
        hooks: Optional[tuple[Hook, ...]] = None,
    ) -> CallContext:
        """Run every ``after`` hook with the same response snapshot.

        *hooks* is the snapshot the ``before`` stage ran, as in
        :meth:`run_before`.

        Raises:
            Exception: Whatever a hook raised.
        """
        for hook in self._hooks if hooks is None else hooks:
            logger.debug("Running after hook %s", hook.name)
            result = hook.after(ctx, status_code, headers, body, error)
            if isinstance(result, CallContext):
                ctx = result
        return ctx


# Module-level singleton
_chain = HookChain()


def get_hook_chain() -> HookChain:
    """Return the process-wide hook chain."""
    return _chain


def add_hook(hook: Hook) -> None:
    """Append *hook* to the process-wide hook chain."""
    _chain.add(hook)


def reset_hook_chain() -> HookChain:
    """Replace the process-wide chain with an empty one (for testing)."""
    global _chain
    _chain = HookChain()
    return _chain
