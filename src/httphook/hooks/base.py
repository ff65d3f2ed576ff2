"""Base class for request hooks.

A hook intercepts every dispatched call twice: :meth:`Hook.before` runs
before the request is sent and :meth:`Hook.after` runs once the response
(or the transport failure) is known. Both receive the per-call
:class:`~httphook.context.CallContext` and return the context the next hook
should see, which lets a hook leave values for its own ``after`` or for
later hooks.

Raising any exception from either method aborts the call; the exception
becomes the call's error unchanged. :class:`~httphook.exceptions.HookAbortError`
is the conventional choice.

Example:
    Timing hook::

        class TimingHook(Hook):
            def before(self, ctx, request):
                return ctx.with_value("started", time.monotonic())

            def after(self, ctx, status_code, headers, body, error):
                elapsed = time.monotonic() - ctx.value("started")
                logger.info("%s took %.2fs", status_code, elapsed)
                return ctx
"""

from __future__ import annotations

from typing import Optional

import httpx

from httphook.context import CallContext


class Hook:
    """Base class for all hooks.

    Both methods default to passing the context through unchanged, so
    subclasses only override the stage they care about. Hooks shared by
    concurrent calls must synchronise any state of their own.
    """

    @property
    def name(self) -> str:
        """Name used in log messages. Defaults to the class name."""
        return type(self).__name__

    def before(self, ctx: CallContext, request: httpx.Request) -> CallContext:
        """Called before the request is sent.

        The request may be mutated in place (e.g. to add headers).

        Args:
            ctx: Context produced by the previous hook.
            request: The request about to be sent.

        Returns:
            The context for the next hook.
        """
        return ctx

    def after(
        self,
        ctx: CallContext,
        status_code: int,
        headers: Optional[httpx.Headers],
        body: Optional[bytes],
        error: Optional[Exception],
    ) -> CallContext:
        """Called after the transport call, successful or not.

        Args:
            ctx: Context produced by the previous hook.
            status_code: Response status, or ``-1`` if no response was obtained.
            headers: Response headers, or ``None``.
            body: Raw body of a 200 response, otherwise ``None``.
            error: The call's error so far, or ``None``.

        Returns:
            The context for the next hook.
        """
        return ctx
