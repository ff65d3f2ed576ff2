"""Hook system -- request interception before and after dispatch.

Key classes:

* :class:`Hook` -- base class with ``before`` and ``after`` stages.
* :class:`HookChain` -- ordered, append-only list of hooks run around every call.
* :class:`HookManager` -- loads hooks registered in the ``httphook.hooks``
  entry-point group.

Example::

    from httphook.hooks import Hook, add_hook

    class AuthHook(Hook):
        def before(self, ctx, request):
            request.headers["Authorization"] = "Bearer " + token
            return ctx

    add_hook(AuthHook())
"""

from httphook.hooks.base import Hook
from httphook.hooks.chain import HookChain, add_hook, get_hook_chain, reset_hook_chain
from httphook.hooks.manager import HookManager

__all__ = [
    "Hook",
    "HookChain",
    "HookManager",
    "add_hook",
    "get_hook_chain",
    "reset_hook_chain",
]
