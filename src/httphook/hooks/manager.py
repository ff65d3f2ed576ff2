"""Hook discovery through Python entry points.

Third-party packages register hooks by declaring an entry point in the
``httphook.hooks`` group in their ``pyproject.toml``::

    [project.entry-points."httphook.hooks"]
    timing = "my_package.hooks:TimingHook"

:class:`HookManager` loads the qualifying entry points, instantiates each
hook with its no-arg constructor and appends it to a
:class:`~httphook.hooks.chain.HookChain`.
"""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Optional

from httphook.exceptions import HookLoadError
from httphook.hooks.base import Hook
from httphook.hooks.chain import HookChain, get_hook_chain
from httphook.models import HooksConfig

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "httphook.hooks"
"""The entry-point group name used for hook discovery."""


class HookManager:
    """Discovers hooks and registers them on a chain.

    When ``enabled`` in :class:`~httphook.models.HooksConfig` is non-empty only
    those hooks are loaded; otherwise every discovered hook that is **not** in
    ``disabled`` is loaded.

    Args:
        chain: Chain to register hooks on. Defaults to the process-wide chain.
    """

    def __init__(self, chain: Optional[HookChain] = None) -> None:
        self._chain = chain if chain is not None else get_hook_chain()
        self._loaded: dict[str, Hook] = {}

    @property
    def chain(self) -> HookChain:
        return self._chain

    def discover(self, config: HooksConfig) -> list[str]:
        """Load hooks registered under :data:`ENTRY_POINT_GROUP`.

        Returns:
            Names of the hooks that were loaded. Hooks that fail to import or
            instantiate are logged as warnings and skipped.
        """
        loaded_names: list[str] = []
        enabled_set = set(config.enabled)
        disabled_set = set(config.disabled)

        for ep in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP):
            name = ep.name

            if enabled_set and name not in enabled_set:
                logger.debug("Hook '%s' not in enabled list, skipping", name)
                continue
            if name in disabled_set:
                logger.debug("Hook '%s' is disabled, skipping", name)
                continue

            try:
                hook_cls = ep.load()
                hook = hook_cls()
            except Exception as exc:
                logger.warning("Failed to load hook '%s': %s", name, exc)
                continue
            if not isinstance(hook, Hook):
                logger.warning("Entry point '%s' did not produce a Hook, skipping", name)
                continue

            self.load_hook(name, hook)
            loaded_names.append(name)

        return loaded_names

    def load_hook(self, name: str, hook: Hook) -> None:
        """Register a single hook instance under *name*.

        Raises:
            HookLoadError: If *hook* is not a :class:`Hook` or *name* is
                already loaded.
        """
        if name in self._loaded:
            raise HookLoadError(f"Hook '{name}' is already loaded")
        if not isinstance(hook, Hook):
            raise HookLoadError(f"Entry point '{name}' did not produce a Hook")

        self._chain.add(hook)
        self._loaded[name] = hook
        logger.info("Loaded hook '%s'", name)

    def list_hooks(self) -> list[str]:
        """Names of hooks loaded by this manager, in registration order."""
        return list(self._loaded)
