"""Action registry: name to handler catalog, frozen before serving starts."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from types import MappingProxyType
from typing import Any

logger = logging.getLogger(__name__)

# Handler signature: async (player, values) -> Any
ActionHandler = Callable[[Any, list[str]], Awaitable[Any]]


class ActionRegistry:
    """Builder for the action table.

    Supports two registration styles::

        registry = ActionRegistry()

        @registry.action("pause")
        async def pause(player, values):
            ...

        registry.register("play", play)

    Once every handler module has registered, ``freeze()`` returns the
    read-only mapping the dispatcher serves from.
    """

    def __init__(self) -> None:
        self._actions: dict[str, ActionHandler] = {}
        self._frozen = False

    def register(self, name: str, handler: ActionHandler) -> None:
        """Register ``handler`` under ``name``. A repeated name replaces the old handler."""
        if self._frozen:
            msg = f"Cannot register action '{name}' after the registry was frozen"
            raise RuntimeError(msg)
        if not inspect.iscoroutinefunction(handler):
            msg = f"Action handler '{name}' must be an async function"
            raise TypeError(msg)

        key = name.lower()
        if key in self._actions:
            logger.debug("Replacing action handler: %s", key)
        self._actions[key] = handler
        logger.debug("Registered action: %s", key)

    def action(self, name: str) -> Callable[[ActionHandler], ActionHandler]:
        """Decorator form of ``register``."""

        def decorator(fn: ActionHandler) -> ActionHandler:
            self.register(name, fn)
            return fn

        return decorator

    def get(self, name: str) -> ActionHandler | None:
        """Look up a handler by action name."""
        return self._actions.get(name.lower())

    @property
    def names(self) -> list[str]:
        """All registered action names."""
        return list(self._actions)

    def freeze(self) -> Mapping[str, ActionHandler]:
        """Stop accepting registrations and return a read-only view of the table."""
        self._frozen = True
        return MappingProxyType(dict(self._actions))
