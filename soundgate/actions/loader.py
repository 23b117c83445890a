"""Handler module loading.

Every module in an action package exposes ``register(api)`` and calls
``api.register_action(name, handler)`` for each action it provides. The
loader calls those functions explicitly and hands back the frozen table.
"""

from __future__ import annotations

import importlib
import logging
import pkgutil
from collections.abc import Mapping
from typing import TYPE_CHECKING

from soundgate.actions.registry import ActionHandler, ActionRegistry

if TYPE_CHECKING:
    from soundgate.config import Settings
    from soundgate.discovery import Discovery

logger = logging.getLogger(__name__)

BUILTIN_PACKAGE = "soundgate.actions.builtin"


class GatewayAPI:
    """The view of the gateway that handler modules receive at load time."""

    def __init__(
        self,
        discovery: Discovery,
        settings: Settings,
        registry: ActionRegistry | None = None,
    ) -> None:
        self.discovery = discovery
        self._settings = settings
        self._registry = registry or ActionRegistry()

    def get_port(self) -> int:
        return self._settings.port

    def get_web_root(self) -> str:
        return self._settings.webroot

    def register_action(self, name: str, handler: ActionHandler) -> None:
        self._registry.register(name, handler)

    @property
    def registry(self) -> ActionRegistry:
        return self._registry


def load_actions(api: GatewayAPI, packages: tuple[str, ...] = (BUILTIN_PACKAGE,)) -> Mapping[str, ActionHandler]:
    """Import every module of ``packages``, run its ``register(api)``, and freeze the registry."""
    for package_name in packages:
        package = importlib.import_module(package_name)
        for info in sorted(pkgutil.iter_modules(package.__path__), key=lambda m: m.name):
            module = importlib.import_module(f"{package_name}.{info.name}")
            register = getattr(module, "register", None)
            if not callable(register):
                logger.warning("Action module %s has no register(api) function, skipped", module.__name__)
                continue
            register(api)
            logger.debug("Loaded action module: %s", module.__name__)

    actions = api.registry.freeze()
    logger.info("Loaded %d actions: %s", len(actions), ", ".join(sorted(actions)) or "none")
    return actions
