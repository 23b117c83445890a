"""Gateway wiring for the action table, HTTP server and webhook notifier.

The discovery library is supplied by the caller; it publishes its events on
the ``EventBus`` handed to ``Gateway``::

    bus = EventBus()
    gateway = Gateway(discovery, bus)
    await gateway.start()
    ...
    await gateway.stop()
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

import aiohttp

from soundgate.actions.loader import BUILTIN_PACKAGE, GatewayAPI, load_actions
from soundgate.config import Settings, settings as default_settings
from soundgate.server import GatewayServer
from soundgate.webhooks.notifier import WebhookNotifier

if TYPE_CHECKING:
    from soundgate.actions.registry import ActionHandler
    from soundgate.discovery import Discovery, EventBus

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings = default_settings) -> None:
    """Configure root logging once at process start."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
    )


class Gateway:
    """Owns the shared client session and the lifecycles of server and notifier."""

    def __init__(
        self,
        discovery: Discovery,
        bus: EventBus,
        settings: Settings = default_settings,
        action_packages: tuple[str, ...] = (BUILTIN_PACKAGE,),
    ) -> None:
        self.discovery = discovery
        self.settings = settings
        self._bus = bus
        self._action_packages = action_packages
        self.actions: Mapping[str, ActionHandler] = {}
        self._session: aiohttp.ClientSession | None = None
        self._server: GatewayServer | None = None
        self._notifier: WebhookNotifier | None = None

    async def start(self) -> None:
        """Load actions, then start the notifier consumers and the HTTP server."""
        api = GatewayAPI(self.discovery, self.settings)
        self.actions = load_actions(api, self._action_packages)

        self._session = aiohttp.ClientSession()
        self._notifier = WebhookNotifier(self.settings, self._session)
        self._notifier.run(self._bus)
        if self.settings.webhook:
            logger.info("Webhook delivery enabled: %s", self.settings.webhook)
        else:
            logger.info("WEBHOOK not set, event delivery disabled")

        self._server = GatewayServer(
            self.actions, self.discovery, port=self.settings.port, host=self.settings.host
        )
        await self._server.start()

    async def stop(self) -> None:
        """Stop serving, finish in-flight deliveries, and close the session."""
        if self._server is not None:
            await self._server.stop()
            self._server = None
        if self._notifier is not None:
            await self._notifier.stop()
            self._notifier = None
        if self._session is not None:
            await self._session.close()
            self._session = None
