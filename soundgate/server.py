"""Async HTTP front end for the action dispatcher.

Every path and method lands on one catch-all route; the dispatcher decides
what the path means. Responses are always JSON.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from aiohttp import web

from soundgate.dispatch import Dispatcher

if TYPE_CHECKING:
    from soundgate.actions.registry import ActionHandler
    from soundgate.discovery import Discovery

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json;charset=utf-8"

_DISPATCHER_KEY = web.AppKey("dispatcher", Dispatcher)


def json_response(status: int, body: Any) -> web.Response:
    """Serialize ``body`` with an explicit content type and length."""
    payload = json.dumps(body, separators=(",", ":"), default=str).encode("utf-8")
    return web.Response(
        body=payload,
        status=status,
        headers={"Content-Type": JSON_CONTENT_TYPE, "Content-Length": str(len(payload))},
    )


async def _handle_request(request: web.Request) -> web.StreamResponse:
    """Route ``<any method> /...`` through the dispatcher."""
    path = request.rel_url.raw_path
    if path == "/favicon.ico":
        return web.Response(status=200)

    dispatcher = request.app[_DISPATCHER_KEY]
    status, body = await dispatcher.handle(path)
    logger.debug("%s %s -> %d", request.method, path, status)
    return json_response(status, body)


def create_app(actions: Mapping[str, ActionHandler], discovery: Discovery) -> web.Application:
    """Build the aiohttp Application with the catch-all route."""
    app = web.Application()
    app[_DISPATCHER_KEY] = Dispatcher(actions, discovery)
    app.router.add_route("*", "/{tail:.*}", _handle_request)
    return app


class GatewayServer:
    """Manages the aiohttp server lifecycle."""

    def __init__(
        self,
        actions: Mapping[str, ActionHandler],
        discovery: Discovery,
        port: int,
        host: str = "0.0.0.0",
    ) -> None:
        self.port = port
        self.host = host
        self._actions = actions
        self._discovery = discovery
        self._runner: web.AppRunner | None = None

    async def start(self) -> None:
        """Start listening for requests."""
        app = create_app(self._actions, self._discovery)
        self._runner = web.AppRunner(app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()
        logger.info("Gateway listening on %s:%d (%d actions)", self.host, self.port, len(self._actions))

    async def stop(self) -> None:
        """Shut down the server gracefully."""
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
            logger.info("Gateway server stopped")
