"""Dispatcher: runs the resolved action and normalizes its outcome."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from soundgate.actions.results import ActionResult, Failure, classify, to_envelope
from soundgate.errors import ActionNotFound, GatewayError, HandlerFailure, format_stack
from soundgate.routing import RequestAddress, resolve

if TYPE_CHECKING:
    from soundgate.actions.registry import ActionHandler
    from soundgate.discovery import Discovery

logger = logging.getLogger(__name__)


def _failure(exc: BaseException) -> Failure:
    kind = type(exc).__name__ if isinstance(exc, GatewayError) else HandlerFailure.__name__
    message = exc.message if isinstance(exc, GatewayError) else str(exc)
    return Failure(kind=kind, message=message, stack=format_stack(exc))


class Dispatcher:
    """Routes request paths to registered actions.

    Args:
        actions: Frozen action table from ``load_actions``.
        discovery: The discovery collaborator used to resolve rooms.
    """

    def __init__(self, actions: Mapping[str, ActionHandler], discovery: Discovery) -> None:
        self._actions = actions
        self._discovery = discovery

    async def dispatch(self, address: RequestAddress) -> ActionResult:
        """Invoke the handler for ``address`` and classify what it returned."""
        handler = self._actions.get(address.action)
        if handler is None:
            exc = ActionNotFound(address.action)
            logger.error("%s", exc.message)
            return _failure(exc)

        try:
            value = await handler(address.player, address.values)
        except Exception as exc:
            logger.exception("Action '%s' failed", address.action)
            return _failure(exc)

        return classify(value)

    async def handle(self, path: str) -> tuple[int, Any]:
        """Resolve ``path``, dispatch it, and return ``(http_status, json_body)``."""
        try:
            address = resolve(path, self._discovery)
        except GatewayError as exc:
            logger.error("Could not resolve %s: %s", path, exc.message)
            return to_envelope(_failure(exc))
        except Exception as exc:
            logger.exception("Could not resolve %s", path)
            return to_envelope(_failure(exc))

        return to_envelope(await self.dispatch(address))
