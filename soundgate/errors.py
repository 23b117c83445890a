"""Gateway error taxonomy.

HTTP-facing errors are rendered into the ``{status, error, stack}`` envelope
by the dispatcher; webhook-facing errors never leave the notifier.
"""

from __future__ import annotations

import traceback


class GatewayError(Exception):
    """Base class for all gateway errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SystemNotReady(GatewayError):
    """No device has been discovered yet."""

    MESSAGE = (
        "No system has yet been discovered. Please check that the discovery "
        "service can reach your network if it doesn't resolve itself in a few seconds."
    )

    def __init__(self) -> None:
        super().__init__(self.MESSAGE)


class AddressDecodeError(GatewayError):
    """The device segment of the request path could not be decoded."""


class ActionNotFound(GatewayError):
    """No handler is registered under the requested action name."""

    def __init__(self, action: str) -> None:
        super().__init__(f"action '{action}' not found")
        self.action = action


class HandlerFailure(GatewayError):
    """An action handler raised."""


class WebhookDeliveryFailure(GatewayError):
    """An outbound webhook POST failed (logged only)."""


class CoverArtFetchFailure(GatewayError):
    """Album art could not be downloaded."""


def format_stack(exc: BaseException) -> str:
    """Render an exception and its traceback the way it is reported to clients."""
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
