"""Action result sum type and its mapping onto HTTP response envelopes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from aiohttp import ClientResponse

SUCCESS_BODY = {"status": "success"}


@dataclass(frozen=True)
class Success:
    """The handler finished; ``payload`` becomes the JSON body (None → bare success)."""

    payload: Any = None


@dataclass(frozen=True)
class RawTransportPassthrough:
    """The handler leaked a raw HTTP response object. Reported as bare success."""


@dataclass(frozen=True)
class Failure:
    """The request failed before or inside the handler."""

    kind: str
    message: str
    stack: str = ""


ActionResult = Success | RawTransportPassthrough | Failure


def _is_transport_response(value: Any) -> bool:
    return isinstance(value, ClientResponse)


def classify(value: Any) -> ActionResult:
    """Map whatever a handler returned onto an ``ActionResult``."""
    if isinstance(value, Success | RawTransportPassthrough | Failure):
        return value
    if _is_transport_response(value):
        return RawTransportPassthrough()
    if isinstance(value, list | tuple) and value and _is_transport_response(value[0]):
        return RawTransportPassthrough()
    return Success(value)


def to_envelope(result: ActionResult) -> tuple[int, Any]:
    """Return ``(http_status, json_body)`` for a result."""
    match result:
        case Success(payload=None) | RawTransportPassthrough():
            return 200, dict(SUCCESS_BODY)
        case Success(payload=payload):
            return 200, payload
        case Failure(message=message, stack=stack):
            return 500, {"status": "error", "error": message, "stack": stack}
