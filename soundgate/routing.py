"""Path resolver: turns a request path into (player, action, values).

Two shapes are accepted::

    /<room>/<action>/<arg>/...   room resolved by discovery
    /<action>/<arg>/...          falls back to any known player

A first segment is a room only if discovery knows it; there is no other
delimiter between the two shapes.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from urllib.parse import unquote_to_bytes

from soundgate.errors import AddressDecodeError, SystemNotReady

if TYPE_CHECKING:
    from soundgate.discovery import Discovery

logger = logging.getLogger(__name__)

# A '%' that does not start a two-digit hex escape
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


@dataclass
class RequestAddress:
    """Where one request is going."""

    player: Any
    action: str
    values: list[str] = field(default_factory=list)


def decode_component(segment: str) -> str:
    """Percent-decode one path segment, rejecting malformed escapes and invalid UTF-8."""
    if _BAD_ESCAPE.search(segment):
        msg = f"URI malformed: {segment}"
        raise AddressDecodeError(msg)
    try:
        return unquote_to_bytes(segment).decode("utf-8")
    except UnicodeDecodeError as exc:
        msg = f"URI malformed: {segment}"
        raise AddressDecodeError(msg) from exc


def resolve(path: str, discovery: Discovery) -> RequestAddress:
    """Resolve ``path`` against the players discovery currently knows.

    Raises:
        SystemNotReady: discovery has not found any zone yet.
        AddressDecodeError: the first segment is not valid percent-encoding,
            or discovery rejected it.
    """
    if len(discovery.zones) == 0:
        raise SystemNotReady()

    params = path[1:].split("/") if path.startswith("/") else path.split("/")

    try:
        player = discovery.get_player(decode_component(params[0]))
    except AddressDecodeError:
        logger.error("Unable to parse supplied URI component (%s)", params[0])
        raise
    except Exception as exc:
        logger.error("Unable to parse supplied URI component (%s)", params[0])
        raise AddressDecodeError(str(exc)) from exc

    if player is not None:
        action = params[1] if len(params) > 1 else ""
        values = params[2:]
    else:
        player = discovery.get_any_player()
        action = params[0]
        values = params[1:]

    return RequestAddress(player=player, action=action.lower(), values=values)
