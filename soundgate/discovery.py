"""Discovery collaborator contract and the typed event channel it publishes on."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

TRANSPORT_STATE = "transport-state"
TOPOLOGY_CHANGE = "topology-change"
VOLUME_CHANGE = "volume-change"
MUTE_CHANGE = "mute-change"

EVENT_TYPES: tuple[str, ...] = (TRANSPORT_STATE, TOPOLOGY_CHANGE, VOLUME_CHANGE, MUTE_CHANGE)


@runtime_checkable
class Discovery(Protocol):
    """What the gateway needs from the device-discovery library."""

    @property
    def zones(self) -> Sequence[Any]:
        """Currently known zones. Empty until the first topology is received."""
        ...

    def get_player(self, name: str) -> Any | None:
        """Resolve a player by room name. May raise on malformed input."""
        ...

    def get_any_player(self) -> Any | None:
        """Return some known player, used when the path names no device."""
        ...


@dataclass(frozen=True)
class DiscoveryEvent:
    """A device-state change published by the discovery library."""

    type: str
    data: Any


class EventBus:
    """Fan-out channel from the discovery library to per-type consumers.

    Usage::

        bus = EventBus()
        queue = bus.subscribe("volume-change")
        bus.publish(DiscoveryEvent("volume-change", {...}))
        event = await queue.get()
    """

    def __init__(self) -> None:
        self._queues: dict[str, list[asyncio.Queue[DiscoveryEvent]]] = {
            event_type: [] for event_type in EVENT_TYPES
        }

    def subscribe(self, event_type: str) -> asyncio.Queue[DiscoveryEvent]:
        """Return a fresh queue receiving every event of ``event_type``."""
        if event_type not in self._queues:
            msg = f"Unknown event type '{event_type}'"
            raise ValueError(msg)
        queue: asyncio.Queue[DiscoveryEvent] = asyncio.Queue()
        self._queues[event_type].append(queue)
        return queue

    def publish(self, event: DiscoveryEvent) -> None:
        """Put ``event`` on every queue subscribed to its type. Never blocks."""
        if event.type not in self._queues:
            msg = f"Unknown event type '{event.type}'"
            raise ValueError(msg)
        subscribers = self._queues[event.type]
        if not subscribers:
            logger.debug("Event %s published with no subscribers", event.type)
        for queue in subscribers:
            queue.put_nowait(event)

    def emit(self, event_type: str, data: Any) -> None:
        """Shorthand for ``publish(DiscoveryEvent(event_type, data))``."""
        self.publish(DiscoveryEvent(event_type, data))
