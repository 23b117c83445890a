"""Tests for the discovery event channel."""

import pytest

from soundgate.discovery import EVENT_TYPES, DiscoveryEvent, EventBus


async def test_publish_reaches_subscriber() -> None:
    bus = EventBus()
    queue = bus.subscribe("volume-change")

    bus.emit("volume-change", {"roomName": "Kitchen", "newVolume": 20})

    event = await queue.get()
    assert event == DiscoveryEvent("volume-change", {"roomName": "Kitchen", "newVolume": 20})


async def test_events_only_reach_their_type() -> None:
    bus = EventBus()
    volume = bus.subscribe("volume-change")
    mute = bus.subscribe("mute-change")

    bus.emit("mute-change", {"newMute": True})

    assert volume.empty()
    assert mute.qsize() == 1


async def test_every_subscriber_gets_a_copy() -> None:
    bus = EventBus()
    first = bus.subscribe("transport-state")
    second = bus.subscribe("transport-state")

    bus.emit("transport-state", {})

    assert first.qsize() == 1
    assert second.qsize() == 1


def test_publish_without_subscribers_is_noop() -> None:
    bus = EventBus()
    bus.emit("topology-change", [])


def test_unknown_type_rejected() -> None:
    bus = EventBus()
    with pytest.raises(ValueError, match="Unknown event type"):
        bus.subscribe("group-change")
    with pytest.raises(ValueError, match="Unknown event type"):
        bus.emit("group-change", {})


def test_known_event_types() -> None:
    assert set(EVENT_TYPES) == {"transport-state", "topology-change", "volume-change", "mute-change"}
