#!/usr/bin/env python3
"""Run the gateway against a fixed set of rooms, for poking at it locally.

Usage:
    uv run python scripts/demo_gateway.py Kitchen "Living Room"
    curl localhost:5005/Kitchen/state
    curl localhost:5005/zones

Events can be fired into the webhook pipeline from stdin, one per line as
``<event-type> <json>``:
    volume-change {"roomName": "Kitchen", "newVolume": 12}
"""

import argparse
import asyncio
import json
import sys

from soundgate.config import settings
from soundgate.discovery import EventBus
from soundgate.gateway import Gateway, configure_logging


class StaticDiscovery:
    """Discovery stand-in with one idle player per room name."""

    def __init__(self, rooms: list[str]) -> None:
        self._players = {
            name: {"roomName": name, "state": {"playbackState": "STOPPED"}} for name in rooms
        }

    @property
    def zones(self) -> list[dict]:
        return [{"coordinator": p, "members": [p]} for p in self._players.values()]

    def get_player(self, name: str) -> dict | None:
        return self._players.get(name)

    def get_any_player(self) -> dict | None:
        return next(iter(self._players.values()), None)


async def _read_events(bus: EventBus) -> None:
    loop = asyncio.get_running_loop()
    while True:
        line = await loop.run_in_executor(None, sys.stdin.readline)
        if not line:
            return
        event_type, _, raw = line.strip().partition(" ")
        try:
            bus.emit(event_type, json.loads(raw or "{}"))
        except ValueError as exc:
            print(f"Ignored: {exc}", file=sys.stderr)


async def _run(rooms: list[str]) -> None:
    bus = EventBus()
    gateway = Gateway(StaticDiscovery(rooms), bus)
    await gateway.start()
    try:
        await _read_events(bus)
        await asyncio.Event().wait()
    finally:
        await gateway.stop()


def main() -> None:
    parser = argparse.ArgumentParser(description="Serve the gateway with static rooms")
    parser.add_argument("rooms", nargs="*", default=["Kitchen"], help="Room names to expose")
    args = parser.parse_args()

    configure_logging(settings)
    try:
        asyncio.run(_run(args.rooms))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
