"""Shared test fixtures."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from soundgate.config import Settings

# 1 KiB stand-in for a JPEG cover
FAKE_IMAGE = bytes(range(256)) * 4


class FakeDiscovery:
    """In-memory discovery collaborator keyed by room name."""

    def __init__(self, rooms: list[str] | None = None) -> None:
        self.players: dict[str, dict[str, Any]] = {
            name: {"roomName": name, "state": {"playbackState": "STOPPED"}} for name in rooms or []
        }

    @property
    def zones(self) -> list[dict[str, Any]]:
        return [{"coordinator": p} for p in self.players.values()]

    def get_player(self, name: str) -> dict[str, Any] | None:
        return self.players.get(name)

    def get_any_player(self) -> dict[str, Any] | None:
        return next(iter(self.players.values()), None)


def mock_response(status: int = 200, body: bytes = b"", text: str = "") -> AsyncMock:
    """An aiohttp response usable as ``async with session.x(...) as resp``."""
    resp = AsyncMock()
    resp.status = status
    resp.read = AsyncMock(return_value=body)
    resp.text = AsyncMock(return_value=text)
    resp.__aenter__ = AsyncMock(return_value=resp)
    resp.__aexit__ = AsyncMock(return_value=False)
    return resp


@pytest.fixture
def discovery() -> FakeDiscovery:
    return FakeDiscovery(["Kitchen", "Living Room"])


@pytest.fixture
def empty_discovery() -> FakeDiscovery:
    return FakeDiscovery([])


@pytest.fixture
def webhook_settings() -> Settings:
    return Settings(
        webhook="http://hooks.test/events",
        webhook_cover="http://hooks.test/cover",
    )


@pytest.fixture
def session() -> MagicMock:
    """Client session whose POSTs succeed and whose GETs return FAKE_IMAGE."""
    mock_session = MagicMock()
    mock_session.post = MagicMock(side_effect=lambda *a, **kw: mock_response(200))
    mock_session.get = MagicMock(side_effect=lambda *a, **kw: mock_response(200, FAKE_IMAGE))
    mock_session.closed = False
    return mock_session
