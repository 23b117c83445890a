"""``/<room>/state``: the player's current playback state."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from soundgate.actions.loader import GatewayAPI


async def state(player: Any, values: list[str]) -> Any:
    if player is None:
        msg = "No player available"
        raise LookupError(msg)
    if isinstance(player, dict):
        return player.get("state", {})
    return getattr(player, "state", {})


def register(api: GatewayAPI) -> None:
    api.register_action("state", state)
