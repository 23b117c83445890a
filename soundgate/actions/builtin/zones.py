"""``/zones``: the topology as currently known to discovery."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from soundgate.actions.loader import GatewayAPI


def register(api: GatewayAPI) -> None:
    async def zones(player: Any, values: list[str]) -> Any:
        return list(api.discovery.zones)

    api.register_action("zones", zones)
