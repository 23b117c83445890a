"""Action registry, handler loading, and action result types."""

from soundgate.actions.loader import GatewayAPI, load_actions
from soundgate.actions.registry import ActionHandler, ActionRegistry
from soundgate.actions.results import (
    ActionResult,
    Failure,
    RawTransportPassthrough,
    Success,
    classify,
    to_envelope,
)

__all__ = [
    "ActionHandler",
    "ActionRegistry",
    "ActionResult",
    "Failure",
    "GatewayAPI",
    "RawTransportPassthrough",
    "Success",
    "classify",
    "load_actions",
    "to_envelope",
]
