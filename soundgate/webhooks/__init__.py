"""Outbound webhook delivery for discovery events."""

from soundgate.webhooks.cover_art import fetch_cover_art
from soundgate.webhooks.notifier import WebhookNotifier

__all__ = ["WebhookNotifier", "fetch_cover_art"]
