"""Webhook notifier: forwards discovery events to the configured endpoints.

Each event becomes one JSON POST to ``WEBHOOK``. Transport-state events whose
current track has album art also get a second, independent POST to
``WEBHOOK_COVER`` carrying the art base64-encoded. Deliveries are
fire-and-forget: never retried, never reported back to the event source.
Every delivery runs as a tracked task so failures still reach the log.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Coroutine, Mapping
from typing import TYPE_CHECKING, Any

import aiohttp

from soundgate.discovery import EVENT_TYPES
from soundgate.errors import CoverArtFetchFailure, WebhookDeliveryFailure
from soundgate.webhooks.cover_art import album_art_uri, fetch_cover_art

if TYPE_CHECKING:
    from soundgate.config import Settings
    from soundgate.discovery import DiscoveryEvent, EventBus

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def current_track(data: Any) -> Any:
    """Return ``data.state.currentTrack`` or None."""
    state = _field(data, "state")
    if state is None:
        return None
    return _field(state, "currentTrack")


def _encode(payload: dict[str, Any]) -> bytes:
    return json.dumps(payload, separators=(",", ":"), default=str).encode("utf-8")


class WebhookNotifier:
    """Delivers discovery events as webhook POSTs.

    Args:
        settings: Source of the webhook URLs, field names, and custom header.
        session: Shared client session used for every outbound request.
    """

    def __init__(self, settings: Settings, session: aiohttp.ClientSession) -> None:
        self._settings = settings
        self._session = session
        self._pending: set[asyncio.Task] = set()
        self._consumers: list[asyncio.Task] = []

    # -- Event intake ----------------------------------------------------------

    def run(self, bus: EventBus) -> list[asyncio.Task]:
        """Start one consumer task per event type. Returns the consumer tasks."""
        for event_type in EVENT_TYPES:
            queue = bus.subscribe(event_type)
            task = asyncio.create_task(self._consume(queue), name=f"webhook-consumer:{event_type}")
            self._consumers.append(task)
        return list(self._consumers)

    async def _consume(self, queue: asyncio.Queue[DiscoveryEvent]) -> None:
        while True:
            event = await queue.get()
            try:
                await self.notify(event.type, event.data)
            except Exception:
                logger.exception("Could not schedule webhook for %s", event.type)
            finally:
                queue.task_done()

    async def notify(self, event_type: str, data: Any) -> None:
        """Schedule the webhook deliveries for one event. Never raises on delivery errors."""
        settings = self._settings
        if not settings.webhook:
            return

        body = _encode(
            {
                settings.webhook_type: event_type,
                settings.webhook_data: data,
                "sentTime": _now_ms(),
            }
        )
        headers = {
            "Content-Type": "application/json",
            "Content-Length": str(len(body)),
            **settings.webhook_headers(),
        }
        self._spawn(self._post(settings.webhook, body, headers), f"webhook:{event_type}")

        track = current_track(data)
        if track is not None and album_art_uri(track):
            self._spawn(self._send_cover(data, track), f"webhook-cover:{event_type}")

    # -- Deliveries ------------------------------------------------------------

    async def _post(self, url: str, body: bytes, headers: dict[str, str]) -> bool:
        """POST one webhook body. Returns True on a 2xx answer."""
        try:
            await self._deliver(url, body, headers)
        except WebhookDeliveryFailure as exc:
            logger.error("%s", exc.message, exc_info=exc.__cause__)
            return False
        return True

    async def _deliver(self, url: str, body: bytes, headers: dict[str, str]) -> None:
        """POST one webhook body, raising ``WebhookDeliveryFailure`` unless it got a 2xx."""
        try:
            async with self._session.post(url, data=body, headers=headers) as resp:
                if 200 <= resp.status < 300:
                    logger.debug("Webhook delivered to %s (status=%d)", url, resp.status)
                    return
                text = await resp.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            msg = (
                f"Could not reach webhook endpoint {url}. "
                "Verify that the receiving end is up and running."
            )
            raise WebhookDeliveryFailure(msg) from exc

        msg = f"Webhook endpoint {url} answered status={resp.status} body={text[:200]}"
        raise WebhookDeliveryFailure(msg)

    async def _send_cover(self, data: Any, track: Any) -> bool:
        """Fetch album art and POST it to the cover webhook."""
        settings = self._settings
        if not settings.webhook_cover:
            logger.debug("WEBHOOK_COVER not set, skipping cover art upload")
            return False

        logger.info("Uploading cover art.")
        try:
            art = await fetch_cover_art(self._session, track)
        except CoverArtFetchFailure as exc:
            logger.warning("Cover art unavailable, sending without it: %s", exc.message)
            art = None
        except Exception:
            logger.exception("Cover art fetch crashed, sending without it")
            art = None

        body = _encode(
            {
                settings.webhook_data: data,
                "base64": art or "",
                "sentTime": _now_ms(),
            }
        )
        headers = {"Content-Type": "application/json", "Content-Length": str(len(body))}
        return await self._post(settings.webhook_cover, body, headers)

    # -- Task bookkeeping ------------------------------------------------------

    def _spawn(self, coro: Coroutine[Any, Any, Any], name: str) -> asyncio.Task:
        task = asyncio.create_task(coro, name=name)
        self._pending.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Webhook task %s failed", task.get_name(), exc_info=exc)

    @property
    def pending(self) -> int:
        """Number of deliveries still in flight."""
        return len(self._pending)

    async def drain(self) -> None:
        """Wait until every scheduled delivery has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def stop(self) -> None:
        """Cancel the consumers and let in-flight deliveries finish."""
        for task in self._consumers:
            task.cancel()
        await asyncio.gather(*self._consumers, return_exceptions=True)
        self._consumers.clear()
        await self.drain()
