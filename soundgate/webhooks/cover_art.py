"""Album-art download for the delayed cover webhook."""

from __future__ import annotations

import asyncio
import base64
import logging
from collections.abc import Mapping
from typing import Any

import aiohttp

from soundgate.errors import CoverArtFetchFailure

logger = logging.getLogger(__name__)


def album_art_uri(track: Any) -> str | None:
    """Return the track's absolute album-art URI, if it carries one."""
    if isinstance(track, Mapping):
        uri = track.get("absoluteAlbumArtUri")
    else:
        uri = getattr(track, "absoluteAlbumArtUri", None)
    return uri or None


async def fetch_cover_art(session: aiohttp.ClientSession, track: Any) -> str | None:
    """Download the track's album art and return it base64-encoded.

    Returns None when the track has no absolute art URI.

    Raises:
        CoverArtFetchFailure: non-200 answer or transport error.
    """
    uri = album_art_uri(track) if track is not None else None
    if uri is None:
        return None

    try:
        async with session.get(uri) as resp:
            if resp.status != 200:
                msg = f"Album art request to {uri} returned status {resp.status}"
                raise CoverArtFetchFailure(msg)
            image_bytes = await resp.read()
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        msg = f"Album art request to {uri} failed: {exc}"
        raise CoverArtFetchFailure(msg) from exc

    logger.debug("Downloaded %d bytes of album art from %s", len(image_bytes), uri)
    return base64.b64encode(image_bytes).decode("ascii")
