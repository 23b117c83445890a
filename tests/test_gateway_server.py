"""Tests for the gateway HTTP server."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from aiohttp import ClientResponse
from aiohttp.test_utils import TestClient, TestServer
from conftest import FakeDiscovery
from yarl import URL

from soundgate.server import JSON_CONTENT_TYPE, GatewayServer, create_app

# -- Helpers -----------------------------------------------------------------


@pytest.fixture
def actions() -> dict[str, AsyncMock]:
    return {
        "play": AsyncMock(return_value=None),
        "volume": AsyncMock(return_value={"volume": 30}),
        "raw": AsyncMock(return_value=[MagicMock(spec=ClientResponse)]),
        "broken": AsyncMock(side_effect=RuntimeError("speaker on fire")),
    }


async def _make_client(actions, discovery) -> TestClient:
    """Create a TestClient for the gateway app."""
    server = TestServer(create_app(actions, discovery))
    client = TestClient(server)
    await client.start_server()
    return client


# -- Favicon ----------------------------------------------------------------


async def test_favicon_is_empty_200(actions, discovery) -> None:
    client = await _make_client(actions, discovery)
    try:
        resp = await client.get("/favicon.ico")
        assert resp.status == 200
        assert await resp.read() == b""
    finally:
        await client.close()


async def test_favicon_before_discovery(actions, empty_discovery) -> None:
    client = await _make_client(actions, empty_discovery)
    try:
        resp = await client.get("/favicon.ico")
        assert resp.status == 200
        assert await resp.read() == b""
    finally:
        await client.close()


# -- Dispatch ---------------------------------------------------------------


async def test_device_qualified_request(actions, discovery: FakeDiscovery) -> None:
    client = await _make_client(actions, discovery)
    try:
        resp = await client.get("/Kitchen/play/x/y")
        assert resp.status == 200
        assert await resp.json() == {"status": "success"}
        actions["play"].assert_awaited_once_with(discovery.get_player("Kitchen"), ["x", "y"])
    finally:
        await client.close()


async def test_default_device_request(actions, discovery: FakeDiscovery) -> None:
    client = await _make_client(actions, discovery)
    try:
        resp = await client.get("/Volume/30")
        assert resp.status == 200
        assert await resp.json() == {"volume": 30}
        actions["volume"].assert_awaited_once_with(discovery.get_any_player(), ["30"])
    finally:
        await client.close()


async def test_any_method_is_routed(actions, discovery) -> None:
    client = await _make_client(actions, discovery)
    try:
        resp = await client.post("/Kitchen/play")
        assert resp.status == 200
    finally:
        await client.close()


async def test_raw_transport_result_collapses(actions, discovery) -> None:
    client = await _make_client(actions, discovery)
    try:
        resp = await client.get("/raw")
        assert resp.status == 200
        assert await resp.json() == {"status": "success"}
    finally:
        await client.close()


async def test_json_headers(actions, discovery) -> None:
    client = await _make_client(actions, discovery)
    try:
        resp = await client.get("/volume")
        body = await resp.read()
        assert resp.headers["Content-Type"] == JSON_CONTENT_TYPE
        assert int(resp.headers["Content-Length"]) == len(body)
    finally:
        await client.close()


# -- Failures ---------------------------------------------------------------


async def test_unknown_action_returns_500(actions, discovery) -> None:
    client = await _make_client(actions, discovery)
    try:
        resp = await client.get("/moonwalk")
        assert resp.status == 500
        data = await resp.json()
        assert data["status"] == "error"
        assert "moonwalk" in data["error"]
    finally:
        await client.close()


async def test_handler_failure_returns_500(actions, discovery) -> None:
    client = await _make_client(actions, discovery)
    try:
        resp = await client.get("/Kitchen/broken")
        assert resp.status == 500
        data = await resp.json()
        assert data["error"] == "speaker on fire"
        assert "RuntimeError" in data["stack"]
    finally:
        await client.close()


async def test_no_zones_returns_500(actions, empty_discovery) -> None:
    client = await _make_client(actions, empty_discovery)
    try:
        for path in ("/play", "/Kitchen/play", "/anything/at/all"):
            resp = await client.get(path)
            assert resp.status == 500
            data = await resp.json()
            assert data["error"].startswith("No system has yet been discovered")
        actions["play"].assert_not_awaited()
    finally:
        await client.close()


async def test_malformed_device_segment_never_dispatches(actions, discovery) -> None:
    client = await _make_client(actions, discovery)
    try:
        resp = await client.get(URL("/%FF/play", encoded=True))
        assert resp.status == 500
        data = await resp.json()
        assert data["status"] == "error"
        assert "URI malformed" in data["error"]
        assert data["stack"]
        actions["play"].assert_not_awaited()
    finally:
        await client.close()


# -- GatewayServer lifecycle ------------------------------------------------


async def test_server_start_stop(actions, discovery) -> None:
    server = GatewayServer(actions, discovery, port=0, host="127.0.0.1")
    await server.start()
    assert server._runner is not None
    await server.stop()
    assert server._runner is None
