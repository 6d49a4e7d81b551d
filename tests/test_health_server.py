"""Tests for the HTTP status server."""

import pytest
from aiohttp import test_utils
from conftest import raw_advance, raw_media, raw_user

from dubbot.core import HealthCheckServer


@pytest.fixture
def health(bot):
    return HealthCheckServer(bot.context, host="127.0.0.1", port=0)


class TestHealthCheckServer:
    """Test the routes against an in-process aiohttp server."""

    @pytest.mark.asyncio
    async def test_starting_until_state_is_tracked(self, health):
        async with test_utils.TestClient(test_utils.TestServer(health.app)) as http:
            response = await http.get("/health")
            assert response.status == 200
            assert await response.json() == {"status": "starting", "ready": False}

    @pytest.mark.asyncio
    async def test_status(self, health, tracker, client):
        client.emit("user-join", {"user": raw_user("a", "alice")})
        client.emit("room_playlist-update", raw_advance(media=raw_media("x", "Song X")))

        async with test_utils.TestClient(test_utils.TestServer(health.app)) as http:
            health_response = await http.get("/health")
            assert (await health_response.json())["status"] == "healthy"

            status = await (await http.get("/status")).json()

        assert status["room"] == "test-room"
        assert status["ready"] is True
        assert status["users_in_room"] == 1
        assert status["play_history_length"] == 1
        assert status["current_play"] == "Song X"

    @pytest.mark.asyncio
    async def test_root_and_ping(self, health):
        async with test_utils.TestClient(test_utils.TestServer(health.app)) as http:
            root = await (await http.get("/")).json()
            pong = await (await http.get("/ping")).text()

        assert root == {"service": "dubbot", "status": "running"}
        assert pong == "pong"

    def test_status_without_tracker(self, health):
        status = health.status()
        assert status["ready"] is False
        assert status["users_in_room"] == 0
        assert status["current_play"] is None
