"""
Pytest configuration and shared fixtures for the bot test suite.

``FakeRoomClient`` stands in for the room service client library: it records
registered callbacks and sent chat, and lets tests emit raw service events.
"""

import asyncio
from collections import defaultdict
from typing import Any, Callable

import pytest

from dubbot.core import Bot, BotSettings, StateTracker

ROLE_ID_VIP = "5615fe1ee596154fc2000001"
ROLE_ID_MOD = "52d1ce33c38a06510c000001"


class FakeRoomClient:
    """In-memory room client."""

    def __init__(self) -> None:
        self.callbacks: dict[str, list[Callable[..., None]]] = defaultdict(list)
        self.sent_chat: list[str] = []
        self.login_calls: list[tuple[str, str]] = []
        self.connect_calls: list[str] = []
        self.login_error: Exception | None = None
        self.never_ready = False

        # Room state reported by the get_* methods
        self.users: list[dict[str, Any]] = []
        self.dj: dict[str, Any] | None = None
        self.media: dict[str, Any] | None = None
        self.time_elapsed: float = 0
        self.queue: list[dict[str, Any]] = []

        # Whether each action can be queued, and whether it completes right away
        self.action_results: dict[str, bool] = defaultdict(lambda: True)
        self.complete_actions = True
        self.pending: list[Callable[[], None]] = []
        self.actions: list[tuple] = []

    async def login(self, username: str, password: str) -> None:
        self.login_calls.append((username, password))
        if self.login_error:
            raise self.login_error

    def connect(self, room_name: str) -> None:
        self.connect_calls.append(room_name)

    async def wait_until_ready(self) -> None:
        if self.never_ready:
            await asyncio.Event().wait()

    def on(self, event_name: str, callback: Callable[..., None]) -> None:
        self.callbacks[event_name].append(callback)

    def emit(self, event_name: str, *args: Any) -> None:
        for callback in list(self.callbacks[event_name]):
            callback(*args)

    def get_users(self) -> list[dict[str, Any]]:
        return self.users

    def get_dj(self) -> dict[str, Any] | None:
        return self.dj

    def get_media(self) -> dict[str, Any] | None:
        return self.media

    def get_time_elapsed(self) -> float:
        return self.time_elapsed

    def get_queue(self) -> list[dict[str, Any]]:
        return self.queue

    def send_chat(self, message: str) -> None:
        self.sent_chat.append(message)

    def _action(self, name: str, callback: Callable[[], None], *args: Any) -> bool:
        self.actions.append((name, *args))
        if not self.action_results[name]:
            return False
        if self.complete_actions:
            callback()
        else:
            self.pending.append(callback)
        return True

    def moderate_skip(self, callback: Callable[[], None]) -> bool:
        return self._action("skip", callback)

    def grab(self, callback: Callable[[], None]) -> bool:
        return self._action("grab", callback)

    def woot(self, callback: Callable[[], None]) -> bool:
        return self._action("woot", callback)

    def meh(self, callback: Callable[[], None]) -> bool:
        return self._action("meh", callback)

    def join_booth(self, callback: Callable[[], None]) -> bool:
        return self._action("join", callback)

    def leave_booth(self, callback: Callable[[], None]) -> bool:
        return self._action("leave", callback)

    def moderate_move_dj(self, user_id: str, position: int, callback: Callable[[], None]) -> bool:
        return self._action("move", callback, user_id, position)


# ----------------------------------------------------------------------
# Raw payload factories, in the room service's schema
# ----------------------------------------------------------------------


def raw_user(user_id: str = "u1", username: str = "alice", role: str | None = None, **extra: Any):
    user = {"id": user_id, "username": username, "created": 1_500_000_000_000}
    if role:
        user["role"] = role
    user.update(extra)
    return user


def raw_media(content_id: str = "yt-1", name: str = "Song One", song_length: int = 200_000):
    return {"fkid": content_id, "name": name, "songLength": song_length}


def raw_chat(chat_id: str, message: str, user: dict[str, Any] | None = None):
    return {
        "id": chat_id,
        "message": message,
        "type": "chat-message",
        "user": user or raw_user(),
    }


def raw_advance(user: dict[str, Any] | None = None, media: dict[str, Any] | None = None, **extra):
    payload = {
        "user": user or raw_user("dj1", "deejay"),
        "media": media or raw_media(),
        "startTime": 1_600_000_000_000,
    }
    payload.update(extra)
    return payload


@pytest.fixture
def settings():
    """Settings that never read the environment's .env file or scan bundled plugins."""
    return BotSettings(
        _env_file=None,
        room_name="test-room",
        bot_email="bot@example.com",
        bot_password="hunter2",
        commands_dir=None,
        event_listeners_dir=None,
    )


@pytest.fixture
def client():
    return FakeRoomClient()


@pytest.fixture
def bot(client, settings):
    """A logged-in bot connected to ``test-room``."""
    bot = Bot(client, settings)
    bot._hook_client_events()
    bot.connect()
    return bot


@pytest.fixture
def tracker(bot):
    tracker = StateTracker(bot, max_chat_history=10, max_play_history=5)
    tracker.init()
    bot.context.state = tracker
    return tracker
