"""The slice of the room service client library the bot depends on."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

ActionCallback = Callable[[], None]


@runtime_checkable
class RoomClient(Protocol):
    """Transport to the room service.

    Payloads are plain dicts in the service's own schema; ``dubbot.core.translator``
    is the only code that reads them. Action methods return ``False`` when the
    action cannot be queued (no permission, nothing playing, already in that
    state) and otherwise call ``callback`` once the action completes.
    """

    async def login(self, username: str, password: str) -> None: ...

    def connect(self, room_name: str) -> None: ...

    async def wait_until_ready(self) -> None:
        """Resolve once the room connection can be queried."""
        ...

    def on(self, event_name: str, callback: Callable[[Any], None]) -> None: ...

    # Point-in-time room state
    def get_users(self) -> list[dict[str, Any]]: ...

    def get_dj(self) -> dict[str, Any] | None: ...

    def get_media(self) -> dict[str, Any] | None: ...

    def get_time_elapsed(self) -> float: ...

    def get_queue(self) -> list[dict[str, Any]]: ...

    # Actions
    def send_chat(self, message: str) -> None: ...

    def moderate_skip(self, callback: ActionCallback) -> bool: ...

    def grab(self, callback: ActionCallback) -> bool: ...

    def woot(self, callback: ActionCallback) -> bool: ...

    def meh(self, callback: ActionCallback) -> bool: ...

    def join_booth(self, callback: ActionCallback) -> bool: ...

    def leave_booth(self, callback: ActionCallback) -> bool: ...

    def moderate_move_dj(self, user_id: str, position: int, callback: ActionCallback) -> bool: ...
