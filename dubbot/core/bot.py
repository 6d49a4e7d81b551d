"""Bot class: login, connection, event fan-out and room actions.

The Bot insulates everything else from the room service client library: raw
payloads go through the translator, and listeners only ever see internal
events. Outbound actions are best effort and report through callbacks.
"""

from __future__ import annotations

import asyncio
import dataclasses
import functools
import json
import logging
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from typing import Any

from dubbot.models import Event, RoomEvent, UserRole

from .client import RoomClient
from .config import BotSettings
from .context import BotContext
from .exceptions import LoginError, RoomConnectionError
from .translator import EVENT_TRANSLATORS

LOGGER: logging.Logger = logging.getLogger("Bot")

PLACEHOLDER = "{}"

ActionResultCallback = Callable[[bool], None]

# Errors a translator raises when a payload is missing fields or has the wrong shape
_MALFORMED_PAYLOAD_ERRORS = (KeyError, IndexError, TypeError, AttributeError, ValueError)


def _json_default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, UserRole):
        return value.role_name
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    return str(value)


def _stringify(value: Any) -> str:
    if isinstance(value, Enum):
        value = _json_default(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    # true, false and null are spelled the way JSON arguments are
    return json.dumps(value, separators=(",", ":"), default=_json_default)


def replace_placeholders(template: str, *args: Any) -> str:
    """Replace each ``{}`` in ``template`` with the matching argument, in order.

    Non-primitive arguments are serialized as JSON. Substituted text is not
    scanned again, so passing ``"{}"`` emits a literal placeholder. Placeholders
    without a matching argument are left as they are.

        replace_placeholders("User {} has received {} woots", "coolguy", 5)
        -> "User coolguy has received 5 woots"
    """
    parts: list[str] = []
    position = 0

    for arg in args:
        index = template.find(PLACEHOLDER, position)
        if index < 0:
            break
        parts.append(template[position:index])
        parts.append(_stringify(arg))
        position = index + len(PLACEHOLDER)

    parts.append(template[position:])
    return "".join(parts)


@dataclasses.dataclass
class Listener:
    callback: Callable[..., Any]
    context: Any = None

    def invoke(self, event: RoomEvent, bot_context: BotContext) -> None:
        # An explicit context is passed the way a bound method receives self
        if self.context is not None:
            self.callback(self.context, event, bot_context)
        else:
            self.callback(event, bot_context)


class Bot:
    def __init__(self, client: RoomClient, settings: BotSettings) -> None:
        self.client = client
        self.settings = settings
        self.room_name: str | None = None
        self.context = BotContext(settings=settings, bot=self)
        self._listeners: dict[Event, list[Listener]] = {event: [] for event in Event}
        self._hooked = False

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    async def login(self) -> None:
        LOGGER.info(f"Attempting to log in with email {self.settings.bot_email}")

        try:
            await self.client.login(self.settings.bot_email, self.settings.bot_password)
        except Exception as e:
            raise LoginError(f"Error occurred when logging in: {e}") from e

        LOGGER.info("Logged in successfully")
        self._hook_client_events()

    def _hook_client_events(self) -> None:
        if self._hooked:
            return

        self.client.on("error", self._on_client_error)
        self.client.on("disconnected", self._on_disconnected)

        if self.settings.log_all_events:
            LOGGER.info("Logging of all events is enabled. Setting up logging event handlers.")
            for vendor_event in EVENT_TRANSLATORS:
                self.client.on(vendor_event, functools.partial(self._log_payload, vendor_event))

        for vendor_event, (internal_event, translate) in EVENT_TRANSLATORS.items():
            self.client.on(
                vendor_event,
                functools.partial(self._translate_and_dispatch, vendor_event, internal_event, translate),
            )

        self._hooked = True

    def connect(self, room_name: str | None = None) -> None:
        """Ask the client to connect. Completion is signalled by ``wait_until_ready``."""
        self.room_name = room_name or self.settings.room_name
        LOGGER.info(f"Attempting to connect to room {self.room_name}")
        self.client.connect(self.room_name)

    async def wait_until_ready(self, timeout: float | None = None) -> None:
        timeout = timeout if timeout is not None else self.settings.ready_timeout
        try:
            await asyncio.wait_for(self.client.wait_until_ready(), timeout=timeout)
        except asyncio.TimeoutError as e:
            raise RoomConnectionError(
                f"Connection to room {self.room_name} was not ready after {timeout}s"
            ) from e
        LOGGER.info(f"Connected to room {self.room_name}")

    # ------------------------------------------------------------------
    # Client events
    # ------------------------------------------------------------------

    def _on_client_error(self, error: Any) -> None:
        # Swallowed so one bad frame does not take the bot down
        LOGGER.error(f"Unhandled client error: {error}")

    def _on_disconnected(self, room_name: str | None = None) -> None:
        room_name = room_name or self.room_name
        LOGGER.warning(f"Disconnected from room {room_name}. Reconnecting..")
        self.connect(room_name)

    def _log_payload(self, vendor_event: str, payload: Any) -> None:
        LOGGER.info(f"event '{vendor_event}' has JSON payload: {_stringify(payload)}")

    def _translate_and_dispatch(
        self,
        vendor_event: str,
        internal_event: Event,
        translate: Callable[[Any], RoomEvent | None],
        payload: Any,
    ) -> None:
        try:
            event = translate(payload)
        except _MALFORMED_PAYLOAD_ERRORS as e:
            LOGGER.warning(f"Dropping malformed '{vendor_event}' payload: {type(e).__name__}: {e}")
            return

        if event is None:
            return

        event.event_name = internal_event
        self.dispatch(event)

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def on(self, event_name: Event | str, callback: Callable[..., Any], context: Any = None) -> bool:
        """Subscribe ``callback`` to an internal event.

        Listeners run synchronously in registration order. Unknown event names
        are logged and ignored; the return value says whether it registered.
        """
        try:
            event = Event(event_name)
        except ValueError:
            LOGGER.error(
                f"Received a request to hook into an unknown event called '{event_name}'. "
                "Request will be ignored."
            )
            return False

        self._listeners[event].append(Listener(callback=callback, context=context))
        return True

    def listener_count(self, event_name: Event | str) -> int:
        try:
            return len(self._listeners[Event(event_name)])
        except ValueError:
            return 0

    def dispatch(self, event: RoomEvent) -> None:
        """Deliver ``event`` to every listener of ``event.event_name``.

        A listener that raises is logged; the remaining listeners still run.
        """
        if event.event_name is None:
            LOGGER.error(f"Cannot dispatch {type(event).__name__} without an event name")
            return

        for listener in list(self._listeners[event.event_name]):
            try:
                listener.invoke(event, self.context)
            except Exception:
                LOGGER.exception(
                    f"Listener {getattr(listener.callback, '__qualname__', listener.callback)!s} "
                    f"failed on '{event.event_name.value}'"
                )

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _queue_action(
        self,
        action: str,
        enqueue: Callable[[Callable[..., None]], bool],
        callback: ActionResultCallback | None,
    ) -> bool:
        def on_complete(*_args: Any) -> None:
            if callback:
                callback(True)

        queued = enqueue(on_complete)

        # If queuing failed the client never calls back, so report it now
        if not queued:
            LOGGER.debug(f"Could not queue action: {action}")
            if callback:
                callback(False)

        return bool(queued)

    def force_skip(self, callback: ActionResultCallback | None = None) -> bool:
        """Skip the current media. Needs a bouncer-level role and a current DJ."""
        return self._queue_action("skip", self.client.moderate_skip, callback)

    def grab_song(self, callback: ActionResultCallback | None = None) -> bool:
        return self._queue_action("grab", self.client.grab, callback)

    def woot_song(self, callback: ActionResultCallback | None = None) -> bool:
        return self._queue_action("woot", self.client.woot, callback)

    def meh_song(self, callback: ActionResultCallback | None = None) -> bool:
        return self._queue_action("meh", self.client.meh, callback)

    def join_wait_list(self, callback: ActionResultCallback | None = None) -> bool:
        """Fails when already in the wait list, it is locked, or the bot has no playlist."""
        return self._queue_action("join wait list", self.client.join_booth, callback)

    def leave_wait_list(self, callback: ActionResultCallback | None = None) -> bool:
        return self._queue_action("leave wait list", self.client.leave_booth, callback)

    def move_dj_in_wait_list(
        self, user_id: str, position: int, callback: ActionResultCallback | None = None
    ) -> bool:
        """Fails when the user is not in the wait list or already at ``position``."""
        return self._queue_action(
            f"move {user_id} to {position}",
            functools.partial(self.client.moderate_move_dj, user_id, position),
            callback,
        )

    def send_chat(self, message: str, *args: Any) -> None:
        """Send a chat message, filling ``{}`` placeholders from ``args``."""
        message = replace_placeholders(message, *args)
        LOGGER.debug(f"Sending chat: {message}")
        self.client.send_chat(message)
