"""Translation from room-service payloads to the internal event model.

The room service's event schema changes often and has plenty of quirks, so
everything that knows about its field names lives here. Every ``translate_*``
event function returns exactly one event object, or ``None`` when the payload
is incomplete; callers drop ``None`` silently.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from dubbot.models import (
    AdvanceEvent,
    ChatDeleteEvent,
    ChatEvent,
    ChatType,
    Event,
    GrabEvent,
    Media,
    ModBanEvent,
    ModMuteEvent,
    ModSkipEvent,
    PreviousPlay,
    RoomEvent,
    Score,
    SkipEvent,
    User,
    UserEvent,
    UserRole,
    VoteEvent,
    WaitListEntry,
    WaitListUpdateEvent,
)

LOGGER = logging.getLogger("Translator")

Payload = dict[str, Any]

# Role identifiers as issued by the room service
_ROLE_IDS: dict[str, UserRole] = {
    "5615fa9ae596154a5c000000": UserRole.COOWNER,
    "5615fd84e596150061000003": UserRole.MANAGER,
    "52d1ce33c38a06510c000001": UserRole.MOD,
    "5615fe1ee596154fc2000001": UserRole.VIP,
    "5615feb8e596154fc2000002": UserRole.RESIDENT_DJ,
    "564435423f6ba174d2000001": UserRole.DJ,
}

_VOTE_TYPES = {"updub": 1, "downdub": -1}

_EMOTE_PREFIX = "/me "


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _coerce_number(value: Any) -> float | None:
    """Numbers arrive as either strings or numbers; ``None`` if neither."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return int(number) if number.is_integer() else number


# ----------------------------------------------------------------------
# Object translation
# ----------------------------------------------------------------------


def translate_date_timestamp(timestamp: Any) -> datetime:
    """Convert a millisecond UNIX timestamp, falling back to now."""
    millis = _coerce_number(timestamp)
    if not millis:
        LOGGER.warning(f"Received an invalid timestamp: {timestamp!r}")
        return _now()

    try:
        return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        LOGGER.warning(f"Received an out of range timestamp: {timestamp!r}")
        return _now()


def translate_role(role: Any) -> UserRole:
    """Map a role identifier to a ``UserRole``. Unknown identifiers are ``NONE``."""
    if not isinstance(role, str):
        return UserRole.NONE
    return _ROLE_IDS.get(role, UserRole.NONE)


def translate_media_object(media: Payload | None) -> Media | None:
    if not media:
        return None

    return Media(
        content_id=media["fkid"],  # the YouTube or SoundCloud ID
        duration_in_seconds=(_coerce_number(media.get("songLength")) or 0) / 1000,
        full_title=media.get("name", ""),
    )


def translate_score_object(score: Payload | None) -> Score | None:
    if not score:
        return None

    return Score(
        grabs=score.get("grabs", 0),
        mehs=score.get("downdubs", 0),
        woots=score.get("updubs", 0),
    )


def translate_user_object(user: Payload | None) -> User | None:
    if not user:
        return None

    return User(
        user_id=user["id"],
        username=user.get("username", ""),
        role=translate_role(user.get("role")),
        join_date=translate_date_timestamp(user.get("created")),
        number_of_songs_played=user.get("playedCount"),
        dubs=user.get("dubs"),
    )


def translate_chat_type(event: Payload) -> ChatType:
    message: str = event["message"]

    if message.startswith("!"):
        return ChatType.COMMAND

    # "/me" on its own is a plain message
    if len(message) > len(_EMOTE_PREFIX) and message.startswith(_EMOTE_PREFIX):
        return ChatType.EMOTE

    if event.get("type") != "chat-message":
        LOGGER.warning(
            f"Unable to identify chat type {event.get('type')!r}. "
            f"Defaulting to {ChatType.MESSAGE.value}."
        )
    return ChatType.MESSAGE


# ----------------------------------------------------------------------
# Event translation
# ----------------------------------------------------------------------


def translate_advance_event(event: Payload) -> AdvanceEvent | None:
    if not event.get("user") or not event.get("media"):
        LOGGER.warning("Advance event is missing required fields; dropping it")
        return None

    start_time = _coerce_number(event.get("startTime"))
    local_start_date = _now()

    advance = AdvanceEvent(
        incoming_dj=translate_user_object(event["user"]),
        media=translate_media_object(event["media"]),
        # The service clock is only trusted when it actually sent one
        start_date=(
            translate_date_timestamp(start_time)
            if start_time and start_time > 0
            else local_start_date
        ),
        local_start_date=local_start_date,
    )

    last_play = event.get("lastPlay")
    if last_play and last_play.get("user") and last_play.get("media") and last_play.get("score"):
        advance.previous_play = PreviousPlay(
            dj=translate_user_object(last_play["user"]),
            media=translate_media_object(last_play["media"]),
            score=translate_score_object(last_play["score"]),
        )

    return advance


def translate_chat_event(event: Payload) -> ChatEvent:
    # Some chat payloads only carry the raw user record
    user = event.get("user")
    if user:
        user_id, username, role = user["id"], user.get("username", ""), user.get("role")
    else:
        raw_user = event["raw"]["user"]
        user_id, username, role = (
            raw_user["_id"],
            raw_user.get("username", ""),
            raw_user.get("roleid"),
        )

    chat_type = translate_chat_type(event)
    message: str = event["message"]

    chat = ChatEvent(
        chat_id=event["id"],
        message=message,
        type=chat_type,
        user_id=user_id,
        username=username,
        user_role=translate_role(role),
    )

    if chat_type is ChatType.EMOTE:
        chat.message = message[len(_EMOTE_PREFIX) :]
    elif chat_type is ChatType.COMMAND:
        words = message.split()
        chat.command = words[0][1:]
        chat.args = words[1:]

    return chat


def translate_chat_delete_event(event: Payload) -> ChatDeleteEvent:
    """Only the named message; the same-author cascade is the state tracker's job."""
    return ChatDeleteEvent(
        chat_id=event["id"],
        deleter_id=event["user"]["id"],
        deleter_username=event["user"].get("username", ""),
    )


def translate_grab_event(event: Any) -> GrabEvent:
    # The payload is the grabbing user's ID
    return GrabEvent(user_id=event)


def translate_vote_event(event: Payload) -> VoteEvent | None:
    vote = _VOTE_TYPES.get(event.get("dubtype"))
    if vote is None:
        LOGGER.warning(f"Received unknown dubtype {event.get('dubtype')!r}")
        return None

    user = translate_user_object(event.get("user"))
    if user is None:
        return None
    return VoteEvent(user=user, vote=vote)


def translate_wait_list_update_event(event: Payload) -> WaitListUpdateEvent | None:
    queue = event.get("queue")
    if queue is None:
        return None

    return WaitListUpdateEvent(
        queue=[
            WaitListEntry(
                media=translate_media_object(entry.get("media")),
                user=translate_user_object(entry.get("user")),
            )
            for entry in queue
        ]
    )


def translate_skip_event(event: Payload) -> SkipEvent:
    return SkipEvent(user_id=event["user"]["id"], username=event["user"].get("username", ""))


def translate_mod_skip_event(event: Payload) -> ModSkipEvent:
    return ModSkipEvent(mod_username=event["m"], mod_user_id=event["mi"])


def translate_mod_ban_event(event: Payload) -> ModBanEvent:
    return ModBanEvent(
        banned_user=translate_user_object(event.get("user")),
        duration_in_minutes=_coerce_number(event.get("time")),
        mod=translate_user_object(event.get("mod")),
    )


def translate_mod_mute_event(event: Payload) -> ModMuteEvent:
    return ModMuteEvent(
        muted_user=translate_user_object(event.get("user")),
        mod=translate_user_object(event.get("mod")),
    )


def translate_user_event(event: Payload) -> UserEvent | None:
    user = translate_user_object(event.get("user"))
    if user is None:
        return None
    return UserEvent(user=user)


# Room service event name -> (internal event, translator)
EVENT_TRANSLATORS: dict[str, tuple[Event, Callable[[Any], RoomEvent | None]]] = {
    "room_playlist-update": (Event.ADVANCE, translate_advance_event),
    "chat-message": (Event.CHAT, translate_chat_event),
    "delete-chat-message": (Event.CHAT_DELETE, translate_chat_delete_event),
    "room_playlist-queue-update-grabs": (Event.GRAB, translate_grab_event),
    "room_playlist-dub": (Event.VOTE, translate_vote_event),
    "room_playlist-queue-update-dub": (Event.WAIT_LIST_UPDATE, translate_wait_list_update_event),
    "chat-skip": (Event.SKIP, translate_skip_event),
    "modSkip": (Event.MODERATE_SKIP, translate_mod_skip_event),
    "user-ban": (Event.MODERATE_BAN, translate_mod_ban_event),
    "user-mute": (Event.MODERATE_MUTE, translate_mod_mute_event),
    "user-unmute": (Event.USER_UNMUTE, translate_mod_mute_event),
    "user-join": (Event.USER_JOIN, translate_user_event),
    "user-leave": (Event.USER_LEAVE, translate_user_event),
    "user_update": (Event.USER_UPDATE, translate_user_event),
}
