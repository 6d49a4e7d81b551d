"""Translated event payloads delivered to listeners.

Each class is produced by one function in ``dubbot.core.translator``. The
dispatcher stamps ``event_name`` before fan-out.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .room import ChatMessage, Media, User, WaitListEntry
from .types import ChatType, Event, UserRole


@dataclass
class RoomEvent:
    event_name: Event | None = field(default=None, kw_only=True)


@dataclass
class Score:
    grabs: int
    mehs: int
    woots: int


@dataclass
class PreviousPlay:
    dj: User
    media: Media
    score: Score


@dataclass
class AdvanceEvent(RoomEvent):
    incoming_dj: User  # the user who is DJing following this event
    media: Media
    start_date: datetime  # according to the room service, when trusted
    local_start_date: datetime  # according to this machine
    previous_play: PreviousPlay | None = None


@dataclass
class ChatEvent(RoomEvent):
    chat_id: str
    message: str
    type: ChatType
    user_id: str
    username: str
    user_role: UserRole
    command: str | None = None
    args: list[str] = field(default_factory=list)


@dataclass
class ChatDeleteEvent(RoomEvent):
    chat_id: str
    deleter_id: str
    deleter_username: str
    # Filled in by the state tracker: the named message plus the cascade.
    deleted_messages: list[ChatMessage] = field(default_factory=list)


@dataclass
class GrabEvent(RoomEvent):
    user_id: str


@dataclass
class VoteEvent(RoomEvent):
    user: User
    vote: int  # +1 woot, -1 meh


@dataclass
class WaitListUpdateEvent(RoomEvent):
    queue: list[WaitListEntry]


@dataclass
class SkipEvent(RoomEvent):
    user_id: str
    username: str


@dataclass
class ModSkipEvent(RoomEvent):
    mod_username: str
    mod_user_id: str


@dataclass
class ModBanEvent(RoomEvent):
    banned_user: User | None
    duration_in_minutes: float | None
    mod: User | None


@dataclass
class ModMuteEvent(RoomEvent):
    muted_user: User | None
    mod: User | None


@dataclass
class UserEvent(RoomEvent):
    """Join, leave and update all carry the affected user."""

    user: User
