"""Data models for the tracked room: media, users, plays, chat and wait list."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime

from .types import ChatType, UserRole


@dataclass
class Media:
    """A playable track. ``content_id`` is the catalog key and repeats across replays."""

    content_id: str
    duration_in_seconds: float
    full_title: str


@dataclass
class User:
    """Room user record."""

    user_id: str
    username: str
    role: UserRole = UserRole.NONE
    join_date: datetime | None = None
    number_of_songs_played: int | None = None
    dubs: int | None = None


@dataclass
class Votes:
    """User IDs that reacted to a play. A user is in at most one of woots/mehs."""

    grabs: list[str] = field(default_factory=list)
    mehs: list[str] = field(default_factory=list)
    woots: list[str] = field(default_factory=list)


@dataclass
class Play:
    """One entry of the play history."""

    media: Media
    start_date: datetime
    user: User
    votes: Votes = field(default_factory=Votes)


@dataclass
class ChatMessage:
    """Stored chat message. Deletion marks the record, it is never removed."""

    chat_id: str
    message: str
    timestamp: datetime
    type: ChatType
    user_id: str
    username: str
    was_user_muted: bool = False
    is_deleted: bool = False
    deleted_by_user_id: str | None = None
    deletion_time: datetime | None = None


@dataclass
class WaitListEntry:
    media: Media | None
    user: User | None


@dataclass
class RoomState:
    """In-memory room snapshot. Histories are most-recent-first and bounded."""

    max_chat_history: int
    max_play_history: int
    users_in_room: list[User] = field(default_factory=list)
    wait_list: list[WaitListEntry] = field(default_factory=list)
    muted_user_ids: set[str] = field(default_factory=set)
    chat_history: deque[ChatMessage] = field(init=False)
    play_history: deque[Play] = field(init=False)

    def __post_init__(self) -> None:
        self.chat_history = deque(maxlen=self.max_chat_history)
        self.play_history = deque(maxlen=self.max_play_history)
