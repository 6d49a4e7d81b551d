"""Data models for the room snapshot and translated events."""

from .events import (
    AdvanceEvent,
    ChatDeleteEvent,
    ChatEvent,
    GrabEvent,
    ModBanEvent,
    ModMuteEvent,
    ModSkipEvent,
    PreviousPlay,
    RoomEvent,
    Score,
    SkipEvent,
    UserEvent,
    VoteEvent,
    WaitListUpdateEvent,
)
from .room import ChatMessage, Media, Play, RoomState, User, Votes, WaitListEntry
from .types import ChatType, Event, UserRole

__all__ = [
    # Types
    "ChatType",
    "Event",
    "UserRole",
    # Room
    "ChatMessage",
    "Media",
    "Play",
    "RoomState",
    "User",
    "Votes",
    "WaitListEntry",
    # Events
    "AdvanceEvent",
    "ChatDeleteEvent",
    "ChatEvent",
    "GrabEvent",
    "ModBanEvent",
    "ModMuteEvent",
    "ModSkipEvent",
    "PreviousPlay",
    "RoomEvent",
    "Score",
    "SkipEvent",
    "UserEvent",
    "VoteEvent",
    "WaitListUpdateEvent",
]
