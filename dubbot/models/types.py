"""Enumerations shared by the translator, the state tracker and plugins."""

from __future__ import annotations

from enum import Enum


class Event(str, Enum):
    """Internal event names. Listeners can only subscribe to these."""

    ADVANCE = "advance"  # the next media item starts playing
    CHAT = "chat-message"  # someone sends a chat message
    CHAT_DELETE = "delete-chat-message"  # a mod deletes a chat message
    GRAB = "grab"  # someone grabs the current media
    VOTE = "vote"  # someone woots or mehs
    WAIT_LIST_UPDATE = "wait-list-update"  # the wait list changes
    SKIP = "skip"  # the current DJ skips their own media
    MODERATE_SKIP = "mod-skip"  # a mod skips the current DJ
    MODERATE_BAN = "user-ban"  # a mod bans a user from the room
    MODERATE_MUTE = "user-mute"  # a mod mutes a user
    USER_UNMUTE = "user-unmute"  # a mod unmutes a user
    USER_JOIN = "user-join"
    USER_LEAVE = "user-leave"
    USER_UPDATE = "user-update"  # name, avatar, role etc. changed


class ChatType(str, Enum):
    COMMAND = "command"
    EMOTE = "emote"
    MESSAGE = "message"


class UserRole(Enum):
    """Room roles. Only ``level`` matters for permission checks."""

    NONE = ("none", 0)
    RESIDENT_DJ = ("residentDj", 1)
    BOUNCER = ("bouncer", 2)
    DJ = ("dj", 2)
    VIP = ("vip", 2)
    MANAGER = ("manager", 3)
    MOD = ("mod", 3)
    COHOST = ("cohost", 4)
    COOWNER = ("coowner", 4)
    HOST = ("host", 5)
    OWNER = ("owner", 5)

    def __init__(self, role_name: str, level: int) -> None:
        self.role_name = role_name
        self.level = level

    def at_least(self, other: UserRole) -> bool:
        return self.level >= other.level
