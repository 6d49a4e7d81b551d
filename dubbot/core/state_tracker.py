"""Room state tracking.

The tracker owns the ``RoomState`` snapshot. It must subscribe to the bot
before any other listener so that every later listener sees state that
already reflects the event being delivered. Everything else gets read access
through the properties and query helpers below.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from dubbot.models import (
    AdvanceEvent,
    ChatDeleteEvent,
    ChatEvent,
    ChatMessage,
    Event,
    GrabEvent,
    ModMuteEvent,
    Play,
    RoomState,
    User,
    UserEvent,
    VoteEvent,
    WaitListEntry,
    WaitListUpdateEvent,
)

from . import translator

if TYPE_CHECKING:
    from dubbot.core.bot import Bot

LOGGER = logging.getLogger("StateTracker")


class StateTracker:
    def __init__(self, bot: Bot, *, max_chat_history: int, max_play_history: int) -> None:
        self.bot = bot
        self._state = RoomState(
            max_chat_history=max_chat_history,
            max_play_history=max_play_history,
        )
        self._initialized = False

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def init(self) -> None:
        """Subscribe to room events and populate the snapshot from the room.

        Call this before any other listener is registered with the bot.
        """
        if self._initialized:
            LOGGER.warning("State tracker is already initialized; ignoring")
            return

        self.bot.on(Event.ADVANCE, self.on_advance)
        self.bot.on(Event.CHAT, self.on_chat)
        self.bot.on(Event.CHAT_DELETE, self.on_chat_delete)
        self.bot.on(Event.GRAB, self.on_grab)
        self.bot.on(Event.VOTE, self.on_vote)
        self.bot.on(Event.WAIT_LIST_UPDATE, self.on_wait_list_update)
        self.bot.on(Event.USER_JOIN, self.on_user_join)
        self.bot.on(Event.USER_LEAVE, self.on_user_leave)
        self.bot.on(Event.USER_UPDATE, self.on_user_update)
        self.bot.on(Event.MODERATE_MUTE, self.on_mute)
        self.bot.on(Event.USER_UNMUTE, self.on_unmute)

        self._populate()
        self._initialized = True

    def _populate(self) -> None:
        client = self.bot.client
        raw_users = client.get_users()

        for raw_user in raw_users:
            user = translator.translate_user_object(raw_user)
            if user and not self.find_user_in_room_by_id(user.user_id):
                self._state.users_in_room.append(user)

        self._state.wait_list = [
            WaitListEntry(
                media=translator.translate_media_object(entry.get("media")),
                user=translator.translate_user_object(entry.get("user")),
            )
            for entry in client.get_queue() or []
        ]

        # The advance event for the current media fired before we subscribed,
        # so rebuild the current play from what the room reports now.
        media = translator.translate_media_object(client.get_media())
        dj = translator.translate_user_object(client.get_dj())
        if media and dj:
            elapsed = client.get_time_elapsed() or 0
            play = Play(
                media=media,
                start_date=datetime.now(timezone.utc) - timedelta(seconds=elapsed),
                user=dj,
            )

            for raw_user in raw_users:
                user_id = raw_user.get("id")
                if raw_user.get("grab"):
                    play.votes.grabs.append(user_id)
                if raw_user.get("vote") == 1:
                    play.votes.woots.append(user_id)
                elif raw_user.get("vote") == -1:
                    play.votes.mehs.append(user_id)

            self._state.play_history.appendleft(play)

        LOGGER.info(
            f"Room state initialized: {len(self._state.users_in_room)} users, "
            f"{len(self._state.wait_list)} in wait list, "
            f"current media: {media.full_title if media else None}"
        )

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def users_in_room(self) -> tuple[User, ...]:
        return tuple(self._state.users_in_room)

    @property
    def chat_history(self) -> tuple[ChatMessage, ...]:
        """Most recent first."""
        return tuple(self._state.chat_history)

    @property
    def play_history(self) -> tuple[Play, ...]:
        """Most recent first; the head is the current play."""
        return tuple(self._state.play_history)

    @property
    def wait_list(self) -> tuple[WaitListEntry, ...]:
        return tuple(self._state.wait_list)

    @property
    def current_play(self) -> Play | None:
        return self._state.play_history[0] if self._state.play_history else None

    def is_user_muted(self, user_id: str) -> bool:
        return user_id in self._state.muted_user_ids

    def find_user_in_room_by_id(self, user_id: str) -> User | None:
        for user in self._state.users_in_room:
            if user.user_id == user_id:
                return user
        return None

    def find_plays_for_content_id(self, content_id: str) -> list[Play]:
        return [play for play in self._state.play_history if play.media.content_id == content_id]

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def on_advance(self, event: AdvanceEvent, context) -> None:
        play = Play(media=event.media, start_date=event.start_date, user=event.incoming_dj)
        # appendleft on a bounded deque drops the oldest play
        self._state.play_history.appendleft(play)

    def on_chat(self, event: ChatEvent, context) -> None:
        self._state.chat_history.appendleft(
            ChatMessage(
                chat_id=event.chat_id,
                message=event.message,
                timestamp=datetime.now(timezone.utc),
                type=event.type,
                user_id=event.user_id,
                username=event.username,
                was_user_muted=self.is_user_muted(event.user_id),
            )
        )

    def on_chat_delete(self, event: ChatDeleteEvent, context) -> None:
        """Mark the named message and the cascade the room service also deletes.

        The service only names one message, but it removes that message and
        every following message from the same author up to the first message
        from someone else. History is most-recent-first, so "following" means
        walking towards the front of the deque.
        """
        history = self._state.chat_history
        deletion_time = datetime.now(timezone.utc)
        deleted: list[ChatMessage] = []

        index = next((i for i, chat in enumerate(history) if chat.chat_id == event.chat_id), None)

        if index is None:
            LOGGER.debug(f"Deleted message {event.chat_id} is not in chat history")
        elif history[index].is_deleted:
            # Keep the first deletion's attribution
            LOGGER.debug(f"Message {event.chat_id} was already deleted")
        else:
            author_id = history[index].user_id
            for i in range(index, -1, -1):
                chat = history[i]
                if i != index and (chat.user_id != author_id or chat.is_deleted):
                    break
                chat.is_deleted = True
                chat.deleted_by_user_id = event.deleter_id
                chat.deletion_time = deletion_time
                deleted.append(chat)

        event.deleted_messages = deleted

    def on_grab(self, event: GrabEvent, context) -> None:
        play = self.current_play
        if play is None:
            LOGGER.warning(f"Grab from {event.user_id} with no current play; ignoring")
            return

        if event.user_id not in play.votes.grabs:
            play.votes.grabs.append(event.user_id)

    def on_vote(self, event: VoteEvent, context) -> None:
        play = self.current_play
        user_id = event.user.user_id
        if play is None:
            LOGGER.warning(f"Vote from {user_id} with no current play; ignoring")
            return

        # Users can change their vote; keep them in at most one list
        votes = play.votes
        if user_id in votes.woots:
            votes.woots.remove(user_id)
        if user_id in votes.mehs:
            votes.mehs.remove(user_id)

        if event.vote == 1:
            votes.woots.append(user_id)
        elif event.vote == -1:
            votes.mehs.append(user_id)

    def on_wait_list_update(self, event: WaitListUpdateEvent, context) -> None:
        self._state.wait_list = list(event.queue)

    def on_user_join(self, event: UserEvent, context) -> None:
        if self.find_user_in_room_by_id(event.user.user_id):
            LOGGER.warning(
                "Received a user join event for a user who was already recorded as present "
                f"(user_id = {event.user.user_id}, username = {event.user.username}). "
                "This may indicate a bug in the state tracker."
            )
            return

        self._state.users_in_room.append(event.user)

    def on_user_leave(self, event: UserEvent, context) -> None:
        users = self._state.users_in_room
        self._state.users_in_room = [u for u in users if u.user_id != event.user.user_id]

    def on_user_update(self, event: UserEvent, context) -> None:
        users = self._state.users_in_room
        for i, user in enumerate(users):
            if user.user_id == event.user.user_id:
                users[i] = event.user
                return

    def on_mute(self, event: ModMuteEvent, context) -> None:
        if event.muted_user:
            self._state.muted_user_ids.add(event.muted_user.user_id)

    def on_unmute(self, event: ModMuteEvent, context) -> None:
        if event.muted_user:
            self._state.muted_user_ids.discard(event.muted_user.user_id)
