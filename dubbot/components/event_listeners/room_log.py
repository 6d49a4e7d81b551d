"""Log play results and moderator chat deletions."""

import logging

from dubbot.core import BotContext
from dubbot.models import AdvanceEvent, ChatDeleteEvent, Event

LOGGER = logging.getLogger("RoomLog")


class DeletionCounter:
    def __init__(self) -> None:
        self.total = 0

    def on_chat_delete(self, event: ChatDeleteEvent, context: BotContext) -> None:
        self.total += len(event.deleted_messages)
        for message in event.deleted_messages:
            LOGGER.info(
                f"{event.deleter_username} deleted a message from {message.username}: "
                f"{message.message}"
            )


counter = DeletionCounter()


def on_advance(event: AdvanceEvent, context: BotContext) -> None:
    previous = event.previous_play
    if previous:
        LOGGER.info(
            f"{previous.dj.username} played {previous.media.full_title}: "
            f"{previous.score.woots} woots, {previous.score.mehs} mehs, {previous.score.grabs} grabs"
        )
    LOGGER.info(f"Now playing: {event.media.full_title} ({event.incoming_dj.username})")


listeners = {
    Event.ADVANCE: on_advance,
    Event.CHAT_DELETE: {"handler": DeletionCounter.on_chat_delete, "context": counter},
}
