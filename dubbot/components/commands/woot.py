"""Make the bot woot the current media.

Usage: !woot
"""

import logging

from dubbot.core import BotContext
from dubbot.models import ChatEvent

LOGGER = logging.getLogger("WootCommand")

triggers = ["woot", "dubup"]


def handler(event: ChatEvent, context: BotContext) -> None:
    def on_result(wooted: bool) -> None:
        if not wooted:
            context.bot.send_chat("@{} there's nothing to woot right now", event.username)

    LOGGER.info(f"{event.username} asked the bot to woot")
    context.bot.woot_song(on_result)
