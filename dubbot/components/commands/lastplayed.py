"""Say when the current media was last played in this room.

Usage: !lastplayed
"""

from datetime import datetime, timezone

from dubbot.core import BotContext
from dubbot.models import ChatEvent

triggers = ["lastplayed"]


def _format_ago(seconds: float) -> str:
    minutes = int(seconds // 60)
    if minutes < 60:
        return f"{minutes} minutes"
    hours, minutes = divmod(minutes, 60)
    return f"{hours} hours {minutes} minutes"


def handler(event: ChatEvent, context: BotContext) -> None:
    state = context.state
    current = state.current_play if state else None
    if current is None:
        context.bot.send_chat("Nothing is playing right now")
        return

    # The head of the result is the current play itself
    earlier = state.find_plays_for_content_id(current.media.content_id)[1:]
    if not earlier:
        context.bot.send_chat("{} hasn't been played recently", current.media.full_title)
        return

    last = earlier[0]
    ago = (datetime.now(timezone.utc) - last.start_date).total_seconds()
    context.bot.send_chat(
        "{} was last played {} ago by {}",
        current.media.full_title,
        _format_ago(ago),
        last.user.username,
    )
