"""Skip the current DJ.

Usage: !skip [reason]
"""

from dubbot.core import BotContext
from dubbot.models import ChatEvent, UserRole

triggers = ["skip"]
minimum_role = UserRole.BOUNCER


def handler(event: ChatEvent, context: BotContext) -> None:
    reason = " ".join(event.args)

    def on_result(skipped: bool) -> None:
        if not skipped:
            context.bot.send_chat("@{} nothing was skipped", event.username)
        elif reason:
            context.bot.send_chat("Skipped by {}: {}", event.username, reason)

    context.bot.force_skip(on_result)


def insufficient_permissions_handler(event: ChatEvent, context: BotContext) -> None:
    context.bot.send_chat(
        "@{} you need to be a {} or above to skip", event.username, minimum_role.role_name
    )
