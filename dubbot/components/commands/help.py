"""List the available commands.

Usage: !help, !commands
"""

from dubbot.core import BotContext, Command
from dubbot.models import ChatEvent

triggers = ["help", "commands"]


def _label(command: Command) -> str:
    # Modules are named after their main trigger; aliases are left out
    short_name = command.name.rpartition(".")[2]
    if short_name in command.triggers:
        return short_name
    return min(command.triggers)


def handler(event: ChatEvent, context: BotContext) -> None:
    names = sorted({f"!{_label(command)}" for command in context.commands})
    context.bot.send_chat("Available commands: {}", ", ".join(names))
