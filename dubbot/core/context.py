"""Shared context handed to every listener and command handler."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .bot import Bot
    from .commands import Command
    from .config import BotSettings
    from .state_tracker import StateTracker


@dataclass
class BotContext:
    """What handlers can reach: settings, the bot's actions and read access to room state.

    ``state`` is set once the state tracker has initialized. Handlers must not
    mutate room state directly.
    """

    settings: BotSettings
    bot: Bot
    state: StateTracker | None = None
    commands: list[Command] = field(default_factory=list)
