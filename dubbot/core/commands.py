"""Chat command routing.

A command matches when the chat event's command token is one of its
triggers. Every matching command fires independently; commands whose
minimum role the chatter lacks get their insufficient-permissions hook
instead of their handler.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from types import ModuleType
from typing import Any

from dubbot.models import ChatEvent, UserRole

from .context import BotContext
from .exceptions import PluginError
from .guards import has_role

LOGGER = logging.getLogger("CommandRouter")

CommandHandler = Callable[[ChatEvent, BotContext], Any]


@dataclass
class Command:
    """A registered chat command."""

    name: str
    triggers: frozenset[str]
    handler: CommandHandler
    minimum_role: UserRole | None = None
    insufficient_permissions_handler: CommandHandler | None = None
    description: str = ""
    init: Callable[[BotContext], Any] | None = field(default=None, repr=False)

    @classmethod
    def from_module(cls, module: ModuleType, *, case_sensitive: bool = False) -> Command:
        """Build a command from a module exporting ``triggers`` and ``handler``.

        Optional exports: ``minimum_role``, ``insufficient_permissions_handler``
        and ``init``. Raises ``PluginError`` when the module does not fit.
        """
        name = module.__name__
        triggers = getattr(module, "triggers", None)
        handler = getattr(module, "handler", None)

        if not triggers or handler is None:
            raise PluginError("module does not export 'triggers' and 'handler'", module=name)
        if isinstance(triggers, str) or not isinstance(triggers, Iterable):
            raise PluginError("'triggers' must be a collection of strings", module=name)
        if not callable(handler):
            raise PluginError("'handler' is not callable", module=name)

        minimum_role = getattr(module, "minimum_role", None)
        if minimum_role is not None and not isinstance(minimum_role, UserRole):
            raise PluginError("'minimum_role' must be a UserRole", module=name)

        insufficient = getattr(module, "insufficient_permissions_handler", None)
        if insufficient is not None and not callable(insufficient):
            raise PluginError("'insufficient_permissions_handler' is not callable", module=name)

        init = getattr(module, "init", None)

        return cls(
            name=name,
            triggers=normalize_triggers(triggers, case_sensitive=case_sensitive),
            handler=handler,
            minimum_role=minimum_role,
            insufficient_permissions_handler=insufficient,
            description=_summary(module.__doc__),
            init=init if callable(init) else None,
        )


def _summary(doc: str | None) -> str:
    lines = (doc or "").strip().splitlines()
    return lines[0] if lines else ""


def normalize_triggers(triggers: Iterable[str], *, case_sensitive: bool) -> frozenset[str]:
    if case_sensitive:
        return frozenset(triggers)
    return frozenset(trigger.lower() for trigger in triggers)


class CommandRouter:
    """Chat listener that invokes the commands matching a chat event."""

    def __init__(self, commands: Iterable[Command] = (), *, case_sensitive: bool = False) -> None:
        self.case_sensitive = case_sensitive
        self.commands: list[Command] = list(commands)

    def add(self, command: Command) -> None:
        self.commands.append(command)

    def match(self, command_name: str) -> list[Command]:
        if not self.case_sensitive:
            command_name = command_name.lower()
        return [command for command in self.commands if command_name in command.triggers]

    def route(self, event: ChatEvent, context: BotContext) -> None:
        if not event.command:
            return

        for command in self.match(event.command):
            if not has_role(event.user_role, command.minimum_role):
                LOGGER.info(
                    f"{event.username} ({event.user_role.role_name}) lacks the role for "
                    f"!{event.command} (needs {command.minimum_role.role_name})"
                )
                if command.insufficient_permissions_handler:
                    self._invoke(command, command.insufficient_permissions_handler, event, context)
                continue

            LOGGER.debug(f"Command: !{event.command} by {event.username} -> {command.name}")
            self._invoke(command, command.handler, event, context)

    def _invoke(
        self, command: Command, handler: CommandHandler, event: ChatEvent, context: BotContext
    ) -> None:
        # One failing command must not stop the others sharing its trigger
        try:
            handler(event, context)
        except Exception:
            LOGGER.exception(f"Command {command.name} failed on !{event.command}")
