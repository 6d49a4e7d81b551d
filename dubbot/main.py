"""Bot startup: log in, connect, initialize room state, then load plugins."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from dubbot.core import (
    Bot,
    BotContext,
    BotSettings,
    CommandRouter,
    ConfigurationError,
    HealthCheckServer,
    RoomClient,
    StateTracker,
    load_commands,
    load_event_listeners,
    setup_logging,
    validate_settings,
)
from dubbot.models import Event

LOGGER: logging.Logger = logging.getLogger("Bot")


def _create_client(settings: BotSettings) -> RoomClient:
    if settings.client_class is None:
        raise ConfigurationError("CLIENT_CLASS must name the room service client class")
    return settings.client_class()


async def start(
    settings: BotSettings | None = None,
    client: RoomClient | None = None,
    on_ready: Callable[[BotContext], Any] | None = None,
) -> BotContext:
    """Start the bot and return the context shared with every handler.

    The state tracker is subscribed and populated before any plugin is
    loaded, so plugins never observe a partially initialized room.
    """
    settings = settings or validate_settings()
    bot = Bot(client or _create_client(settings), settings)

    await bot.login()
    bot.connect(settings.room_name)
    LOGGER.info("Connect request sent. Waiting for the room connection to be ready.")
    await bot.wait_until_ready()

    tracker = StateTracker(
        bot,
        max_chat_history=settings.number_of_chat_events_to_store,
        max_play_history=settings.number_of_played_songs_to_store,
    )
    tracker.init()

    context = bot.context
    context.state = tracker

    commands = load_commands(
        context,
        directory=settings.commands_dir,
        module_names=settings.command_modules,
        case_sensitive=settings.are_commands_case_sensitive,
    )
    context.commands.extend(commands)

    load_event_listeners(
        context,
        directory=settings.event_listeners_dir,
        module_names=settings.event_listener_modules,
    )

    router = CommandRouter(commands, case_sensitive=settings.are_commands_case_sensitive)
    bot.on(Event.CHAT, router.route)

    LOGGER.info(f"Bot ready in room {bot.room_name} with {len(commands)} commands")

    if on_ready:
        on_ready(context)

    return context


async def run(settings: BotSettings) -> None:
    context = await start(settings)

    health_server: HealthCheckServer | None = None
    if settings.health_port:
        health_server = HealthCheckServer(context, port=settings.health_port)
        await health_server.start()

    try:
        # Everything else happens in client callbacks
        await asyncio.Event().wait()
    finally:
        if health_server:
            await health_server.stop()


def main() -> None:
    setup_logging()
    settings = validate_settings()
    setup_logging(settings.log_level)

    try:
        asyncio.run(run(settings))
    except KeyboardInterrupt:
        LOGGER.warning("Shutting down due to KeyboardInterrupt...")


if __name__ == "__main__":
    main()
