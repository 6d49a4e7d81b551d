"""Core modules for the room bot."""

from .bot import Bot, replace_placeholders
from .client import RoomClient
from .commands import Command, CommandRouter
from .config import (
    COMMANDS_DIR,
    COMPONENTS_DIR,
    EVENT_LISTENERS_DIR,
    BotSettings,
    get_settings,
    validate_settings,
)
from .context import BotContext
from .exceptions import (
    ConfigurationError,
    DubBotError,
    LoginError,
    PluginError,
    RoomConnectionError,
)
from .guards import has_role
from .health_server import HealthCheckServer
from .logging import setup_logging
from .plugins import load_commands, load_event_listeners
from .state_tracker import StateTracker

__all__ = [
    # Settings
    "BotSettings",
    "get_settings",
    "validate_settings",
    # Path Constants
    "COMPONENTS_DIR",
    "COMMANDS_DIR",
    "EVENT_LISTENERS_DIR",
    # Setup functions
    "setup_logging",
    # Bot
    "Bot",
    "BotContext",
    "RoomClient",
    "StateTracker",
    "replace_placeholders",
    # Commands and plugins
    "Command",
    "CommandRouter",
    "has_role",
    "load_commands",
    "load_event_listeners",
    # Services
    "HealthCheckServer",
    # Errors
    "ConfigurationError",
    "DubBotError",
    "LoginError",
    "PluginError",
    "RoomConnectionError",
]
