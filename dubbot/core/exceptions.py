"""
Custom exceptions for the bot framework.

Outbound action failures are never raised; they are reported through the
action's callback instead.
"""


class DubBotError(Exception):
    """Base exception for all bot framework errors."""

    pass


class ConfigurationError(DubBotError):
    """Raised when settings are missing or invalid."""

    pass


class LoginError(DubBotError):
    """Raised when the room service rejects the bot's credentials."""

    pass


class RoomConnectionError(DubBotError):
    """Raised when the room connection does not become ready in time."""

    pass


class PluginError(DubBotError):
    """Raised when a command or event listener module has an invalid shape."""

    def __init__(self, message: str, *, module: str | None = None) -> None:
        super().__init__(message)
        self.module = module
