"""Bot framework for media rooms: room state tracking, chat commands and event listeners."""

__version__ = "0.1.0"
