"""Bot configuration"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field, ImportString, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# === Path Configuration ===
PACKAGE_DIR = Path(__file__).parent.parent
COMPONENTS_DIR = PACKAGE_DIR / "components"
COMMANDS_DIR = COMPONENTS_DIR / "commands"
EVENT_LISTENERS_DIR = COMPONENTS_DIR / "event_listeners"


class BotSettings(BaseSettings):
    """Bot settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Room
    room_name: str = Field(..., description="Name of the room to connect to")

    # Credentials
    bot_email: str = Field(..., description="Bot account email")
    bot_password: str = Field(..., description="Bot account password")

    # Behaviour
    are_commands_case_sensitive: bool = Field(
        default=False, description="Match command triggers case-sensitively"
    )
    log_all_events: bool = Field(default=False, description="Log every raw room event payload")

    # History
    number_of_chat_events_to_store: int = Field(
        default=512, ge=1, description="Maximum stored chat messages"
    )
    number_of_played_songs_to_store: int = Field(
        default=64, ge=1, description="Maximum stored plays"
    )

    # Plugins
    commands_dir: Path | None = Field(
        default=COMMANDS_DIR, description="Directory scanned for command modules"
    )
    event_listeners_dir: Path | None = Field(
        default=EVENT_LISTENERS_DIR, description="Directory scanned for event listener modules"
    )
    command_modules: list[str] = Field(
        default_factory=list, description="Extra command modules by dotted path"
    )
    event_listener_modules: list[str] = Field(
        default_factory=list, description="Extra event listener modules by dotted path"
    )

    # Transport
    client_class: ImportString | None = Field(
        default=None, description="Dotted path of the room service client class"
    )
    ready_timeout: float = Field(
        default=30.0, gt=0, description="Seconds to wait for the room connection"
    )

    # Health server
    health_port: int | None = Field(default=None, description="Port for the HTTP status server")

    # Environment
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            logger.warning(f"Invalid log level '{v}', defaulting to INFO")
            return "INFO"
        return v_upper


@lru_cache
def get_settings() -> BotSettings:
    """Get cached settings instance"""
    return BotSettings()  # type: ignore[call-arg]


def validate_settings(**overrides: Any) -> BotSettings:
    """Build settings, logging and raising ``ConfigurationError`` on failure."""
    try:
        settings = BotSettings(**overrides) if overrides else get_settings()
    except Exception as e:
        bot_logger = logging.getLogger("Bot")
        bot_logger.error(f"Settings validation failed: {e}")
        raise ConfigurationError(str(e)) from e

    logger.info("All required settings validated successfully")
    return settings
