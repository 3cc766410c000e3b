"""Configuration management"""
import logging
import os
from pathlib import Path

import pytz
from dotenv import load_dotenv

from daily_quests.exceptions import ConfigurationError

load_dotenv()

# Storage
# The snapshot lives at DATA_PATH / f"{SNAPSHOT_KEY}.json"
DATA_PATH: Path = Path(os.getenv("DATA_PATH", "./data"))
SNAPSHOT_KEY: str = os.getenv("SNAPSHOT_KEY", "dailyQuestsApp")

# Day boundaries are evaluated in this IANA timezone
QUEST_TIMEZONE: str = os.getenv("QUEST_TIMEZONE", "UTC")

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


# Validation
def validate_config() -> None:
    """Validate configuration"""
    if not SNAPSHOT_KEY.strip():
        raise ConfigurationError("SNAPSHOT_KEY must not be empty", config_key="SNAPSHOT_KEY")
    if not isinstance(logging.getLevelName(LOG_LEVEL.upper()), int):
        raise ConfigurationError(f"Unknown LOG_LEVEL: '{LOG_LEVEL}'", config_key="LOG_LEVEL")
    try:
        pytz.timezone(QUEST_TIMEZONE)
    except pytz.exceptions.UnknownTimeZoneError:
        raise ConfigurationError(
            f"Invalid timezone: '{QUEST_TIMEZONE}'. "
            f"Use IANA timezone (e.g., 'Europe/Stockholm', 'America/New_York')",
            config_key="QUEST_TIMEZONE",
        )
