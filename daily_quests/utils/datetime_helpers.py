"""
Date handling utilities

Day boundaries drive streaks, decay and daily quest resets, so "today" is
always computed in the configured quest timezone and stored as a plain date.
Snapshots store dates as ISO strings (YYYY-MM-DD).
"""

import logging
from datetime import datetime, date
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from daily_quests.config import QUEST_TIMEZONE

logger = logging.getLogger(__name__)

# Fallback when the configured timezone is unknown
DEFAULT_TIMEZONE = "UTC"


def get_quest_timezone(tz_name: Optional[str] = None) -> ZoneInfo:
    """
    Resolve the timezone used for day boundaries

    Args:
        tz_name: IANA timezone name (defaults to QUEST_TIMEZONE)

    Returns:
        ZoneInfo object, UTC if the name is unknown
    """
    tz_name = tz_name or QUEST_TIMEZONE
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        logger.error(f"Invalid timezone '{tz_name}', falling back to {DEFAULT_TIMEZONE}: {e}")
        return ZoneInfo(DEFAULT_TIMEZONE)


def today_in_timezone(tz_name: Optional[str] = None) -> date:
    """
    Get today's date in the quest timezone

    Returns:
        Today's date
    """
    return datetime.now(get_quest_timezone(tz_name)).date()


def parse_stored_date(value: Union[str, date, None]) -> Optional[date]:
    """
    Parse a date read from a snapshot

    Supports formats:
    - YYYY-MM-DD (ISO format)
    - "Mon Oct 19 2026" (JavaScript Date.toDateString)

    Args:
        value: Stored value, a date, or None

    Returns:
        date object, or None when value is empty or unrecognized
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    for fmt in ("%Y-%m-%d", "%a %b %d %Y"):
        try:
            return datetime.strptime(str(value).strip(), fmt).date()
        except ValueError:
            continue

    logger.warning(f"Unrecognized stored date '{value}', treating as missing")
    return None
