"""Time-until labels and urgency styles for event cards."""
import enum
from datetime import datetime, timezone
from typing import Optional

import pytz


class BadgeStyle(str, enum.Enum):
    now = "now"
    soon = "soon"
    later = "later"


def _seconds_until(date: datetime, now: Optional[datetime]) -> float:
    now = now or datetime.now(timezone.utc)
    return (date - now).total_seconds()


def time_until(date: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Compact label such as ``"5m"``, ``"3h"``, ``"2d"`` or ``"1y"``.

    Undated events are happening "Now". Anything less than a minute away,
    including events already under way, shows as ``"1m"``.
    """
    if date is None:
        return "Now"
    seconds = _seconds_until(date, now)
    if seconds < 60:
        return "1m"
    minutes = int(seconds // 60)
    if minutes < 60:
        return f"{minutes}m"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h"
    days = hours // 24
    years = days // 365
    if years > 0:
        return f"{years}y"
    return f"{days}d"


def badge_style(date: Optional[datetime], now: Optional[datetime] = None) -> BadgeStyle:
    if date is None:
        return BadgeStyle.now
    if _seconds_until(date, now) < 24 * 3600:
        return BadgeStyle.soon
    return BadgeStyle.later


def format_event_date(date: Optional[datetime], timezone_name: str) -> str:
    """Abbreviated date (``"Oct 19, 2026"``) in the viewer's timezone."""
    if date is None:
        return ""
    if date.tzinfo is None:
        date = pytz.utc.localize(date)
    local = date.astimezone(pytz.timezone(timezone_name))
    return f"{local:%b} {local.day}, {local.year}"
