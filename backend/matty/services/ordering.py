"""Event ordering helpers shared by the controller and the stores."""
from datetime import datetime, timezone
from typing import Iterable, Optional

from matty.schemas.event import Event


def by_date(event: Event, now: datetime) -> datetime:
    """Sort key: the event's date, undated events counting as ``now``."""
    return event.date or now


def upcoming_first(events: Iterable[Event], now: Optional[datetime] = None) -> list[Event]:
    """Sort events by date, then move past events to the tail.

    Both partitions keep their date order, so the result starts with the
    soonest event that is not over yet and ends with past events oldest
    first.
    """
    now = now or datetime.now(timezone.utc)
    ordered = sorted(events, key=lambda e: by_date(e, now))
    current = [e for e in ordered if not e.past]
    past = [e for e in ordered if e.past]
    return current + past
