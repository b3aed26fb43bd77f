from __future__ import annotations

import math
import re
from datetime import date, datetime, time, timedelta
from typing import Iterator, Optional

_SLOT_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::(\d{2}))?\s*([AaPp][Mm])?\s*$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from start to end inclusive (nothing if start > end)."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def parse_time_slot(value: Optional[str]) -> Optional[time]:
    """Parse the start of a scheduled slot.

    Accepts ``HH:MM``, ``HH:MM:SS``, ``h:MM AM/PM`` and ranges such as
    ``08:00-09:00`` (only the start is used). Returns None when unparseable.
    """
    if not value or not value.strip():
        return None

    head = value.split("-", 1)[0]
    m = _SLOT_RE.match(head)
    if not m:
        return None

    hours = int(m.group(1))
    minutes = int(m.group(2))
    seconds = int(m.group(3) or 0)
    period = (m.group(4) or "").upper()

    if period:
        if hours < 1 or hours > 12:
            return None
        if period == "PM" and hours != 12:
            hours += 12
        if period == "AM" and hours == 12:
            hours = 0

    if hours > 23 or minutes > 59 or seconds > 59:
        return None
    return time(hour=hours, minute=minutes, second=seconds)


def whole_minutes_between(earlier: datetime, later: datetime) -> int:
    """Whole minutes from earlier to later, half a minute rounding up, never negative."""
    return max(math.floor((later - earlier).total_seconds() / 60 + 0.5), 0)
