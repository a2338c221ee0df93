"""Calendar windows for the reporting queries.

All instants are naive wall-clock datetimes in the studio's time zone.
Month boundaries are the 1st of the month at 00:00; weeks start on Monday.
"""
import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

import pytz


@dataclass(frozen=True)
class TimeWindow:
    """Half-open interval ``[start, end)``; ``end=None`` is open-ended."""
    start: datetime
    end: Optional[datetime] = None

    def contains(self, moment: datetime) -> bool:
        if moment < self.start:
            return False
        return self.end is None or moment < self.end


def local_now(timezone_str: str) -> datetime:
    """Current wall-clock time in the given zone, without tzinfo."""
    tz = pytz.timezone(timezone_str)
    return datetime.now(tz).replace(tzinfo=None)


def localize(dt: datetime, timezone_str: str) -> datetime:
    """Attach the studio zone to a naive wall-clock datetime; aware values pass through."""
    if dt.tzinfo is not None:
        return dt
    return pytz.timezone(timezone_str).localize(dt)


def to_local_naive(dt: datetime, timezone_str: str) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(pytz.timezone(timezone_str)).replace(tzinfo=None)


def shift_months(dt: datetime, months: int) -> datetime:
    """Move ``dt`` by whole calendar months, clamping the day to month end."""
    month_index = dt.year * 12 + (dt.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def month_start(now: datetime) -> datetime:
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def month_to_date(now: datetime) -> TimeWindow:
    """From the 1st of the current month through ``now``."""
    return TimeWindow(month_start(now), now)


def prior_month(now: datetime) -> TimeWindow:
    """The whole previous calendar month."""
    current = month_start(now)
    return TimeWindow(shift_months(current, -1), current)


def trailing_days(now: datetime, days: int) -> TimeWindow:
    return TimeWindow(now - timedelta(days=days))


def trailing_weeks(now: datetime, weeks: int) -> TimeWindow:
    return TimeWindow(now - timedelta(weeks=weeks))


def trailing_months(now: datetime, months: int) -> TimeWindow:
    return TimeWindow(shift_months(now, -months))


def week_start(dt: datetime) -> datetime:
    """Monday 00:00 of the week containing ``dt``."""
    day = dt.replace(hour=0, minute=0, second=0, microsecond=0)
    return day - timedelta(days=day.weekday())


def week_label(dt: datetime) -> str:
    """Short label like ``Oct 13``."""
    return f"{dt:%b} {dt.day}"
