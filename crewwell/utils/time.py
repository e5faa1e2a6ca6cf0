from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple


def local_now() -> datetime:
    """
    Current server-local time, naive. Check-in days follow the server's calendar.
    """
    return datetime.now()


def start_of_day(dt: datetime) -> datetime:
    return datetime.combine(dt.date(), time.min)


def day_window(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """
    Half-open window [start_of_day(now), start_of_day(now) + 1 day).
    """
    start = start_of_day(now or local_now())
    return start, start + timedelta(days=1)


def days_ago(days: int, *, now: Optional[datetime] = None) -> datetime:
    return (now or local_now()) - timedelta(days=days)


def date_range_for(selected: Optional[date], days: int, *, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """
    Window ending at the close of `selected` (or now) and starting `days` before it.
    A selected date starts the window at midnight; the default window starts at the same time of day.
    """
    if selected is not None:
        end = datetime.combine(selected, time.max)
        start = datetime.combine(selected - timedelta(days=days), time.min)
        return start, end
    end = now or local_now()
    return end - timedelta(days=days), end
