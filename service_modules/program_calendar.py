"""
Program Calendar - maps program week/day slots to calendar dates,
generates recurring session dates and detects time overlaps.
"""
import calendar
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Union

DEFAULT_SESSION_TIME = "18:00"
DEFAULT_SESSION_DURATION = 60

DateLike = Union[str, date]


def to_date(value: DateLike) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def calculate_session_date(start_date: DateLike, week_number: int, day_number: int) -> str:
    """
    Calendar date (YYYY-MM-DD) of a program slot.

    day_number is 1=Monday .. 7=Sunday. Week 1 is the week containing the
    start date, so a day before the start weekday lands earlier than the
    start date itself.
    """
    start = to_date(start_date)
    start_day = start.isoweekday()
    days_to_add = (week_number - 1) * 7 + (day_number - start_day)
    return (start + timedelta(days=days_to_add)).isoformat()


def add_months(value: date, months: int) -> date:
    # Clamp to the last day of the target month (Jan 31 + 1 month -> Feb 28/29)
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def next_occurrence(current: date, pattern: Optional[str], anchor: Optional[date] = None, step: int = 1) -> date:
    if pattern == "biweekly":
        return current + timedelta(days=14)
    if pattern == "monthly":
        # Count from the anchor so a 31st does not drift to the 28th forever
        return add_months(anchor or current, step)
    return current + timedelta(days=7)  # weekly and unknown patterns


def generate_recurring_dates(start_date: DateLike, end_date: DateLike, pattern: Optional[str] = "weekly") -> List[str]:
    """All dates from start_date to end_date inclusive, stepping by pattern."""
    start = to_date(start_date)
    end = to_date(end_date)
    dates = []
    current = start
    step = 1
    while current <= end:
        dates.append(current.isoformat())
        current = next_occurrence(current, pattern, anchor=start, step=step)
        step += 1
    return dates


def time_to_minutes(time_str: str) -> int:
    parts = str(time_str).split(":")
    return int(parts[0]) * 60 + int(parts[1])


def normalize_time(time_str: Optional[str]) -> Optional[str]:
    """'7:05', '07:05:00' -> '07:05'."""
    if not time_str:
        return time_str
    minutes = time_to_minutes(time_str)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def check_time_overlap(new_start_time: str, new_duration: Optional[int],
                       existing_start_time: str, existing_duration: Optional[int]) -> bool:
    new_start = time_to_minutes(new_start_time)
    new_end = new_start + (new_duration or DEFAULT_SESSION_DURATION)
    existing_start = time_to_minutes(existing_start_time)
    existing_end = existing_start + (existing_duration or DEFAULT_SESSION_DURATION)
    return new_start < existing_end and new_end > existing_start


def session_slot_for_day(day_number: int, default_time: Optional[str], default_duration: Optional[int],
                         day_times: Optional[Dict[str, str]] = None,
                         day_durations: Optional[Dict[str, int]] = None):
    """(time, duration) for a weekday, honouring per-day overrides keyed "1".."7"."""
    key = str(day_number)
    session_time = (day_times or {}).get(key) or default_time or DEFAULT_SESSION_TIME
    override = (day_durations or {}).get(key)
    session_duration = int(override) if override else (default_duration or DEFAULT_SESSION_DURATION)
    return normalize_time(session_time), session_duration


def group_by_date(items: Iterable[dict], key: str = "date") -> Dict[str, List[dict]]:
    grouped: Dict[str, List[dict]] = {}
    for item in items:
        grouped.setdefault(item[key], []).append(item)
    return dict(sorted(grouped.items()))


def week_dates(week_start: Optional[DateLike] = None) -> List[str]:
    """Monday..Sunday of the week containing week_start (default today)."""
    anchor = to_date(week_start) if week_start else date.today()
    monday = anchor - timedelta(days=anchor.weekday())
    return [(monday + timedelta(days=i)).isoformat() for i in range(7)]
