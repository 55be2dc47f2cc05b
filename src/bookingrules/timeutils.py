"""Calendar helpers: weekday numbering, holiday lookup and time-of-day arithmetic.

Weekdays are numbered 0 = Sunday ... 6 = Saturday throughout the package, so
Python's Monday-based `date.weekday()` is remapped in `weekday_number`.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterator, Optional

__all__ = [
    "HOLIDAYS",
    "COUNTRY_ADJECTIVES",
    "is_holiday",
    "holiday_name",
    "weekday_number",
    "minutes_of_day",
    "minutes_between",
    "parse_hhmm",
    "format_hhmm",
    "to_24h",
    "is_first_monday",
    "iter_days",
    "at_time",
]

# Swedish national holidays 2024-2025
SWEDISH_HOLIDAYS = {
    "2024-01-01": "New Year's Day",
    "2024-01-06": "Epiphany",
    "2024-03-29": "Good Friday",
    "2024-04-01": "Easter Monday",
    "2024-05-01": "Labour Day",
    "2024-05-09": "Ascension Day",
    "2024-05-20": "Whit Monday",
    "2024-06-06": "National Day",
    "2024-06-21": "Midsummer Eve",
    "2024-06-22": "Midsummer Day",
    "2024-11-02": "All Saints' Day",
    "2024-12-24": "Christmas Eve",
    "2024-12-25": "Christmas Day",
    "2024-12-26": "Boxing Day",
    "2024-12-31": "New Year's Eve",
    "2025-01-01": "New Year's Day",
    "2025-01-06": "Epiphany",
    "2025-04-18": "Good Friday",
    "2025-04-21": "Easter Monday",
    "2025-05-01": "Labour Day",
    "2025-05-29": "Ascension Day",
    "2025-06-06": "National Day",
    "2025-06-20": "Midsummer Eve",
    "2025-06-21": "Midsummer Day",
    "2025-11-01": "All Saints' Day",
    "2025-12-24": "Christmas Eve",
    "2025-12-25": "Christmas Day",
    "2025-12-26": "Boxing Day",
    "2025-12-31": "New Year's Eve",
}

# Countries without a table have no holidays at all
HOLIDAYS: dict[str, dict[str, str]] = {
    "SE": SWEDISH_HOLIDAYS,
}

COUNTRY_ADJECTIVES = {"SE": "Swedish"}


def holiday_name(day: date, country_code: str) -> Optional[str]:
    """Return the holiday name for `day` in `country_code`, or None."""
    table = HOLIDAYS.get((country_code or "").upper())
    if table is None:
        return None
    return table.get(day.strftime("%Y-%m-%d"))


def is_holiday(day: date, country_code: str) -> bool:
    return holiday_name(day, country_code) is not None


def weekday_number(day: date) -> int:
    """0 = Sunday, 1 = Monday, ..., 6 = Saturday."""
    return (day.weekday() + 1) % 7


def minutes_of_day(moment: datetime) -> int:
    """Wall-clock minutes since midnight; seconds are ignored."""
    return moment.hour * 60 + moment.minute


def minutes_between(later: datetime, earlier: datetime) -> int:
    """Signed whole minutes from `earlier` to `later`, truncated toward zero."""
    return int((later - earlier).total_seconds() / 60)


def parse_hhmm(text: str) -> int:
    """Parse 'HH:MM' into minutes since midnight.

    Raises ValueError when `text` is not a valid 24h clock time.
    """
    if not isinstance(text, str):
        raise ValueError(f"Expected a 'HH:MM' string, got {text!r}")
    hour_s, sep, minute_s = text.strip().partition(":")
    if not sep or not hour_s.isdigit() or not minute_s.isdigit():
        raise ValueError(f"Expected a 'HH:MM' string, got {text!r}")
    hour, minute = int(hour_s), int(minute_s)
    if hour > 23 or minute > 59:
        raise ValueError(f"Clock time out of range: {text!r}")
    return hour * 60 + minute


def format_hhmm(hour: int, minute: int = 0) -> str:
    return f"{hour:02d}:{minute:02d}"


def to_24h(hour: int, minute: int = 0, period: Optional[str] = None) -> tuple[int, int]:
    """Apply an optional am/pm marker to a clock reading.

    pm adds 12 hours unless the hour is already 12; am on 12 resets to 0.
    Hours without a marker are taken as 24h values.
    """
    period = (period or "").lower()
    if period == "pm" and hour < 12:
        hour += 12
    if period == "am" and hour == 12:
        hour = 0
    return hour, minute


def is_first_monday(day: date) -> bool:
    return weekday_number(day) == 1 and day.day <= 7


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from `start` to `end`, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def at_time(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime.combine(day, time(hour, minute))
