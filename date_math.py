#!/usr/bin/env python3
"""Calendar date arithmetic for datepad.

Every helper here is pure: no I/O, no state. An invalid month or day handed
across this boundary is a caller bug and fails an assertion.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Tuple

MONTH_NAMES: Tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
WEEKDAY_ABBR: Tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

_ISO_DATE_RE = re.compile(r"(\d{4})-(\d{2})-(\d{2})", re.ASCII)


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    assert 1 <= month <= 12, f"month out of range: {month}"
    if month in (4, 6, 9, 11):
        return 30
    if month == 2:
        return 29 if is_leap_year(year) else 28
    return 31


def pred_month_of(year: int, month: int) -> Tuple[int, int]:
    """Return (year, month) for one month earlier."""
    assert 1 <= month <= 12, f"month out of range: {month}"
    if month == 1:
        return year - 1, 12
    return year, month - 1


def succ_month_of(year: int, month: int) -> Tuple[int, int]:
    """Return (year, month) for one month later."""
    assert 1 <= month <= 12, f"month out of range: {month}"
    if month == 12:
        return year + 1, 1
    return year, month + 1


def days_in_pred_month(year: int, month: int) -> int:
    return days_in_month(*pred_month_of(year, month))


def days_in_succ_month(year: int, month: int) -> int:
    return days_in_month(*succ_month_of(year, month))


def weekday_of(year: int, month: int, day: int) -> int:
    """Weekday of a date, Monday=1 .. Sunday=7."""
    return date(year, month, day).isoweekday()


@dataclass(frozen=True, order=True)
class CalendarDate:
    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"Invalid month {self.month} in {self.year}-{self.month}-{self.day}")
        limit = days_in_month(self.year, self.month)
        if not 1 <= self.day <= limit:
            raise ValueError(
                f"Invalid day {self.day} for {self.year:04d}-{self.month:02d} (1..{limit})"
            )

    @classmethod
    def clamped(cls, year: int, month: int, day: int) -> "CalendarDate":
        """Build a date, pulling an overflowing day back to the month's last day."""
        return cls(year, month, max(1, min(day, days_in_month(year, month))))

    @classmethod
    def today(cls) -> "CalendarDate":
        return cls.from_date(date.today())

    @classmethod
    def from_date(cls, value: date) -> "CalendarDate":
        return cls(value.year, value.month, value.day)

    @classmethod
    def fromisoformat(cls, value: str) -> "CalendarDate":
        # Strict YYYY-MM-DD; date.fromisoformat accepts more on newer Pythons.
        match = _ISO_DATE_RE.fullmatch(value)
        if match is None:
            raise ValueError(f"Invalid date '{value}'. Expected YYYY-MM-DD")
        year, month, day = (int(part) for part in match.groups())
        return cls(year, month, day)

    def to_date(self) -> date:
        return date(self.year, self.month, self.day)

    def isoformat(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    def weekday(self) -> int:
        return weekday_of(self.year, self.month, self.day)

    def __str__(self) -> str:
        return self.isoformat()


def pred_month(value: CalendarDate) -> CalendarDate:
    year, month = pred_month_of(value.year, value.month)
    return CalendarDate.clamped(year, month, value.day)


def succ_month(value: CalendarDate) -> CalendarDate:
    year, month = succ_month_of(value.year, value.month)
    return CalendarDate.clamped(year, month, value.day)


def pred_year(value: CalendarDate) -> CalendarDate:
    return CalendarDate.clamped(value.year - 1, value.month, value.day)


def succ_year(value: CalendarDate) -> CalendarDate:
    return CalendarDate.clamped(value.year + 1, value.month, value.day)


def _shift_days(value: CalendarDate, days: int) -> CalendarDate:
    return CalendarDate.from_date(value.to_date() + timedelta(days=days))


def pred_week(value: CalendarDate) -> CalendarDate:
    return _shift_days(value, -7)


def succ_week(value: CalendarDate) -> CalendarDate:
    return _shift_days(value, 7)


def pred_day(value: CalendarDate) -> CalendarDate:
    return _shift_days(value, -1)


def succ_day(value: CalendarDate) -> CalendarDate:
    return _shift_days(value, 1)


__all__ = [
    "CalendarDate",
    "MONTH_NAMES",
    "WEEKDAY_ABBR",
    "is_leap_year",
    "days_in_month",
    "days_in_pred_month",
    "days_in_succ_month",
    "pred_month_of",
    "succ_month_of",
    "weekday_of",
    "pred_month",
    "succ_month",
    "pred_year",
    "succ_year",
    "pred_week",
    "succ_week",
    "pred_day",
    "succ_day",
]
