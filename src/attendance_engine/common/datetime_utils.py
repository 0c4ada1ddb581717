from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterator

from ..core.constants import HOURS_QUANTUM, MINUTES_PER_HOUR, MONEY_QUANTUM


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def quantize_hours(value: Decimal) -> Decimal:
    return value.quantize(HOURS_QUANTUM, rounding=ROUND_HALF_UP)


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def minutes_to_hours(minutes: int | Decimal) -> Decimal:
    """Fixed-point hours (0.01h) from a minute count."""
    return quantize_hours(Decimal(minutes) / MINUTES_PER_HOUR)


def seconds_to_hours(seconds: float | int) -> Decimal:
    return quantize_hours(Decimal(int(seconds)) / 3600)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def add_months(day: date, months: int) -> date:
    """Same day-of-month ``months`` later, clamped to the month's last day."""
    index = day.year * 12 + day.month - 1 + months
    year, month = divmod(index, 12)
    month += 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def period_end_bounds(start: date, min_months: int, max_months: int) -> tuple[date, date]:
    """Earliest and latest inclusive end for a period of whole months from ``start``."""
    return add_months(start, min_months) - timedelta(days=1), add_months(start, max_months) - timedelta(days=1)


def iter_months(start: date, end: date) -> Iterator[date]:
    """First day of every calendar month touched by [start, end]."""
    current = date(start.year, start.month, 1)
    while current <= end:
        yield current
        if current.month == 12:
            current = date(current.year + 1, 1, 1)
        else:
            current = date(current.year, current.month + 1, 1)


def format_hours(value: Decimal) -> str:
    """Display form used by exports: trailing zeros dropped (6.50 -> 6.5)."""
    text = format(quantize_hours(value), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"
