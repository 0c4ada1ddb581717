from __future__ import annotations

from datetime import datetime, timedelta

from ..rules.model import NightWindow


def night_overlap_seconds(start: datetime, end: datetime, window: NightWindow) -> int:
    """Seconds of [start, end] inside the recurring night window.

    A window that wraps midnight (22:00-06:00) is anchored on each calendar
    day touched, starting the day before ``start`` so early-morning tails count.
    """
    if end <= start:
        return 0

    total = timedelta()
    day = start.date() - timedelta(days=1)
    while day <= end.date():
        window_start = datetime.combine(day, window.start)
        window_end_day = day + timedelta(days=1) if window.wraps_midnight else day
        window_end = datetime.combine(window_end_day, window.end)

        overlap = min(end, window_end) - max(start, window_start)
        if overlap > timedelta():
            total += overlap
        day += timedelta(days=1)

    return int(total.total_seconds())
