from __future__ import annotations

from datetime import datetime, time

from ..core.constants import DINNER_CUTOFF_HOUR, DINNER_MIN_NET_HOURS, MINUTES_PER_HOUR


def dinner_missing(check_in: datetime, check_out: datetime, net_minutes: int, *, had_dinner: bool) -> bool:
    """True when the day qualified for a dinner break that was never recorded.

    Qualifies: at least 8 net hours, checked in by 19:00 and out after 19:00
    of the check-in day.
    """
    if had_dinner:
        return False
    cutoff = datetime.combine(check_in.date(), time(DINNER_CUTOFF_HOUR))
    return (
        net_minutes >= DINNER_MIN_NET_HOURS * MINUTES_PER_HOUR
        and check_in <= cutoff
        and check_out > cutoff
    )
