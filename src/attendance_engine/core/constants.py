"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

# Terminal "day" starts at 06:00; earlier AM stamps belong to the previous work-date.
ROLLOVER_HOUR = 6

HOURS_PER_LEAVE_DAY = 8
LEAVE_UNIT_HOURS = 4

MINUTES_PER_HOUR = 60
DINNER_BREAK_MINUTES = 60
# A dinner break is expected when a long day runs past this hour.
DINNER_CUTOFF_HOUR = 19
DINNER_MIN_NET_HOURS = 8
ACCRUAL_BASE_HOURS = 8

HOURS_QUANTUM = Decimal("0.01")
MONEY_QUANTUM = Decimal("1")

MIN_SETTLEMENT_MONTHS = 2
MAX_SETTLEMENT_MONTHS = 3
