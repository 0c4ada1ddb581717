from __future__ import annotations

from ..core.constants import DINNER_BREAK_MINUTES
from ..rules.model import RuleConfiguration


def break_minutes(raw_minutes: int, rules: RuleConfiguration, *, had_dinner: bool = False) -> int:
    """Largest reached tier (not cumulative), plus the dinner break when taken."""
    deducted = 0
    for tier in rules.effective_break_tiers():
        if raw_minutes >= tier.min_minutes:
            deducted = tier.break_minutes
    if had_dinner:
        deducted += DINNER_BREAK_MINUTES
    return deducted
