from __future__ import annotations

from typing import Optional

from ...core.enums import WorkStatus
from ...rules.model import RuleConfiguration
from ..model import DailyAttendance
from .base import StatusDecision, StatusStrategy


class EarlyLeaveStrategy(StatusStrategy):
    """Early leave on checkout (only when check-in was on time)."""

    def decide(self, *, attendance: Optional[DailyAttendance], rules: RuleConfiguration) -> StatusDecision:
        return StatusDecision(status=WorkStatus.EARLY_LEAVE)
