from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import WorkStatus
from ...rules.model import RuleConfiguration
from ..model import DailyAttendance
from .base import StatusDecision, StatusStrategy


class LateStrategy(StatusStrategy):
    """Check-in after scheduled start plus grace."""

    def decide(self, *, attendance: Optional[DailyAttendance], rules: RuleConfiguration) -> StatusDecision:
        note = None
        if attendance and attendance.check_in and rules.scheduled_start:
            start = datetime.combine(attendance.work_date, rules.scheduled_start)
            minutes = int((attendance.check_in - start).total_seconds() // 60)
            note = f"late by {minutes} min"
        return StatusDecision(status=WorkStatus.LATE, note=note)
