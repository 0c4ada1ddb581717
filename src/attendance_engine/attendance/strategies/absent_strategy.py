from __future__ import annotations

from typing import Optional

from ...core.enums import WorkStatus
from ...rules.model import RuleConfiguration
from ..model import DailyAttendance
from .base import StatusDecision, StatusStrategy


class AbsentStrategy(StatusStrategy):
    def decide(self, *, attendance: Optional[DailyAttendance], rules: RuleConfiguration) -> StatusDecision:
        return StatusDecision(status=WorkStatus.ABSENT)
