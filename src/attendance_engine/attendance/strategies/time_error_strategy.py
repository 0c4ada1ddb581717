from __future__ import annotations

from typing import Optional

from ...core.enums import WorkStatus
from ...rules.model import RuleConfiguration
from ..model import DailyAttendance
from .base import StatusDecision, StatusStrategy


class TimeErrorStrategy(StatusStrategy):
    """Day cannot be computed; kept for manual review."""

    def __init__(self, reason: Optional[str] = None):
        self._reason = reason

    def decide(self, *, attendance: Optional[DailyAttendance], rules: RuleConfiguration) -> StatusDecision:
        reason = self._reason or (attendance.review_note if attendance else None)
        return StatusDecision(status=WorkStatus.TIME_ERROR, note=reason)
