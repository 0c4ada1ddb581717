from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Optional

from ...attendance.model import DailyAttendance
from ...core.enums import DayType
from ...rules.model import RuleConfiguration
from ..model import DailyWorkSummary


class WorkTimeCalculator(ABC):
    """Calculator interface (Strategy Pattern for work-time rules)."""

    @abstractmethod
    def compute(
        self,
        *,
        employee_id: int,
        work_date: date,
        attendance: Optional[DailyAttendance],
        rules: RuleConfiguration,
        day_type: DayType,
        overtime_threshold_hours: Decimal,
    ) -> DailyWorkSummary:
        raise NotImplementedError
