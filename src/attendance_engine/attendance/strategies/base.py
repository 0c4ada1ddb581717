from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ...core.enums import WorkStatus
from ...rules.model import RuleConfiguration
from ..model import DailyAttendance


@dataclass(frozen=True)
class StatusDecision:
    status: WorkStatus
    note: Optional[str] = None


class StatusStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide a day's status."""

    @abstractmethod
    def decide(self, *, attendance: Optional[DailyAttendance], rules: RuleConfiguration) -> StatusDecision:
        raise NotImplementedError
