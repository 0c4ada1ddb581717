from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import DailyWorkSummary


class WorkSummaryRepository(Protocol):
    def upsert(self, summary: DailyWorkSummary) -> None:
        """Insert or overwrite the row keyed by (employee_id, work_date)."""

        raise NotImplementedError

    def get(self, employee_id: int, work_date: date) -> Optional[DailyWorkSummary]:
        raise NotImplementedError

    def list_between(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[DailyWorkSummary]:
        raise NotImplementedError
