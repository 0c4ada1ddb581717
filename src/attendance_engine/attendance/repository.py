from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceEvent, DailyAttendance


class AttendanceRepository(Protocol):
    def add_events(self, events: Sequence[AttendanceEvent]) -> int:
        """Append events; exact (employee_id, timestamp, kind) duplicates are absorbed.

        Returns the number of rows actually inserted.
        """

        raise NotImplementedError

    def add_web_event(self, event: AttendanceEvent) -> bool:
        """Append a web stamp unless that work-day already has a web stamp of its kind.

        Check and insert happen atomically; returns False when refused.
        """

        raise NotImplementedError

    def list_events(self, employee_id: int, work_date: date) -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def get_daily(self, employee_id: int, work_date: date) -> Optional[DailyAttendance]:
        raise NotImplementedError

    def upsert_daily(self, attendance: DailyAttendance) -> None:
        raise NotImplementedError
