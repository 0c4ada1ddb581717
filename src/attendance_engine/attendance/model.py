from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import EventKind, RecordMode, SourceSystem
from ..core.exceptions import AmbiguousEventError

_KIND_BY_MODE = {
    RecordMode.CHECK_IN: EventKind.CHECK_IN,
    RecordMode.UNLOCK: EventKind.CHECK_IN,
    RecordMode.CHECK_OUT: EventKind.CHECK_OUT,
    RecordMode.LOCK: EventKind.CHECK_OUT,
    RecordMode.PASSAGE: EventKind.PASSAGE,
}


def classify(mode: RecordMode) -> EventKind:
    return _KIND_BY_MODE[mode]


@dataclass(frozen=True)
class AttendanceEvent:
    """Normalized stamp; append-only once stored."""

    employee_id: int
    work_date: date
    timestamp: datetime
    mode: RecordMode
    source_system: SourceSystem
    terminal_id: Optional[str] = None
    event_id: Optional[int] = None

    @property
    def kind(self) -> EventKind:
        return classify(self.mode)


@dataclass(frozen=True)
class DailyAttendance:
    """One employee, one work-day, after reconciliation."""

    employee_id: int
    work_date: date
    check_in: Optional[datetime]
    check_out: Optional[datetime]
    had_dinner: bool = False
    events: tuple[AttendanceEvent, ...] = ()
    review_note: Optional[str] = None

    def __post_init__(self):
        if self.check_in and self.check_out and self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")

    def require_pair(self) -> tuple[datetime, datetime]:
        if self.check_in is None or self.check_out is None:
            raise AmbiguousEventError(self.review_note or "check-in/check-out pair is incomplete")
        return self.check_in, self.check_out
