from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Optional

from ..core.enums import RecordMode, SourceSystem
from ..core.exceptions import IdentityResolutionError, ValidationError
from ..employees.service import EmployeeDirectory
from ..imports.model import LineError
from ..imports.parser import parse_lines, resolve_work_date
from ..worktime.model import DailyWorkSummary
from ..worktime.service import WorkTimeService
from .model import AttendanceEvent, DailyAttendance
from .reconciler import EventReconciler
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayFailure:
    employee_id: int
    work_date: date
    reason: str

    def to_dict(self) -> dict:
        return {"employee_id": self.employee_id, "work_date": self.work_date.isoformat(), "reason": self.reason}


@dataclass
class ImportResult:
    parsed_count: int = 0
    reconciled_days: int = 0
    failed_days: int = 0
    errors: list[LineError] = field(default_factory=list)
    day_failures: list[DayFailure] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "parsed_count": self.parsed_count,
            "reconciled_days": self.reconciled_days,
            "failed_days": self.failed_days,
            "errors": [e.to_dict() for e in self.errors],
            "day_failures": [f.to_dict() for f in self.day_failures],
        }


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        directory: EmployeeDirectory,
        worktime: WorkTimeService,
        *,
        reconciler: EventReconciler | None = None,
    ):
        self._attendance = attendance
        self._directory = directory
        self._worktime = worktime
        self._reconciler = reconciler or EventReconciler()

    def import_batch(self, raw_lines: Iterable[str]) -> ImportResult:
        """Parse, resolve, store and recompute every touched (employee, work-date).

        Bad lines and failing days are reported in the result; the rest of the
        batch is still applied. Web-origin lines get the same one-per-kind guard
        as manual submissions; re-importing an identical web line is absorbed.
        """
        lines = list(raw_lines)
        parsed = parse_lines(lines)
        result = ImportResult(parsed_count=len(parsed.records), errors=list(parsed.errors))

        def reject(line_no: int, reason: str) -> None:
            logger.warning("line %s: %s", line_no, reason)
            result.errors.append(LineError(line_no, lines[line_no - 1].rstrip("\r\n"), reason))

        events: list[AttendanceEvent] = []
        terminal_events: list[AttendanceEvent] = []
        inserted = 0
        for record in parsed.records:
            try:
                employee_id = self._directory.resolve(record.display_name)
            except IdentityResolutionError as exc:
                reject(record.line_no, str(exc))
                continue
            event = AttendanceEvent(
                employee_id=employee_id,
                work_date=record.work_date,
                timestamp=record.timestamp,
                mode=record.mode,
                source_system=record.source_system,
                terminal_id=getattr(record, "terminal_id", None) or None,
            )
            if event.source_system == SourceSystem.WEB:
                if self._attendance.add_web_event(event):
                    inserted += 1
                elif not self._already_stored(event):
                    reject(record.line_no, _web_duplicate_reason(event))
                    continue
            else:
                terminal_events.append(event)
            events.append(event)

        inserted += self._attendance.add_events(terminal_events)

        for employee_id, work_date in sorted(self._reconciler.group(events)):
            try:
                self.recompute_day(employee_id, work_date)
            except Exception as exc:
                logger.exception("recompute failed for employee %s on %s", employee_id, work_date)
                result.failed_days += 1
                result.day_failures.append(DayFailure(employee_id, work_date, str(exc)))
            else:
                result.reconciled_days += 1

        logger.info(
            "import: lines=%s parsed=%s inserted=%s days=%s failed_days=%s errors=%s",
            len(lines), result.parsed_count, inserted,
            result.reconciled_days, result.failed_days, len(result.errors),
        )
        return result

    def _already_stored(self, event: AttendanceEvent) -> bool:
        return any(
            (e.timestamp, e.kind, e.source_system) == (event.timestamp, event.kind, event.source_system)
            for e in self._attendance.list_events(event.employee_id, event.work_date)
        )

    def recompute_day(
        self,
        employee_id: int,
        work_date: date,
        had_dinner_override: Optional[bool] = None,
    ) -> DailyWorkSummary:
        existing = self._attendance.get_daily(employee_id, work_date)
        if had_dinner_override is not None:
            had_dinner = bool(had_dinner_override)
        else:
            had_dinner = existing.had_dinner if existing else False

        events = self._attendance.list_events(employee_id, work_date)
        attendance = self._reconciler.reconcile(employee_id, work_date, events, had_dinner=had_dinner)
        # The daily row is saved only once the summary and leave credit are accepted.
        summary = self._worktime.compute_day(employee_id, work_date, attendance)
        self._attendance.upsert_daily(attendance)
        return summary

    def set_dinner(self, employee_id: int, work_date: date, had_dinner: bool) -> DailyWorkSummary:
        return self.recompute_day(employee_id, work_date, had_dinner_override=had_dinner)

    def submit_manual_event(
        self,
        employee_id: int,
        timestamp: datetime,
        mode: RecordMode,
        *,
        work_date: Optional[date] = None,
    ) -> DailyWorkSummary:
        """Store a web stamp, at most one per kind and work-day."""
        if self._directory.get(employee_id) is None:
            raise ValidationError("employee does not exist")

        if work_date is None:
            work_date = resolve_work_date(timestamp.date(), timestamp.time(), before_noon=timestamp.hour < 12)

        event = AttendanceEvent(
            employee_id=employee_id,
            work_date=work_date,
            timestamp=timestamp,
            mode=mode,
            source_system=SourceSystem.WEB,
        )
        if not self._attendance.add_web_event(event):
            raise ValidationError(_web_duplicate_reason(event))
        return self.recompute_day(employee_id, work_date)

    def get_daily(self, employee_id: int, work_date: date) -> Optional[DailyAttendance]:
        return self._attendance.get_daily(employee_id, work_date)


def _web_duplicate_reason(event: AttendanceEvent) -> str:
    return f"a web {event.kind.value} already exists for {event.work_date.isoformat()}"
