from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Sequence

from ..core.enums import EventKind, RecordMode
from .model import AttendanceEvent, DailyAttendance

logger = logging.getLogger(__name__)


@dataclass
class EventReconciler:
    """Resolve a day's stamps into a single check-in and check-out.

    Earliest check-in-equivalent wins, latest check-out-equivalent wins.
    When ``passage_backfill`` is on and the day ends with a passage swipe while
    lock and passage counts match, the lock right before that swipe joins the
    check-out candidates (the terminal logs the real exit as a passage after
    arming), so a later check-out stamp still wins.
    """

    passage_backfill: bool = True

    @staticmethod
    def group(events: Iterable[AttendanceEvent]) -> dict[tuple[int, date], list[AttendanceEvent]]:
        groups: dict[tuple[int, date], list[AttendanceEvent]] = defaultdict(list)
        for e in events:
            groups[(e.employee_id, e.work_date)].append(e)
        return dict(groups)

    def reconcile(
        self,
        employee_id: int,
        work_date: date,
        events: Sequence[AttendanceEvent],
        *,
        had_dinner: bool = False,
    ) -> DailyAttendance:
        ordered = sorted(events, key=lambda e: e.timestamp)
        notes: list[str] = []

        check_ins = [e.timestamp for e in ordered if e.kind == EventKind.CHECK_IN]
        check_outs = [e.timestamp for e in ordered if e.kind == EventKind.CHECK_OUT]
        check_in = min(check_ins) if check_ins else None
        check_out = max(check_outs) if check_outs else None

        if self.passage_backfill and ordered and ordered[-1].kind == EventKind.PASSAGE:
            backfilled, note = self._backfill_from_passage(ordered)
            if backfilled is not None:
                check_out = max(filter(None, (check_out, backfilled)))
            if note:
                notes.append(note)

        if check_in is None:
            notes.append("no check-in event")
        if check_out is None:
            notes.append("no check-out event")
        if check_in is not None and check_out is not None and check_out <= check_in:
            notes.append("check-out is not after check-in")
            check_out = None

        review_note = "; ".join(notes) or None
        if review_note:
            logger.info("employee %s %s needs review: %s", employee_id, work_date, review_note)

        return DailyAttendance(
            employee_id=employee_id,
            work_date=work_date,
            check_in=check_in,
            check_out=check_out,
            had_dinner=had_dinner,
            events=tuple(ordered),
            review_note=review_note,
        )

    @staticmethod
    def _backfill_from_passage(ordered: Sequence[AttendanceEvent]):
        locks = sum(1 for e in ordered if e.mode == RecordMode.LOCK)
        passages = sum(1 for e in ordered if e.mode == RecordMode.PASSAGE)

        if passages > locks:
            return None, "more passage than lock events; check-out needs manual review"
        if locks != passages:
            return None, None

        for e in reversed(ordered[:-1]):
            if e.mode == RecordMode.LOCK:
                return e.timestamp, None
        return None, None

    def reconcile_all(self, events: Iterable[AttendanceEvent]) -> list[DailyAttendance]:
        return [
            self.reconcile(employee_id, work_date, group)
            for (employee_id, work_date), group in sorted(self.group(events).items())
        ]
