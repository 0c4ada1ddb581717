from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import RecordMode, SourceSystem
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceEvent, DailyAttendance
from .repository import AttendanceRepository


def _row_to_event(r: dict) -> AttendanceEvent:
    return AttendanceEvent(
        event_id=int(r["event_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        timestamp=r["event_time"],
        mode=RecordMode(r["mode"]),
        source_system=SourceSystem(r["source_system"]),
        terminal_id=r.get("terminal_id"),
    )


_INSERT_EVENT = """
    INSERT IGNORE INTO attendance_events
        (employee_id, work_date, event_time, mode, kind, source_system, terminal_id)
    VALUES (%s,%s,%s,%s,%s,%s,%s)
"""


def _event_params(e: AttendanceEvent) -> tuple:
    return (
        e.employee_id,
        e.work_date,
        e.timestamp,
        e.mode.value,
        e.kind.value,
        e.source_system.value,
        e.terminal_id,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add_events(self, events: Sequence[AttendanceEvent]) -> int:
        if not events:
            return 0
        inserted = 0
        with db_cursor(self._conn_factory) as (_, cur):
            for e in events:
                cur.execute(_INSERT_EVENT, _event_params(e))
                inserted += cur.rowcount
        return inserted

    def add_web_event(self, event: AttendanceEvent) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # Locking the day row serializes concurrent web stamps for that day.
            cur.execute(
                "INSERT IGNORE INTO daily_attendance(employee_id, work_date) VALUES (%s,%s)",
                (event.employee_id, event.work_date),
            )
            cur.execute(
                "SELECT employee_id FROM daily_attendance WHERE employee_id=%s AND work_date=%s FOR UPDATE",
                (event.employee_id, event.work_date),
            )
            cur.fetchall()

            cur.execute(
                """
                SELECT 1 AS hit FROM attendance_events
                WHERE employee_id=%s AND work_date=%s AND kind=%s AND source_system=%s
                LIMIT 1
                """,
                (event.employee_id, event.work_date, event.kind.value, SourceSystem.WEB.value),
            )
            if fetchone(cur) is not None:
                return False
            cur.execute(_INSERT_EVENT, _event_params(event))
            return cur.rowcount > 0

    def list_events(self, employee_id: int, work_date: date) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT event_id, employee_id, work_date, event_time, mode, source_system, terminal_id
                FROM attendance_events
                WHERE employee_id=%s AND work_date=%s
                ORDER BY event_time ASC, event_id ASC
                """,
                (employee_id, work_date),
            )
            return [_row_to_event(r) for r in fetchall(cur)]

    def get_daily(self, employee_id: int, work_date: date) -> Optional[DailyAttendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, work_date, check_in, check_out, had_dinner, review_note
                FROM daily_attendance
                WHERE employee_id=%s AND work_date=%s
                """,
                (employee_id, work_date),
            )
            r = fetchone(cur)
        if not r:
            return None
        return DailyAttendance(
            employee_id=int(r["employee_id"]),
            work_date=r["work_date"],
            check_in=r.get("check_in"),
            check_out=r.get("check_out"),
            had_dinner=bool(r.get("had_dinner")),
            events=tuple(self.list_events(employee_id, work_date)),
            review_note=r.get("review_note"),
        )

    def upsert_daily(self, attendance: DailyAttendance) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO daily_attendance(employee_id, work_date, check_in, check_out, had_dinner, review_note)
                VALUES (%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    check_in=VALUES(check_in),
                    check_out=VALUES(check_out),
                    had_dinner=VALUES(had_dinner),
                    review_note=VALUES(review_note)
                """,
                (
                    attendance.employee_id,
                    attendance.work_date,
                    attendance.check_in,
                    attendance.check_out,
                    int(attendance.had_dinner),
                    attendance.review_note,
                ),
            )
