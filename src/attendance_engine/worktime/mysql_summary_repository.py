from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import WorkStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import DailyWorkSummary
from .repository import WorkSummaryRepository

_COLUMNS = """
    employee_id, work_date, status, basic_hours, overtime_hours, night_hours, break_minutes,
    substitute_hours_earned, compensatory_hours_earned, had_dinner, dinner_missing, note
"""


def _row_to_summary(r: dict) -> DailyWorkSummary:
    return DailyWorkSummary(
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        status=WorkStatus(r["status"]),
        basic_hours=to_decimal(r["basic_hours"]),
        overtime_hours=to_decimal(r["overtime_hours"]),
        night_hours=to_decimal(r["night_hours"]),
        break_minutes=int(r["break_minutes"]),
        substitute_hours_earned=to_decimal(r["substitute_hours_earned"]),
        compensatory_hours_earned=to_decimal(r["compensatory_hours_earned"]),
        had_dinner=bool(r["had_dinner"]),
        dinner_missing=bool(r["dinner_missing"]),
        note=r.get("note"),
    )


class MySQLWorkSummaryRepository(WorkSummaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(self, summary: DailyWorkSummary) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO daily_work_summaries ({_COLUMNS})
                VALUES (%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status),
                    basic_hours=VALUES(basic_hours),
                    overtime_hours=VALUES(overtime_hours),
                    night_hours=VALUES(night_hours),
                    break_minutes=VALUES(break_minutes),
                    substitute_hours_earned=VALUES(substitute_hours_earned),
                    compensatory_hours_earned=VALUES(compensatory_hours_earned),
                    had_dinner=VALUES(had_dinner),
                    dinner_missing=VALUES(dinner_missing),
                    note=VALUES(note)
                """,
                (
                    summary.employee_id,
                    summary.work_date,
                    summary.status.value,
                    summary.basic_hours,
                    summary.overtime_hours,
                    summary.night_hours,
                    summary.break_minutes,
                    summary.substitute_hours_earned,
                    summary.compensatory_hours_earned,
                    int(summary.had_dinner),
                    int(summary.dinner_missing),
                    summary.note,
                ),
            )

    def get(self, employee_id: int, work_date: date) -> Optional[DailyWorkSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM daily_work_summaries WHERE employee_id=%s AND work_date=%s",
                (employee_id, work_date),
            )
            r = fetchone(cur)
            return _row_to_summary(r) if r else None

    def list_between(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[DailyWorkSummary]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))
        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM daily_work_summaries
                WHERE {where}
                ORDER BY employee_id ASC, work_date ASC
                """,
                tuple(params),
            )
            return [_row_to_summary(r) for r in fetchall(cur)]
