from __future__ import annotations

import json
from datetime import date
from typing import Optional, Sequence

from ..core.enums import PeriodStatus
from ..core.exceptions import SettlementConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import QuarterlySettlement, SettlementPeriod
from .repository import SettlementRepository

_PERIOD_COLUMNS = "period_id, name, start_date, end_date, status, settlement_completed"


def _row_to_period(r: dict) -> SettlementPeriod:
    return SettlementPeriod(
        period_id=int(r["period_id"]),
        name=r["name"],
        start_date=r["start_date"],
        end_date=r["end_date"],
        status=PeriodStatus(r["status"]),
        settlement_completed=bool(r["settlement_completed"]),
    )


def _encode_months(settlement: QuarterlySettlement) -> str:
    return json.dumps({m.isoformat(): str(h) for m, h in settlement.monthly_work_hours})


def _decode_months(raw: Optional[str]) -> tuple:
    if not raw:
        return ()
    return tuple(sorted((date.fromisoformat(m), to_decimal(h)) for m, h in json.loads(raw).items()))


class MySQLSettlementRepository(SettlementRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_period(self, *, name: str, start_date: date, end_date: date) -> SettlementPeriod:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO settlement_periods(name, start_date, end_date, status) VALUES (%s,%s,%s,%s)",
                (name, start_date, end_date, PeriodStatus.PLANNED.value),
            )
            period_id = int(cur.lastrowid)
        return SettlementPeriod(period_id=period_id, name=name, start_date=start_date, end_date=end_date)

    def get_period(self, period_id: int) -> Optional[SettlementPeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PERIOD_COLUMNS} FROM settlement_periods WHERE period_id=%s", (int(period_id),))
            r = fetchone(cur)
            return _row_to_period(r) if r else None

    def list_periods(self) -> Sequence[SettlementPeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PERIOD_COLUMNS} FROM settlement_periods ORDER BY start_date DESC, period_id DESC")
            return [_row_to_period(r) for r in fetchall(cur)]

    def update_status(self, period_id: int, *, expected: PeriodStatus, new: PeriodStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE settlement_periods SET status=%s WHERE period_id=%s AND status=%s",
                (new.value, int(period_id), expected.value),
            )
            return cur.rowcount > 0

    def complete_with_settlements(self, period_id: int, settlements: Sequence[QuarterlySettlement]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE settlement_periods
                SET settlement_completed=1
                WHERE period_id=%s AND settlement_completed=0
                """,
                (int(period_id),),
            )
            if cur.rowcount == 0:
                # Raising inside db_cursor rolls the transaction back.
                raise SettlementConflictError(f"period {period_id} has already been settled")

            for s in settlements:
                cur.execute(
                    """
                    INSERT INTO quarterly_settlements (
                        period_id, employee_id, employee_name, department, position, work_days,
                        total_work_hours, weeks_in_period, weekly_avg_hours, excess_hours, total_night_hours,
                        overtime_allowance_amount, night_allowance_already_paid, net_overtime_allowance,
                        monthly_work_hours
                    )
                    VALUES (%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        s.period_id,
                        s.employee_id,
                        s.employee_name,
                        s.department,
                        s.position,
                        s.work_days,
                        s.total_work_hours,
                        s.weeks_in_period,
                        s.weekly_avg_hours,
                        s.excess_hours,
                        s.total_night_hours,
                        s.overtime_allowance_amount,
                        s.night_allowance_already_paid,
                        s.net_overtime_allowance,
                        _encode_months(s),
                    ),
                )

    def list_settlements(self, period_id: int) -> Sequence[QuarterlySettlement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT * FROM quarterly_settlements WHERE period_id=%s ORDER BY employee_name, employee_id",
                (int(period_id),),
            )
            return [
                QuarterlySettlement(
                    period_id=int(r["period_id"]),
                    employee_id=int(r["employee_id"]),
                    employee_name=r["employee_name"],
                    department=r.get("department"),
                    position=r.get("position"),
                    work_days=int(r["work_days"]),
                    total_work_hours=to_decimal(r["total_work_hours"]),
                    weeks_in_period=to_decimal(r["weeks_in_period"]),
                    weekly_avg_hours=to_decimal(r["weekly_avg_hours"]),
                    excess_hours=to_decimal(r["excess_hours"]),
                    total_night_hours=to_decimal(r["total_night_hours"]),
                    overtime_allowance_amount=to_decimal(r["overtime_allowance_amount"]),
                    night_allowance_already_paid=to_decimal(r["night_allowance_already_paid"]),
                    net_overtime_allowance=to_decimal(r["net_overtime_allowance"]),
                    monthly_work_hours=_decode_months(r.get("monthly_work_hours")),
                )
                for r in fetchall(cur)
            ]

    def has_active_period_covering(self, day: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS hit FROM settlement_periods
                WHERE status=%s AND start_date <= %s AND end_date >= %s
                LIMIT 1
                """,
                (PeriodStatus.ACTIVE.value, day, day),
            )
            return fetchone(cur) is not None
