from __future__ import annotations

from datetime import date
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, to_decimal
from .model import MonthlyNightPay
from .repository import NightPayRepository


class MySQLNightPayRepository(NightPayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert_many(self, rows: Sequence[MonthlyNightPay]) -> None:
        if not rows:
            return
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO monthly_night_pay
                    (employee_id, pay_month, night_hours, hourly_rate, night_rate, allowance_amount)
                VALUES (%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    night_hours=VALUES(night_hours),
                    hourly_rate=VALUES(hourly_rate),
                    night_rate=VALUES(night_rate),
                    allowance_amount=VALUES(allowance_amount)
                """,
                [
                    (r.employee_id, r.pay_month, r.night_hours, r.hourly_rate, r.night_rate, r.allowance_amount)
                    for r in rows
                ],
            )

    def list_for_employee(self, employee_id: int, *, start_month: date, end_month: date) -> Sequence[MonthlyNightPay]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, pay_month, night_hours, hourly_rate, night_rate, allowance_amount
                FROM monthly_night_pay
                WHERE employee_id=%s AND pay_month BETWEEN %s AND %s
                ORDER BY pay_month
                """,
                (employee_id, start_month, end_month),
            )
            return [
                MonthlyNightPay(
                    employee_id=int(r["employee_id"]),
                    pay_month=r["pay_month"],
                    night_hours=to_decimal(r["night_hours"]),
                    hourly_rate=to_decimal(r["hourly_rate"]),
                    night_rate=to_decimal(r["night_rate"]),
                    allowance_amount=to_decimal(r["allowance_amount"]),
                )
                for r in fetchall(cur)
            ]
