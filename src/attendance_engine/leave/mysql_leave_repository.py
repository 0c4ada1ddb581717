from __future__ import annotations

from datetime import date
from decimal import Decimal

from ..core.enums import LeaveKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import LeaveCounters
from .repository import LeaveRepository

# (granted column, used column) per day-based kind
_DAY_COLUMNS = {
    LeaveKind.ANNUAL: ("annual_days", "used_annual_days"),
    LeaveKind.SICK: ("sick_days", "used_sick_days"),
}


def _day_columns(kind: LeaveKind) -> tuple[str, str]:
    try:
        return _DAY_COLUMNS[kind]
    except KeyError:
        raise ValueError(f"{kind.value} leave is not tracked in days") from None


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _ensure_balance_row(cur, employee_id: int) -> None:
        cur.execute("INSERT IGNORE INTO leave_balances(employee_id) VALUES (%s)", (employee_id,))

    def get_counters(self, employee_id: int) -> LeaveCounters:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT annual_days, used_annual_days, sick_days, used_sick_days
                FROM leave_balances WHERE employee_id=%s
                """,
                (employee_id,),
            )
            r = fetchone(cur)
        if not r:
            return LeaveCounters()
        return LeaveCounters(
            annual_days=to_decimal(r["annual_days"]),
            used_annual_days=to_decimal(r["used_annual_days"]),
            sick_days=to_decimal(r["sick_days"]),
            used_sick_days=to_decimal(r["used_sick_days"]),
        )

    def add_granted_days(self, employee_id: int, kind: LeaveKind, days: Decimal) -> None:
        granted, _ = _day_columns(kind)
        with db_cursor(self._conn_factory) as (_, cur):
            self._ensure_balance_row(cur, employee_id)
            cur.execute(f"UPDATE leave_balances SET {granted}={granted}+%s WHERE employee_id=%s", (days, employee_id))

    def use_days_if_available(self, employee_id: int, kind: LeaveKind, days: Decimal) -> bool:
        granted, used = _day_columns(kind)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE leave_balances
                SET {used}={used}+%s
                WHERE employee_id=%s AND {granted}-{used} >= %s
                """,
                (days, employee_id, days),
            )
            return cur.rowcount > 0

    def get_day_credit(self, employee_id: int, work_date: date) -> tuple[Decimal, Decimal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT kind, hours FROM leave_day_credits WHERE employee_id=%s AND work_date=%s",
                (employee_id, work_date),
            )
            credits = {r["kind"]: to_decimal(r["hours"]) for r in fetchall(cur)}
        return (
            credits.get(LeaveKind.SUBSTITUTE.value, Decimal("0")),
            credits.get(LeaveKind.COMPENSATORY.value, Decimal("0")),
        )

    def replace_day_credit(
        self,
        employee_id: int,
        work_date: date,
        *,
        substitute_hours: Decimal,
        compensatory_hours: Decimal,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            for kind, hours in ((LeaveKind.SUBSTITUTE, substitute_hours), (LeaveKind.COMPENSATORY, compensatory_hours)):
                if hours > 0:
                    cur.execute(
                        """
                        INSERT INTO leave_day_credits(employee_id, work_date, kind, hours)
                        VALUES (%s,%s,%s,%s)
                        ON DUPLICATE KEY UPDATE hours=VALUES(hours)
                        """,
                        (employee_id, work_date, kind.value, hours),
                    )
                else:
                    cur.execute(
                        "DELETE FROM leave_day_credits WHERE employee_id=%s AND work_date=%s AND kind=%s",
                        (employee_id, work_date, kind.value),
                    )

    @staticmethod
    def _sum_hours(cur, table: str, employee_id: int, kind: LeaveKind) -> Decimal:
        cur.execute(
            f"SELECT COALESCE(SUM(hours), 0) AS total FROM {table} WHERE employee_id=%s AND kind=%s",
            (employee_id, kind.value),
        )
        return to_decimal(fetchone(cur)["total"])

    def credited_hours(self, employee_id: int, kind: LeaveKind) -> Decimal:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._sum_hours(cur, "leave_day_credits", employee_id, kind)

    def debited_hours(self, employee_id: int, kind: LeaveKind) -> Decimal:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._sum_hours(cur, "leave_debits", employee_id, kind)

    def debit_hours_if_available(self, employee_id: int, kind: LeaveKind, hours: Decimal) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # Row lock serializes concurrent debits for the same employee.
            self._ensure_balance_row(cur, employee_id)
            cur.execute("SELECT employee_id FROM leave_balances WHERE employee_id=%s FOR UPDATE", (employee_id,))
            cur.fetchall()

            available = self._sum_hours(cur, "leave_day_credits", employee_id, kind) - self._sum_hours(
                cur, "leave_debits", employee_id, kind
            )
            if available < hours:
                return False
            cur.execute(
                "INSERT INTO leave_debits(employee_id, kind, hours) VALUES (%s,%s,%s)",
                (employee_id, kind.value, hours),
            )
            return True
