from __future__ import annotations

import json
from datetime import date
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_mysql_time, to_decimal
from .model import BreakTier, NightWindow, RuleConfiguration
from .repository import HolidayRepository, RuleConfigurationRepository


def _parse_break_tiers(raw: Optional[str]) -> Optional[tuple[BreakTier, ...]]:
    if not raw:
        return None
    return tuple(BreakTier(min_minutes=int(m), break_minutes=int(b)) for m, b in json.loads(raw))


class MySQLRuleConfigurationRepository(RuleConfigurationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_effective(self, on: date) -> Optional[RuleConfiguration]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT *
                FROM rule_configurations
                WHERE effective_from <= %s AND (effective_to IS NULL OR effective_to >= %s)
                ORDER BY effective_from DESC, rule_id DESC
                LIMIT 1
                """,
                (on, on),
            )
            r = fetchone(cur)
            if not r:
                return None
            return RuleConfiguration(
                rule_id=int(r["rule_id"]),
                effective_from=r["effective_from"],
                effective_to=r.get("effective_to"),
                lunch_break_minutes=int(r["lunch_break_minutes"]),
                break_tiers=_parse_break_tiers(r.get("break_tiers")),
                night_window=NightWindow(
                    start=normalize_mysql_time(r["night_start"]),
                    end=normalize_mysql_time(r["night_end"]),
                ),
                overtime_threshold_hours=to_decimal(r["overtime_threshold_hours"]),
                flexible_threshold_hours=to_decimal(r["flexible_threshold_hours"]),
                overtime_rate=to_decimal(r["overtime_rate"]),
                night_rate=to_decimal(r["night_rate"]),
                weekly_baseline_hours=to_decimal(r["weekly_baseline_hours"]),
                monthly_standard_hours=to_decimal(r["monthly_standard_hours"]),
                saturday_base_rate=to_decimal(r["saturday_base_rate"]),
                saturday_extra_rate=to_decimal(r["saturday_extra_rate"]),
                holiday_base_rate=to_decimal(r["holiday_base_rate"]),
                holiday_extra_rate=to_decimal(r["holiday_extra_rate"]),
                night_accrual_bonus=to_decimal(r["night_accrual_bonus"]),
                scheduled_start=normalize_mysql_time(r.get("scheduled_start")),
                scheduled_end=normalize_mysql_time(r.get("scheduled_end")),
                late_grace_minutes=int(r.get("late_grace_minutes") or 0),
            )


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def is_holiday(self, day: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS hit FROM holidays WHERE holiday_date=%s", (day,))
            return fetchone(cur) is not None
