from __future__ import annotations

import csv
import io
from typing import Sequence

import pandas as pd

from ..common.datetime_utils import format_hours
from .model import QuarterlySettlement

SETTLEMENT_COLUMNS = [
    "employee_id",
    "employee_name",
    "department",
    "position",
    "work_days",
    "total_work_hours",
    "weeks_in_period",
    "weekly_avg_hours",
    "excess_hours",
    "total_night_hours",
    "overtime_allowance_amount",
    "night_allowance_already_paid",
    "net_overtime_allowance",
]


def _month_columns(settlements: Sequence[QuarterlySettlement]) -> list[str]:
    months = sorted({m for s in settlements for m, _ in s.monthly_work_hours})
    return [f"hours_{m.strftime('%Y-%m')}" for m in months]


def _rows(settlements: Sequence[QuarterlySettlement]) -> list[dict]:
    rows = []
    for s in settlements:
        row = {k: v for k, v in s.to_dict().items() if k in SETTLEMENT_COLUMNS}
        for month, hours in s.monthly_work_hours:
            row[f"hours_{month.strftime('%Y-%m')}"] = format_hours(hours)
        rows.append(row)
    return rows


def settlements_to_csv(settlements: Sequence[QuarterlySettlement]) -> str:
    """Header line plus one line per employee."""
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=SETTLEMENT_COLUMNS + _month_columns(settlements), restval="0")
    writer.writeheader()
    for row in _rows(settlements):
        writer.writerow(row)
    return out.getvalue()


def settlements_to_xlsx(settlements: Sequence[QuarterlySettlement], *, sheet_name: str = "Settlement") -> bytes:
    columns = SETTLEMENT_COLUMNS + _month_columns(settlements)
    df = pd.DataFrame(_rows(settlements), columns=columns)

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
    return output.getvalue()
