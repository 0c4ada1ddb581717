from __future__ import annotations

import csv
import io
from datetime import date
from decimal import Decimal

import pandas as pd

from attendance_engine.settlement.export import SETTLEMENT_COLUMNS, settlements_to_csv, settlements_to_xlsx
from attendance_engine.settlement.model import QuarterlySettlement


def settlement(employee_id: int, name: str, amount: str) -> QuarterlySettlement:
    return QuarterlySettlement(
        period_id=1,
        employee_id=employee_id,
        employee_name=name,
        total_work_hours=Decimal("350.5"),
        weekly_avg_hours=Decimal("43.81"),
        total_night_hours=Decimal("12"),
        overtime_allowance_amount=Decimal(amount),
        night_allowance_already_paid=Decimal("50000"),
        net_overtime_allowance=Decimal(amount),
        weeks_in_period=Decimal("8.00"),
        excess_hours=Decimal("30.50"),
        work_days=35,
        monthly_work_hours=((date(2025, 6, 1), Decimal("200")), (date(2025, 7, 1), Decimal("150.5"))),
    )


def test_csv_has_header_and_one_line_per_employee():
    text = settlements_to_csv([settlement(1, "김민수", "457500"), settlement(2, "이재혁", "0")])

    rows = list(csv.DictReader(io.StringIO(text)))

    assert len(rows) == 2
    assert rows[0]["employee_name"] == "김민수"
    assert rows[0]["total_work_hours"] == "350.5"
    assert rows[0]["overtime_allowance_amount"] == "457500"
    assert rows[0]["night_allowance_already_paid"] == "50000"
    assert rows[0]["hours_2025-07"] == "150.5"
    assert rows[1]["net_overtime_allowance"] == "0"


def test_empty_csv_is_just_the_header():
    assert settlements_to_csv([]).strip() == ",".join(SETTLEMENT_COLUMNS)


def test_xlsx_round_trips_through_pandas():
    payload = settlements_to_xlsx([settlement(1, "김민수", "457500")])

    df = pd.read_excel(io.BytesIO(payload), engine="openpyxl")

    assert list(df.columns) == SETTLEMENT_COLUMNS + ["hours_2025-06", "hours_2025-07"]
    assert df.loc[0, "employee_name"] == "김민수"
