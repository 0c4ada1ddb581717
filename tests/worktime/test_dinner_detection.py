from __future__ import annotations

from datetime import date, datetime

import pytest

from attendance_engine.attendance.model import AttendanceEvent, DailyAttendance
from attendance_engine.core.enums import DayType, RecordMode, SourceSystem
from attendance_engine.rules.model import RuleConfiguration
from attendance_engine.worktime.calculator.standard_calculator import StandardWorkTimeCalculator
from attendance_engine.worktime.dinner import dinner_missing

RULES = RuleConfiguration(effective_from=date(2025, 1, 1))


def summary_for(check_in: datetime, check_out: datetime, *, had_dinner: bool = False):
    events = (
        AttendanceEvent(1, check_in.date(), check_in, RecordMode.CHECK_IN, SourceSystem.TERMINAL),
        AttendanceEvent(1, check_in.date(), check_out, RecordMode.CHECK_OUT, SourceSystem.TERMINAL),
    )
    attendance = DailyAttendance(
        employee_id=1,
        work_date=check_in.date(),
        check_in=check_in,
        check_out=check_out,
        had_dinner=had_dinner,
        events=events,
    )
    return StandardWorkTimeCalculator().compute(
        employee_id=1,
        work_date=check_in.date(),
        attendance=attendance,
        rules=RULES,
        day_type=DayType.WEEKDAY,
        overtime_threshold_hours=RULES.overtime_threshold_hours,
    )


@pytest.mark.parametrize(
    "check_in, check_out, expected",
    [
        (datetime(2025, 6, 19, 9, 0), datetime(2025, 6, 19, 21, 0), True),
        (datetime(2025, 6, 19, 10, 0), datetime(2025, 6, 19, 19, 1), True),
        (datetime(2025, 6, 19, 19, 0), datetime(2025, 6, 20, 5, 0), True),
        (datetime(2025, 6, 19, 9, 0), datetime(2025, 6, 19, 18, 30), False),
        (datetime(2025, 6, 19, 19, 30), datetime(2025, 6, 20, 5, 0), False),
        (datetime(2025, 6, 19, 11, 0), datetime(2025, 6, 19, 19, 30), False),
    ],
)
def test_long_day_past_seven_pm_without_dinner_is_flagged(check_in, check_out, expected):
    assert summary_for(check_in, check_out).dinner_missing is expected


def test_recorded_dinner_clears_the_flag():
    summary = summary_for(datetime(2025, 6, 19, 9, 0), datetime(2025, 6, 19, 21, 0), had_dinner=True)

    assert summary.had_dinner is True
    assert summary.dinner_missing is False
    assert summary.to_dict()["dinner_missing"] is False


def test_net_minutes_threshold_is_inclusive():
    check_in = datetime(2025, 6, 19, 10, 0)
    check_out = datetime(2025, 6, 19, 20, 0)

    assert dinner_missing(check_in, check_out, 480, had_dinner=False) is True
    assert dinner_missing(check_in, check_out, 479, had_dinner=False) is False
