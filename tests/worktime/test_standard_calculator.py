from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from attendance_engine.attendance.model import AttendanceEvent, DailyAttendance
from attendance_engine.core.enums import DayType, RecordMode, SourceSystem, WorkStatus
from attendance_engine.rules.model import RuleConfiguration
from attendance_engine.worktime.calculator.standard_calculator import StandardWorkTimeCalculator

RULES = RuleConfiguration(effective_from=date(2025, 1, 1))


def day(check_in: datetime | None, check_out: datetime | None, *, work_date=date(2025, 6, 19), had_dinner=False):
    events = tuple(
        AttendanceEvent(1, work_date, stamp, mode, SourceSystem.TERMINAL)
        for stamp, mode in ((check_in, RecordMode.CHECK_IN), (check_out, RecordMode.CHECK_OUT))
        if stamp
    )
    return DailyAttendance(
        employee_id=1,
        work_date=work_date,
        check_in=check_in,
        check_out=check_out,
        had_dinner=had_dinner,
        events=events,
    )


def compute(attendance, *, day_type=DayType.WEEKDAY, threshold=Decimal("8"), rules=RULES):
    return StandardWorkTimeCalculator().compute(
        employee_id=1,
        work_date=attendance.work_date if attendance else date(2025, 6, 19),
        attendance=attendance,
        rules=rules,
        day_type=day_type,
        overtime_threshold_hours=threshold,
    )


def test_overnight_shift_splits_basic_overtime_and_night():
    summary = compute(day(datetime(2025, 6, 19, 21, 0), datetime(2025, 6, 20, 7, 0)))

    assert summary.status == WorkStatus.NORMAL
    assert summary.break_minutes == 60
    assert summary.basic_hours == Decimal("8.00")
    assert summary.overtime_hours == Decimal("1.00")
    assert summary.night_hours == Decimal("8.00")
    assert summary.substitute_hours_earned == Decimal("0")
    assert summary.compensatory_hours_earned == Decimal("0")


def test_raw_minutes_truncate_seconds():
    # 7:29:59 raw -> 449 minutes -> 30 min break -> 419 min
    summary = compute(day(datetime(2025, 6, 19, 9, 0, 0), datetime(2025, 6, 19, 16, 29, 59)))

    assert summary.basic_hours == Decimal("6.98")


def test_dinner_flag_adds_a_break():
    plain = compute(day(datetime(2025, 6, 19, 9, 0), datetime(2025, 6, 19, 21, 0)))
    dinner = compute(day(datetime(2025, 6, 19, 9, 0), datetime(2025, 6, 19, 21, 0), had_dinner=True))

    assert plain.total_hours - dinner.total_hours == Decimal("1.00")
    assert dinner.had_dinner is True


def test_flexible_threshold_keeps_long_day_in_basic_hours():
    attendance = day(datetime(2025, 6, 19, 8, 0), datetime(2025, 6, 19, 20, 0))

    standard = compute(attendance)
    flexible = compute(attendance, threshold=Decimal("12"))

    assert (standard.basic_hours, standard.overtime_hours) == (Decimal("8.00"), Decimal("3.00"))
    assert (flexible.basic_hours, flexible.overtime_hours) == (Decimal("11.00"), Decimal("0.00"))


def test_saturday_work_earns_substitute_leave():
    saturday = date(2025, 6, 21)
    summary = compute(
        day(datetime(2025, 6, 21, 9, 0), datetime(2025, 6, 21, 19, 0), work_date=saturday),
        day_type=DayType.SATURDAY,
    )

    # 9h net: 8 x 1.0 + 1 x 1.5
    assert summary.substitute_hours_earned == Decimal("9.50")
    assert summary.compensatory_hours_earned == Decimal("0")


def test_holiday_night_work_earns_compensatory_leave_with_night_bonus():
    sunday = date(2025, 6, 22)
    summary = compute(
        day(datetime(2025, 6, 22, 14, 0), datetime(2025, 6, 23, 0, 0), work_date=sunday),
        day_type=DayType.SUNDAY_OR_HOLIDAY,
    )

    # 9h net: 8 x 1.5 + 1 x 2.0 + 2h night x 0.5
    assert summary.night_hours == Decimal("2.00")
    assert summary.compensatory_hours_earned == Decimal("15.00")
    assert summary.substitute_hours_earned == Decimal("0")


def test_missing_check_out_is_time_error_with_zero_hours():
    summary = compute(day(datetime(2025, 6, 19, 9, 0), None))

    assert summary.status == WorkStatus.TIME_ERROR
    assert summary.total_hours == 0
    assert summary.night_hours == 0


def test_stay_fully_eaten_by_breaks_is_time_error():
    summary = compute(day(datetime(2025, 6, 19, 9, 0), datetime(2025, 6, 19, 9, 30), had_dinner=True))

    assert summary.status == WorkStatus.TIME_ERROR
    assert summary.total_hours == 0


def test_no_attendance_is_absent():
    summary = compute(None)

    assert summary.status == WorkStatus.ABSENT
    assert summary.total_hours == 0


def test_same_inputs_give_identical_summaries():
    attendance = day(datetime(2025, 6, 19, 21, 0), datetime(2025, 6, 20, 7, 0))
    assert compute(attendance) == compute(attendance)
