from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from attendance_engine.core.enums import LeaveKind, RecordMode, SourceSystem, WorkStatus
from attendance_engine.core.exceptions import ConfigurationMissingError, ValidationError
from attendance_engine.employees.model import Employee

from fakes import make_services

EMPLOYEES = [
    Employee(employee_id=1, display_name="이재혁", employee_number="23"),
    Employee(employee_id=2, display_name="김 민수", employee_number="31"),
    Employee(employee_id=3, display_name="박지은", employee_number="40"),
    Employee(employee_id=4, display_name="박 지은", employee_number="41"),
]


def line(date_text: str, time_text: str, name: str, mode: str) -> str:
    return "\t".join([date_text, time_text, "2", "7", name, "23", "", "일반", mode, "CAPS", "O"])


def test_import_reconciles_each_employee_day():
    container, stores = make_services(employees=EMPLOYEES)

    result = container.attendance_service.import_batch(
        [
            line("2025. 6. 19.", "AM 9:00:00", "이재혁", "출근"),
            line("2025. 6. 19.", "PM 6:00:00", "이재혁", "퇴근"),
            line("2025. 6. 19.", "PM 10:00:00", "김민수", "출근"),
            line("2025. 6. 20.", "AM 3:00:00", "김민수", "퇴근"),
        ]
    )

    assert result.parsed_count == 4
    assert result.reconciled_days == 2
    assert result.failed_days == 0
    assert result.errors == []

    night = stores["summaries"].get(2, date(2025, 6, 19))
    assert night.night_hours == Decimal("5.00")
    assert stores["attendance"].get_daily(2, date(2025, 6, 19)).check_out == datetime(2025, 6, 20, 3, 0)


def test_unknown_and_ambiguous_names_are_line_errors():
    container, stores = make_services(employees=EMPLOYEES)

    result = container.attendance_service.import_batch(
        [
            line("2025. 6. 19.", "AM 9:00:00", "홍길동", "출근"),
            line("2025. 6. 19.", "AM 9:00:00", "박지은", "출근"),
            line("2025. 6. 19.", "AM 9:00:00", "이재혁", "출근"),
        ]
    )

    assert [e.line_no for e in result.errors] == [1, 2]
    assert "unknown" in result.errors[0].reason
    assert "share the name" in result.errors[1].reason
    assert result.reconciled_days == 1
    assert stores["summaries"].get(1, date(2025, 6, 19)).status == WorkStatus.TIME_ERROR


def test_reimport_is_idempotent():
    container, stores = make_services(employees=EMPLOYEES)
    lines = [
        line("2025. 6. 21.", "AM 9:00:00", "이재혁", "출근"),
        line("2025. 6. 21.", "PM 7:00:00", "이재혁", "퇴근"),
    ]

    container.attendance_service.import_batch(lines)
    first = stores["summaries"].get(1, date(2025, 6, 21))
    container.attendance_service.import_batch(lines)
    second = stores["summaries"].get(1, date(2025, 6, 21))

    assert first == second
    assert len(stores["attendance"].events) == 2
    assert container.leave_ledger.get_balance(1).substitute_leave_hours == Decimal("9.50")


def test_missing_configuration_fails_the_day_but_not_the_batch():
    container, _ = make_services(employees=EMPLOYEES, configs=[])

    result = container.attendance_service.import_batch([line("2025. 6. 19.", "AM 9:00:00", "이재혁", "출근")])

    assert result.failed_days == 1
    assert result.reconciled_days == 0
    assert result.day_failures[0].employee_id == 1

    with pytest.raises(ConfigurationMissingError):
        container.attendance_service.recompute_day(1, date(2025, 6, 19))


def test_recompute_with_dinner_override_is_remembered():
    container, _ = make_services(employees=EMPLOYEES)
    container.attendance_service.import_batch(
        [
            line("2025. 6. 19.", "AM 9:00:00", "이재혁", "출근"),
            line("2025. 6. 19.", "PM 9:00:00", "이재혁", "퇴근"),
        ]
    )

    with_dinner = container.attendance_service.set_dinner(1, date(2025, 6, 19), True)
    again = container.attendance_service.recompute_day(1, date(2025, 6, 19))

    assert with_dinner.break_minutes == 120
    assert again == with_dinner


def test_day_without_events_recomputes_to_absent():
    container, _ = make_services(employees=EMPLOYEES)

    summary = container.attendance_service.recompute_day(1, date(2025, 6, 19))

    assert summary.status == WorkStatus.ABSENT


def test_manual_web_event_guard():
    container, stores = make_services(employees=EMPLOYEES)
    service = container.attendance_service

    service.submit_manual_event(1, datetime(2025, 6, 19, 9, 0), RecordMode.CHECK_IN)
    with pytest.raises(ValidationError):
        service.submit_manual_event(1, datetime(2025, 6, 19, 9, 30), RecordMode.UNLOCK)

    summary = service.submit_manual_event(1, datetime(2025, 6, 19, 18, 0), RecordMode.CHECK_OUT)
    assert summary.status == WorkStatus.NORMAL
    assert summary.basic_hours == Decimal("8.00")
    assert all(e.source_system == SourceSystem.WEB for e in stores["attendance"].events.values())


def test_terminal_event_alongside_web_event_is_accepted():
    container, stores = make_services(employees=EMPLOYEES)
    service = container.attendance_service

    service.submit_manual_event(1, datetime(2025, 6, 19, 9, 10), RecordMode.CHECK_IN)
    service.import_batch(
        [
            line("2025. 6. 19.", "AM 9:00:00", "이재혁", "출근"),
            line("2025. 6. 19.", "PM 6:00:00", "이재혁", "퇴근"),
        ]
    )

    daily = stores["attendance"].get_daily(1, date(2025, 6, 19))
    assert len(daily.events) == 3
    assert daily.check_in == datetime(2025, 6, 19, 9, 0)


def test_manual_event_for_unknown_employee_is_rejected():
    container, _ = make_services(employees=EMPLOYEES)

    with pytest.raises(ValidationError):
        container.attendance_service.submit_manual_event(99, datetime(2025, 6, 19, 9, 0), RecordMode.CHECK_IN)


def test_early_morning_manual_check_out_belongs_to_previous_day():
    container, stores = make_services(employees=EMPLOYEES)
    service = container.attendance_service

    service.submit_manual_event(1, datetime(2025, 6, 19, 21, 0), RecordMode.CHECK_IN)
    summary = service.submit_manual_event(1, datetime(2025, 6, 20, 2, 0), RecordMode.CHECK_OUT)

    assert summary.work_date == date(2025, 6, 19)
    assert summary.night_hours == Decimal("4.00")


def test_holiday_on_saturday_credits_compensatory_leave():
    container, _ = make_services(employees=EMPLOYEES, holidays={date(2025, 6, 21)})
    container.attendance_service.import_batch(
        [
            line("2025. 6. 21.", "AM 9:00:00", "이재혁", "출근"),
            line("2025. 6. 21.", "PM 6:00:00", "이재혁", "퇴근"),
        ]
    )

    balance = container.leave_ledger.get_balance(1)
    assert balance.substitute_leave_hours == 0
    assert balance.compensatory_leave_hours == Decimal("12.00")
    assert container.leave_ledger.debit_leave(1, LeaveKind.COMPENSATORY, Decimal("12")).ok


def web_line(date_text: str, time_text: str, name: str, mode: str) -> str:
    return "\t".join([date_text, time_text, name, "23", "", "일반", mode, "O"])


def test_imported_web_lines_get_the_one_per_kind_guard():
    container, stores = make_services(employees=EMPLOYEES)
    lines = [
        web_line("2025. 6. 19.", "AM 9:00:00", "이재혁", "출근"),
        web_line("2025. 6. 19.", "AM 9:05:00", "이재혁", "출근"),
        web_line("2025. 6. 19.", "PM 6:00:00", "이재혁", "퇴근"),
    ]

    result = container.attendance_service.import_batch(lines)
    again = container.attendance_service.import_batch(lines[:1] + lines[2:])

    assert [e.line_no for e in result.errors] == [2]
    assert "already exists" in result.errors[0].reason
    assert again.errors == []
    web_check_ins = [
        e for e in stores["attendance"].events.values()
        if e.source_system == SourceSystem.WEB and e.mode == RecordMode.CHECK_IN
    ]
    assert [e.timestamp for e in web_check_ins] == [datetime(2025, 6, 19, 9, 0)]


def test_imported_web_line_conflicting_with_manual_stamp_is_a_line_error():
    container, _ = make_services(employees=EMPLOYEES)
    container.attendance_service.submit_manual_event(1, datetime(2025, 6, 19, 9, 0), RecordMode.CHECK_IN)

    result = container.attendance_service.import_batch([web_line("2025. 6. 19.", "AM 9:10:00", "이재혁", "출근")])

    assert [e.line_no for e in result.errors] == [1]


def test_refused_dinner_change_leaves_the_day_untouched():
    container, stores = make_services(employees=EMPLOYEES)
    saturday = date(2025, 6, 21)
    container.attendance_service.import_batch(
        [
            line("2025. 6. 21.", "AM 9:00:00", "이재혁", "출근"),
            line("2025. 6. 21.", "PM 6:00:00", "이재혁", "퇴근"),
        ]
    )
    assert container.leave_ledger.debit_leave(1, LeaveKind.SUBSTITUTE, Decimal("8")).ok

    with pytest.raises(ValidationError):
        container.attendance_service.set_dinner(1, saturday, True)

    assert stores["attendance"].get_daily(1, saturday).had_dinner is False
    assert stores["summaries"].get(1, saturday).had_dinner is False
    assert container.attendance_service.recompute_day(1, saturday).break_minutes == 60
