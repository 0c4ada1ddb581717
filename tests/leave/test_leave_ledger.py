from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from attendance_engine.core.enums import LeaveKind
from attendance_engine.core.exceptions import ValidationError
from attendance_engine.leave.ledger import LeaveLedger, days_to_hours, hours_to_days, is_leave_unit

from fakes import InMemoryLeave

SATURDAY = date(2025, 6, 21)


@pytest.fixture
def ledger():
    ledger = LeaveLedger(InMemoryLeave())
    ledger.replace_day_credit(1, SATURDAY, substitute_hours=Decimal("8"), compensatory_hours=Decimal("0"))
    return ledger


def test_unit_helpers():
    assert hours_to_days(Decimal("12")) == Decimal("1.5")
    assert hours_to_days(Decimal("0")) == 0
    assert days_to_hours(Decimal("0.5")) == Decimal("4.0")
    assert is_leave_unit(Decimal("4"))
    assert is_leave_unit(Decimal("8"))
    assert not is_leave_unit(Decimal("2.4"))
    assert not is_leave_unit(Decimal("0"))


def test_debit_exact_balance_leaves_zero(ledger):
    result = ledger.debit_leave(1, LeaveKind.SUBSTITUTE, Decimal("8"))

    assert result.ok
    assert result.balance.substitute_leave_hours == 0


def test_debit_beyond_balance_is_rejected(ledger):
    assert ledger.debit_leave(1, LeaveKind.SUBSTITUTE, Decimal("8")).ok

    result = ledger.debit_leave(1, LeaveKind.SUBSTITUTE, Decimal("4"))

    assert not result.ok
    assert "insufficient" in result.reason
    assert ledger.get_balance(1).substitute_leave_hours == 0


def test_non_half_day_request_is_rejected_regardless_of_balance(ledger):
    result = ledger.debit_leave(1, LeaveKind.SUBSTITUTE, days_to_hours(Decimal("0.3")))

    assert not result.ok
    assert "4h" in result.reason
    assert ledger.get_balance(1).substitute_leave_hours == Decimal("8")


def test_recomputed_credit_overwrites_instead_of_stacking(ledger):
    ledger.replace_day_credit(1, SATURDAY, substitute_hours=Decimal("9.5"), compensatory_hours=Decimal("0"))
    ledger.replace_day_credit(1, SATURDAY, substitute_hours=Decimal("9.5"), compensatory_hours=Decimal("0"))

    assert ledger.get_balance(1).substitute_leave_hours == Decimal("9.5")


def test_lowering_an_already_used_credit_is_refused(ledger):
    assert ledger.debit_leave(1, LeaveKind.SUBSTITUTE, Decimal("8")).ok

    with pytest.raises(ValidationError):
        ledger.replace_day_credit(1, SATURDAY, substitute_hours=Decimal("0"), compensatory_hours=Decimal("0"))

    assert ledger.get_balance(1).substitute_leave_hours == 0


def test_annual_leave_is_granted_and_used_in_days():
    ledger = LeaveLedger(InMemoryLeave())
    ledger.grant_days(1, LeaveKind.ANNUAL, Decimal("2"))

    assert ledger.debit_leave(1, LeaveKind.ANNUAL, Decimal("12")).ok
    balance = ledger.get_balance(1)
    assert balance.used_annual_days == Decimal("1.5")
    assert balance.remaining_annual_days == Decimal("0.5")

    assert not ledger.debit_leave(1, LeaveKind.ANNUAL, Decimal("8")).ok
    assert ledger.debit_leave(1, LeaveKind.ANNUAL, Decimal("4")).ok
    assert ledger.get_balance(1).remaining_annual_days == 0


def test_sick_leave_without_grant_is_rejected():
    result = LeaveLedger(InMemoryLeave()).debit_leave(1, LeaveKind.SICK, Decimal("8"))

    assert not result.ok


@pytest.mark.parametrize("kind, days", [(LeaveKind.SUBSTITUTE, Decimal("1")), (LeaveKind.ANNUAL, Decimal("0"))])
def test_invalid_grants(kind, days):
    with pytest.raises(ValidationError):
        LeaveLedger(InMemoryLeave()).grant_days(1, kind, days)
