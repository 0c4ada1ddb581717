from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.reconciler import EventReconciler
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeDirectory
from .leave.ledger import LeaveLedger
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .payroll.mysql_night_pay_repository import MySQLNightPayRepository
from .payroll.night_pay import NightPayService
from .rules.mysql_rule_repository import MySQLHolidayRepository, MySQLRuleConfigurationRepository
from .rules.service import RuleService
from .settlement.mysql_settlement_repository import MySQLSettlementRepository
from .settlement.service import SettlementService
from .worktime.calculator.standard_calculator import StandardWorkTimeCalculator
from .worktime.mysql_summary_repository import MySQLWorkSummaryRepository
from .worktime.service import WorkTimeService


@dataclass(frozen=True)
class Container:
    attendance_service: AttendanceService
    worktime_service: WorkTimeService
    settlement_service: SettlementService
    night_pay_service: NightPayService
    leave_ledger: LeaveLedger
    directory: EmployeeDirectory


def build_services(
    *,
    employees,
    rules,
    holidays,
    attendance,
    summaries,
    leave,
    settlements,
    night_pay,
    passage_backfill: bool = True,
) -> Container:
    """Wire services over any repository implementations (MySQL or in-memory)."""
    directory = EmployeeDirectory(employees)
    rule_service = RuleService(rules, holidays, flexible_periods=settlements)
    ledger = LeaveLedger(leave)
    worktime_service = WorkTimeService(summaries, rule_service, ledger, calculator=StandardWorkTimeCalculator())
    attendance_service = AttendanceService(
        attendance,
        directory,
        worktime_service,
        reconciler=EventReconciler(passage_backfill=passage_backfill),
    )

    return Container(
        attendance_service=attendance_service,
        worktime_service=worktime_service,
        settlement_service=SettlementService(settlements, summaries, directory, rule_service, night_pay),
        night_pay_service=NightPayService(summaries, directory, rule_service, night_pay),
        leave_ledger=ledger,
        directory=directory,
    )


def build_container(*, db_config: dict, passage_backfill: bool = True) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return build_services(
        employees=MySQLEmployeeRepository(conn),
        rules=MySQLRuleConfigurationRepository(conn),
        holidays=MySQLHolidayRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
        summaries=MySQLWorkSummaryRepository(conn),
        leave=MySQLLeaveRepository(conn),
        settlements=MySQLSettlementRepository(conn),
        night_pay=MySQLNightPayRepository(conn),
        passage_backfill=passage_backfill,
    )
