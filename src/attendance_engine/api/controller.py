from __future__ import annotations

from datetime import date, datetime

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_decimal, require_positive_int
from ..container import Container
from ..core.enums import LeaveKind, PeriodStatus
from ..core.exceptions import (
    ConfigurationMissingError,
    DomainError,
    IdentityResolutionError,
    LineParseError,
    SettlementConflictError,
    ValidationError,
)
from ..imports.parser import parse_mode
from ..settlement.export import settlements_to_csv, settlements_to_xlsx

_STATUS_BY_ERROR = (
    (SettlementConflictError, 409),
    (ConfigurationMissingError, 422),
    (ValidationError, 400),
    (IdentityResolutionError, 400),
    (LineParseError, 400),
)

_TRANSITIONS = {
    "activate": PeriodStatus.ACTIVE,
    "complete": PeriodStatus.COMPLETED,
    "cancel": PeriodStatus.CANCELLED,
}


def _fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def _date(value: str, field_name: str = "date") -> date:
    try:
        return parse_iso_date(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be YYYY-MM-DD") from None


def _datetime(value: str, field_name: str) -> datetime:
    try:
        return datetime.fromisoformat(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be an ISO date-time") from None


def _leave_kind(value: str) -> LeaveKind:
    try:
        return LeaveKind(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"unknown leave kind {value!r}") from None


def _payload() -> dict:
    return request.get_json(silent=True) or {}


def _import_lines() -> list[str]:
    upload = request.files.get("file")
    if upload is not None:
        return upload.read().decode("utf-8-sig").splitlines()
    data = _payload()
    if isinstance(data.get("lines"), list):
        return [str(line) for line in data["lines"]]
    return str(data.get("text", "")).splitlines()


def register(app: Flask, container: Container) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(err: DomainError):
        for error_type, status in _STATUS_BY_ERROR:
            if isinstance(err, error_type):
                return _fail(str(err), status)
        return _fail(str(err), 400)

    # Attendance
    @app.route("/api/attendance/import", methods=["POST"], endpoint="api_attendance_import")
    def api_attendance_import():
        lines = _import_lines()
        if not lines:
            raise ValidationError("no lines to import")
        result = container.attendance_service.import_batch(lines)
        return jsonify({"success": True, **result.to_dict()}), 200

    @app.route(
        "/api/attendance/<int:employee_id>/<work_date>/recompute",
        methods=["POST"],
        endpoint="api_attendance_recompute",
    )
    def api_attendance_recompute(employee_id: int, work_date: str):
        had_dinner = _payload().get("had_dinner")
        summary = container.attendance_service.recompute_day(
            employee_id,
            _date(work_date, "work_date"),
            had_dinner_override=None if had_dinner is None else bool(had_dinner),
        )
        return jsonify({"success": True, "summary": summary.to_dict()}), 200

    @app.route("/api/attendance/manual", methods=["POST"], endpoint="api_attendance_manual")
    def api_attendance_manual():
        data = _payload()
        work_date = data.get("work_date")
        summary = container.attendance_service.submit_manual_event(
            require_positive_int(data.get("employee_id"), "employee_id"),
            _datetime(data.get("timestamp", ""), "timestamp"),
            parse_mode(data.get("mode", "")),
            work_date=_date(work_date, "work_date") if work_date else None,
        )
        return jsonify({"success": True, "summary": summary.to_dict()}), 201

    @app.route(
        "/api/worktime/<int:employee_id>/<int:year>/<int:month>",
        methods=["GET"],
        endpoint="api_worktime_monthly",
    )
    def api_worktime_monthly(employee_id: int, year: int, month: int):
        if not 1 <= month <= 12:
            raise ValidationError("month must be 1-12")
        stats = container.worktime_service.monthly_stats(employee_id, year, month)
        return jsonify({"success": True, "stats": stats.to_dict()}), 200

    @app.route("/api/payroll/night-pay/<int:year>/<int:month>", methods=["POST"], endpoint="api_night_pay_record")
    def api_night_pay_record(year: int, month: int):
        if not 1 <= month <= 12:
            raise ValidationError("month must be 1-12")
        rows = container.night_pay_service.record_month(year, month)
        return jsonify({"success": True, "rows": [r.to_dict() for r in rows]}), 200

    # Settlement
    @app.route("/api/settlement/periods", methods=["GET"], endpoint="api_settlement_periods")
    def api_settlement_periods():
        periods = container.settlement_service.list_periods()
        return jsonify({"success": True, "periods": [p.to_dict() for p in periods]}), 200

    @app.route("/api/settlement/periods", methods=["POST"], endpoint="api_settlement_period_create")
    def api_settlement_period_create():
        data = _payload()
        period = container.settlement_service.create_period(
            str(data.get("name", "")),
            _date(data.get("start_date"), "start_date"),
            _date(data.get("end_date"), "end_date"),
        )
        return jsonify({"success": True, "period": period.to_dict()}), 201

    @app.route(
        "/api/settlement/periods/<int:period_id>/<action>",
        methods=["POST"],
        endpoint="api_settlement_period_transition",
    )
    def api_settlement_period_transition(period_id: int, action: str):
        if action == "run":
            run = container.settlement_service.run_quarterly_settlement(period_id)
            return jsonify(
                {
                    "success": True,
                    "period": run.period.to_dict(),
                    "settlements": [s.to_dict() for s in run.settlements],
                    "summary": container.settlement_service.summarize(run.settlements).to_dict(),
                    "csv": run.csv_export,
                }
            ), 200

        target = _TRANSITIONS.get(action)
        if target is None:
            return _fail(f"unknown action {action!r}", 404)
        period = container.settlement_service.transition(period_id, target)
        return jsonify({"success": True, "period": period.to_dict()}), 200

    def _download(payload: bytes, *, mimetype: str, filename: str):
        return app.response_class(
            payload,
            mimetype=mimetype,
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/settlement/periods/<int:period_id>/export.csv", methods=["GET"], endpoint="api_settlement_csv")
    def api_settlement_csv(period_id: int):
        settlements = container.settlement_service.list_settlements(period_id)
        return _download(
            settlements_to_csv(settlements).encode("utf-8-sig"),
            mimetype="text/csv",
            filename=f"settlement_{period_id}.csv",
        )

    @app.route("/api/settlement/periods/<int:period_id>/export.xlsx", methods=["GET"], endpoint="api_settlement_xlsx")
    def api_settlement_xlsx(period_id: int):
        settlements = container.settlement_service.list_settlements(period_id)
        return _download(
            settlements_to_xlsx(settlements),
            mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            filename=f"settlement_{period_id}.xlsx",
        )

    # Leave
    @app.route("/api/leave/<int:employee_id>", methods=["GET"], endpoint="api_leave_balance")
    def api_leave_balance(employee_id: int):
        balance = container.leave_ledger.get_balance(employee_id)
        return jsonify({"success": True, "balance": balance.to_dict()}), 200

    @app.route("/api/leave/<int:employee_id>/debit", methods=["POST"], endpoint="api_leave_debit")
    def api_leave_debit(employee_id: int):
        data = _payload()
        result = container.leave_ledger.debit_leave(
            employee_id,
            _leave_kind(data.get("kind", "")),
            require_decimal(data.get("hours"), "hours"),
        )
        if not result.ok:
            return _fail(result.reason or "leave debit rejected", 400)
        return jsonify({"success": True, "balance": result.balance.to_dict()}), 200

    @app.route("/api/leave/<int:employee_id>/grant", methods=["POST"], endpoint="api_leave_grant")
    def api_leave_grant(employee_id: int):
        data = _payload()
        balance = container.leave_ledger.grant_days(
            employee_id,
            _leave_kind(data.get("kind", "")),
            require_decimal(data.get("days"), "days"),
        )
        return jsonify({"success": True, "balance": balance.to_dict()}), 200
