from __future__ import annotations

from enum import Enum


class SourceSystem(str, Enum):
    """Where an attendance stamp came from."""

    TERMINAL = "terminal"
    WEB = "web"


class RecordMode(str, Enum):
    """Native terminal labels for a stamp."""

    CHECK_IN = "출근"
    CHECK_OUT = "퇴근"
    UNLOCK = "해제"
    LOCK = "세트"
    PASSAGE = "출입"


class EventKind(str, Enum):
    """Normalized meaning of a stamp for reconciliation."""

    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"
    PASSAGE = "passage"


class WorkStatus(str, Enum):
    """Trạng thái ngày công chuẩn hoá lưu trong CSDL."""

    NORMAL = "normal"
    LATE = "late"
    EARLY_LEAVE = "early_leave"
    ABSENT = "absent"
    TIME_ERROR = "time_error"


class DayType(str, Enum):
    WEEKDAY = "weekday"
    SATURDAY = "saturday"
    SUNDAY_OR_HOLIDAY = "sunday_or_holiday"


class PeriodStatus(str, Enum):
    """Lifecycle of a flexible-work settlement period."""

    PLANNED = "planned"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class LeaveKind(str, Enum):
    ANNUAL = "annual"
    SICK = "sick"
    SUBSTITUTE = "substitute"
    COMPENSATORY = "compensatory"
