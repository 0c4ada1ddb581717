from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import ClassVar, Union

from ..core.enums import RecordMode, SourceSystem


@dataclass(frozen=True)
class RawRecord:
    """One parsed export line (ephemeral, lives only during an import)."""

    line_no: int
    occurred_date: date
    occurred_time_text: str
    timestamp: datetime
    work_date: date
    display_name: str
    employee_number: str
    mode: RecordMode
    job_title: str = ""
    category: str = ""
    result_flag: str = ""

    source_system: ClassVar[SourceSystem]


@dataclass(frozen=True)
class TerminalOriginRecord(RawRecord):
    """Long-form line exported by the physical terminal."""

    terminal_id: str = ""
    external_user_ref: str = ""
    source_label: str = ""

    source_system: ClassVar[SourceSystem] = SourceSystem.TERMINAL


@dataclass(frozen=True)
class WebOriginRecord(RawRecord):
    """Short-form line from a manual web submission."""

    source_system: ClassVar[SourceSystem] = SourceSystem.WEB


ParsedRecord = Union[TerminalOriginRecord, WebOriginRecord]


@dataclass(frozen=True)
class LineError:
    line_no: int
    line: str
    reason: str

    def to_dict(self) -> dict:
        return {"line_no": self.line_no, "line": self.line, "reason": self.reason}


@dataclass
class ParseResult:
    records: list[ParsedRecord] = field(default_factory=list)
    errors: list[LineError] = field(default_factory=list)
    skipped: int = 0
