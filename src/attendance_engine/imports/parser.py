"""Terminal export line parser.

Two line shapes are accepted, told apart by field count:

* long form (10+ fields) exported by the terminal::

    date, time, terminal id, user ref, name, employee no, job title, category, mode, source[, result]

* short form (8 fields) produced by manual web entry::

    date, time, name, employee no, job title, category, mode, result

A malformed line never aborts the batch; it becomes a ``LineError``.
"""

from __future__ import annotations

import csv
import logging
import re
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional

from ..core.constants import ROLLOVER_HOUR
from ..core.enums import RecordMode
from ..core.exceptions import LineParseError
from .model import LineError, ParsedRecord, ParseResult, TerminalOriginRecord, WebOriginRecord

logger = logging.getLogger(__name__)

LONG_FORM_MIN_FIELDS = 10
SHORT_FORM_FIELDS = 8

HEADER_FIRST_FIELDS = {"발생일자", "date", "occurred_date"}

_DATE_RE = re.compile(r"^\s*(\d{4})\s*\.\s*(\d{1,2})\s*\.\s*(\d{1,2})\s*\.?\s*$")
_TIME_RE = re.compile(
    r"^(?:(?P<pre>AM|PM)\s*)?(?P<h>\d{1,2}):(?P<m>\d{2})(?::(?P<s>\d{2}))?(?:\s*(?P<post>AM|PM))?$",
    re.IGNORECASE,
)

_MARKER_ALIASES = {"오전": "AM", "오후": "PM"}

_MODE_ALIASES = {
    "출근": RecordMode.CHECK_IN,
    "퇴근": RecordMode.CHECK_OUT,
    "해제": RecordMode.UNLOCK,
    "세트": RecordMode.LOCK,
    "출입": RecordMode.PASSAGE,
    "check-in": RecordMode.CHECK_IN,
    "check-out": RecordMode.CHECK_OUT,
    "unlock": RecordMode.UNLOCK,
    "lock": RecordMode.LOCK,
    "passage": RecordMode.PASSAGE,
}


def parse_date(text: str) -> date:
    """Parse the localized ``YYYY. M. D.`` token."""
    m = _DATE_RE.match(text or "")
    if not m:
        raise LineParseError(f"invalid date {text!r}")
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        raise LineParseError(f"invalid date {text!r}")


def parse_time(text: str) -> tuple[time, bool]:
    """Parse a 12-hour (AM/PM, 오전/오후) or bare 24-hour clock token.

    Returns the clock time and whether it falls on the before-noon branch.
    """
    value = (text or "").strip()
    for native, marker in _MARKER_ALIASES.items():
        value = value.replace(native, f" {marker} ")
    value = " ".join(value.split())

    m = _TIME_RE.match(value)
    if not m:
        raise LineParseError(f"invalid time {text!r}")

    pre, post = m.group("pre"), m.group("post")
    if pre and post:
        raise LineParseError(f"invalid time {text!r}")
    marker = (pre or post or "").upper()

    hour = int(m.group("h"))
    minute = int(m.group("m"))
    second = int(m.group("s") or 0)
    if minute > 59 or second > 59:
        raise LineParseError(f"invalid time {text!r}")

    if marker:
        if not 1 <= hour <= 12:
            raise LineParseError(f"invalid time {text!r}")
        if marker == "PM" and hour != 12:
            hour += 12
        elif marker == "AM" and hour == 12:
            hour = 0
        before_noon = marker == "AM"
    else:
        if hour > 23:
            raise LineParseError(f"invalid time {text!r}")
        before_noon = hour < 12

    return time(hour, minute, second), before_noon


def resolve_work_date(occurred: date, clock: time, *, before_noon: bool) -> date:
    """Early-morning AM stamps belong to the previous day's overnight extension."""
    if before_noon and clock.hour < ROLLOVER_HOUR:
        return occurred - timedelta(days=1)
    return occurred


def parse_mode(text: str) -> RecordMode:
    mode = _MODE_ALIASES.get((text or "").strip().lower())
    if mode is None:
        raise LineParseError(f"unrecognized mode {text!r}")
    return mode


def split_fields(line: str) -> list[str]:
    line = line.rstrip("\r\n")
    if "\t" in line:
        return [f.strip() for f in line.split("\t")]
    return [f.strip() for f in next(csv.reader([line]))]


def parse_line(line: str, *, line_no: int = 1) -> Optional[ParsedRecord]:
    """Parse one export line.

    Returns ``None`` for blank lines and header rows; raises ``LineParseError``
    for anything malformed.
    """
    if not line or not line.strip():
        return None

    fields = split_fields(line)
    if fields and fields[0] in HEADER_FIRST_FIELDS:
        return None

    if len(fields) >= LONG_FORM_MIN_FIELDS:
        date_text, time_text, terminal_id, user_ref, name, emp_no, title, category, mode_text, source = fields[:10]
        result = fields[10] if len(fields) > 10 else ""
    elif len(fields) == SHORT_FORM_FIELDS:
        date_text, time_text, name, emp_no, title, category, mode_text, result = fields
        terminal_id = user_ref = source = ""
    else:
        raise LineParseError(f"unexpected field count {len(fields)}")

    if not name:
        raise LineParseError("missing display name")
    mode = parse_mode(mode_text)

    occurred = parse_date(date_text)
    clock, before_noon = parse_time(time_text)
    common = dict(
        line_no=line_no,
        occurred_date=occurred,
        occurred_time_text=time_text,
        timestamp=datetime.combine(occurred, clock),
        work_date=resolve_work_date(occurred, clock, before_noon=before_noon),
        display_name=name,
        employee_number=emp_no,
        mode=mode,
        job_title=title,
        category=category,
        result_flag=result,
    )

    if len(fields) == SHORT_FORM_FIELDS:
        return WebOriginRecord(**common)
    return TerminalOriginRecord(
        **common,
        terminal_id=terminal_id,
        external_user_ref=user_ref,
        source_label=source,
    )


def parse_lines(lines: Iterable[str]) -> ParseResult:
    """Parse a whole batch; one bad line is recorded and skipped."""
    result = ParseResult()
    for line_no, line in enumerate(lines, start=1):
        try:
            record = parse_line(line, line_no=line_no)
        except LineParseError as e:
            logger.warning("line %d skipped: %s", line_no, e)
            result.errors.append(LineError(line_no=line_no, line=line.rstrip("\r\n"), reason=str(e)))
            continue
        if record is None:
            result.skipped += 1
            continue
        result.records.append(record)
    return result
