"""Tolerant readers for raw leave-request and employee records.

Records arrive exactly as the document store holds them, and their field
names drifted across several releases of the crew app and the office web
app. Every logical field therefore has an ordered alias table below; the
first alias holding a value wins. The tables are part of the data contract
with the record store, so extend them rather than adding ad hoc fallbacks.

Nothing in this module raises on malformed input: unreadable values come
back as ``None`` / ``False`` / ``0``.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Sequence
from zoneinfo import ZoneInfo

from crewleave.common.constants import (
    AM_DESIGNATORS,
    APPROVED_STATUSES,
    DATE_INPUT_FORMATS,
    FALSY_STRINGS,
    PENDING_STATUSES,
    PM_DESIGNATORS,
    TIMEZONE,
    TRUTHY_STRINGS,
    HalfDayPeriod,
    LeaveKind,
    LeaveStatus,
)


# ═════════════════════════════════════════════════════════════════════
# Alias tables (priority order)
# ═════════════════════════════════════════════════════════════════════

# Leave requests
REQUEST_START_FIELDS = ("startDate", "from")
REQUEST_END_FIELDS = ("endDate", "to")
REQUEST_STATUS_FIELDS = ("status", "Status")
REQUEST_EMPLOYEE_NAME_FIELDS = ("employee", "name")
REQUEST_EMPLOYEE_CODE_FIELDS = ("employeeCode", "userCode")
REQUEST_TYPE_TEXT_FIELDS = ("leaveType", "paidStatus")
START_HALF_FIELDS = ("startHalfDay", "startHalf", "startHalfday")
END_HALF_FIELDS = ("endHalfDay", "endHalf", "endHalfday")
START_PERIOD_FIELDS = ("startAMPM", "startPeriod", "halfDayPeriod", "halfDayType")
END_PERIOD_FIELDS = ("endAMPM", "endPeriod")
# Checked as ANY-OF, not first-present
LEGACY_HALF_FIELDS = ("halfDay", "isHalfDay", "isHalf", "half")

# Employees
EMPLOYEE_NAME_FIELDS = ("name", "displayName")
EMPLOYEE_CODE_FIELDS = ("userCode", "code")
EMPLOYEE_EMAIL_FIELDS = ("email",)
ALLOWANCE_BY_YEAR_FIELDS = ("allowanceByYear", "holidayAllowances", "holidayAllowanceByYear")
ALLOWANCE_FIELDS = ("allowance", "holidayAllowance")
CARRYOVER_BY_YEAR_FIELDS = ("carryoverByYear", "carryOverByYear", "carriedOverByYear")
CARRYOVER_FIELDS = ("carryover", "carriedOverDays", "carryOverDays")

_STRICT_YMD = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_JS_DATE_STRING_FORMAT = "%a %b %d %Y"


# ═════════════════════════════════════════════════════════════════════
# Generic readers
# ═════════════════════════════════════════════════════════════════════


def pick(record: Any, aliases: Sequence[str]) -> Any:
    """Return the first alias value that is neither ``None`` nor a blank string."""
    if not isinstance(record, Mapping):
        return None
    for key in aliases:
        value = record.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def safe_str(value: Any) -> str:
    """Lower-cased, stripped text form used for every identity/status comparison."""
    if value is None:
        return ""
    return str(value).strip().lower()


def boolish(value: Any) -> bool:
    if value is True:
        return True
    if value is False or value is None:
        return False
    return safe_str(value) in TRUTHY_STRINGS


def falsish(value: Any) -> bool:
    """True only for an explicit negative (``False``, ``"false"``, ``"no"``...)."""
    if value is False:
        return True
    if value is None or value is True:
        return False
    return safe_str(value) in FALSY_STRINGS


def normalise_ampm(value: Any) -> Optional[HalfDayPeriod]:
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip().upper()
    if text in AM_DESIGNATORS:
        return HalfDayPeriod.am
    if text in PM_DESIGNATORS:
        return HalfDayPeriod.pm
    return None


def num_or_zero(value: Any) -> Decimal:
    """Numeric reading of a day count; anything unreadable or non-finite is 0."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, float) and not math.isfinite(value):
        return Decimal("0")
    text = str(value).strip()
    if not text:
        return Decimal("0")
    try:
        number = Decimal(text)
    except InvalidOperation:
        return Decimal("0")
    if not number.is_finite():
        return Decimal("0")
    return number


# ── Dates ───────────────────────────────────────────────────────────


def parse_ymd(value: Any) -> Optional[date]:
    """Parse a strict ``YYYY-MM-DD`` string as a plain calendar date."""
    match = _STRICT_YMD.match(str(value).strip()) if isinstance(value, str) else None
    if match is None:
        return None
    try:
        return date(*(int(part) for part in match.groups()))
    except ValueError:
        return None


def _local_date(value: datetime) -> date:
    if value.tzinfo is None:
        return value.date()
    return value.astimezone(ZoneInfo(TIMEZONE)).date()


def _from_epoch_seconds(seconds: Any) -> Optional[date]:
    try:
        stamp = float(seconds)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(stamp):
        return None
    try:
        moment = datetime.fromtimestamp(stamp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
    return _local_date(moment)


def _parse_date_string(text: str) -> Optional[date]:
    text = text.strip()
    if not text:
        return None

    strict = parse_ymd(text)
    if strict is not None:
        return strict

    try:
        return _local_date(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        pass

    for fmt in DATE_INPUT_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    # JavaScript Date.toString(): "Mon Jun 10 2024 00:00:00 GMT+0100 (...)"
    try:
        return datetime.strptime(text[:15], _JS_DATE_STRING_FORMAT).date()
    except ValueError:
        return None


def to_date_safe(value: Any) -> Optional[date]:
    """Convert a stored date-like value to a calendar date, or ``None``.

    Accepts ``date``/``datetime`` (Firestore timestamps are ``datetime``
    subclasses), serialized timestamps (``{"seconds": ...}`` or
    ``{"_seconds": ...}``), epoch milliseconds and date strings. Strict
    ``YYYY-MM-DD`` strings are read as-is with no timezone shift.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _local_date(value)
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return _parse_date_string(value)
    if isinstance(value, (int, float)):
        return _from_epoch_seconds(value / 1000)
    if isinstance(value, Mapping):
        seconds = pick(value, ("seconds", "_seconds"))
        if seconds is None:
            return None
        return _from_epoch_seconds(seconds)
    return None


# ═════════════════════════════════════════════════════════════════════
# Leave-request readers
# ═════════════════════════════════════════════════════════════════════


def request_start(request: Mapping[str, Any]) -> Optional[date]:
    return to_date_safe(pick(request, REQUEST_START_FIELDS))


def request_end(request: Mapping[str, Any]) -> Optional[date]:
    """Stored end date only; callers default it to the start date."""
    return to_date_safe(pick(request, REQUEST_END_FIELDS))


def request_span(request: Mapping[str, Any]) -> tuple[Optional[date], Optional[date]]:
    start = request_start(request)
    end = request_end(request) or start
    return start, end


def status_text(request: Mapping[str, Any]) -> str:
    return safe_str(pick(request, REQUEST_STATUS_FIELDS))


def normalise_status(request: Mapping[str, Any]) -> LeaveStatus:
    text = status_text(request)
    if text in APPROVED_STATUSES:
        return LeaveStatus.approved
    if text in PENDING_STATUSES:
        return LeaveStatus.pending
    return LeaveStatus.other


def is_approved(request: Mapping[str, Any]) -> bool:
    return normalise_status(request) is LeaveStatus.approved


def classify_leave_kind(request: Mapping[str, Any]) -> LeaveKind:
    """Resolve Paid / Unpaid / Accrued from flags and free-text hints.

    Accrued (TOIL) wins over Unpaid, Unpaid over Paid; a request with no
    signal at all is Paid.
    """
    text = safe_str(pick(request, REQUEST_TYPE_TEXT_FIELDS))

    if boolish(pick(request, ("isAccrued",))) or "accrued" in text or "toil" in text:
        return LeaveKind.accrued
    if boolish(pick(request, ("isUnpaid",))) or "unpaid" in text or falsish(pick(request, ("paid",))):
        return LeaveKind.unpaid
    return LeaveKind.paid


@dataclass(frozen=True)
class HalfDayMeta:
    """Half-day markers of one request, resolved from all their aliases."""

    start_half: bool = False
    end_half: bool = False
    start_period: Optional[HalfDayPeriod] = None
    end_period: Optional[HalfDayPeriod] = None
    legacy_half: bool = False

    @property
    def start_signal(self) -> bool:
        return self.start_half or self.start_period is not None

    @property
    def end_signal(self) -> bool:
        return self.end_half or self.end_period is not None

    @property
    def any_signal(self) -> bool:
        return self.start_signal or self.end_signal or self.legacy_half


def half_day_meta(request: Mapping[str, Any]) -> HalfDayMeta:
    return HalfDayMeta(
        start_half=boolish(pick(request, START_HALF_FIELDS)),
        end_half=boolish(pick(request, END_HALF_FIELDS)),
        start_period=normalise_ampm(pick(request, START_PERIOD_FIELDS)),
        end_period=normalise_ampm(pick(request, END_PERIOD_FIELDS)),
        legacy_half=any(boolish(pick(request, (key,))) for key in LEGACY_HALF_FIELDS),
    )
