"""Leave Pydantic v2 schemas — request / response validation.

Naming conventions:
  - *Request  → request bodies
  - *Out      → response bodies

Employee and leave-request records are passed through as raw mappings,
exactly as the record store returns them; their field aliases are resolved
by ``crewleave.leave.records``.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from crewleave.common.constants import BankHolidayRegion
from crewleave.leave.records import parse_ymd


def _clean_bank_holidays(value: Optional[list[str]]) -> Optional[list[str]]:
    if value is None:
        return None
    cleaned = []
    for item in value:
        day = parse_ymd(item)
        if day is not None:
            cleaned.append(day.isoformat())
    return cleaned


# ═════════════════════════════════════════════════════════════════════
# Holiday summary (personal dashboard)
# ═════════════════════════════════════════════════════════════════════


class HolidaySummaryRequest(BaseModel):
    """Raw records for one employee's holiday snapshot."""

    employee: Optional[dict[str, Any]] = Field(
        None, description="Employee record; skips matching when given"
    )
    employees: list[dict[str, Any]] = Field(
        default_factory=list, description="Employee records to match the user against"
    )
    user_code: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    requests: list[dict[str, Any]] = Field(
        default_factory=list, description="Leave-request records (all, or already the user's)"
    )
    prefiltered: bool = Field(False, description="True when requests already belong to the employee")
    year: Optional[int] = Field(None, ge=1900, le=2100, description="Defaults to the current year")
    today: Optional[date] = Field(None, description="Defaults to today in the configured timezone")
    bank_holidays: Optional[list[str]] = Field(
        None, description="YYYY-MM-DD dates; fetched from gov.uk when omitted"
    )
    region: Optional[BankHolidayRegion] = None

    @field_validator("bank_holidays")
    @classmethod
    def keep_iso_dates(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        return _clean_bank_holidays(v)


class HolidaySummaryOut(BaseModel):
    """Allowance / used / remaining for the year plus next holiday and pending count."""

    year: int
    employee_matched: bool
    base_allowance: Decimal
    carryover: Decimal
    allowance: Decimal = Field(..., description="Base allowance + carryover")
    used: Decimal
    remaining: Decimal
    pending_count: int
    next_holiday: Optional[dict[str, Any]] = None
    next_holiday_label: Optional[str] = None
    by_kind: dict[str, Decimal] = Field(default_factory=dict)
    request_count: int = 0


# ═════════════════════════════════════════════════════════════════════
# Draft request check (holiday request form)
# ═════════════════════════════════════════════════════════════════════


class RequestCheckRequest(BaseModel):
    """A draft leave request plus the employee's existing requests."""

    request: dict[str, Any]
    existing: list[dict[str, Any]] = Field(default_factory=list)
    bank_holidays: Optional[list[str]] = None
    region: Optional[BankHolidayRegion] = None

    @field_validator("bank_holidays")
    @classmethod
    def keep_iso_dates(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        return _clean_bank_holidays(v)


class RequestCheckOut(BaseModel):
    """Business-day length of the draft and the first overlapping request."""

    days: Decimal
    label: Optional[str] = None
    conflict: Optional[dict[str, Any]] = None
    conflict_label: Optional[str] = None
