"""Leave service layer — holiday snapshot, draft request check, bank holidays.

Business logic:
  - Resolve the signed-in employee and their requests from raw records
  - Load bank holidays (caller-supplied, else the gov.uk feed)
  - Hand everything to the pure calculator and shape the response
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from crewleave.common.constants import BankHolidayRegion
from crewleave.config import settings
from crewleave.holidays.client import fetch_bank_holidays, fetch_bank_holidays_between
from crewleave.holidays.schemas import BankHolidaysOut
from crewleave.leave.calculator import (
    compute_request_days,
    describe_span,
    summarise_year,
)
from crewleave.leave.conflicts import find_conflict
from crewleave.leave.matching import filter_requests_for_employee, find_employee_record
from crewleave.leave.records import request_span
from crewleave.leave.schemas import (
    HolidaySummaryOut,
    HolidaySummaryRequest,
    RequestCheckOut,
    RequestCheckRequest,
)

logger = logging.getLogger(__name__)


def _today() -> date:
    """Current date in the configured timezone (UK)."""
    from zoneinfo import ZoneInfo

    return datetime.now(ZoneInfo(settings.TIMEZONE)).date()


class LeaveService:
    """Async leave operations: summary, request check, bank holidays."""

    # ─────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def _load_bank_holidays(
        supplied: Optional[list[str]],
        first_year: int,
        last_year: int,
        region: Optional[BankHolidayRegion],
    ) -> set[str]:
        """Caller-supplied dates win; otherwise read the years from the feed."""
        if supplied is not None:
            return set(supplied)
        return await fetch_bank_holidays_between(first_year, last_year, region)

    # ─────────────────────────────────────────────────────────────────
    # Holiday summary
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def get_summary(body: HolidaySummaryRequest) -> HolidaySummaryOut:
        """Holiday snapshot for the personal dashboard.

        With no employee record and no code/name to fall back on, every
        figure is zero rather than an error.
        """
        today = body.today or _today()
        year = body.year or today.year

        employee = body.employee
        if employee is None and body.employees:
            employee = find_employee_record(
                body.employees,
                user_code=body.user_code,
                email=body.email,
                name=body.name,
            )
        if employee is None:
            logger.info(
                "No employee record matched (code=%r, email=%r); using raw identifiers",
                body.user_code, body.email,
            )

        if body.prefiltered:
            mine = list(body.requests)
        else:
            mine = filter_requests_for_employee(
                body.requests,
                employee,
                user_code=body.user_code,
                name=body.name,
            )

        bank_holidays = await LeaveService._load_bank_holidays(
            body.bank_holidays, year, year, body.region,
        )

        summary = summarise_year(employee, mine, year, bank_holidays, today)
        logger.debug(
            "Holiday summary %d: allowance=%s used=%s remaining=%s (%d requests)",
            year, summary.allowance, summary.used, summary.remaining, len(mine),
        )

        return HolidaySummaryOut(
            year=summary.year,
            employee_matched=employee is not None,
            base_allowance=summary.base_allowance,
            carryover=summary.carryover,
            allowance=summary.allowance,
            used=summary.used,
            remaining=summary.remaining,
            pending_count=summary.pending_count,
            next_holiday=dict(summary.next_holiday) if summary.next_holiday else None,
            next_holiday_label=describe_span(summary.next_holiday),
            by_kind={kind.value: days for kind, days in summary.by_kind.items()},
            request_count=len(mine),
        )

    # ─────────────────────────────────────────────────────────────────
    # Draft request check
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def check_request(body: RequestCheckRequest) -> RequestCheckOut:
        """Length in business days of a draft request and its first clash."""
        start, end = request_span(body.request)
        if start is None:
            return RequestCheckOut(days=0)

        bank_holidays = await LeaveService._load_bank_holidays(
            body.bank_holidays, min(start, end).year, max(start, end).year, body.region,
        )

        days = compute_request_days(body.request, start, end, start, end, bank_holidays)
        conflict = find_conflict(body.request, body.existing)

        return RequestCheckOut(
            days=days,
            label=describe_span(body.request),
            conflict=dict(conflict) if conflict else None,
            conflict_label=describe_span(conflict),
        )

    # ─────────────────────────────────────────────────────────────────
    # Bank holidays
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def get_bank_holidays(
        year: Optional[int] = None,
        region: Optional[BankHolidayRegion] = None,
    ) -> BankHolidaysOut:
        year = year or _today().year
        region = region or BankHolidayRegion(settings.BANK_HOLIDAY_REGION)
        dates = await fetch_bank_holidays(year, region)
        return BankHolidaysOut(region=region, year=year, dates=sorted(dates))
