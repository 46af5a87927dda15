"""Bank-holiday router — the dates excluded from business-day counts."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query

from crewleave.common.constants import BankHolidayRegion
from crewleave.common.exceptions import UnknownRegionException
from crewleave.holidays.schemas import BankHolidaysOut
from crewleave.leave.service import LeaveService

router = APIRouter()


# ── GET / ───────────────────────────────────────────────────────────

@router.get("", response_model=BankHolidaysOut)
async def list_bank_holidays(
    year: Optional[int] = Query(None, ge=1900, le=2100, description="Defaults to the current year"),
    region: Optional[str] = Query(None, description="england-and-wales | scotland | northern-ireland"),
):
    """Bank holidays for a UK region and year (empty when the feed is down)."""
    parsed_region = None
    if region is not None:
        try:
            parsed_region = BankHolidayRegion(region.strip().lower())
        except ValueError:
            raise UnknownRegionException(region)
    return await LeaveService.get_bank_holidays(year, parsed_region)
