"""Bank-holiday Pydantic v2 schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from crewleave.common.constants import BankHolidayRegion


class BankHolidaysOut(BaseModel):
    """Bank holidays of one region and year, sorted ascending."""

    region: BankHolidayRegion
    year: int
    dates: list[str] = Field(default_factory=list, description="ISO dates (YYYY-MM-DD)")
