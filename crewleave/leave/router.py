"""Leave router — personal holiday snapshot and draft request check.

Records are posted as the record store returns them; the service resolves
the employee, filters their requests and runs the calculator.
"""

from fastapi import APIRouter

from crewleave.leave.schemas import (
    HolidaySummaryOut,
    HolidaySummaryRequest,
    RequestCheckOut,
    RequestCheckRequest,
)
from crewleave.leave.service import LeaveService

router = APIRouter()


# ── POST /summary ───────────────────────────────────────────────────

@router.post("/summary", response_model=HolidaySummaryOut)
async def holiday_summary(body: HolidaySummaryRequest):
    """Allowance, used and remaining days for the year, next holiday, pending count."""
    return await LeaveService.get_summary(body)


# ── POST /check ─────────────────────────────────────────────────────

@router.post("/check", response_model=RequestCheckOut)
async def check_request(body: RequestCheckRequest):
    """Business days a draft request would use and the first request it overlaps."""
    return await LeaveService.check_request(body)
