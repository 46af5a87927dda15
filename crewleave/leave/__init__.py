"""Leave module — holiday-allowance calculator, record readers and matching."""

from crewleave.leave.calculator import (
    AllowanceFigures,
    HolidaySummary,
    compute_allowance_for_year,
    compute_used_days,
    next_upcoming_approved,
    pending_count,
    round_to_half,
    summarise_year,
)

__all__ = [
    "AllowanceFigures",
    "HolidaySummary",
    "compute_allowance_for_year",
    "compute_used_days",
    "next_upcoming_approved",
    "pending_count",
    "round_to_half",
    "summarise_year",
]
