"""Common module — shared enums, constants and error handling for crewleave."""

from crewleave.common.constants import (
    SHORT_DATE_FORMAT,
    TIMEZONE,
    BankHolidayRegion,
    HalfDayPeriod,
    LeaveKind,
    LeaveStatus,
)
from crewleave.common.exceptions import (
    AppException,
    UnknownRegionException,
    ValidationException,
    register_exception_handlers,
)

__all__ = [
    # Constants / Enums
    "BankHolidayRegion",
    "HalfDayPeriod",
    "LeaveKind",
    "LeaveStatus",
    "SHORT_DATE_FORMAT",
    "TIMEZONE",
    # Exceptions
    "AppException",
    "UnknownRegionException",
    "ValidationException",
    "register_exception_handlers",
]
