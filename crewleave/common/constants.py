"""Enums and constants for crewleave — the vocabulary of the holiday records."""

from __future__ import annotations

import enum


# ── Leave ───────────────────────────────────────────────────────────

class LeaveStatus(str, enum.Enum):
    approved = "approved"
    pending = "pending"
    other = "other"


class LeaveKind(str, enum.Enum):
    paid = "Paid"
    unpaid = "Unpaid"
    accrued = "Accrued"
    other = "Other"


class HalfDayPeriod(str, enum.Enum):
    am = "AM"
    pm = "PM"


# Raw status strings (already lower-cased and stripped) per normalized status
APPROVED_STATUSES = frozenset({"approved", "accept", "approved ✅"})
PENDING_STATUSES = frozenset({"pending", "requested"})
# Requests in these states never block a new request for the same dates
CLOSED_STATUSES = frozenset({"declined", "cancelled", "canceled"})

AM_DESIGNATORS = frozenset({"AM", "A.M.", "MORNING"})
PM_DESIGNATORS = frozenset({"PM", "P.M.", "AFTERNOON"})

TRUTHY_STRINGS = frozenset({"true", "1", "yes", "y"})
FALSY_STRINGS = frozenset({"false", "0", "no", "n"})


# ── Bank holidays ───────────────────────────────────────────────────

class BankHolidayRegion(str, enum.Enum):
    england_and_wales = "england-and-wales"
    scotland = "scotland"
    northern_ireland = "northern-ireland"


# ── Formats ─────────────────────────────────────────────────────────

SHORT_DATE_FORMAT = "%d %b"        # UK format: 10 Jun
TIMEZONE = "Europe/London"

# Accepted layouts for date strings that are not strict YYYY-MM-DD
DATE_INPUT_FORMATS = (
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%d %b %Y",
    "%d %B %Y",
    "%a %b %d %Y",
    "%b %d, %Y",
    "%B %d, %Y",
)
