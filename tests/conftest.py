"""Shared test fixtures — app, client, record factories, bank holidays.

The calculator is pure, so most tests build plain dicts shaped like the
record store's documents. API tests never touch the network: the bank
holiday loaders are patched or the caller supplies the dates.
"""

from __future__ import annotations

from datetime import date
from typing import Any, AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from crewleave.main import create_app


# ── FastAPI test client ─────────────────────────────────────────────

@pytest.fixture
async def app():
    """Fresh app instance per test."""
    yield create_app()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Bank holidays ───────────────────────────────────────────────────

# England and Wales, 2023-2024
BANK_HOLIDAYS_EW = frozenset({
    "2023-12-25", "2023-12-26",
    "2024-01-01", "2024-03-29", "2024-04-01", "2024-05-06",
    "2024-05-27", "2024-08-26", "2024-12-25", "2024-12-26",
})


@pytest.fixture
def bank_holidays() -> frozenset[str]:
    return BANK_HOLIDAYS_EW


@pytest.fixture
def gov_uk_feed() -> dict[str, Any]:
    """Trimmed copy of https://www.gov.uk/bank-holidays.json."""
    return {
        "england-and-wales": {
            "division": "england-and-wales",
            "events": [
                {"title": "Boxing Day", "date": "2023-12-26", "notes": "", "bunting": True},
                {"title": "New Year’s Day", "date": "2024-01-01", "notes": "", "bunting": True},
                {"title": "Good Friday", "date": "2024-03-29", "notes": "", "bunting": False},
                {"title": "Easter Monday", "date": "2024-04-01", "notes": "", "bunting": True},
                {"title": "Christmas Day", "date": "2024-12-25", "notes": "", "bunting": True},
                {"title": "New Year’s Day", "date": "2025-01-01", "notes": "", "bunting": True},
            ],
        },
        "scotland": {
            "division": "scotland",
            "events": [
                {"title": "New Year’s Day", "date": "2024-01-01", "notes": "", "bunting": True},
                {"title": "2nd January", "date": "2024-01-02", "notes": "", "bunting": True},
                {"title": "St Andrew’s Day", "date": "2024-12-02", "notes": "Substitute day", "bunting": True},
            ],
        },
        "northern-ireland": {
            "division": "northern-ireland",
            "events": [
                {"title": "St Patrick’s Day", "date": "2024-03-18", "notes": "Substitute day", "bunting": True},
            ],
        },
    }


# ── Record factories ────────────────────────────────────────────────

def make_request(
    start: str,
    end: str | None = None,
    *,
    status: str = "approved",
    employee: str = "Sam Carter",
    employee_code: str = "SC01",
    **extra: Any,
) -> dict[str, Any]:
    """Leave-request document as the crew app stores it."""
    record: dict[str, Any] = {
        "employee": employee,
        "employeeCode": employee_code,
        "startDate": start,
        "status": status,
    }
    if end is not None:
        record["endDate"] = end
    record.update(extra)
    return record


def make_employee(
    *,
    name: str = "Sam Carter",
    user_code: str = "SC01",
    email: str = "sam.carter@example.com",
    **extra: Any,
) -> dict[str, Any]:
    record: dict[str, Any] = {"name": name, "userCode": user_code, "email": email}
    record.update(extra)
    return record


def fixed_today() -> date:
    return date(2024, 6, 1)
