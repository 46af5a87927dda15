"""UK bank-holiday source — the gov.uk ``bank-holidays.json`` feed.

The feed is keyed by region (``england-and-wales``, ``scotland``,
``northern-ireland``), each holding ``events`` with ISO ``date`` strings.
An unavailable feed is not an error for the caller: it is logged and the
empty set is returned, so business-day counts fall back to weekends only.
"""

from __future__ import annotations

import logging
from typing import Any, Container, Optional

import httpx

from crewleave.common.constants import BankHolidayRegion
from crewleave.config import settings
from crewleave.leave.records import parse_ymd

logger = logging.getLogger(__name__)


def parse_bank_holiday_feed(
    payload: Any,
    region: BankHolidayRegion,
    years: Container[int],
) -> set[str]:
    """Extract ``YYYY-MM-DD`` strings for ``region`` falling in ``years``."""
    if not isinstance(payload, dict):
        return set()
    section = payload.get(region.value)
    events = section.get("events") if isinstance(section, dict) else None
    if not isinstance(events, list):
        return set()

    dates: set[str] = set()
    for event in events:
        if not isinstance(event, dict):
            continue
        day = parse_ymd(event.get("date"))
        if day is not None and day.year in years:
            dates.add(day.isoformat())
    return dates


async def _fetch_feed(transport: Optional[httpx.AsyncBaseTransport]) -> Any:
    """Raw feed body, or ``None`` when it cannot be loaded."""
    try:
        async with httpx.AsyncClient(
            timeout=settings.BANK_HOLIDAYS_TIMEOUT,
            transport=transport,
        ) as client:
            resp = await client.get(
                settings.BANK_HOLIDAYS_URL,
                headers={"Accept": "application/json", "Cache-Control": "no-store"},
            )
            resp.raise_for_status()
            return resp.json()
    except httpx.HTTPError as e:
        logger.warning("Bank holidays unavailable (%s): %s", settings.BANK_HOLIDAYS_URL, e)
    except ValueError as e:
        logger.warning("Bank holiday feed is not valid JSON: %s", e)
    return None


async def fetch_bank_holidays_between(
    first_year: int,
    last_year: int,
    region: Optional[BankHolidayRegion] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> set[str]:
    """Bank holidays of ``region`` from ``first_year`` to ``last_year`` inclusive."""
    region = region or BankHolidayRegion(settings.BANK_HOLIDAY_REGION)
    payload = await _fetch_feed(transport)
    if payload is None:
        return set()

    dates = parse_bank_holiday_feed(payload, region, range(first_year, last_year + 1))
    logger.debug(
        "Loaded %d bank holidays for %s %d-%d", len(dates), region.value, first_year, last_year,
    )
    return dates


async def fetch_bank_holidays(
    year: int,
    region: Optional[BankHolidayRegion] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> set[str]:
    """Bank holidays of ``year`` for ``region`` (default from settings)."""
    return await fetch_bank_holidays_between(year, year, region, transport=transport)
