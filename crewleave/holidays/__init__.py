"""Bank holidays module — gov.uk feed client, schemas and router."""

from crewleave.holidays.client import fetch_bank_holidays, parse_bank_holiday_feed

__all__ = ["fetch_bank_holidays", "parse_bank_holiday_feed"]
