"""Crew Leave — holiday allowance and business-day accrual service."""

__version__ = "1.0.0"
