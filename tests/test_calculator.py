"""Holiday-allowance calculator tests — rounding, business days, half-days,
year clamping, allowance lookup, used / remaining, next holiday, pending.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from crewleave.common.constants import LeaveKind
from crewleave.leave.calculator import (
    compute_allowance_for_year,
    compute_request_days,
    compute_used_days,
    count_business_days,
    days_by_kind,
    describe_span,
    format_half,
    next_upcoming_approved,
    pending_count,
    remaining_days,
    round_to_half,
    summarise_year,
)
from tests.conftest import make_employee, make_request


def _days(request, bank_holidays=None):
    """Length of a request that is not clamped."""
    start = date.fromisoformat(request["startDate"])
    end = date.fromisoformat(request.get("endDate", request["startDate"]))
    return compute_request_days(request, start, end, start, end, bank_holidays)


# ═════════════════════════════════════════════════════════════════════
# Rounding
# ═════════════════════════════════════════════════════════════════════


class TestRoundToHalf:

    @pytest.mark.parametrize(
        "value, expected",
        [
            (1.24, "1"),
            (1.25, "1.5"),
            (1.75, "2"),
            (2.74, "2.5"),
            ("4.5", "4.5"),
            (-1.25, "-1.5"),
            (Decimal("0.2"), "0"),
        ],
    )
    def test_nearest_half(self, value, expected):
        assert round_to_half(value) == Decimal(expected)

    def test_idempotent(self):
        once = round_to_half(7.3)
        assert round_to_half(once) == once

    @pytest.mark.parametrize("value", [None, True, "abc", float("nan"), float("inf")])
    def test_unreadable_is_zero(self, value):
        assert round_to_half(value) == Decimal("0")

    def test_format_half(self):
        assert format_half(5) == "5"
        assert format_half(4.5) == "4.5"

    @pytest.mark.parametrize("value", [1e300, "1e30", Decimal("9" * 40)])
    def test_too_many_digits_is_zero(self, value):
        """Values beyond the decimal context degrade to 0 instead of raising."""
        assert round_to_half(value) == Decimal("0")


# ═════════════════════════════════════════════════════════════════════
# Business days and half-day reductions
# ═════════════════════════════════════════════════════════════════════


class TestRequestDays:

    def test_full_week(self):
        """Mon–Fri with no markers is five days."""
        assert _days(make_request("2024-06-10", "2024-06-14")) == Decimal("5")

    def test_weekend_only(self):
        """A Saturday request counts nothing, half-day flag or not."""
        assert _days(make_request("2024-06-15")) == Decimal("0")
        assert _days(make_request("2024-06-15", startHalfDay=True)) == Decimal("0")

    def test_bank_holidays_excluded(self, bank_holidays):
        """Good Friday and Easter Monday drop out of a two-week span."""
        request = make_request("2024-03-25", "2024-04-05")
        assert _days(request, bank_holidays) == Decimal("8")
        assert _days(request, None) == Decimal("10")

    def test_single_day_start_half(self):
        assert _days(make_request("2024-06-10", startHalfDay=True)) == Decimal("0.5")

    def test_single_day_end_half_only(self):
        """Any half marker on a one-day request makes it half a day."""
        assert _days(make_request("2024-06-10", "2024-06-10", endHalfDay=True)) == Decimal("0.5")

    def test_single_day_period_marker(self):
        assert _days(make_request("2024-06-10", startAMPM="pm")) == Decimal("0.5")

    def test_multi_day_both_halves(self):
        request = make_request("2024-06-10", "2024-06-14", startHalfDay=True, endAMPM="AM")
        assert _days(request) == Decimal("4")

    def test_half_on_bank_holiday_boundary_ignored(self, bank_holidays):
        """A half marker on a boundary that is not a business day takes nothing off."""
        request = make_request("2024-05-27", "2024-05-29", startHalfDay=True)
        assert _days(request, bank_holidays) == Decimal("2")

    def test_legacy_flag_single_day(self):
        assert _days(make_request("2024-06-10", isHalfDay="yes")) == Decimal("0.5")

    def test_legacy_flag_ignored_on_multi_day(self):
        assert _days(make_request("2024-06-10", "2024-06-11", halfDay=True)) == Decimal("2")

    def test_reversed_span_is_zero(self):
        request = make_request("2024-06-14", "2024-06-10")
        assert compute_request_days(
            request, date(2024, 6, 14), date(2024, 6, 10), date(2024, 6, 14), date(2024, 6, 10),
        ) == Decimal("0")

    def test_count_business_days(self, bank_holidays):
        assert count_business_days(date(2024, 12, 23), date(2024, 12, 27), bank_holidays) == 3

    def test_count_business_days_long_span(self):
        """Ten full weeks plus a Mon–Wed tail."""
        assert count_business_days(date(2024, 6, 3), date(2024, 8, 14)) == 53

    def test_span_ending_on_last_representable_day(self):
        request = make_request("9999-12-30", "9999-12-31")
        assert _days(request) == Decimal("2")

    def test_whole_calendar_span(self):
        """The span 0001-01-01 → 9999-12-31 is counted without walking it."""
        days = count_business_days(date.min, date.max, {"2024-01-01", "2024-01-06"})
        assert days == (date.max - date.min).days // 7 * 5 + 4


# ═════════════════════════════════════════════════════════════════════
# Year clamping
# ═════════════════════════════════════════════════════════════════════


class TestYearClamping:

    def test_span_across_new_year_with_end_half(self, bank_holidays):
        """Fri 29 Dec → Tue 2 Jan, half on 2 Jan: 2024 uses half a day."""
        request = make_request("2023-12-29", "2024-01-02", endHalfDay=True)
        assert compute_used_days([request], 2024, bank_holidays) == Decimal("0.5")

    def test_span_across_new_year_without_bank_holidays(self):
        request = make_request("2023-12-29", "2024-01-02", endHalfDay=True)
        assert compute_used_days([request], 2024, None) == Decimal("1.5")

    def test_earlier_year_gets_its_own_part(self, bank_holidays):
        request = make_request("2023-12-29", "2024-01-02", endHalfDay=True)
        assert compute_used_days([request], 2023, bank_holidays) == Decimal("1")

    def test_start_half_not_applied_to_clamped_start(self):
        """The start marker belongs to 29 Dec, not to 1 Jan."""
        request = make_request("2023-12-29", "2024-01-03", startHalfDay=True)
        assert compute_used_days([request], 2024, None) == Decimal("3")

    def test_clamped_to_single_day_keeps_original_start_half(self):
        """2024 keeps only 31 Dec, which is still the original start."""
        request = make_request("2024-12-31", "2025-01-02", startHalfDay=True)
        assert compute_used_days([request], 2024, None) == Decimal("0.5")
        assert compute_used_days([request], 2025, None) == Decimal("2")

    def test_outside_year(self):
        assert compute_used_days([make_request("2023-06-12")], 2024, None) == Decimal("0")

    def test_last_representable_year(self):
        request = make_request("9999-12-30", "9999-12-31")
        assert compute_used_days([request], 9999, None) == Decimal("2")


# ═════════════════════════════════════════════════════════════════════
# Allowance
# ═════════════════════════════════════════════════════════════════════


class TestAllowance:

    def test_year_maps(self):
        employee = make_employee(allowanceByYear={"2024": 20}, carryoverByYear={"2024": 3})
        figures = compute_allowance_for_year(employee, 2024)
        assert figures.allowance == Decimal("20")
        assert figures.carryover == Decimal("3")
        assert figures.total == Decimal("23")

    def test_falls_back_to_scalar_fields(self):
        employee = make_employee(allowanceByYear={"2023": 25}, holidayAllowance="28", carriedOverDays=2.5)
        figures = compute_allowance_for_year(employee, 2024)
        assert figures.allowance == Decimal("28")
        assert figures.carryover == Decimal("2.5")

    def test_zero_year_entry_falls_back(self):
        employee = make_employee(holidayAllowances={"2024": 0}, allowance=22)
        assert compute_allowance_for_year(employee, 2024).allowance == Decimal("22")

    def test_no_employee(self):
        figures = compute_allowance_for_year(None, 2024)
        assert figures.total == Decimal("0")

    def test_unreadable_values_are_zero(self):
        employee = make_employee(allowance="lots", carryover=None)
        assert compute_allowance_for_year(employee, 2024).total == Decimal("0")


# ═════════════════════════════════════════════════════════════════════
# Used / remaining / breakdown
# ═════════════════════════════════════════════════════════════════════


class TestUsedDays:

    def test_only_approved_paid(self):
        requests = [
            make_request("2024-06-10", "2024-06-14"),
            make_request("2024-07-01", "2024-07-02", status="Pending"),
            make_request("2024-07-08", "2024-07-09", status="Declined"),
            make_request("2024-08-05", isUnpaid=True),
            make_request("2024-08-06", leaveType="TOIL"),
        ]
        assert compute_used_days(requests, 2024, None) == Decimal("5")

    def test_status_variants(self):
        requests = [
            make_request("2024-06-10", status=" Approved "),
            make_request("2024-06-11", status="accept"),
            make_request("2024-06-12", Status="Approved ✅", status=None),
        ]
        assert compute_used_days(requests, 2024, None) == Decimal("3")

    def test_invalid_dates_skipped(self):
        requests = [
            make_request("not a date"),
            {"status": "approved"},
            "garbage",
            make_request("2024-06-10"),
        ]
        assert compute_used_days(requests, 2024, None) == Decimal("1")

    def test_by_kind(self):
        requests = [
            make_request("2024-06-10", "2024-06-11"),
            make_request("2024-06-12", paid="no"),
            make_request("2024-06-13", "2024-06-14", isAccrued="true"),
        ]
        totals = days_by_kind(requests, 2024, None)
        assert totals == {
            LeaveKind.paid: Decimal("2"),
            LeaveKind.unpaid: Decimal("1"),
            LeaveKind.accrued: Decimal("2"),
        }

    def test_remaining_never_negative(self):
        assert remaining_days(10, 12.5) == Decimal("0")

    def test_remaining(self):
        assert remaining_days(Decimal("23"), Decimal("5.5")) == Decimal("17.5")


# ═════════════════════════════════════════════════════════════════════
# Next holiday / pending
# ═════════════════════════════════════════════════════════════════════


class TestNextAndPending:

    def test_earliest_start_first(self):
        later = make_request("2024-07-01", "2024-07-05")
        sooner = make_request("2024-06-20", "2024-06-21")
        assert next_upcoming_approved([later, sooner], date(2024, 6, 1)) is sooner

    def test_in_progress_counts(self):
        current = make_request("2024-05-28", "2024-06-03")
        assert next_upcoming_approved([current], date(2024, 6, 1)) is current

    def test_finished_and_pending_ignored(self):
        requests = [
            make_request("2024-05-01", "2024-05-03"),
            make_request("2024-06-20", status="pending"),
        ]
        assert next_upcoming_approved(requests, date(2024, 6, 1)) is None

    def test_unreadable_start_sorts_last(self):
        undated = make_request("tbc", "2024-06-05")
        dated = make_request("2024-06-20", "2024-06-21")
        assert next_upcoming_approved([undated, dated], date(2024, 6, 1)) is dated
        assert next_upcoming_approved([undated], date(2024, 6, 1)) is undated

    def test_today_as_datetime(self):
        request = make_request("2024-06-20")
        assert next_upcoming_approved([request], datetime(2024, 6, 1, 9, 0)) is request

    @pytest.mark.parametrize("today", [None, "someday"])
    def test_unreadable_today(self, today):
        assert next_upcoming_approved([make_request("2024-06-20")], today) is None

    def test_pending_count(self):
        requests = [
            make_request("2024-06-20", status="Pending"),
            make_request("2024-06-21", status="requested"),
            make_request("2024-06-22", status="approved"),
            make_request("2024-06-23", status="cancelled"),
        ]
        assert pending_count(requests) == 2

    def test_describe_span(self):
        request = make_request("2024-06-10", "2024-06-14", endAMPM="am")
        assert describe_span(request) == "10 Jun → 14 Jun (AM)"
        assert describe_span(make_request("2024-06-10", startHalfDay=True)) == "10 Jun (Half)"
        assert describe_span(None) is None


# ═════════════════════════════════════════════════════════════════════
# Year summary
# ═════════════════════════════════════════════════════════════════════


class TestSummariseYear:

    def test_huge_allowance_degrades_to_zero(self):
        employee = make_employee(allowance="1e30")
        summary = summarise_year(employee, [make_request("2024-06-10")], 2024, None, date(2024, 6, 1))
        assert summary.allowance == Decimal("0")
        assert summary.used == Decimal("1")
        assert summary.remaining == Decimal("0")

    def test_full_year_snapshot(self):
        """20 + 3 allowance, one approved week, one pending request."""
        employee = make_employee(allowanceByYear={"2024": 20}, carryoverByYear={"2024": 3})
        requests = [
            make_request("2024-06-10", "2024-06-14"),
            make_request("2024-08-12", status="Pending"),
        ]
        summary = summarise_year(employee, requests, 2024, set(), date(2024, 6, 1))
        assert summary.allowance == Decimal("23")
        assert summary.used == Decimal("5")
        assert summary.remaining == Decimal("18")
        assert summary.pending_count == 1
        assert summary.next_holiday is requests[0]

    def test_no_employee_no_requests(self):
        summary = summarise_year(None, [], 2024, None, date(2024, 6, 1))
        assert summary.allowance == Decimal("0")
        assert summary.used == Decimal("0")
        assert summary.remaining == Decimal("0")
        assert summary.pending_count == 0
        assert summary.next_holiday is None

    def test_repeatable(self, bank_holidays):
        employee = make_employee(allowance=25)
        requests = [make_request("2023-12-29", "2024-01-02", endHalfDay=True)]
        first = summarise_year(employee, requests, 2024, bank_holidays, date(2024, 6, 1))
        second = summarise_year(employee, requests, 2024, bank_holidays, date(2024, 6, 1))
        assert first == second
