"""Holiday-allowance calculator — allowance, used, remaining, next, pending.

Pure functions over the raw records returned by the record store. Nothing
here performs I/O or reads ambient state; every input arrives as an
argument, so the functions are safe to call repeatedly and concurrently.

Business rules:
  - Only approved, Paid requests count toward "used", and only the part of
    their span inside the target calendar year.
  - Weekends and bank holidays are never counted.
  - A half-day marker describes the boundary day it was recorded against.
    After clamping a request to the year, the 0.5 reduction is applied to a
    clamped boundary only when it is also the original boundary.
  - All day counts are rounded to the nearest 0.5, ties away from zero.
  - Malformed input degrades to 0 / empty / ``None``; nothing raises.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import MAXYEAR, MINYEAR, date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Collection, Iterable, Iterator, Mapping, Optional

from crewleave.common.constants import (
    SHORT_DATE_FORMAT,
    LeaveKind,
    LeaveStatus,
)
from crewleave.leave.records import (
    ALLOWANCE_BY_YEAR_FIELDS,
    ALLOWANCE_FIELDS,
    CARRYOVER_BY_YEAR_FIELDS,
    CARRYOVER_FIELDS,
    classify_leave_kind,
    half_day_meta,
    is_approved,
    normalise_status,
    num_or_zero,
    parse_ymd,
    pick,
    request_end,
    request_span,
    request_start,
    to_date_safe,
)

BankHolidays = Optional[Collection[str]]

_ZERO = Decimal("0")
_HALF = Decimal("0.5")
_ONE = Decimal("1")


# ═════════════════════════════════════════════════════════════════════
# Rounding / formatting
# ═════════════════════════════════════════════════════════════════════


def round_to_half(value: Any) -> Decimal:
    """Round to the nearest multiple of 0.5, ties away from zero.

    ``round_to_half(1.24) == Decimal("1")``, ``round_to_half(1.25) == Decimal("1.5")``.
    Non-numeric or non-finite input rounds to 0.
    """
    if isinstance(value, bool) or value is None:
        return _ZERO
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        return _ZERO
    if not number.is_finite():
        return _ZERO
    try:
        doubled = (number * 2).quantize(_ONE, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # More digits than the decimal context holds
        return _ZERO
    result = doubled / 2
    return result if result else _ZERO


def format_half(value: Any) -> str:
    """``5`` → ``"5"``, ``4.5`` → ``"4.5"``."""
    rounded = round_to_half(value)
    if rounded == rounded.to_integral_value():
        return str(int(rounded))
    return str(rounded)


# ═════════════════════════════════════════════════════════════════════
# Allowance
# ═════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class AllowanceFigures:
    allowance: Decimal = _ZERO
    carryover: Decimal = _ZERO

    @property
    def total(self) -> Decimal:
        return self.allowance + self.carryover


def _year_value(
    employee: Mapping[str, Any],
    by_year_fields: tuple[str, ...],
    scalar_fields: tuple[str, ...],
    year: int,
) -> Decimal:
    by_year = pick(employee, by_year_fields)
    if isinstance(by_year, Mapping):
        value = num_or_zero(by_year.get(str(year), by_year.get(year)))
        if value:
            return value
    for field in scalar_fields:
        value = num_or_zero(pick(employee, (field,)))
        if value:
            return value
    return _ZERO


def compute_allowance_for_year(employee: Optional[Mapping[str, Any]], year: int) -> AllowanceFigures:
    """Base allowance and carryover for ``year``, not yet summed.

    The year-keyed maps win; a zero or missing year entry falls back to the
    employee's single non-year-keyed figure. No employee → zeros.
    """
    if not isinstance(employee, Mapping):
        return AllowanceFigures()
    return AllowanceFigures(
        allowance=_year_value(employee, ALLOWANCE_BY_YEAR_FIELDS, ALLOWANCE_FIELDS, year),
        carryover=_year_value(employee, CARRYOVER_BY_YEAR_FIELDS, CARRYOVER_FIELDS, year),
    )


# ═════════════════════════════════════════════════════════════════════
# Business days
# ═════════════════════════════════════════════════════════════════════


def is_business_day(day: date, bank_holidays: BankHolidays = None) -> bool:
    if day.weekday() >= 5:
        return False
    if bank_holidays and day.isoformat() in bank_holidays:
        return False
    return True


def count_business_days(start: date, end: date, bank_holidays: BankHolidays = None) -> int:
    """Weekdays in ``[start, end]`` that are not bank holidays (0 if end < start).

    Whole weeks are counted arithmetically, so the cost does not grow with
    the length of the span.
    """
    span = (end - start).days + 1
    if span <= 0:
        return 0

    full_weeks, extra = divmod(span, 7)
    first = start.weekday()
    weekdays = full_weeks * 5 + sum(1 for offset in range(extra) if (first + offset) % 7 < 5)

    holidays = {parse_ymd(text) for text in bank_holidays or ()}
    weekdays -= sum(
        1 for day in holidays
        if day is not None and start <= day <= end and day.weekday() < 5
    )
    return weekdays


def compute_request_days(
    request: Mapping[str, Any],
    clamp_start: Optional[date],
    clamp_end: Optional[date],
    orig_start: Optional[date],
    orig_end: Optional[date],
    bank_holidays: BankHolidays = None,
) -> Decimal:
    """Business-day length of the clamped span with half-day reductions."""
    if clamp_start is None or clamp_end is None:
        return _ZERO

    days = count_business_days(clamp_start, clamp_end, bank_holidays)
    if days <= 0:
        return _ZERO

    meta = half_day_meta(request)
    orig_end = orig_end or orig_start
    orig_single = orig_start is not None and orig_start == orig_end

    if clamp_start == clamp_end:
        if not is_business_day(clamp_start, bank_holidays):
            return _ZERO
        if orig_single and meta.any_signal:
            return _HALF
        if (clamp_start == orig_start and meta.start_signal) or (
            clamp_start == orig_end and meta.end_signal
        ):
            return _HALF
        return _ONE

    reduction = _ZERO
    if clamp_start == orig_start and meta.start_signal and is_business_day(clamp_start, bank_holidays):
        reduction += _HALF
    if clamp_end == orig_end and meta.end_signal and is_business_day(clamp_end, bank_holidays):
        reduction += _HALF

    # Legacy whole-request flag: only for an unclamped single-day original
    if (
        reduction == 0
        and meta.legacy_half
        and orig_single
        and clamp_start == orig_start
        and clamp_end == orig_end
    ):
        reduction += _HALF

    return round_to_half(max(_ZERO, Decimal(days) - reduction))


def _mappings(requests: Optional[Iterable[Any]]) -> Iterator[Mapping[str, Any]]:
    for request in requests or ():
        if isinstance(request, Mapping):
            yield request


def _clamped_days_in_year(
    request: Mapping[str, Any],
    year: int,
    bank_holidays: BankHolidays,
) -> Decimal:
    orig_start, orig_end = request_span(request)
    if orig_start is None:
        return _ZERO
    if not isinstance(year, int) or not MINYEAR <= year <= MAXYEAR:
        return _ZERO

    year_start = date(year, 1, 1)
    year_end = date(year, 12, 31)
    if orig_end < year_start or orig_start > year_end:
        return _ZERO

    clamp_start = max(orig_start, year_start)
    clamp_end = min(orig_end, year_end)
    return compute_request_days(request, clamp_start, clamp_end, orig_start, orig_end, bank_holidays)


# ═════════════════════════════════════════════════════════════════════
# Used / breakdown
# ═════════════════════════════════════════════════════════════════════


def compute_used_days(
    requests: Optional[Iterable[Any]],
    year: int,
    bank_holidays: BankHolidays = None,
) -> Decimal:
    """Approved Paid days falling inside ``year``, rounded to half."""
    used = _ZERO
    for request in _mappings(requests):
        if not is_approved(request):
            continue
        if classify_leave_kind(request) is not LeaveKind.paid:
            continue
        used += _clamped_days_in_year(request, year, bank_holidays)
    return round_to_half(used)


def days_by_kind(
    requests: Optional[Iterable[Any]],
    year: int,
    bank_holidays: BankHolidays = None,
) -> dict[LeaveKind, Decimal]:
    """Approved days inside ``year`` per leave kind (Paid, Unpaid, Accrued)."""
    totals = {LeaveKind.paid: _ZERO, LeaveKind.unpaid: _ZERO, LeaveKind.accrued: _ZERO}
    for request in _mappings(requests):
        if not is_approved(request):
            continue
        kind = classify_leave_kind(request)
        if kind not in totals:
            continue
        totals[kind] += _clamped_days_in_year(request, year, bank_holidays)
    return {kind: round_to_half(value) for kind, value in totals.items()}


def remaining_days(total_allowance: Any, used: Any) -> Decimal:
    """``max(0, total - used)`` rounded to half; used may exceed the allowance."""
    return round_to_half(max(_ZERO, num_or_zero(total_allowance) - num_or_zero(used)))


# ═════════════════════════════════════════════════════════════════════
# Next holiday / pending
# ═════════════════════════════════════════════════════════════════════


def next_upcoming_approved(
    requests: Optional[Iterable[Any]],
    today: Any,
) -> Optional[Mapping[str, Any]]:
    """Earliest-starting approved request that has not finished before ``today``."""
    today = to_date_safe(today)
    if today is None:
        return None

    upcoming = []
    for request in _mappings(requests):
        if not is_approved(request):
            continue
        end = request_end(request) or request_start(request)
        if end is None or end < today:
            continue
        upcoming.append(request)

    # Unparseable starts sort last; the sort is stable on ties
    upcoming.sort(key=lambda r: request_start(r) or date.max)
    return upcoming[0] if upcoming else None


def pending_count(requests: Optional[Iterable[Any]]) -> int:
    return sum(1 for request in _mappings(requests) if normalise_status(request) is LeaveStatus.pending)


def describe_span(request: Optional[Mapping[str, Any]]) -> Optional[str]:
    """Short label for a request, e.g. ``"10 Jun → 14 Jun (AM)"``."""
    if not isinstance(request, Mapping):
        return None
    start = request_start(request)
    if start is None:
        return None
    end = request_end(request)
    meta = half_day_meta(request)
    single = end is None or end == start

    start_text = start.strftime(SHORT_DATE_FORMAT)
    if meta.start_period is not None:
        start_text += f" ({meta.start_period.value})"
    elif single and (meta.start_half or meta.legacy_half):
        start_text += " (Half)"

    if end is None:
        return start_text

    end_text = end.strftime(SHORT_DATE_FORMAT)
    if meta.end_period is not None:
        end_text += f" ({meta.end_period.value})"
    elif single and meta.end_half:
        end_text += " (Half)"
    return f"{start_text} → {end_text}"


# ═════════════════════════════════════════════════════════════════════
# Year summary
# ═════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class HolidaySummary:
    """Dashboard projection for one employee and one calendar year."""

    year: int
    base_allowance: Decimal
    carryover: Decimal
    allowance: Decimal
    used: Decimal
    remaining: Decimal
    pending_count: int
    next_holiday: Optional[Mapping[str, Any]]
    by_kind: dict[LeaveKind, Decimal]


def summarise_year(
    employee: Optional[Mapping[str, Any]],
    requests: Optional[Iterable[Any]],
    year: int,
    bank_holidays: BankHolidays,
    today: date,
) -> HolidaySummary:
    """Allowance, used, remaining, pending and next holiday for ``year``.

    ``requests`` must already be filtered to the employee.
    """
    requests = list(_mappings(requests))
    figures = compute_allowance_for_year(employee, year)
    total = round_to_half(figures.total)
    used = compute_used_days(requests, year, bank_holidays)

    return HolidaySummary(
        year=year,
        base_allowance=round_to_half(figures.allowance),
        carryover=round_to_half(figures.carryover),
        allowance=total,
        used=used,
        remaining=remaining_days(figures.total, used),
        pending_count=pending_count(requests),
        next_holiday=next_upcoming_approved(requests, today),
        by_kind=days_by_kind(requests, year, bank_holidays),
    )
