"""Overlap check between a draft holiday request and the employee's existing ones."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from crewleave.common.constants import CLOSED_STATUSES, HalfDayPeriod
from crewleave.leave.records import HalfDayMeta, half_day_meta, request_span, status_text


def _period(meta: HalfDayMeta) -> Optional[HalfDayPeriod]:
    return meta.start_period or meta.end_period


def _halves_collide(new: HalfDayMeta, old: HalfDayMeta) -> bool:
    # Full day clashes with anything; AM only with AM, PM only with PM
    if not new.any_signal or not old.any_signal:
        return True
    new_period, old_period = _period(new), _period(old)
    if new_period is None or old_period is None:
        return True
    return new_period == old_period


def find_conflict(
    draft: Mapping[str, Any],
    existing: Optional[Iterable[Any]],
) -> Optional[Mapping[str, Any]]:
    """First live request whose dates overlap ``draft``, or ``None``.

    Declined and cancelled requests are ignored. Two single-day requests on
    the same date may coexist as an AM half and a PM half.
    """
    start, end = request_span(draft)
    if start is None or end is None:
        return None
    draft_meta = half_day_meta(draft)

    for request in existing or ():
        if not isinstance(request, Mapping):
            continue
        if status_text(request) in CLOSED_STATUSES:
            continue

        other_start, other_end = request_span(request)
        if other_start is None or other_end is None:
            continue
        if not (start <= other_end and other_start <= end):
            continue

        both_single_same_day = start == end and other_start == other_end and start == other_start
        if both_single_same_day and not _halves_collide(draft_meta, half_day_meta(request)):
            continue
        return request
    return None
