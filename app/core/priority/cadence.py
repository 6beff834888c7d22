"""
Visit Cadence Aggregator

Counts a patient's visits inside one Monday–Sunday week: per weekday,
today, and the week total. Callers pass visits already fetched for the
week window; the aggregator only filters and counts.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Sequence

from app.utils import get_logger
from .base import Visit, VisitCounts
from .dates import current_time, to_datetime, week_bounds, weekday_index

logger = get_logger(__name__)


def aggregate(
    visits: Iterable[Visit],
    patient_id: str,
    week_start: Any,
    week_end: Any,
    now: Any,
) -> VisitCounts:
    """
    Tally `patient_id`'s visits between `week_start` and `week_end` inclusive.

    The bounds are used exactly as given; they are expected to be the
    Monday 00:00 / Sunday 23:59:59 bounds of the week containing `now`.
    """
    start = to_datetime(week_start, field="week_start")
    end = to_datetime(week_end, field="week_end")
    current = to_datetime(now, field="now")

    today_index = weekday_index(current)
    today_date = current.date()

    by_weekday: Dict[int, int] = {day: 0 for day in range(7)}
    this_week = 0
    today = 0

    for visit in visits:
        if visit.patient_id != patient_id:
            continue
        when = to_datetime(visit.date, field="visit.date")
        if when < start or when > end:
            continue

        this_week += 1
        index = weekday_index(when)
        by_weekday[index] += 1
        if index == today_index and when.date() == today_date:
            today += 1

    return VisitCounts(
        visits_today=today,
        visits_this_week=this_week,
        by_weekday=by_weekday,
    )


def counts_by_patient(
    visits: Sequence[Visit],
    patient_ids: Iterable[str],
    now: Optional[Any] = None,
) -> Dict[str, VisitCounts]:
    """
    VisitCounts for each patient over the week containing `now`.

    Convenience for callers that fetched one week of visits for the whole
    team and need counts for every patient in a list.
    """
    current = to_datetime(now, field="now") if now is not None else current_time()
    start, end = week_bounds(current)

    grouped: Dict[str, list] = {}
    for visit in visits:
        grouped.setdefault(visit.patient_id, []).append(visit)

    result = {
        pid: aggregate(grouped.get(pid, ()), pid, start, end, current)
        for pid in patient_ids
    }
    logger.debug(
        f"Cadence: {len(visits)} visit(s) aggregated for {len(result)} patient(s), "
        f"week {start.date().isoformat()}..{end.date().isoformat()}"
    )
    return result
