"""
Date handling for the priority core.

Every instant entering the core goes through `to_datetime`, which returns a
timezone-aware datetime in the clinic timezone (``settings.timezone``).
Naive datetimes are read as clinic wall-clock time; aware ones are
converted. "Today", weekdays and week bounds are therefore always clinic
calendar notions, whatever offset the store stamped on the value.

Weeks run Monday 00:00:00 through Sunday 23:59:59.999999.
"""
from __future__ import annotations

from datetime import date, datetime, time, timedelta, tzinfo
from functools import lru_cache
from typing import Any, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.config import settings
from app.utils import InvalidDateError

ONE_DAY = timedelta(days=1)


@lru_cache(maxsize=8)
def _zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidDateError(
            f"Unknown timezone '{name}'", field="timezone", value=name
        ) from exc


def clinic_timezone(tz: Optional[tzinfo] = None) -> tzinfo:
    """Return `tz` if given, else the configured clinic timezone."""
    return tz if tz is not None else _zone(settings.timezone)


def current_time(tz: Optional[tzinfo] = None) -> datetime:
    """Wall-clock "now" in the clinic timezone."""
    return datetime.now(clinic_timezone(tz))


def to_datetime(value: Any, field: str = "date", tz: Optional[tzinfo] = None) -> datetime:
    """
    Coerce a collaborator date value into an aware clinic-timezone datetime.

    Accepts datetime, date (local midnight), ISO-8601 strings and epoch
    seconds. Anything else, including None, raises InvalidDateError.
    """
    zone = clinic_timezone(tz)

    if isinstance(value, datetime):
        try:
            if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
                return value.replace(tzinfo=zone)
            return value.astimezone(zone)
        except (OverflowError, ValueError) as exc:
            raise InvalidDateError(
                f"{field}: {value.isoformat()} is out of range in {zone}",
                field=field,
                value=value,
            ) from exc

    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=zone)

    # bool is an int subclass; True is not a timestamp
    if isinstance(value, bool):
        raise InvalidDateError(f"{field}: boolean is not a date", field=field, value=value)

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, zone)
        except (OverflowError, OSError, ValueError) as exc:
            raise InvalidDateError(
                f"{field}: timestamp out of range", field=field, value=value
            ) from exc

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise InvalidDateError(f"{field}: empty date string", field=field, value=value)
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise InvalidDateError(
                f"{field}: '{value}' is not an ISO-8601 date", field=field, value=value
            ) from exc
        return to_datetime(parsed, field=field, tz=zone)

    raise InvalidDateError(
        f"{field}: cannot interpret {type(value).__name__} as a date",
        field=field,
        value=value,
    )


def days_between(later: datetime, earlier: datetime) -> int:
    """
    Whole days from `earlier` to `later`, truncated toward zero.

    Both sides must already be clinic-timezone datetimes (see `to_datetime`);
    the difference is taken on wall-clock time so a DST shift does not eat a
    day.
    """
    delta = later.replace(tzinfo=None) - earlier.replace(tzinfo=None)
    return int(delta / ONE_DAY)


def weekday_index(moment: datetime) -> int:
    """Monday = 0 ... Sunday = 6."""
    # (JS getDay() + 6) % 7 is exactly Python's weekday()
    return moment.weekday()


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _week_out_of_range(moment: datetime) -> InvalidDateError:
    return InvalidDateError(
        f"week of {moment.isoformat()} falls outside the supported calendar",
        field="week",
        value=moment,
    )


def start_of_week(moment: datetime) -> datetime:
    """Monday 00:00:00 of the week containing `moment`."""
    try:
        return start_of_day(moment) - timedelta(days=weekday_index(moment))
    except OverflowError as exc:
        raise _week_out_of_range(moment) from exc


def end_of_week(moment: datetime) -> datetime:
    """Sunday 23:59:59.999999 of the week containing `moment`."""
    try:
        return start_of_week(moment) + timedelta(days=7, microseconds=-1)
    except OverflowError as exc:
        raise _week_out_of_range(moment) from exc


def week_bounds(moment: datetime) -> Tuple[datetime, datetime]:
    """(start_of_week, end_of_week) for `moment`."""
    return start_of_week(moment), end_of_week(moment)
