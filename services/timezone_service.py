"""
Timezone conversion between a caller's local wall clock and stored UTC instants.

All functions are pure: they read no shared state and are safe to call
from any thread. Local dates and times are resolved with zoneinfo, so day
boundaries follow the zone's DST rules. A local time that does not exist
(spring-forward gap) resolves with the pre-transition offset and lands
after the gap; an ambiguous local time (fall-back) resolves to its first
occurrence.
"""

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator, Tuple, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.exceptions import ConfigurationError, ServiceValidationError

logger = logging.getLogger("feedingschedule.timezone")

UTC = timezone.utc

DateLike = Union[datetime, date, str]


def get_zone(zone: str) -> ZoneInfo:
    """
    Resolve an IANA zone identifier.

    Raises:
        ServiceValidationError: If no zone was supplied
        ConfigurationError: If the identifier is not a known zone
    """
    if zone is None or not str(zone).strip():
        raise ServiceValidationError("Timezone is required", code="TIMEZONE_REQUIRED")
    try:
        return ZoneInfo(str(zone).strip())
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(
            f"Unrecognized timezone: {zone}",
            details={"timezone": zone},
            code="UNKNOWN_TIMEZONE",
        ) from e


def _parse(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError as e:
        raise ServiceValidationError(
            f"Invalid date/time value: {value!r}", code="INVALID_DATETIME"
        ) from e


def to_utc(value: DateLike, zone: str) -> datetime:
    """
    Convert a local date, local datetime or instant to an aware UTC datetime.

    Naive datetimes and plain dates are read as wall-clock values in `zone`
    (a date means local midnight). Aware datetimes are already instants and
    are only re-expressed in UTC. ISO strings follow the same rules after
    parsing.
    """
    tz = get_zone(zone)
    if isinstance(value, str):
        value = _parse(value)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=tz)
        return value.astimezone(UTC)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=tz).astimezone(UTC)
    raise ServiceValidationError(
        f"Unsupported date/time value: {value!r}", code="INVALID_DATETIME"
    )


def to_local(instant: datetime, zone: str) -> datetime:
    """Express an instant as an aware datetime in `zone`"""
    tz = get_zone(zone)
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)
    return instant.astimezone(tz)


def local_date(value: DateLike, zone: str) -> date:
    """Local calendar day of a date, local datetime or instant"""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    return to_local(to_utc(value, zone), zone).date()


def time_of_day(instant: datetime, zone: str) -> time:
    """Local wall-clock time of an instant (seconds kept, microseconds dropped)"""
    return to_local(instant, zone).time().replace(microsecond=0)


def resolve_local(day: date, tod: time, zone: str) -> datetime:
    """UTC instant of wall-clock `tod` on local calendar day `day`"""
    tz = get_zone(zone)
    return datetime.combine(day, tod.replace(tzinfo=None), tzinfo=tz).astimezone(UTC)


def start_of_day(day: date, zone: str) -> datetime:
    """UTC instant of local midnight starting `day`"""
    return resolve_local(day, time.min, zone)


def day_boundary(instant: DateLike, zone: str) -> datetime:
    """UTC instant of the start of the local day containing `instant`"""
    return start_of_day(local_date(instant, zone), zone)


def combine_date_and_time_of_day(
    day: DateLike, time_source: Union[datetime, time, str], zone: str
) -> datetime:
    """
    Put the time-of-day of `time_source` onto local calendar day `day`.

    Args:
        day: Local calendar day (a date, or anything local_date accepts)
        time_source: An instant whose local time is taken in `zone`, a naive
            local datetime, or a plain time
        zone: IANA zone identifier

    Returns:
        Aware UTC datetime
    """
    if isinstance(time_source, str):
        time_source = _parse(time_source)
    if isinstance(time_source, datetime):
        if time_source.tzinfo is None:
            tod = time_source.time().replace(microsecond=0)
        else:
            tod = time_of_day(time_source, zone)
    else:
        tod = time_source
    return resolve_local(local_date(day, zone), tod, zone)


def week_start_date(anchor: DateLike, zone: str, week_start_day: int = 0) -> date:
    """First local day of the week containing `anchor` (0=Monday ... 6=Sunday)"""
    day = local_date(anchor, zone)
    return day - timedelta(days=(day.weekday() - week_start_day) % 7)


def week_range(
    anchor: DateLike, zone: str, week_start_day: int = 0
) -> Tuple[datetime, datetime]:
    """
    Half-open UTC window of the local week containing `anchor`.

    The end is local midnight seven calendar days after the start, so a
    week spanning a DST change is 167 or 169 hours long.
    """
    first = week_start_date(anchor, zone, week_start_day)
    return start_of_day(first, zone), start_of_day(first + timedelta(days=7), zone)


def iter_days(first: date, last: date) -> Iterator[date]:
    """Calendar days from `first` through `last`, inclusive"""
    day = first
    while day <= last:
        yield day
        day += timedelta(days=1)
