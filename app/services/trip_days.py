# file: services/trip_days.py

import logging
import math
from datetime import date, datetime, time
from typing import Iterable, Optional, Union

from app.models.itinerary import ItineraryItem

logger = logging.getLogger(__name__)

MAX_TRIP_DAYS = 30
SECONDS_PER_DAY = 60 * 60 * 24

DateLike = Union[str, date, datetime, None]


def parse_trip_date(value: DateLike) -> Optional[datetime]:
    """
    Parses an ISO date (or datetime) string into a naive datetime.
    Empty or unparseable values are treated as missing. A UTC offset is
    dropped and the local wall-clock value kept, so mixed inputs compare.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    try:
        return datetime.fromisoformat(value).replace(tzinfo=None)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring unparseable trip date: {value!r}")
        return None


def max_item_day(items: Iterable[ItineraryItem]) -> int:
    return max((item.day for item in items), default=1)


def date_span_days(start: DateLike, end: DateLike) -> Optional[int]:
    """
    Inclusive number of days between start and end, or None when either
    date is missing or the range is not ordered.
    """
    start_dt, end_dt = parse_trip_date(start), parse_trip_date(end)
    if start_dt is None or end_dt is None:
        return None
    if start_dt >= end_dt:
        return None
    return math.ceil((end_dt - start_dt).total_seconds() / SECONDS_PER_DAY) + 1


def total_days(start: DateLike, end: DateLike, items: Iterable[ItineraryItem]) -> int:
    items = list(items)
    item_days = max(1, max_item_day(items))

    if parse_trip_date(start) is None or parse_trip_date(end) is None:
        return item_days

    span = date_span_days(start, end)
    if span is None:
        # Unordered range: fall back to the itinerary instead of failing.
        logger.debug(f"Start date {start} is not before end date {end}; deriving days from items")
        return item_days

    return max(span, item_days, 1)


def validate_trip_dates(start: DateLike, end: DateLike, today: Optional[date] = None,
                        check_past: bool = True) -> Optional[str]:
    """
    Returns a user-facing error message for a bad date range, or None.
    Missing dates are allowed. Only consulted before saving a trip.
    With `check_past` off, a start date in the past is accepted.
    """
    start_dt, end_dt = parse_trip_date(start), parse_trip_date(end)
    if start not in (None, "") and start_dt is None:
        return "Start date is not a valid date"
    if end not in (None, "") and end_dt is None:
        return "End date is not a valid date"

    today = today or date.today()
    if check_past and start_dt is not None and start_dt.date() < today:
        return "Start date cannot be in the past"
    if start_dt is None or end_dt is None:
        return None
    if end_dt <= start_dt:
        return "End date must be after start date"
    if date_span_days(start_dt, end_dt) > MAX_TRIP_DAYS:
        return f"Trip cannot be longer than {MAX_TRIP_DAYS} days"
    return None
