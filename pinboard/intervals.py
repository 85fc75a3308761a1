"""Closed date-range overlap tests used by the collision rule and the week filter."""
from __future__ import annotations

import re
from datetime import date, datetime
from typing import Iterable, List, Optional, TypeVar, Union

from .errors import InvalidDate, InvalidRange
from .schemas import BookingRead, WeekWindow

DateLike = Union[date, str]
B = TypeVar("B", bound=BookingRead)

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date(value: DateLike) -> date:
    """Return ``value`` as a calendar date.

    Strings must be exactly ``YYYY-MM-DD`` and are read as a date-only value,
    so no timezone shift can move them to a neighbouring day.
    """

    # datetime is a date subclass; drop the time part rather than compare instants
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        raise InvalidDate(value)
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise InvalidDate(value) from exc


def ranges_overlap(start_a: DateLike, end_a: DateLike, start_b: DateLike, end_b: DateLike) -> bool:
    """True iff ``[start_a, end_a]`` and ``[start_b, end_b]`` share at least one day.

    Both ends are inclusive: a range ending on the day another starts overlaps it.
    """

    return parse_date(start_a) <= parse_date(end_b) and parse_date(start_b) <= parse_date(end_a)


def in_week(date_from: DateLike, date_to: DateLike, week: WeekWindow) -> bool:
    return ranges_overlap(date_from, date_to, week.start, week.end)


def validate_range(date_from: DateLike, date_to: DateLike) -> None:
    if parse_date(date_from) > parse_date(date_to):
        raise InvalidRange(date_from, date_to)


def filter_by_week(bookings: Iterable[B], week: Optional[WeekWindow]) -> List[B]:
    """Bookings overlapping ``week``; every booking when no week is selected."""

    if week is None:
        return list(bookings)
    return [booking for booking in bookings if in_week(booking.date_from, booking.date_to, week)]
