"""Week windows offered by the booking list filter."""
from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, List, Optional

from .config import get_settings
from .schemas import WeekWindow

DAYS_PER_WEEK = 7


def _format_day(value: date) -> str:
    return value.strftime("%d.%m")


def generate_weeks(
    anchor: Optional[date] = None,
    target_year: Optional[int] = None,
    max_weeks: Optional[int] = None,
) -> List[WeekWindow]:
    """Consecutive 7-day windows starting at ``anchor``.

    A window is always emitted before the year check, so the last window may be
    the first one starting after ``target_year``. Never more than ``max_weeks``.
    Defaults come from the application settings.
    """

    settings = get_settings()
    start = anchor if anchor is not None else settings.calendar_anchor
    year = target_year if target_year is not None else settings.calendar_year
    limit = max_weeks if max_weeks is not None else settings.max_weeks

    weeks: List[WeekWindow] = []
    for number in range(1, limit + 1):
        end = start + timedelta(days=DAYS_PER_WEEK - 1)
        weeks.append(
            WeekWindow(
                id=f"week-{number}",
                label=f"Week {number}: {_format_day(start)} - {_format_day(end)}",
                start=start,
                end=end,
            )
        )
        if start.year > year:
            break
        start += timedelta(days=DAYS_PER_WEEK)
    return weeks


def find_week(weeks: Iterable[WeekWindow], week_id: str) -> Optional[WeekWindow]:
    return next((week for week in weeks if week.id == week_id), None)
