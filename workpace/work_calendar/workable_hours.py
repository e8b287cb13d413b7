"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    WORKPACE — WORKABLE HOURS
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Available work hours over an inclusive date range.

    W(start, end) = Σ_{d = start}^{end} h(d)

Per-day resolution (first match wins):

    1. d has a custom override            → override hours
    2. d is a holiday                     → profile[holiday]
    3. otherwise                          → profile[weekday(d)]

A date counts as a holiday when it appears in the caller-supplied holiday set
OR when the calculated calendar of d's year lists it. A partial supplied list
therefore never hides a national holiday. The calculated calendar is built
once per distinct year inside a single call; nothing is memoised across calls.

    workable_days = |{ d ∈ [start, end] : h(d) > 0 }|

start > end is an empty range: 0 hours, 0 days.
═══════════════════════════════════════════════════════════════════════════════════════════════════════
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional

import pandas as pd

from .availability import (
    AvailabilityProfile,
    CustomDateOverride,
    DayKey,
    index_overrides,
    weekday_key,
)
from .holiday_calendar import DateLike, Holiday, as_calendar_date, holidays_for_year

logger = logging.getLogger(__name__)


class HoursSource(str, Enum):
    """Which rule decided a day's hours."""
    OVERRIDE = "override"
    HOLIDAY = "holiday"
    WEEKDAY = "weekday"


@dataclass(frozen=True)
class DayHours:
    """Resolved hours for one calendar day."""
    date: date
    hours: float
    source: HoursSource
    holiday_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "weekday": weekday_key(self.date).value,
            "holiday_name": self.holiday_name,
            "source": self.source.value,
            "hours": round(self.hours, 2),
        }


@dataclass
class WorkableHoursResult:
    """Total available hours and the number of days with nonzero hours."""
    total_hours: float
    workable_days: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_hours": round(self.total_hours, 2),
            "workable_days": self.workable_days,
        }


class HolidayLookup:
    """
    Holiday names by date for the duration of one calculation.

    Supplied holidays are checked first, then the calculated calendar for the
    date's year (built lazily, once per year).
    """

    def __init__(self, holidays: Iterable[Holiday] = ()):
        self._supplied: Dict[date, str] = {h.date: h.name for h in holidays}
        self._calculated: Dict[int, Dict[date, str]] = {}

    def name_on(self, day: date) -> Optional[str]:
        name = self._supplied.get(day)
        if name is not None:
            return name
        if day.year not in self._calculated:
            self._calculated[day.year] = {h.date: h.name for h in holidays_for_year(day.year)}
        return self._calculated[day.year].get(day)


def _resolve(
    day: date,
    profile: AvailabilityProfile,
    lookup: HolidayLookup,
    overrides: Dict[date, CustomDateOverride],
) -> DayHours:
    holiday_name = lookup.name_on(day)

    override = overrides.get(day)
    if override is not None:
        return DayHours(day, override.resolve_hours(profile), HoursSource.OVERRIDE, holiday_name)

    if holiday_name is not None:
        return DayHours(day, profile.hours_for(DayKey.HOLIDAY), HoursSource.HOLIDAY, holiday_name)

    return DayHours(day, profile.hours_for(weekday_key(day)), HoursSource.WEEKDAY)


def resolve_day_hours(
    day: DateLike,
    profile: AvailabilityProfile,
    holidays: Iterable[Holiday] = (),
    overrides: Iterable[CustomDateOverride] = (),
) -> DayHours:
    """Hours available on a single day."""
    return _resolve(as_calendar_date(day), profile, HolidayLookup(holidays), index_overrides(overrides))


def iter_day_hours(
    start: DateLike,
    end: DateLike,
    profile: AvailabilityProfile,
    holidays: Iterable[Holiday] = (),
    overrides: Iterable[CustomDateOverride] = (),
) -> Iterator[DayHours]:
    """Resolved hours for every day of [start, end], in date order."""
    lookup = HolidayLookup(holidays)
    indexed = index_overrides(overrides)
    for timestamp in pd.date_range(as_calendar_date(start), as_calendar_date(end), freq="D"):
        yield _resolve(timestamp.date(), profile, lookup, indexed)


def workable_hours_breakdown(
    start: DateLike,
    end: DateLike,
    profile: AvailabilityProfile,
    holidays: Iterable[Holiday] = (),
    overrides: Iterable[CustomDateOverride] = (),
) -> WorkableHoursResult:
    """Total hours and workable-day count over the inclusive range."""
    total = 0.0
    workable_days = 0
    for day in iter_day_hours(start, end, profile, holidays, overrides):
        total += day.hours
        if day.hours > 0:
            workable_days += 1
    return WorkableHoursResult(total_hours=total, workable_days=workable_days)


def workable_hours(
    start: DateLike,
    end: DateLike,
    profile: AvailabilityProfile,
    holidays: Iterable[Holiday] = (),
    overrides: Iterable[CustomDateOverride] = (),
) -> float:
    """Total available hours over the inclusive range."""
    return workable_hours_breakdown(start, end, profile, holidays, overrides).total_hours


DAILY_FRAME_COLUMNS: List[str] = ["date", "weekday", "holiday_name", "source", "hours"]


def daily_hours_frame(
    start: DateLike,
    end: DateLike,
    profile: AvailabilityProfile,
    holidays: Iterable[Holiday] = (),
    overrides: Iterable[CustomDateOverride] = (),
) -> pd.DataFrame:
    """One row per day of the range with the resolved hours and their source."""
    rows = [day.to_dict() for day in iter_day_hours(start, end, profile, holidays, overrides)]
    df = pd.DataFrame(rows, columns=DAILY_FRAME_COLUMNS)
    if not df.empty:
        df["date"] = pd.to_datetime(df["date"])
    return df
