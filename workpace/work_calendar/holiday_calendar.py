"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    WORKPACE — HOLIDAY CALENDAR
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Calculated national holiday calendar.

    holidays_for_year(Y) = sort_by_date( Base(Y) ∪ Substitutes(Y) )

Base(Y):
    One date per applicable rule row (see holiday_rules), with the year's
    relocations applied, plus the year's one-off holidays.

Substitutes(Y):
    For every base holiday h with weekday(h) = Sunday, in date order:

        s = h + 1 day
        while s ∈ Base(Y) or s ∈ Substitutes(Y):
            s = s + 1 day
        Substitutes(Y) ← Substitutes(Y) ∪ {s}

    The search skips both the original holidays and substitutes assigned so
    far, so no two entries of the result share a date. Consecutive holidays
    are at most a handful of days long, so the loop terminates after a few
    steps.

The calendar is a pure function of the year: no caching, no clock, no I/O.
Unsupported years degrade to nominal fixed dates instead of failing.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Union

from dateutil.relativedelta import relativedelta, weekday as relative_weekday

from .holiday_rules import (
    EQUINOX_NOMINAL_DAY,
    EQUINOX_RATE,
    EQUINOX_REFERENCE_YEAR,
    EQUINOX_TABLE,
    ONE_OFF_HOLIDAYS,
    RELOCATIONS,
    SUBSTITUTE_HOLIDAY_NAME,
    SUNDAY,
    Equinox,
    HolidayRule,
    RuleKind,
    rules_for_year,
)

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime]


@dataclass(frozen=True, order=True)
class Holiday:
    """A named holiday. Ordering is by date first."""
    date: date
    name: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "date": self.date.isoformat()}

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "Holiday":
        return cls(date=as_calendar_date(data["date"]), name=data["name"])


def as_calendar_date(value: Union[DateLike, str]) -> date:
    """Truncate a datetime (or ISO string) to its calendar day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# DATE DERIVATION
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def nth_weekday_of_month(year: int, month: int, nth: int, weekday: int) -> date:
    """
    n-th occurrence of ``weekday`` (Monday == 0) in the month.

    relativedelta(day=1, weekday=MO(+n)) lands on the first Monday on or
    after the 1st and then moves (n-1) weeks forward.
    """
    return date(year, month, 1) + relativedelta(day=1, weekday=relative_weekday(weekday)(+nth))


def equinox_day(year: int, equinox: Equinox) -> int:
    """Day of month of the equinox; nominal day outside the supported range."""
    for coeffs in EQUINOX_TABLE[equinox]:
        if coeffs.first_year <= year <= coeffs.last_year:
            leap_correction = int((year - coeffs.offset) / 4)
            value = coeffs.base + EQUINOX_RATE * (year - EQUINOX_REFERENCE_YEAR) - leap_correction
            return int(math.floor(value))
    logger.debug(f"Year {year} outside equinox approximation range, using nominal {equinox.value} day")
    return EQUINOX_NOMINAL_DAY[equinox]


def _rule_date(rule: HolidayRule, year: int) -> date:
    relocated = RELOCATIONS.get(year, {}).get(rule.key)
    if relocated is not None:
        month, day = relocated
        return date(year, month, day)

    if rule.kind == RuleKind.NTH_WEEKDAY:
        return nth_weekday_of_month(year, rule.month, rule.nth, rule.weekday)
    if rule.kind == RuleKind.EQUINOX:
        return date(year, rule.month, equinox_day(year, rule.equinox))
    return date(year, rule.month, rule.day)


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# CALENDAR
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def base_holidays(year: int) -> List[Holiday]:
    """Rule-derived and one-off holidays of ``year`` (no substitutes), sorted."""
    by_date: Dict[date, Holiday] = {}

    for rule in rules_for_year(year):
        day = _rule_date(rule, year)
        by_date.setdefault(day, Holiday(date=day, name=rule.name))

    for name, month, day_of_month in ONE_OFF_HOLIDAYS.get(year, []):
        day = date(year, month, day_of_month)
        by_date.setdefault(day, Holiday(date=day, name=name))

    return sorted(by_date.values())


def substitute_holidays(holidays: Iterable[Holiday]) -> List[Holiday]:
    """Substitute holidays for every holiday falling on a Sunday."""
    base = sorted(holidays)
    taken = {h.date for h in base}
    substitutes: List[Holiday] = []

    for holiday in base:
        if holiday.date.weekday() != SUNDAY:
            continue
        candidate = holiday.date + timedelta(days=1)
        while candidate in taken:
            candidate += timedelta(days=1)
        taken.add(candidate)
        substitutes.append(Holiday(date=candidate, name=SUBSTITUTE_HOLIDAY_NAME))

    return substitutes


def holidays_for_year(year: int) -> List[Holiday]:
    """
    All national holidays of ``year`` including substitutes, sorted by date.

    Deterministic and total: never raises for a valid year number.
    """
    base = base_holidays(year)
    return sorted(base + substitute_holidays(base))


def holidays_for_period(start: DateLike, end: DateLike) -> List[Holiday]:
    """Calculated holidays with start <= date <= end (both inclusive)."""
    first = as_calendar_date(start)
    last = as_calendar_date(end)
    result: List[Holiday] = []
    for year in range(first.year, last.year + 1):
        result.extend(h for h in holidays_for_year(year) if first <= h.date <= last)
    return result


def holiday_on(day: DateLike) -> Optional[Holiday]:
    """The calculated holiday on ``day``, if any."""
    target = as_calendar_date(day)
    for holiday in holidays_for_year(target.year):
        if holiday.date == target:
            return holiday
    return None
