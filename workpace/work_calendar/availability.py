"""
Workpace - Availability Profile
===============================

Weekly work-hour plan plus date-specific overrides.

A profile maps each of ``monday..sunday`` and ``holiday`` to a number of hours.
A CustomDateOverride pins one exact date and wins over both the weekday and
the holiday value:

    custom_hours     explicit hours for that date
    custom_holiday   the profile's holiday hours
    unavailable      0 hours

Hour values that are negative, NaN or infinite count as 0.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from .holiday_calendar import as_calendar_date

logger = logging.getLogger(__name__)


class DayKey(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"
    HOLIDAY = "holiday"


# Indexed by date.weekday()
WEEKDAY_KEYS = (
    DayKey.MONDAY,
    DayKey.TUESDAY,
    DayKey.WEDNESDAY,
    DayKey.THURSDAY,
    DayKey.FRIDAY,
    DayKey.SATURDAY,
    DayKey.SUNDAY,
)


def weekday_key(day: date) -> DayKey:
    return WEEKDAY_KEYS[day.weekday()]


def sanitize_hours(value: Any) -> float:
    """Coerce an hour value to a finite, non-negative float."""
    try:
        hours = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(hours) or hours < 0:
        return 0.0
    return hours


@dataclass(frozen=True)
class AvailabilityProfile:
    """Hours per weekday and for holidays. Missing keys mean 0 hours."""
    hours: Mapping[DayKey, float] = field(default_factory=dict)

    def hours_for(self, key: Union[DayKey, str]) -> float:
        return sanitize_hours(self.hours.get(DayKey(key), 0.0))

    def weekly_hours(self) -> float:
        """Hours of a week without holidays or overrides."""
        return sum(self.hours_for(key) for key in WEEKDAY_KEYS)

    def to_dict(self) -> Dict[str, float]:
        return {key.value: round(self.hours_for(key), 2) for key in DayKey}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AvailabilityProfile":
        hours: Dict[DayKey, float] = {}
        for raw_key, value in data.items():
            try:
                key = DayKey(str(raw_key).lower())
            except ValueError:
                logger.warning(f"Ignoring unknown availability key: {raw_key}")
                continue
            hours[key] = sanitize_hours(value)
        return cls(hours=hours)

    @classmethod
    def from_work_hours(cls, entries: Iterable[Mapping[str, Any]]) -> "AvailabilityProfile":
        """
        Build from a ``[{"day": "monday", "hours": 4}, ...]`` list.

        Later entries for the same day replace earlier ones.
        """
        return cls.from_dict({entry.get("day", ""): entry.get("hours", 0) for entry in entries})


class CustomDateKind(str, Enum):
    CUSTOM_HOURS = "custom_hours"
    CUSTOM_HOLIDAY = "custom_holiday"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class CustomDateOverride:
    """Hours pinned to one exact calendar date."""
    date: date
    hours: Optional[float] = None
    kind: CustomDateKind = CustomDateKind.CUSTOM_HOURS

    def resolve_hours(self, profile: AvailabilityProfile) -> float:
        if self.kind == CustomDateKind.UNAVAILABLE:
            return 0.0
        if self.kind == CustomDateKind.CUSTOM_HOLIDAY:
            return profile.hours_for(DayKey.HOLIDAY)
        return sanitize_hours(self.hours)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "kind": self.kind.value,
            "hours": self.hours,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CustomDateOverride":
        # Accept the hyphenated spelling used by stored documents
        kind = CustomDateKind(str(data.get("kind") or data.get("type") or "custom_hours").replace("-", "_"))
        hours = data.get("hours", data.get("custom_hours"))
        return cls(date=as_calendar_date(data["date"]), hours=hours, kind=kind)


def index_overrides(overrides: Iterable[CustomDateOverride]) -> Dict[date, CustomDateOverride]:
    """Map overrides by date. The last override for a date wins."""
    indexed: Dict[date, CustomDateOverride] = {}
    for override in overrides:
        indexed[override.date] = override
    return indexed


def default_profile() -> AvailabilityProfile:
    """Five 8-hour weekdays, free weekends and holidays."""
    hours: Dict[DayKey, float] = {key: 8.0 for key in WEEKDAY_KEYS[:5]}
    hours.update({DayKey.SATURDAY: 0.0, DayKey.SUNDAY: 0.0, DayKey.HOLIDAY: 0.0})
    return AvailabilityProfile(hours=hours)
