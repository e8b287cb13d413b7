"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    WORKPACE — WORK CALENDAR
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Calendar side of deadline pacing:
- Japanese national holiday calendar (fixed, n-th weekday and equinox rules,
  year-keyed exceptions, substitute holidays)
- Official Cabinet Office holiday list with local cache and calculated fallback
- Weekly availability profile with date-specific overrides
- Workable hours over an inclusive date range

All calculations are pure functions of their arguments; the reference date is
always passed in by the caller.
"""

from .holiday_rules import (
    HOLIDAY_RULES,
    ONE_OFF_HOLIDAYS,
    RELOCATIONS,
    SUBSTITUTE_HOLIDAY_NAME,
    Equinox,
    HolidayRule,
    RuleKind,
    rules_for_year,
)

from .holiday_calendar import (
    Holiday,
    as_calendar_date,
    base_holidays,
    equinox_day,
    holiday_on,
    holidays_for_period,
    holidays_for_year,
    nth_weekday_of_month,
    substitute_holidays,
)

from .availability import (
    AvailabilityProfile,
    CustomDateKind,
    CustomDateOverride,
    DayKey,
    default_profile,
    weekday_key,
)

from .workable_hours import (
    DayHours,
    HoursSource,
    WorkableHoursResult,
    daily_hours_frame,
    resolve_day_hours,
    workable_hours,
    workable_hours_breakdown,
)

from .official_holidays import (
    HolidaySourceError,
    OfficialHolidayProvider,
    parse_holiday_csv,
)

__all__ = [
    # Rules
    "HOLIDAY_RULES",
    "ONE_OFF_HOLIDAYS",
    "RELOCATIONS",
    "SUBSTITUTE_HOLIDAY_NAME",
    "Equinox",
    "HolidayRule",
    "RuleKind",
    "rules_for_year",
    # Calendar
    "Holiday",
    "as_calendar_date",
    "base_holidays",
    "equinox_day",
    "holiday_on",
    "holidays_for_period",
    "holidays_for_year",
    "nth_weekday_of_month",
    "substitute_holidays",
    # Availability
    "AvailabilityProfile",
    "CustomDateKind",
    "CustomDateOverride",
    "DayKey",
    "default_profile",
    "weekday_key",
    # Workable hours
    "DayHours",
    "HoursSource",
    "WorkableHoursResult",
    "daily_hours_frame",
    "resolve_day_hours",
    "workable_hours",
    "workable_hours_breakdown",
    # Official source
    "HolidaySourceError",
    "OfficialHolidayProvider",
    "parse_holiday_csv",
]
