"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    WORKPACE — HOLIDAY RULE TABLE
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Japanese national holidays as data.

Every holiday is described by one or more HolidayRule rows. A row is valid for
an inclusive year range [since, until]; rows for the same holiday key never
overlap, so at most one row per key applies to a given year. Historical
variants (a different fixed date, a different name) are separate rows.

RULE KINDS
══════════

    FIXED         month/day every year
    NTH_WEEKDAY   n-th <weekday> of month  (first occurrence + (n-1)·7 days)
    EQUINOX       day from the equinox approximation:

        day = ⌊ base + 0.242194 · (Y − 1980) − trunc((Y − offset) / 4) ⌋

        ┌──────────────┬───────────┬─────────┬─────────┐
        │ years        │ equinox   │ base    │ offset  │
        ├──────────────┼───────────┼─────────┼─────────┤
        │ 1900–1979    │ vernal    │ 20.8357 │ 1983    │
        │ 1900–1979    │ autumnal  │ 23.2588 │ 1983    │
        │ 1980–2099    │ vernal    │ 20.8431 │ 1980    │
        │ 1980–2099    │ autumnal  │ 23.2488 │ 1980    │
        └──────────────┴───────────┴─────────┴─────────┘

        Outside 1900–2099 the nominal day (20 / 23) is used.

YEAR-KEYED EXCEPTIONS
═════════════════════

RELOCATIONS move a rule-generated holiday to a fixed date for one year
(Olympic rescheduling 2020 and 2021). ONE_OFF_HOLIDAYS add holidays that exist
in a single year only (2019 enthronement). Both are hardcoded on purpose.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

# Python weekday() numbering
MONDAY = 0
SUNDAY = 6

SUBSTITUTE_HOLIDAY_NAME = "振替休日"


class RuleKind(str, Enum):
    FIXED = "fixed"
    NTH_WEEKDAY = "nth_weekday"
    EQUINOX = "equinox"


class Equinox(str, Enum):
    VERNAL = "vernal"
    AUTUMNAL = "autumnal"


@dataclass(frozen=True)
class HolidayRule:
    """
    One row of the holiday table.

    Attributes:
        key: Stable identifier shared by all rows of the same holiday
        name: Name as published for the years the row covers
        kind: How the date is derived
        month: Month (1-12)
        day: Day of month (FIXED)
        nth: Occurrence of ``weekday`` in the month (NTH_WEEKDAY)
        weekday: Python weekday number, Monday == 0 (NTH_WEEKDAY)
        equinox: Which equinox (EQUINOX)
        since: First year the row applies (inclusive), None = open
        until: Last year the row applies (inclusive), None = open
    """
    key: str
    name: str
    kind: RuleKind
    month: int
    day: int = 0
    nth: int = 0
    weekday: int = MONDAY
    equinox: Optional[Equinox] = None
    since: Optional[int] = None
    until: Optional[int] = None

    def applies_to(self, year: int) -> bool:
        if self.since is not None and year < self.since:
            return False
        if self.until is not None and year > self.until:
            return False
        return True


@dataclass(frozen=True)
class EquinoxCoefficients:
    first_year: int
    last_year: int
    base: float
    offset: int


EQUINOX_RATE = 0.242194
EQUINOX_REFERENCE_YEAR = 1980

EQUINOX_TABLE: Dict[Equinox, Tuple[EquinoxCoefficients, ...]] = {
    Equinox.VERNAL: (
        EquinoxCoefficients(1900, 1979, 20.8357, 1983),
        EquinoxCoefficients(1980, 2099, 20.8431, 1980),
    ),
    Equinox.AUTUMNAL: (
        EquinoxCoefficients(1900, 1979, 23.2588, 1983),
        EquinoxCoefficients(1980, 2099, 23.2488, 1980),
    ),
}

EQUINOX_NOMINAL_DAY: Dict[Equinox, int] = {
    Equinox.VERNAL: 20,
    Equinox.AUTUMNAL: 23,
}


HOLIDAY_RULES: Tuple[HolidayRule, ...] = (
    HolidayRule("new_years_day", "元日", RuleKind.FIXED, 1, day=1),

    HolidayRule("coming_of_age_day", "成人の日", RuleKind.FIXED, 1, day=15, until=1999),
    HolidayRule("coming_of_age_day", "成人の日", RuleKind.NTH_WEEKDAY, 1, nth=2, since=2000),

    HolidayRule("foundation_day", "建国記念の日", RuleKind.FIXED, 2, day=11),

    HolidayRule("emperors_birthday", "天皇誕生日", RuleKind.FIXED, 2, day=23, since=2020),

    HolidayRule("vernal_equinox_day", "春分の日", RuleKind.EQUINOX, 3, equinox=Equinox.VERNAL),

    HolidayRule("showa_day", "天皇誕生日", RuleKind.FIXED, 4, day=29, until=1988),
    HolidayRule("showa_day", "みどりの日", RuleKind.FIXED, 4, day=29, since=1989, until=2006),
    HolidayRule("showa_day", "昭和の日", RuleKind.FIXED, 4, day=29, since=2007),

    HolidayRule("constitution_day", "憲法記念日", RuleKind.FIXED, 5, day=3),
    HolidayRule("greenery_day", "みどりの日", RuleKind.FIXED, 5, day=4, since=2007),
    HolidayRule("childrens_day", "こどもの日", RuleKind.FIXED, 5, day=5),

    HolidayRule("marine_day", "海の日", RuleKind.FIXED, 7, day=20, since=1996, until=2002),
    HolidayRule("marine_day", "海の日", RuleKind.NTH_WEEKDAY, 7, nth=3, since=2003),

    HolidayRule("mountain_day", "山の日", RuleKind.FIXED, 8, day=11, since=2016),

    HolidayRule("respect_for_aged_day", "敬老の日", RuleKind.FIXED, 9, day=15, since=1966, until=2002),
    HolidayRule("respect_for_aged_day", "敬老の日", RuleKind.NTH_WEEKDAY, 9, nth=3, since=2003),

    HolidayRule("autumnal_equinox_day", "秋分の日", RuleKind.EQUINOX, 9, equinox=Equinox.AUTUMNAL),

    HolidayRule("sports_day", "体育の日", RuleKind.FIXED, 10, day=10, since=1966, until=1999),
    HolidayRule("sports_day", "体育の日", RuleKind.NTH_WEEKDAY, 10, nth=2, since=2000, until=2019),
    HolidayRule("sports_day", "スポーツの日", RuleKind.NTH_WEEKDAY, 10, nth=2, since=2020),

    HolidayRule("culture_day", "文化の日", RuleKind.FIXED, 11, day=3),
    HolidayRule("labor_thanksgiving_day", "勤労感謝の日", RuleKind.FIXED, 11, day=23),

    HolidayRule("emperors_birthday", "天皇誕生日", RuleKind.FIXED, 12, day=23, since=1989, until=2018),
)


# year -> {holiday key: (month, day)}
RELOCATIONS: Dict[int, Dict[str, Tuple[int, int]]] = {
    2020: {
        "marine_day": (7, 23),
        "sports_day": (7, 24),
        "mountain_day": (8, 10),
    },
    2021: {
        "marine_day": (7, 22),
        "sports_day": (7, 23),
        "mountain_day": (8, 8),
    },
}

# year -> [(name, month, day)]
ONE_OFF_HOLIDAYS: Dict[int, List[Tuple[str, int, int]]] = {
    2019: [
        ("天皇の即位の日", 5, 1),
        ("即位礼正殿の儀の行われる日", 10, 22),
    ],
}


def rules_for_year(year: int) -> List[HolidayRule]:
    """Rows of the table that apply to ``year``, in table order."""
    return [rule for rule in HOLIDAY_RULES if rule.applies_to(year)]
