"""
═══════════════════════════════════════════════════════════════════════════════
                    WORKPACE — Holiday Calendar Tests (H1-H6)
═══════════════════════════════════════════════════════════════════════════════

Calculated Japanese national holidays: rule table, equinoxes, substitutes,
year-keyed relocations and one-off holidays.

Run with: python -m pytest workpace/tests/test_holiday_calendar.py -v
"""

from datetime import date, datetime

import pytest

from workpace.work_calendar.holiday_calendar import (
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
from workpace.work_calendar.holiday_rules import (
    SUBSTITUTE_HOLIDAY_NAME,
    Equinox,
    HOLIDAY_RULES,
    rules_for_year,
)


def _dates(holidays):
    return [h.date for h in holidays]


def _names_by_date(year):
    return {h.date: h.name for h in holidays_for_year(year)}


class TestH1_YearCalendar:
    """H1: Full calendar of a year."""

    def test_2026_calendar(self):
        """H1.1: 2026 has 17 holidays including the Golden Week substitute."""
        expected = [
            date(2026, 1, 1),
            date(2026, 1, 12),
            date(2026, 2, 11),
            date(2026, 2, 23),
            date(2026, 3, 20),
            date(2026, 4, 29),
            date(2026, 5, 3),
            date(2026, 5, 4),
            date(2026, 5, 5),
            date(2026, 5, 6),
            date(2026, 7, 20),
            date(2026, 8, 11),
            date(2026, 9, 21),
            date(2026, 9, 23),
            date(2026, 10, 12),
            date(2026, 11, 3),
            date(2026, 11, 23),
        ]
        assert _dates(holidays_for_year(2026)) == expected

    def test_names_as_published(self):
        """H1.2: Names follow the official spelling."""
        names = _names_by_date(2026)
        assert names[date(2026, 1, 1)] == "元日"
        assert names[date(2026, 1, 12)] == "成人の日"
        assert names[date(2026, 10, 12)] == "スポーツの日"
        assert names[date(2026, 5, 6)] == SUBSTITUTE_HOLIDAY_NAME

    def test_deterministic(self):
        """H1.3: Same year, same result."""
        assert holidays_for_year(2026) == holidays_for_year(2026)

    def test_sorted_and_unique_for_all_years(self):
        """H1.4: Every year is date-sorted with no duplicate dates."""
        for year in range(1900, 2101):
            dates = _dates(holidays_for_year(year))
            assert dates == sorted(dates), year
            assert len(dates) == len(set(dates)), year
            assert all(d.year == year for d in dates), year

    def test_rules_never_overlap(self):
        """H1.5: At most one rule row per holiday key applies to a year."""
        for year in range(1900, 2101):
            keys = [rule.key for rule in rules_for_year(year)]
            assert len(keys) == len(set(keys)), year

    def test_every_holiday_key_applies_to_current_year(self):
        """H1.6: Every holiday of the table still exists in 2026."""
        keys_2026 = {rule.key for rule in rules_for_year(2026)}
        all_keys = {rule.key for rule in HOLIDAY_RULES}
        assert keys_2026 == all_keys


class TestH2_Equinoxes:
    """H2: Equinox approximation."""

    @pytest.mark.parametrize("year, equinox, day", [
        (2024, Equinox.VERNAL, 20),
        (2024, Equinox.AUTUMNAL, 22),
        (2026, Equinox.VERNAL, 20),
        (2026, Equinox.AUTUMNAL, 23),
        (1999, Equinox.VERNAL, 21),
        (1999, Equinox.AUTUMNAL, 23),
        (1990, Equinox.AUTUMNAL, 23),
        (1984, Equinox.VERNAL, 20),
        (1984, Equinox.AUTUMNAL, 23),
        (1950, Equinox.VERNAL, 21),
    ])
    def test_equinox_day(self, year, equinox, day):
        """H2.1: Known equinox days."""
        assert equinox_day(year, equinox) == day

    def test_outside_range_uses_nominal_day(self):
        """H2.2: Years outside 1900-2099 degrade to 20 / 23."""
        assert equinox_day(2100, Equinox.VERNAL) == 20
        assert equinox_day(2100, Equinox.AUTUMNAL) == 23
        assert equinox_day(1899, Equinox.VERNAL) == 20

    def test_unsupported_year_still_has_calendar(self):
        """H2.3: Out-of-range years produce a calendar instead of failing."""
        names = _names_by_date(2150)
        assert names[date(2150, 3, 20)] == "春分の日"
        assert names[date(2150, 9, 23)] == "秋分の日"


class TestH3_MovingHolidays:
    """H3: N-th weekday rules and their adoption years."""

    def test_nth_weekday_of_month(self):
        """H3.1: Second Monday of January 2026 is the 12th."""
        assert nth_weekday_of_month(2026, 1, 2, 0) == date(2026, 1, 12)
        assert nth_weekday_of_month(2026, 9, 3, 0) == date(2026, 9, 21)

    def test_first_day_counts_as_occurrence(self):
        """H3.2: A month starting on the weekday counts the 1st."""
        # 2024-07-01 is a Monday
        assert nth_weekday_of_month(2024, 7, 1, 0) == date(2024, 7, 1)
        assert nth_weekday_of_month(2024, 7, 3, 0) == date(2024, 7, 15)

    def test_coming_of_age_day_switch(self):
        """H3.3: Fixed 15 January until 1999, second Monday from 2000."""
        assert _names_by_date(1999)[date(1999, 1, 15)] == "成人の日"
        names_2000 = _names_by_date(2000)
        assert names_2000[date(2000, 1, 10)] == "成人の日"
        assert date(2000, 1, 15) not in names_2000

    def test_historical_names(self):
        """H3.4: 29 April changes name over time."""
        assert _names_by_date(1988)[date(1988, 4, 29)] == "天皇誕生日"
        assert _names_by_date(2000)[date(2000, 4, 29)] == "みどりの日"
        assert _names_by_date(2010)[date(2010, 4, 29)] == "昭和の日"
        assert _names_by_date(2019)[date(2019, 10, 14)] == "体育の日"

    def test_emperors_birthday_history(self):
        """H3.5: 23 December until 2018, none in 2019, 23 February from 2020."""
        assert date(2017, 12, 23) in _names_by_date(2017)
        names_2019 = _names_by_date(2019)
        assert date(2019, 12, 23) not in names_2019
        assert date(2019, 2, 23) not in names_2019
        assert _names_by_date(2020)[date(2020, 2, 23)] == "天皇誕生日"


class TestH4_YearExceptions:
    """H4: Olympic relocations and one-off holidays."""

    def test_2020_relocations(self):
        """H4.1: Marine, Sports and Mountain Day moved in 2020."""
        names = _names_by_date(2020)
        assert names[date(2020, 7, 23)] == "海の日"
        assert names[date(2020, 7, 24)] == "スポーツの日"
        assert names[date(2020, 8, 10)] == "山の日"
        assert date(2020, 7, 20) not in names
        assert date(2020, 8, 11) not in names
        assert date(2020, 10, 12) not in names

    def test_2021_relocations(self):
        """H4.2: 2021 relocation of Mountain Day to a Sunday gets a substitute."""
        names = _names_by_date(2021)
        assert names[date(2021, 7, 22)] == "海の日"
        assert names[date(2021, 7, 23)] == "スポーツの日"
        assert names[date(2021, 8, 8)] == "山の日"
        assert names[date(2021, 8, 9)] == SUBSTITUTE_HOLIDAY_NAME

    def test_relocations_are_year_specific(self):
        """H4.3: 2022 follows the regular rules again."""
        names = _names_by_date(2022)
        assert names[date(2022, 7, 18)] == "海の日"
        assert names[date(2022, 8, 11)] == "山の日"
        assert names[date(2022, 10, 10)] == "スポーツの日"

    def test_2019_one_off_holidays(self):
        """H4.4: Enthronement holidays exist in 2019 only."""
        names = _names_by_date(2019)
        assert names[date(2019, 5, 1)] == "天皇の即位の日"
        assert names[date(2019, 10, 22)] == "即位礼正殿の儀の行われる日"
        assert date(2020, 5, 1) not in _names_by_date(2020)


class TestH5_SubstituteHolidays:
    """H5: Substitute holidays for Sunday holidays."""

    def test_next_day_substitute(self):
        """H5.1: New Year's Day 2023 fell on a Sunday."""
        assert _names_by_date(2023)[date(2023, 1, 2)] == SUBSTITUTE_HOLIDAY_NAME

    def test_substitute_skips_following_holidays(self):
        """H5.2: Constitution Day 2026 on Sunday skips 4 and 5 May."""
        substitutes = substitute_holidays(base_holidays(2026))
        assert _dates(substitutes) == [date(2026, 5, 6)]

    def test_december_substitute(self):
        """H5.3: 23 December 2018 fell on a Sunday."""
        assert _names_by_date(2018)[date(2018, 12, 24)] == SUBSTITUTE_HOLIDAY_NAME

    def test_substitutes_never_collide(self):
        """H5.4: No substitute shares a date with another holiday."""
        for year in range(1950, 2101):
            base = base_holidays(year)
            base_dates = set(_dates(base))
            substitute_dates = _dates(substitute_holidays(base))
            assert not base_dates.intersection(substitute_dates), year
            assert len(substitute_dates) == len(set(substitute_dates)), year

    def test_substitute_search_tracks_assigned_days(self):
        """H5.5: Two Sunday holidays in a row get two distinct substitutes."""
        holidays = [
            Holiday(date=date(2026, 3, 1), name="甲"),
            Holiday(date=date(2026, 3, 2), name="乙"),
            Holiday(date=date(2026, 3, 8), name="丙"),
            Holiday(date=date(2026, 3, 9), name="丁"),
        ]
        substitutes = substitute_holidays(holidays)
        assert _dates(substitutes) == [date(2026, 3, 3), date(2026, 3, 10)]


class TestH6_Lookups:
    """H6: Period and single-day lookups."""

    def test_period_is_inclusive(self):
        """H6.1: Both bounds are included and years are crossed."""
        holidays = holidays_for_period(date(2025, 12, 31), date(2026, 1, 12))
        assert _dates(holidays) == [date(2026, 1, 1), date(2026, 1, 12)]

    def test_period_accepts_datetimes(self):
        """H6.2: Datetimes are truncated to their calendar day."""
        holidays = holidays_for_period(datetime(2026, 11, 3, 18, 30), datetime(2026, 11, 3, 9, 0))
        assert _dates(holidays) == [date(2026, 11, 3)]

    def test_holiday_on(self):
        """H6.3: Single day lookup."""
        assert holiday_on(date(2026, 11, 3)).name == "文化の日"
        assert holiday_on(date(2026, 11, 4)) is None

    def test_holiday_serialization(self):
        """H6.4: Holidays serialize with ISO dates."""
        holiday = Holiday(date=date(2026, 11, 3), name="文化の日")
        assert holiday.to_dict() == {"name": "文化の日", "date": "2026-11-03"}
        assert Holiday.from_dict(holiday.to_dict()) == holiday

    def test_as_calendar_date(self):
        """H6.5: Strings, dates and datetimes all become dates."""
        assert as_calendar_date("2026-10-19T08:00:00") == date(2026, 10, 19)
        assert as_calendar_date(datetime(2026, 10, 19, 23, 59)) == date(2026, 10, 19)
        assert as_calendar_date(date(2026, 10, 19)) == date(2026, 10, 19)
