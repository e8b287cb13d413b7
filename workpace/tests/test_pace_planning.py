"""
═══════════════════════════════════════════════════════════════════════════════
                    WORKPACE — Urgency & Deadline Overview Tests (U1-U2)
═══════════════════════════════════════════════════════════════════════════════

Run with: python -m pytest workpace/tests/test_pace_planning.py -v
"""

import math
from datetime import timedelta

from workpace.pace_planning.deadline_overview import (
    OVERVIEW_COLUMNS,
    deadline_overview,
    deadline_overview_frame,
    load_ratio,
)
from workpace.pace_planning.pace_engine import PaceStatus
from workpace.pace_planning.urgency_ranking import (
    build_urgency_candidates,
    pick_most_urgent,
    rank_works_by_urgency,
)
from workpace.work_progress.work_model import WorkStatus


class TestU1_Urgency:
    """U1: Most urgent work."""

    def test_equal_days_higher_ratio_wins(self, work_factory, profile, monday):
        """U1.1: Same deadline, more remaining hours is more urgent."""
        friday = monday + timedelta(days=4)
        light = work_factory("light", [[0, 0]], deadline=friday)
        heavy = work_factory("heavy", [[0, 0, 0, 0]], deadline=friday)
        candidates = build_urgency_candidates([light, heavy], profile, today=monday)
        assert [c.remaining_hours for c in candidates] == [4.0, 8.0]
        assert pick_most_urgent(candidates).work.id == "heavy"

    def test_fewer_days_wins_over_ratio(self, work_factory, profile, monday):
        """U1.2: An earlier deadline beats a heavier load."""
        soon = work_factory("soon", [[3, 2]], deadline=monday + timedelta(days=1))
        later = work_factory("later", [[0] * 10], deadline=monday + timedelta(days=4))
        candidates = build_urgency_candidates([later, soon], profile, today=monday)
        assert pick_most_urgent(candidates).work.id == "soon"
        assert [c.work.id for c in rank_works_by_urgency(candidates)] == ["soon", "later"]

    def test_exact_tie_keeps_first(self, work_factory, profile, monday):
        """U1.3: On a full tie the earlier candidate stays."""
        friday = monday + timedelta(days=4)
        first = work_factory("first", [[0, 1]], deadline=friday)
        second = work_factory("second", [[0, 1]], deadline=friday)
        candidates = build_urgency_candidates([first, second], profile, today=monday)
        assert pick_most_urgent(candidates).work.id == "first"
        assert [c.work.id for c in rank_works_by_urgency(candidates)] == ["first", "second"]

    def test_unrankable_works_skipped(self, work_factory, profile, monday):
        """U1.4: No deadline, done, or nothing left are not ranked."""
        friday = monday + timedelta(days=4)
        works = [
            work_factory("no-deadline", [[0]]),
            work_factory("done", [[0]], deadline=friday, status=WorkStatus.DONE),
            work_factory("finished", [[3, 3]], deadline=friday),
        ]
        candidates = build_urgency_candidates(works, profile, today=monday)
        assert candidates == []
        assert pick_most_urgent(candidates) is None

    def test_load_ratio_floor(self, work_factory, profile, monday):
        """U1.5: No workable hours divides by 1 instead of 0."""
        saturday = monday + timedelta(days=5)
        work = work_factory("weekend", [[0, 0]], deadline=saturday + timedelta(days=1))
        candidate = build_urgency_candidates([work], profile, today=saturday)[0]
        assert candidate.pace.remaining_workable_hours == 0.0
        assert candidate.load_ratio == 4.0

    def test_granularity_scaling(self, work_factory, profile, monday):
        """U1.6: Opt-in scaling of remaining hours."""
        work = work_factory("w", [[0, 0]], deadline=monday + timedelta(days=4))
        candidate = build_urgency_candidates([work], profile, today=monday, scale_by_granularity=True)[0]
        assert candidate.remaining_hours == 20.0


class TestU2_DeadlineOverview:
    """U2: Deadline overview rows."""

    def test_rows_sorted_by_deadline(self, work_factory, profile, monday):
        """U2.1: Open works with a deadline, earliest first."""
        works = [
            work_factory("late", [[0, 0]], deadline=monday + timedelta(days=11)),
            work_factory("early", [[1, 3]], deadline=monday + timedelta(days=4)),
            work_factory("no-deadline", [[0]]),
            work_factory("done", [[3]], deadline=monday, status=WorkStatus.DONE),
        ]
        rows = deadline_overview(works, profile, today=monday)
        assert [row.work_id for row in rows] == ["early", "late"]

        early = rows[0]
        assert early.progress_percent == 63
        assert early.remaining_hours == 1.5
        assert early.total_hours == 4.0
        assert early.days_until_deadline == 5
        assert early.available_hours == 40.0
        assert math.isclose(early.load_ratio, 1.5 / 40.0)
        assert early.is_overdue is False
        assert early.pace_status == PaceStatus.AHEAD.value

    def test_overdue_row(self, work_factory, profile, monday):
        """U2.2: A past deadline is overdue and critical."""
        work = work_factory("overdue", [[0]], deadline=monday - timedelta(days=3))
        row = deadline_overview([work], profile, today=monday)[0]
        assert row.is_overdue is True
        assert row.days_until_deadline == 0
        assert row.pace_status == PaceStatus.CRITICAL.value
        assert math.isinf(row.load_ratio)
        assert row.to_dict()["load_ratio"] is None

    def test_load_ratio(self):
        """U2.3: Infinite only when work remains without time."""
        assert load_ratio(10.0, 20.0) == 0.5
        assert load_ratio(0.0, 0.0) == 0.0
        assert math.isinf(load_ratio(1.0, 0.0))

    def test_frame(self, work_factory, profile, monday):
        """U2.4: DataFrame with one row per overview row."""
        works = [
            work_factory("a", [[0]], deadline=monday + timedelta(days=4)),
            work_factory("b", [[0]], deadline=monday + timedelta(days=2)),
        ]
        df = deadline_overview_frame(deadline_overview(works, profile, today=monday))
        assert list(df.columns) == OVERVIEW_COLUMNS
        assert df["work_id"].tolist() == ["b", "a"]
        assert deadline_overview_frame([]).empty

    def test_progress_computed_once_per_row(self, work_factory, profile, monday, monkeypatch):
        """U2.5: Each row measures progress once and reuses it."""
        import importlib

        overview_module = importlib.import_module("workpace.pace_planning.deadline_overview")

        calls = []
        measure = overview_module.overall_progress

        def counting_progress(work, *args, **kwargs):
            calls.append(work.id)
            return measure(work, *args, **kwargs)

        monkeypatch.setattr(overview_module, "overall_progress", counting_progress)
        works = [
            work_factory("a", [[0, 3]], deadline=monday + timedelta(days=4)),
            work_factory("b", [[3, 3]], deadline=monday + timedelta(days=2)),
        ]
        rows = deadline_overview(works, profile, today=monday)
        assert sorted(calls) == ["a", "b"]
        assert [row.progress_percent for row in rows] == [100, 50]
