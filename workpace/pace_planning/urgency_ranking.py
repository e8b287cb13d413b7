"""
Workpace - Urgency Ranking
==========================

Picks the work that needs attention first.

Order: fewest days until the deadline first; on equal days, the higher load
ratio ``remaining_hours / max(remaining_workable_hours, 1)`` first. Works
without a deadline, marked done, or with nothing left to do are not ranked.

``pick_most_urgent`` is a single pass that keeps the current best and only
replaces it on a strictly more urgent candidate, so it returns the same work
as sorting by (days ASC, ratio DESC) and taking the first one (the earlier
candidate wins an exact tie).
"""

from __future__ import annotations

import logging
from typing import Iterable, List, NamedTuple, Optional

from ..work_calendar.availability import AvailabilityProfile, CustomDateOverride
from ..work_calendar.holiday_calendar import DateLike, Holiday
from ..work_progress.progress_engine import overall_progress, remaining_hours
from ..work_progress.work_model import Work
from .pace_engine import WorkPaceCalculation, calculate_pace

logger = logging.getLogger(__name__)


class UrgencyCandidate(NamedTuple):
    work: Work
    remaining_hours: float
    pace: WorkPaceCalculation

    @property
    def load_ratio(self) -> float:
        return self.remaining_hours / max(self.pace.remaining_workable_hours, 1.0)


def is_rankable(work: Work) -> bool:
    return work.has_deadline and not work.is_done


def _more_urgent(candidate: UrgencyCandidate, best: UrgencyCandidate) -> bool:
    if candidate.pace.days_until_deadline != best.pace.days_until_deadline:
        return candidate.pace.days_until_deadline < best.pace.days_until_deadline
    return candidate.load_ratio > best.load_ratio


def pick_most_urgent(candidates: Iterable[UrgencyCandidate]) -> Optional[UrgencyCandidate]:
    """The most urgent candidate, or None when nothing qualifies."""
    best: Optional[UrgencyCandidate] = None
    for candidate in candidates:
        if not is_rankable(candidate.work):
            continue
        if best is None or _more_urgent(candidate, best):
            best = candidate
    return best


def build_urgency_candidates(
    works: Iterable[Work],
    profile: AvailabilityProfile,
    holidays: Iterable[Holiday] = (),
    overrides: Iterable[CustomDateOverride] = (),
    *,
    today: DateLike,
    scale_by_granularity: bool = False,
) -> List[UrgencyCandidate]:
    """Pace every rankable work that still has remaining hours."""
    holidays = list(holidays)
    overrides = list(overrides)
    candidates: List[UrgencyCandidate] = []

    for work in works:
        if not is_rankable(work):
            continue
        remaining = remaining_hours(work, scale_by_granularity=scale_by_granularity)
        if remaining <= 0:
            continue
        pace = calculate_pace(
            work.deadline,
            remaining,
            overall_progress(work) / 100.0,
            profile,
            holidays,
            overrides,
            today=today,
        )
        candidates.append(UrgencyCandidate(work=work, remaining_hours=remaining, pace=pace))

    return candidates


def rank_works_by_urgency(candidates: Iterable[UrgencyCandidate]) -> List[UrgencyCandidate]:
    """Full ordering (days ASC, load ratio DESC); stable for exact ties."""
    rankable = [c for c in candidates if is_rankable(c.work)]
    return sorted(rankable, key=lambda c: (c.pace.days_until_deadline, -c.load_ratio))
