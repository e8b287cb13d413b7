"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    WORKPACE — PACE PLANNING
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Turns remaining effort and available time into decisions:
- Deadline pace (required daily hours, pace status)
- Urgency ranking across works
- Deadline overview with load ratios
"""

from .pace_engine import (
    AHEAD_RATIO,
    BEHIND_RATIO,
    CRITICAL_RATIO,
    PACE_STATUS_MESSAGES,
    PaceStatus,
    WorkPaceCalculation,
    calculate_pace,
    classify_pace,
    pace_ratio,
)

from .urgency_ranking import (
    UrgencyCandidate,
    build_urgency_candidates,
    is_rankable,
    pick_most_urgent,
    rank_works_by_urgency,
)

from .deadline_overview import (
    DeadlineOverviewRow,
    deadline_overview,
    deadline_overview_frame,
    load_ratio,
)

__all__ = [
    # Pace
    "AHEAD_RATIO",
    "BEHIND_RATIO",
    "CRITICAL_RATIO",
    "PACE_STATUS_MESSAGES",
    "PaceStatus",
    "WorkPaceCalculation",
    "calculate_pace",
    "classify_pace",
    "pace_ratio",
    # Urgency
    "UrgencyCandidate",
    "build_urgency_candidates",
    "is_rankable",
    "pick_most_urgent",
    "rank_works_by_urgency",
    # Overview
    "DeadlineOverviewRow",
    "deadline_overview",
    "deadline_overview_frame",
    "load_ratio",
]
