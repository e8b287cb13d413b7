"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    WORKPACE — DEADLINE PACE ENGINE
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Required daily effort and pace classification for one deadline.

Notation:
    t           : today (calendar day, passed in by the caller)
    D           : deadline (calendar day)
    R           : total remaining hours of the work
    W           : workable hours over [t, D] inclusive
    n           : workable days over [t, D] (days with h(d) > 0)

Missed deadline:
    D < t  →  every figure 0, status CRITICAL, not on schedule

Otherwise:
    days_until_deadline   = (D − t) + 1            (deadline today → 1)
    daily_required        = R / n                  (0 when n = 0)
    today_required        = min(daily_required, h(t))
    ratio ρ               = R / W                  (0 when R = 0 and W = 0; ∞ when R > 0 and W = 0)

Classification (first match wins):
    1. W = 0 and R > 0      → CRITICAL
    2. W = 0 and R = 0      → ON_TRACK
    3. ρ > 1.2              → CRITICAL
    4. ρ > 1.0              → BEHIND
    5. ρ < 0.8              → AHEAD
    6. otherwise            → ON_TRACK

    on_schedule = ρ ≤ 1.0

Boundaries: ρ = 1.0 is ON_TRACK, ρ = 0.8 is ON_TRACK, ρ = 1.2 is BEHIND.
═══════════════════════════════════════════════════════════════════════════════════════════════════════
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Optional

from ..work_calendar.availability import AvailabilityProfile, CustomDateOverride
from ..work_calendar.holiday_calendar import DateLike, Holiday, as_calendar_date
from ..work_calendar.workable_hours import resolve_day_hours, workable_hours_breakdown

logger = logging.getLogger(__name__)

CRITICAL_RATIO = 1.2
BEHIND_RATIO = 1.0
AHEAD_RATIO = 0.8


class PaceStatus(str, Enum):
    AHEAD = "ahead"
    ON_TRACK = "on_track"
    BEHIND = "behind"
    CRITICAL = "critical"


PACE_STATUS_MESSAGES: Dict[PaceStatus, str] = {
    PaceStatus.AHEAD: "予定より進んでいます",
    PaceStatus.ON_TRACK: "順調に進んでいます",
    PaceStatus.BEHIND: "遅れ気味です",
    PaceStatus.CRITICAL: "要注意：大幅な遅れです",
}


def _json_number(value: float, digits: int = 2) -> Optional[float]:
    return round(value, digits) if math.isfinite(value) else None


@dataclass
class WorkPaceCalculation:
    """Pace figures for one work and one reference day. Never persisted."""
    total_workable_hours: float
    remaining_workable_hours: float
    daily_required_hours: float
    today_required_hours: float
    days_until_deadline: int
    workable_days_until_deadline: int
    is_on_schedule: bool
    pace_status: PaceStatus
    progress_ratio: float = 0.0

    @property
    def message(self) -> str:
        return PACE_STATUS_MESSAGES[self.pace_status]

    @classmethod
    def missed_deadline(cls) -> "WorkPaceCalculation":
        return cls(
            total_workable_hours=0.0,
            remaining_workable_hours=0.0,
            daily_required_hours=0.0,
            today_required_hours=0.0,
            days_until_deadline=0,
            workable_days_until_deadline=0,
            is_on_schedule=False,
            pace_status=PaceStatus.CRITICAL,
            progress_ratio=0.0,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_workable_hours": round(self.total_workable_hours, 2),
            "remaining_workable_hours": round(self.remaining_workable_hours, 2),
            "daily_required_hours": round(self.daily_required_hours, 2),
            "today_required_hours": round(self.today_required_hours, 2),
            "days_until_deadline": self.days_until_deadline,
            "workable_days_until_deadline": self.workable_days_until_deadline,
            "is_on_schedule": self.is_on_schedule,
            "pace_status": self.pace_status.value,
            "progress_ratio": _json_number(self.progress_ratio, 3),
            "message": self.message,
        }


def pace_ratio(total_remaining_hours: float, remaining_workable_hours: float) -> float:
    """ρ = R / W, with 0 for nothing-to-do and ∞ for no time left."""
    if remaining_workable_hours > 0:
        return total_remaining_hours / remaining_workable_hours
    return math.inf if total_remaining_hours > 0 else 0.0


def classify_pace(
    progress_ratio: float,
    remaining_workable_hours: float,
    total_remaining_hours: float,
) -> PaceStatus:
    if remaining_workable_hours == 0:
        return PaceStatus.CRITICAL if total_remaining_hours > 0 else PaceStatus.ON_TRACK
    if progress_ratio > CRITICAL_RATIO:
        return PaceStatus.CRITICAL
    if progress_ratio > BEHIND_RATIO:
        return PaceStatus.BEHIND
    if progress_ratio < AHEAD_RATIO:
        return PaceStatus.AHEAD
    return PaceStatus.ON_TRACK


def calculate_pace(
    deadline: DateLike,
    total_remaining_hours: float,
    current_progress_ratio: float,
    profile: AvailabilityProfile,
    holidays: Iterable[Holiday] = (),
    overrides: Iterable[CustomDateOverride] = (),
    *,
    today: DateLike,
) -> WorkPaceCalculation:
    """
    Pace of a work due on ``deadline`` as seen on ``today``.

    ``current_progress_ratio`` is accepted for interface compatibility; the
    classification is derived from remaining hours vs. workable hours only.
    Both dates are truncated to calendar days.
    """
    start = as_calendar_date(today)
    end = as_calendar_date(deadline)

    if end < start:
        logger.debug(f"Deadline {end} already passed on {start}")
        return WorkPaceCalculation.missed_deadline()

    holidays = list(holidays)
    overrides = list(overrides)
    remaining = float(total_remaining_hours) if math.isfinite(total_remaining_hours) else 0.0

    window = workable_hours_breakdown(start, end, profile, holidays, overrides)
    workable = window.total_hours
    workable_days = window.workable_days

    daily_required = remaining / workable_days if workable_days > 0 else 0.0
    today_hours = resolve_day_hours(start, profile, holidays, overrides).hours
    ratio = pace_ratio(remaining, workable)
    status = classify_pace(ratio, workable, remaining)

    result = WorkPaceCalculation(
        total_workable_hours=workable,
        remaining_workable_hours=workable,
        daily_required_hours=daily_required,
        today_required_hours=min(daily_required, today_hours),
        days_until_deadline=(end - start).days + 1,
        workable_days_until_deadline=workable_days,
        is_on_schedule=ratio <= BEHIND_RATIO,
        pace_status=status,
        progress_ratio=ratio,
    )
    logger.debug(
        f"Pace to {end}: {remaining:.2f}h over {workable:.2f}h ({workable_days} days), "
        f"ratio={ratio:.3f} → {status.value}"
    )
    return result
