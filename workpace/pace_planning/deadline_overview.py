"""
Workpace - Deadline Overview
============================

One row per open work with a deadline, sorted by deadline:

    progress %, remaining / total hours, days until deadline,
    available workable hours and the load ratio

        load_ratio = remaining / available      (∞ when available = 0 and remaining > 0)

Done works and works without a deadline are left out.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, List

import pandas as pd

from ..work_calendar.availability import AvailabilityProfile, CustomDateOverride
from ..work_calendar.holiday_calendar import DateLike, Holiday, as_calendar_date
from ..work_progress.progress_engine import overall_progress, remaining_hours, total_hours
from ..work_progress.work_model import Work
from .pace_engine import calculate_pace

logger = logging.getLogger(__name__)

OVERVIEW_COLUMNS: List[str] = [
    "work_id",
    "title",
    "deadline",
    "progress_percent",
    "remaining_hours",
    "total_hours",
    "days_until_deadline",
    "available_hours",
    "load_ratio",
    "is_overdue",
    "pace_status",
]


@dataclass
class DeadlineOverviewRow:
    work_id: str
    title: str
    deadline: date
    progress_percent: int
    remaining_hours: float
    total_hours: float
    days_until_deadline: int
    available_hours: float
    load_ratio: float
    is_overdue: bool
    pace_status: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "work_id": self.work_id,
            "title": self.title,
            "deadline": self.deadline.isoformat(),
            "progress_percent": self.progress_percent,
            "remaining_hours": round(self.remaining_hours, 2),
            "total_hours": round(self.total_hours, 2),
            "days_until_deadline": self.days_until_deadline,
            "available_hours": round(self.available_hours, 2),
            "load_ratio": round(self.load_ratio, 3) if math.isfinite(self.load_ratio) else None,
            "is_overdue": self.is_overdue,
            "pace_status": self.pace_status,
        }


def load_ratio(remaining: float, available: float) -> float:
    if available > 0:
        return remaining / available
    return math.inf if remaining > 0 else 0.0


def deadline_overview(
    works: Iterable[Work],
    profile: AvailabilityProfile,
    holidays: Iterable[Holiday] = (),
    overrides: Iterable[CustomDateOverride] = (),
    *,
    today: DateLike,
) -> List[DeadlineOverviewRow]:
    """Overview rows for every open work with a deadline, earliest deadline first."""
    reference = as_calendar_date(today)
    holidays = list(holidays)
    overrides = list(overrides)
    rows: List[DeadlineOverviewRow] = []

    for work in works:
        if work.deadline is None or work.is_done:
            continue
        remaining = remaining_hours(work)
        progress = overall_progress(work)
        pace = calculate_pace(
            work.deadline,
            remaining,
            progress / 100.0,
            profile,
            holidays,
            overrides,
            today=reference,
        )
        available = pace.remaining_workable_hours
        rows.append(
            DeadlineOverviewRow(
                work_id=work.id,
                title=work.title,
                deadline=work.deadline,
                progress_percent=progress,
                remaining_hours=remaining,
                total_hours=total_hours(work),
                days_until_deadline=pace.days_until_deadline,
                available_hours=available,
                load_ratio=load_ratio(remaining, available),
                is_overdue=work.deadline < reference,
                pace_status=pace.pace_status.value,
            )
        )

    rows.sort(key=lambda row: row.deadline)
    logger.debug(f"Deadline overview on {reference}: {len(rows)} open works")
    return rows


def deadline_overview_frame(rows: Iterable[DeadlineOverviewRow]) -> pd.DataFrame:
    """Overview rows as a DataFrame (load_ratio keeps ∞ as a float)."""
    records = [
        {column: getattr(row, column) for column in OVERVIEW_COLUMNS}
        for row in rows
    ]
    df = pd.DataFrame(records, columns=OVERVIEW_COLUMNS)
    if not df.empty:
        df["deadline"] = pd.to_datetime(df["deadline"])
    return df
