"""
Workpace - Progress History
===========================

Daily snapshots of a work's progress and their expansion into a continuous
time series.

A snapshot stores, per stage k, how many leaves have reached that stage
(``unit_stage_counts[k] = |{ l : s_l ≥ k }|``). Completed hours follow
directly from the counts:

    completed = Σ_k h_k · reached_k        (= Σ_l C_{s_l})

so history stays meaningful when the stage hours are edited later. Older
snapshots that only carry ``completed_hours`` are still accepted.

Series rules:
- one row per calendar day from the first to the last snapshot
- days without a snapshot keep the previous day's completed hours
- hours worked on the first day is 0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .progress_engine import completed_hours, leaf_units
from .work_model import StageWorkload, Work, parse_date

logger = logging.getLogger(__name__)

SERIES_COLUMNS: List[str] = ["date", "completed_hours", "hours_worked", "cumulative_percent", "has_snapshot"]


@dataclass(frozen=True)
class ProgressSnapshot:
    """Progress of one work at the end of one day."""
    date: date
    completed_hours: Optional[float] = None
    unit_stage_counts: Tuple[int, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "completed_hours": None if self.completed_hours is None else round(self.completed_hours, 2),
            "unit_stage_counts": list(self.unit_stage_counts),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProgressSnapshot":
        day = parse_date(data.get("date"))
        if day is None:
            raise ValueError(f"Snapshot without a valid date: {data!r}")
        hours = data.get("completed_hours", data.get("completedHours"))
        counts = data.get("unit_stage_counts", data.get("unitStageCounts")) or []
        return cls(
            date=day,
            completed_hours=None if hours is None else float(hours),
            unit_stage_counts=tuple(int(c) for c in counts if isinstance(c, (int, float))),
        )


def reached_stage_counts(work: Work, stage_count: Optional[int] = None) -> Tuple[int, ...]:
    """Number of leaves at or beyond each stage."""
    count = len(work.stage_workloads) if stage_count is None else stage_count
    if count <= 0:
        return ()
    stages = np.array([leaf.stage_index for leaf in leaf_units(work.units)], dtype=int)
    return tuple(int(np.count_nonzero(stages >= k)) for k in range(count))


def completed_hours_from_counts(counts: Sequence[int], stage_workloads: Sequence[StageWorkload]) -> float:
    return float(sum(stage.effective_hours * reached for stage, reached in zip(stage_workloads, counts)))


def take_snapshot(work: Work, day: date) -> ProgressSnapshot:
    return ProgressSnapshot(
        date=day,
        completed_hours=completed_hours(work),
        unit_stage_counts=reached_stage_counts(work),
    )


def record_snapshot(
    history: Sequence[ProgressSnapshot], snapshot: ProgressSnapshot
) -> Tuple[ProgressSnapshot, ...]:
    """History with ``snapshot`` added; an existing snapshot of the same day is replaced."""
    kept = [entry for entry in history if entry.date != snapshot.date]
    kept.append(snapshot)
    return tuple(sorted(kept, key=lambda entry: entry.date))


def _snapshot_hours(snapshot: ProgressSnapshot, stage_workloads: Sequence[StageWorkload]) -> float:
    if snapshot.unit_stage_counts and stage_workloads:
        return completed_hours_from_counts(snapshot.unit_stage_counts, stage_workloads)
    if snapshot.completed_hours is None:
        return np.nan
    return float(snapshot.completed_hours)


def progress_series(
    history: Sequence[ProgressSnapshot],
    stage_workloads: Sequence[StageWorkload] = (),
    total_hours: Optional[float] = None,
) -> pd.DataFrame:
    """
    Continuous daily series of completed hours.

    Args:
        history: Snapshots in any order (one per day)
        stage_workloads: Stage table used to turn stage counts into hours
        total_hours: Denominator for ``cumulative_percent`` (0 / None → 0 %)
    """
    if not history:
        return pd.DataFrame(columns=SERIES_COLUMNS)

    ordered = sorted(history, key=lambda entry: entry.date)
    df = pd.DataFrame(
        {
            "date": pd.to_datetime([entry.date for entry in ordered]),
            "completed_hours": [_snapshot_hours(entry, stage_workloads) for entry in ordered],
        }
    )
    df = df.drop_duplicates(subset="date", keep="last").set_index("date")

    full_range = pd.date_range(df.index.min(), df.index.max(), freq="D")
    df = df.reindex(full_range)
    df["has_snapshot"] = df.index.isin([pd.Timestamp(entry.date) for entry in ordered])
    df["completed_hours"] = df["completed_hours"].ffill().fillna(0.0)

    df["hours_worked"] = df["completed_hours"].diff().fillna(0.0)
    df.iloc[0, df.columns.get_loc("hours_worked")] = 0.0

    if total_hours and total_hours > 0:
        df["cumulative_percent"] = 100.0 * df["completed_hours"] / total_hours
    else:
        df["cumulative_percent"] = 0.0

    df = df.round({"completed_hours": 2, "hours_worked": 2, "cumulative_percent": 2})
    df.index.name = "date"
    return df.reset_index()[SERIES_COLUMNS]
