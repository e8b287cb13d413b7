"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    WORKPACE — PROGRESS ENGINE
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Completion of a work from its unit tree and stage-effort table.

Notation:
    L           : leaf units of the tree (left-to-right)
    s_l         : stage index of leaf l, clamped to [0, K-1]
    h_k         : base hours of stage k (None / non-finite → 0)
    C_k         : cumulative hours  C_k = Σ_{j ≤ k} h_j

WEIGHTED MODE (stage hours configured)
──────────────────────────────────────
    completed  = Σ_l C_{s_l}
    possible   = C_{K-1} · |L|
    remaining  = Σ_l (C_{K-1} − C_{s_l})          = possible − completed
    progress % = round(100 · completed / possible)     (0 if possible = 0)

FALLBACK MODE (no stage hours configured)
─────────────────────────────────────────
    done       = |{ l : s_l ≥ K − 1 }|
    progress % = round(100 · done / |L|)

The caller's data decides the mode: weighted whenever at least one stage has
finite base hours, fallback otherwise. The two are never blended.

Rounding is half-up (0.5 → 1) to match how the figures are displayed.
═══════════════════════════════════════════════════════════════════════════════════════════════════════
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

import numpy as np

from .work_model import (
    BranchUnit,
    Granularity,
    LeafUnit,
    StageWorkload,
    Unit,
    Work,
    round_half_up,
)

logger = logging.getLogger(__name__)


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# LEAVES / STAGES
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def leaf_units(units: Iterable[Any]) -> List[LeafUnit]:
    """All leaves in left-to-right order. Anything that is not a Unit is skipped."""
    leaves: List[LeafUnit] = []
    for unit in units:
        if isinstance(unit, LeafUnit):
            leaves.append(unit)
        elif isinstance(unit, BranchUnit):
            leaves.extend(leaf_units(unit.children))
    return leaves


def cumulative_stage_hours(stage_workloads: Sequence[StageWorkload]) -> np.ndarray:
    """C_k for every stage; empty array for an empty table."""
    return np.cumsum(np.array([s.effective_hours for s in stage_workloads], dtype=float))


def has_workload_data(stage_workloads: Sequence[StageWorkload]) -> bool:
    return any(stage.is_configured for stage in stage_workloads)


def _clamped_stages(leaves: Sequence[LeafUnit], stage_count: int) -> np.ndarray:
    stages = np.array([leaf.stage_index for leaf in leaves], dtype=int)
    return np.clip(stages, 0, max(stage_count - 1, 0))


def granularity_ratio(
    granularities: Sequence[Granularity], primary_granularity_id: Optional[str]
) -> float:
    """primary.weight / lowest.weight, or 1 when either is unknown."""
    if not granularities:
        return 1.0
    lowest = min(granularities, key=lambda g: g.weight)
    primary = next((g for g in granularities if g.id == primary_granularity_id), None)
    if primary is None or lowest.weight <= 0:
        return 1.0
    return primary.weight / lowest.weight


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# AGGREGATES
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def overall_progress(
    work: Work,
    stage_workloads: Optional[Sequence[StageWorkload]] = None,
    stage_count: Optional[int] = None,
) -> int:
    """
    Completion percentage 0..100.

    Args:
        work: Work whose unit tree is measured
        stage_workloads: Stage table (defaults to the work's own)
        stage_count: Number of stages for fallback mode when the table is empty
    """
    stages = list(work.stage_workloads if stage_workloads is None else stage_workloads)
    leaves = leaf_units(work.units)
    if not leaves:
        return 0

    if stages and has_workload_data(stages):
        cumulative = cumulative_stage_hours(stages)
        possible = float(cumulative[-1]) * len(leaves)
        if possible <= 0:
            return 0
        completed = float(cumulative[_clamped_stages(leaves, len(stages))].sum())
        return int(round_half_up(100.0 * completed / possible))

    count = len(stages) or (stage_count or 0)
    if count <= 0:
        return 0
    stage_array = np.array([leaf.stage_index for leaf in leaves], dtype=int)
    done = int(np.count_nonzero(stage_array >= count - 1))
    return int(round_half_up(100.0 * done / len(leaves)))


def completed_hours(work: Work, stage_workloads: Optional[Sequence[StageWorkload]] = None) -> float:
    """Σ C_{s_l} over all leaves."""
    stages = list(work.stage_workloads if stage_workloads is None else stage_workloads)
    leaves = leaf_units(work.units)
    if not stages or not leaves:
        return 0.0
    cumulative = cumulative_stage_hours(stages)
    return float(cumulative[_clamped_stages(leaves, len(stages))].sum())


def total_hours(work: Work, stage_workloads: Optional[Sequence[StageWorkload]] = None) -> float:
    """C_{K-1} · |L|: hours to take every leaf through every stage."""
    stages = list(work.stage_workloads if stage_workloads is None else stage_workloads)
    leaves = leaf_units(work.units)
    if not stages or not leaves:
        return 0.0
    return float(cumulative_stage_hours(stages)[-1]) * len(leaves)


def remaining_hours(
    work: Work,
    stage_workloads: Optional[Sequence[StageWorkload]] = None,
    scale_by_granularity: bool = False,
) -> float:
    """
    Σ (C_{K-1} − C_{s_l}): effort still ahead of every leaf, rounded to 2 dp.

    With ``scale_by_granularity`` the figure is multiplied by the ratio of the
    work's primary granularity weight to the lowest granularity weight.
    """
    remaining = total_hours(work, stage_workloads) - completed_hours(work, stage_workloads)
    if scale_by_granularity:
        remaining *= granularity_ratio(work.granularities, work.primary_granularity_id)
    return round_half_up(max(remaining, 0.0), 2)


def stage_progress(units: Iterable[Unit], stage_index: int) -> int:
    """Percentage of leaves at or beyond ``stage_index``."""
    leaves = leaf_units(units)
    if not leaves:
        return 0
    reached = sum(1 for leaf in leaves if leaf.stage_index >= stage_index)
    return int(round_half_up(100.0 * reached / len(leaves)))


def stage_distribution(units: Iterable[Unit], stage_count: int) -> List[int]:
    """Leaf count per stage (stages beyond the table count toward the last one)."""
    if stage_count <= 0:
        return []
    leaves = leaf_units(units)
    if not leaves:
        return [0] * stage_count
    return np.bincount(_clamped_stages(leaves, stage_count), minlength=stage_count).tolist()


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# SUMMARY
# ════════════════════════════════════════════════════════════════════════════════════════════════════

@dataclass
class WorkProgressSummary:
    """Everything a progress view needs about one work."""
    work_id: str
    title: str
    leaf_count: int
    progress_percent: int
    weighted: bool
    completed_hours: float
    remaining_hours: float
    total_hours: float
    stage_labels: List[str] = field(default_factory=list)
    stage_distribution: List[int] = field(default_factory=list)
    stage_progress: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "work_id": self.work_id,
            "title": self.title,
            "leaf_count": self.leaf_count,
            "progress_percent": self.progress_percent,
            "weighted": self.weighted,
            "completed_hours": round(self.completed_hours, 2),
            "remaining_hours": round(self.remaining_hours, 2),
            "total_hours": round(self.total_hours, 2),
            "stages": [
                {"label": label, "count": count, "progress_percent": percent}
                for label, count, percent in zip(self.stage_labels, self.stage_distribution, self.stage_progress)
            ],
        }


def summarize_progress(
    work: Work,
    stage_workloads: Optional[Sequence[StageWorkload]] = None,
    scale_by_granularity: bool = False,
) -> WorkProgressSummary:
    stages = list(work.stage_workloads if stage_workloads is None else stage_workloads)
    leaves = leaf_units(work.units)

    summary = WorkProgressSummary(
        work_id=work.id,
        title=work.title,
        leaf_count=len(leaves),
        progress_percent=overall_progress(work, stages),
        weighted=bool(stages) and has_workload_data(stages),
        completed_hours=completed_hours(work, stages),
        remaining_hours=remaining_hours(work, stages, scale_by_granularity),
        total_hours=total_hours(work, stages),
        stage_labels=[s.label for s in stages],
        stage_distribution=stage_distribution(work.units, len(stages)),
        stage_progress=[stage_progress(work.units, k) for k in range(len(stages))],
    )
    logger.debug(
        f"Progress {work.id}: {summary.progress_percent}% of {summary.leaf_count} leaves, "
        f"{summary.remaining_hours}h remaining"
    )
    return summary
