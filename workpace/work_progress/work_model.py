"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    WORKPACE — WORK DATA MODEL
═══════════════════════════════════════════════════════════════════════════════════════════════════════

A Work is a serialized piece of creative production (a manuscript, an
episode) broken down into a tree of Units:

    Work
    └── units: (Unit, ...)              top granularity (e.g. pages)
        ├── BranchUnit(children=...)    intermediate granularity
        │   └── LeafUnit(stage_index)   lowest granularity (e.g. panels)
        └── LeafUnit(stage_index)

A Unit is EITHER a branch (carries ``children``, possibly empty) OR a leaf
(carries ``stage_index >= 0``), never both. ``index`` is the 1-based position
among siblings.

Stage workloads are ordered: stage 0 is the first stage a leaf passes through.
``base_hours`` is the effort to take one lowest-granularity unit through the
stage; None means "not configured".

Estimate invariant (checked, not enforced):

    total_estimated_hours = round(total_units × unit_estimated_hours, 2)
═══════════════════════════════════════════════════════════════════════════════════════════════════════
"""

from __future__ import annotations

import logging
import math
import uuid
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)


def new_unit_id() -> str:
    return uuid.uuid4().hex[:12]


def round_half_up(value: float, digits: int = 0) -> float:
    """Round .5 away from zero for positive values (builtin round() is banker's)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


class WorkStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    ON_HOLD = "on_hold"


# Labels used by stored documents
STATUS_LABELS: Dict[str, WorkStatus] = {
    "未着手": WorkStatus.NOT_STARTED,
    "作業中": WorkStatus.IN_PROGRESS,
    "完了": WorkStatus.DONE,
    "保留": WorkStatus.ON_HOLD,
}


def parse_status(value: Any) -> WorkStatus:
    if isinstance(value, WorkStatus):
        return value
    if value in STATUS_LABELS:
        return STATUS_LABELS[value]
    try:
        return WorkStatus(value)
    except ValueError:
        logger.warning(f"Unknown work status {value!r}, using {WorkStatus.NOT_STARTED.value}")
        return WorkStatus.NOT_STARTED


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# UNITS
# ════════════════════════════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class LeafUnit:
    """Lowest-granularity unit; tracks how far it has progressed."""
    id: str
    index: int
    stage_index: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "index": self.index, "stage_index": self.stage_index}


@dataclass(frozen=True)
class BranchUnit:
    """Intermediate unit; groups child units."""
    id: str
    index: int
    children: Tuple["Unit", ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "index": self.index,
            "children": [child.to_dict() for child in self.children],
        }


Unit = Union[LeafUnit, BranchUnit]


def _positive_int(value: Any, fallback: int) -> int:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(number) or number <= 0:
        return fallback
    return int(number)


def _stage_index(value: Any) -> int:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number) or number < 0:
        return 0
    return int(number)


def unit_from_dict(data: Any, fallback_index: int = 1) -> Optional[Unit]:
    """
    Build a Unit from a stored dict.

    A dict carrying a stage index (``stage_index`` or ``stageIndex``) becomes
    a leaf, one carrying a ``children`` list becomes a branch. Anything else
    is malformed and yields None; callers drop it.
    """
    if not isinstance(data, Mapping):
        return None

    unit_id = data.get("id")
    if not isinstance(unit_id, str) or not unit_id.strip():
        unit_id = new_unit_id()
    index = _positive_int(data.get("index"), fallback_index)

    stage = data.get("stage_index", data.get("stageIndex"))
    if stage is not None:
        return LeafUnit(id=unit_id, index=index, stage_index=_stage_index(stage))

    children = data.get("children")
    if isinstance(children, list):
        return BranchUnit(id=unit_id, index=index, children=units_from_list(children))

    logger.debug(f"Skipping malformed unit {unit_id}: neither stage index nor children")
    return None


def units_from_list(items: Iterable[Any]) -> Tuple[Unit, ...]:
    """Parse sibling units, dropping malformed ones and renumbering from 1."""
    parsed = [unit_from_dict(item, i + 1) for i, item in enumerate(items)]
    return tuple(replace(unit, index=i + 1) for i, unit in enumerate(u for u in parsed if u is not None))


def units_to_list(units: Sequence[Unit]) -> List[Dict[str, Any]]:
    return [unit.to_dict() for unit in units]


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# CONFIGURATION ENTRIES
# ════════════════════════════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class StageWorkload:
    """One production stage and its effort per lowest-granularity unit."""
    id: int
    label: str
    base_hours: Optional[float] = None
    color: str = ""

    @property
    def effective_hours(self) -> float:
        """base_hours with None, NaN, infinite and negative values read as 0."""
        if self.base_hours is None:
            return 0.0
        try:
            hours = float(self.base_hours)
        except (TypeError, ValueError):
            return 0.0
        if not math.isfinite(hours) or hours < 0:
            return 0.0
        return hours

    @property
    def is_configured(self) -> bool:
        if self.base_hours is None:
            return False
        try:
            return math.isfinite(float(self.base_hours))
        except (TypeError, ValueError):
            return False

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "label": self.label, "base_hours": self.base_hours, "color": self.color}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StageWorkload":
        return cls(
            id=int(data.get("id", 0)),
            label=str(data.get("label", "")),
            base_hours=data.get("base_hours", data.get("baseHours")),
            color=str(data.get("color", "") or ""),
        )


@dataclass(frozen=True)
class Granularity:
    """A level of subdivision. ``weight`` is its size in lowest-level units."""
    id: str
    label: str
    weight: float
    default_count: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "weight": self.weight,
            "default_count": self.default_count,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Granularity":
        return cls(
            id=str(data.get("id", "")),
            label=str(data.get("label", "")),
            weight=float(data.get("weight", 1) or 1),
            default_count=_positive_int(data.get("default_count", data.get("defaultCount")), 1),
        )


DEFAULT_GRANULARITIES: Tuple[Granularity, ...] = (
    Granularity(id="page", label="ページ単位", weight=5, default_count=1),
    Granularity(id="panel", label="コマ単位", weight=1, default_count=5),
)

DEFAULT_STAGE_WORKLOADS: Tuple[StageWorkload, ...] = (
    StageWorkload(id=1, label="ネーム", base_hours=None),
    StageWorkload(id=2, label="下書き", base_hours=0.5),
    StageWorkload(id=3, label="ペン入れ", base_hours=1.0),
    StageWorkload(id=4, label="仕上げ", base_hours=0.5),
)


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# WORK
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def parse_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        logger.warning(f"Ignoring unparseable date {value!r}")
        return None


@dataclass(frozen=True)
class Work:
    """
    A work under production.

    Attributes:
        default_counts: Children per unit for each level below the top
            (e.g. ``(5,)`` = every page starts with 5 panels)
        primary_granularity_id: Granularity the estimates are expressed in
    """
    id: str
    title: str
    status: WorkStatus = WorkStatus.NOT_STARTED
    start_date: Optional[date] = None
    deadline: Optional[date] = None
    units: Tuple[Unit, ...] = ()
    stage_workloads: Tuple[StageWorkload, ...] = ()
    granularities: Tuple[Granularity, ...] = ()
    primary_granularity_id: Optional[str] = None
    default_counts: Tuple[int, ...] = ()
    total_units: int = 0
    unit_estimated_hours: float = 0.0
    total_estimated_hours: float = 0.0

    @property
    def has_deadline(self) -> bool:
        return self.deadline is not None

    @property
    def is_done(self) -> bool:
        return self.status == WorkStatus.DONE

    @property
    def estimate_is_consistent(self) -> bool:
        expected = round_half_up(self.total_units * self.unit_estimated_hours, 2)
        return math.isclose(self.total_estimated_hours, expected, abs_tol=1e-9)

    def with_units(self, units: Sequence[Unit]) -> "Work":
        """Copy with a new unit tree; totals follow the number of top-level units."""
        total_units = len(units)
        return replace(
            self,
            units=tuple(units),
            total_units=total_units,
            total_estimated_hours=round_half_up(total_units * self.unit_estimated_hours, 2),
        )

    @classmethod
    def create(
        cls,
        title: str,
        total_units: int,
        unit_estimated_hours: float = 0.0,
        default_counts: Sequence[int] = (),
        *,
        status: WorkStatus = WorkStatus.NOT_STARTED,
        start_date: Optional[date] = None,
        deadline: Optional[date] = None,
        stage_workloads: Sequence[StageWorkload] = DEFAULT_STAGE_WORKLOADS,
        granularities: Sequence[Granularity] = DEFAULT_GRANULARITIES,
        primary_granularity_id: Optional[str] = None,
        total_estimated_hours: Optional[float] = None,
        work_id: Optional[str] = None,
    ) -> "Work":
        """
        New work with ``total_units`` fresh top-level units at stage 0.

        ``total_estimated_hours`` is derived unless given explicitly.
        """
        from .unit_tree import build_unit

        total = _positive_int(total_units, 1)
        counts = tuple(_positive_int(c, 1) for c in default_counts)
        unit_hours = max(0.0, float(unit_estimated_hours))
        if total_estimated_hours is None:
            total_estimated_hours = round_half_up(total * unit_hours, 2)

        return cls(
            id=work_id or new_unit_id(),
            title=title.strip(),
            status=status,
            start_date=start_date,
            deadline=deadline,
            units=tuple(build_unit(counts, index=i + 1) for i in range(total)),
            stage_workloads=tuple(stage_workloads),
            granularities=tuple(granularities),
            primary_granularity_id=primary_granularity_id,
            default_counts=counts,
            total_units=total,
            unit_estimated_hours=unit_hours,
            total_estimated_hours=total_estimated_hours,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "status": self.status.value,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "units": units_to_list(self.units),
            "stage_workloads": [s.to_dict() for s in self.stage_workloads],
            "granularities": [g.to_dict() for g in self.granularities],
            "primary_granularity_id": self.primary_granularity_id,
            "default_counts": list(self.default_counts),
            "total_units": self.total_units,
            "unit_estimated_hours": round(self.unit_estimated_hours, 2),
            "total_estimated_hours": round(self.total_estimated_hours, 2),
            "estimate_is_consistent": self.estimate_is_consistent,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Work":
        units = units_from_list(data.get("units") or [])
        unit_hours = float(data.get("unit_estimated_hours") or 0.0)
        total_units = _positive_int(data.get("total_units"), len(units))
        total_hours = data.get("total_estimated_hours")
        if total_hours is None:
            total_hours = round_half_up(total_units * unit_hours, 2)

        return cls(
            id=str(data.get("id") or new_unit_id()),
            title=str(data.get("title", "")),
            status=parse_status(data.get("status", WorkStatus.NOT_STARTED.value)),
            start_date=parse_date(data.get("start_date")),
            deadline=parse_date(data.get("deadline")),
            units=units,
            stage_workloads=tuple(StageWorkload.from_dict(s) for s in data.get("stage_workloads") or []),
            granularities=tuple(Granularity.from_dict(g) for g in data.get("granularities") or []),
            primary_granularity_id=data.get("primary_granularity_id"),
            default_counts=tuple(_positive_int(c, 1) for c in data.get("default_counts") or []),
            total_units=total_units,
            unit_estimated_hours=unit_hours,
            total_estimated_hours=float(total_hours),
        )
