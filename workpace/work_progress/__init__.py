"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    WORKPACE — WORK PROGRESS
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Production side of deadline pacing:
- Work / Unit data model (leaf XOR branch units)
- Functional tree editing with sibling renumbering
- Progress aggregation over stage-effort tables (weighted and fallback modes)
- Structure-string notation for whole trees
- Daily progress history as a pandas time series
"""

from .work_model import (
    DEFAULT_GRANULARITIES,
    DEFAULT_STAGE_WORKLOADS,
    BranchUnit,
    Granularity,
    LeafUnit,
    StageWorkload,
    Unit,
    Work,
    WorkStatus,
    parse_status,
    unit_from_dict,
    units_from_list,
    units_to_list,
)

from .unit_tree import (
    add_child_unit,
    add_root_unit,
    advance_stage,
    build_unit,
    find_unit,
    move_unit,
    remove_unit,
    renumber,
    set_children_count,
    set_stage,
    tree_depth,
    unit_depth,
)

from .progress_engine import (
    WorkProgressSummary,
    completed_hours,
    cumulative_stage_hours,
    granularity_ratio,
    has_workload_data,
    leaf_units,
    overall_progress,
    remaining_hours,
    stage_distribution,
    stage_progress,
    summarize_progress,
    total_hours,
)

from .structure_parser import (
    StructureParseError,
    apply_structure,
    format_structure,
    parse_structure,
    validate_structure,
)

from .progress_history import (
    ProgressSnapshot,
    progress_series,
    reached_stage_counts,
    record_snapshot,
    take_snapshot,
)

__all__ = [
    # Model
    "DEFAULT_GRANULARITIES",
    "DEFAULT_STAGE_WORKLOADS",
    "BranchUnit",
    "Granularity",
    "LeafUnit",
    "StageWorkload",
    "Unit",
    "Work",
    "WorkStatus",
    "parse_status",
    "unit_from_dict",
    "units_from_list",
    "units_to_list",
    # Tree editing
    "add_child_unit",
    "add_root_unit",
    "advance_stage",
    "build_unit",
    "find_unit",
    "move_unit",
    "remove_unit",
    "renumber",
    "set_children_count",
    "set_stage",
    "tree_depth",
    "unit_depth",
    # Progress
    "WorkProgressSummary",
    "completed_hours",
    "cumulative_stage_hours",
    "granularity_ratio",
    "has_workload_data",
    "leaf_units",
    "overall_progress",
    "remaining_hours",
    "stage_distribution",
    "stage_progress",
    "summarize_progress",
    "total_hours",
    # Structure strings
    "StructureParseError",
    "apply_structure",
    "format_structure",
    "parse_structure",
    "validate_structure",
    # History
    "ProgressSnapshot",
    "progress_series",
    "reached_stage_counts",
    "record_snapshot",
    "take_snapshot",
]
