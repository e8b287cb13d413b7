"""
Workpace - Unit Tree Editing
============================

Structural edits on a work's unit tree. Trees are immutable tuples; every
function returns a new tree and leaves its argument untouched.

After every edit:
- sibling ``index`` values are renumbered 1..n at every level
- branches keep a ``children`` tuple (possibly empty), leaves never get one

Edits that address an unknown unit id, or that need a branch but hit a leaf
(or the reverse), return the tree unchanged and log a warning.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .work_model import BranchUnit, LeafUnit, Unit, new_unit_id

logger = logging.getLogger(__name__)

Units = Tuple[Unit, ...]


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# CONSTRUCTION / QUERIES
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def build_unit(default_counts: Sequence[int] = (), index: int = 1) -> Unit:
    """
    Fresh unit with ``default_counts[0]`` children, each with
    ``default_counts[1]`` children, and so on. Empty counts give a leaf at
    stage 0.
    """
    if not default_counts:
        return LeafUnit(id=new_unit_id(), index=index, stage_index=0)
    count, rest = max(0, int(default_counts[0])), default_counts[1:]
    children = tuple(build_unit(rest, index=i + 1) for i in range(count))
    return BranchUnit(id=new_unit_id(), index=index, children=children)


def renumber(units: Iterable[Unit]) -> Units:
    """Reassign 1-based sibling indices at every level."""
    result: List[Unit] = []
    for i, unit in enumerate(units):
        if isinstance(unit, BranchUnit):
            unit = replace(unit, children=renumber(unit.children))
        result.append(replace(unit, index=i + 1))
    return tuple(result)


def find_unit(units: Iterable[Unit], unit_id: str) -> Optional[Unit]:
    for unit in units:
        if unit.id == unit_id:
            return unit
        if isinstance(unit, BranchUnit):
            found = find_unit(unit.children, unit_id)
            if found is not None:
                return found
    return None


def unit_depth(units: Iterable[Unit], unit_id: str, current_depth: int = 0) -> int:
    """Depth of a unit (top level = 0), or -1 when it is not in the tree."""
    for unit in units:
        if unit.id == unit_id:
            return current_depth
        if isinstance(unit, BranchUnit):
            depth = unit_depth(unit.children, unit_id, current_depth + 1)
            if depth != -1:
                return depth
    return -1


def tree_depth(units: Iterable[Unit]) -> int:
    """Number of levels down to the deepest leaf (top-level leaves = 1, empty = 0)."""
    depth = 0
    for unit in units:
        if isinstance(unit, LeafUnit):
            depth = max(depth, 1)
        elif isinstance(unit, BranchUnit):
            below = tree_depth(unit.children)
            if below:
                depth = max(depth, below + 1)
    return depth


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# EDITS
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def _edit(units: Sequence[Unit], unit_id: str, edit: Callable[[Unit], List[Unit]]) -> Tuple[Units, bool]:
    """Replace the unit ``unit_id`` by ``edit(unit)`` (zero or more units)."""
    result: List[Unit] = []
    found = False
    for unit in units:
        if found:
            result.append(unit)
        elif unit.id == unit_id:
            result.extend(edit(unit))
            found = True
        elif isinstance(unit, BranchUnit):
            children, found = _edit(unit.children, unit_id, edit)
            result.append(replace(unit, children=children) if found else unit)
        else:
            result.append(unit)
    return tuple(result), found


def _edit_siblings(
    units: Sequence[Unit], unit_id: str, edit: Callable[[Units], Units]
) -> Tuple[Units, bool]:
    """Apply ``edit`` to the sibling list that contains ``unit_id``."""
    if any(unit.id == unit_id for unit in units):
        return edit(tuple(units)), True
    result: List[Unit] = []
    found = False
    for unit in units:
        if not found and isinstance(unit, BranchUnit):
            children, found = _edit_siblings(unit.children, unit_id, edit)
            if found:
                unit = replace(unit, children=children)
        result.append(unit)
    return tuple(result), found


def _require_branch(units: Sequence[Unit], unit_id: str, action: str) -> Optional[BranchUnit]:
    unit = find_unit(units, unit_id)
    if unit is None:
        logger.warning(f"Cannot {action}: unit {unit_id} not found")
        return None
    if not isinstance(unit, BranchUnit):
        logger.warning(f"Cannot {action}: unit {unit_id} is a leaf")
        return None
    return unit


def _require_leaf(units: Sequence[Unit], unit_id: str, action: str) -> Optional[LeafUnit]:
    unit = find_unit(units, unit_id)
    if unit is None:
        logger.warning(f"Cannot {action}: unit {unit_id} not found")
        return None
    if not isinstance(unit, LeafUnit):
        logger.warning(f"Cannot {action}: unit {unit_id} is not a leaf")
        return None
    return unit


def add_root_unit(units: Sequence[Unit], default_counts: Sequence[int] = ()) -> Units:
    """Append a fresh top-level unit."""
    return renumber(tuple(units) + (build_unit(default_counts),))


def add_child_unit(units: Sequence[Unit], parent_id: str, default_counts: Sequence[int] = ()) -> Units:
    """Append a fresh child (built from ``default_counts``) to a branch."""
    if _require_branch(units, parent_id, "add child") is None:
        return tuple(units)

    def append(parent: Unit) -> List[Unit]:
        return [replace(parent, children=parent.children + (build_unit(default_counts),))]

    edited, _ = _edit(units, parent_id, append)
    return renumber(edited)


def set_children_count(
    units: Sequence[Unit], parent_id: str, count: int, default_counts: Sequence[int] = ()
) -> Units:
    """
    Grow (with fresh units) or truncate (from the end) a branch's children.

    A non-positive count keeps the current children.
    """
    parent = _require_branch(units, parent_id, "set children count")
    if parent is None:
        return tuple(units)
    if count <= 0:
        logger.warning(f"Ignoring non-positive children count {count} for unit {parent_id}")
        return tuple(units)

    current = len(parent.children)
    if count > current:
        children = parent.children + tuple(build_unit(default_counts) for _ in range(count - current))
    else:
        children = parent.children[:count]

    edited, _ = _edit(units, parent_id, lambda unit: [replace(unit, children=children)])
    return renumber(edited)


def remove_unit(units: Sequence[Unit], unit_id: str) -> Units:
    """Remove a unit and its subtree. Its parent keeps a (possibly empty) children tuple."""
    edited, found = _edit(units, unit_id, lambda unit: [])
    if not found:
        logger.warning(f"Cannot remove: unit {unit_id} not found")
        return tuple(units)
    return renumber(edited)


def move_unit(units: Sequence[Unit], unit_id: str, after_id: Optional[str] = None) -> Units:
    """
    Move a unit among its siblings so that it follows ``after_id``
    (None = first position).
    """

    def reorder(siblings: Units) -> Units:
        moving = next(u for u in siblings if u.id == unit_id)
        rest = [u for u in siblings if u.id != unit_id]
        if after_id is None:
            position = 0
        else:
            ids = [u.id for u in rest]
            if after_id not in ids:
                logger.warning(f"Cannot move {unit_id}: {after_id} is not a sibling")
                return siblings
            position = ids.index(after_id) + 1
        rest.insert(position, moving)
        return tuple(rest)

    edited, found = _edit_siblings(units, unit_id, reorder)
    if not found:
        logger.warning(f"Cannot move: unit {unit_id} not found")
        return tuple(units)
    return renumber(edited)


def advance_stage(units: Sequence[Unit], unit_id: str, stage_count: int) -> Units:
    """Move a leaf to its next stage, wrapping back to 0 after the last one."""
    if stage_count <= 0:
        return tuple(units)
    if _require_leaf(units, unit_id, "advance stage") is None:
        return tuple(units)
    edited, _ = _edit(
        units, unit_id, lambda leaf: [replace(leaf, stage_index=(leaf.stage_index + 1) % stage_count)]
    )
    return edited


def set_stage(units: Sequence[Unit], unit_id: str, stage_index: int, stage_count: Optional[int] = None) -> Units:
    """Set a leaf's stage, clamped to [0, stage_count - 1] when the count is known."""
    if _require_leaf(units, unit_id, "set stage") is None:
        return tuple(units)
    stage = max(0, int(stage_index))
    if stage_count is not None and stage_count > 0:
        stage = min(stage, stage_count - 1)
    edited, _ = _edit(units, unit_id, lambda leaf: [replace(leaf, stage_index=stage)])
    return edited
