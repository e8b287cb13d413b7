"""
Workpace - Structure Strings
============================

Compact text notation for a whole unit tree, used to create or overwrite a
work's structure in one go:

    "[1/2/3],[4/4]"           two top-level units with 3 and 2 leaves
    "[[1/2][3/4]],[[1][2]]"   two top-level units, each with two sub-units

Grammar (whitespace ignored):

    structure := group ("," group)*
    group     := "[" (stages | group+) "]"
    stages    := int ("/" int)*

Numbers are 1-based stages as shown to users (1 = first stage); the tree
stores 0-based stage indices, so ``n`` becomes ``max(0, n - 1)``.

The depth of a top-level group is its bracket nesting plus one for the leaf
level: ``[1/2]`` has depth 2, ``[[1/2][3]]`` has depth 3.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from .unit_tree import renumber, tree_depth
from .work_model import BranchUnit, LeafUnit, Unit, Work, new_unit_id

logger = logging.getLogger(__name__)


class StructureParseError(ValueError):
    """The structure string is malformed or has the wrong depth."""


class _StructureReader:
    """Recursive-descent reader over a structure string."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def _peek(self) -> Optional[str]:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1
        return self.text[self.pos] if self.pos < len(self.text) else None

    def _expect(self, char: str) -> None:
        found = self._peek()
        if found != char:
            where = f"{found!r} at position {self.pos}" if found is not None else "end of input"
            raise StructureParseError(f"Expected {char!r} but found {where}")
        self.pos += 1

    def read(self) -> List[Unit]:
        units = [self._group(1)]
        while self._peek() == ",":
            self.pos += 1
            units.append(self._group(len(units) + 1))
        trailing = self._peek()
        if trailing is not None:
            raise StructureParseError(f"Unexpected {trailing!r} at position {self.pos}")
        return units

    def _group(self, index: int) -> Unit:
        self._expect("[")
        if self._peek() == "[":
            children: List[Unit] = []
            while self._peek() == "[":
                children.append(self._group(len(children) + 1))
            self._expect("]")
            return BranchUnit(id=new_unit_id(), index=index, children=tuple(children))

        stages = self._stages()
        self._expect("]")
        leaves = tuple(
            LeafUnit(id=new_unit_id(), index=i + 1, stage_index=max(0, stage - 1))
            for i, stage in enumerate(stages)
        )
        return BranchUnit(id=new_unit_id(), index=index, children=leaves)

    def _stages(self) -> List[int]:
        stages = [self._number()]
        while self._peek() == "/":
            self.pos += 1
            stages.append(self._number())
        return stages

    def _number(self) -> int:
        self._peek()
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos].isdigit():
            self.pos += 1
        if start == self.pos:
            found = self.text[self.pos] if self.pos < len(self.text) else "end of input"
            raise StructureParseError(f"Expected a stage number at position {start}, found {found!r}")
        return int(self.text[start:self.pos])


def parse_structure(text: str, expected_depth: Optional[int] = None) -> Tuple[Unit, ...]:
    """
    Parse a structure string into a unit tree.

    Raises:
        StructureParseError: empty or malformed input, or a top-level group
            whose depth differs from ``expected_depth``
    """
    if not text or not text.strip():
        raise StructureParseError("Structure string is empty")

    units = _StructureReader(text).read()

    if expected_depth is not None:
        depths = [tree_depth((unit,)) for unit in units]
        if any(depth != expected_depth for depth in depths):
            raise StructureParseError(
                f"Expected depth {expected_depth} for every top-level unit, got {depths}"
            )

    return renumber(units)


def validate_structure(text: str, expected_depth: Optional[int] = None) -> Optional[str]:
    """Error message for an invalid structure string, None when it parses."""
    try:
        parse_structure(text, expected_depth)
    except StructureParseError as e:
        return str(e)
    return None


def _format_unit(unit: Unit) -> Optional[str]:
    if not isinstance(unit, BranchUnit) or not unit.children:
        return None
    if all(isinstance(child, LeafUnit) for child in unit.children):
        return "[" + "/".join(str(child.stage_index + 1) for child in unit.children) + "]"

    parts = []
    for child in unit.children:
        part = _format_unit(child)
        if part is None:
            logger.warning(f"Structure of {unit.id} mixes leaves and sub-units; leaf {child.id} omitted")
            continue
        parts.append(part)
    return "[" + "".join(parts) + "]" if parts else None


def format_structure(units: Sequence[Unit]) -> str:
    """
    Render a unit tree in structure notation (1-based stages).

    Top-level leaves and empty branches have no notation and are omitted.
    """
    parts = [part for part in (_format_unit(unit) for unit in units) if part is not None]
    return ",".join(parts)


def apply_structure(work: Work, text: str, expected_depth: Optional[int] = None) -> Work:
    """Copy of ``work`` whose unit tree is replaced by the parsed structure."""
    return work.with_units(parse_structure(text, expected_depth))
