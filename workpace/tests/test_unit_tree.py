"""
Tests for Unit Tree Editing (T1-T3)
"""
import pytest

from workpace.work_progress.progress_engine import leaf_units
from workpace.work_progress.unit_tree import (
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
from workpace.work_progress.work_model import BranchUnit, LeafUnit


@pytest.fixture
def tree():
    """Two pages: P1 with leaves a, b, c and P2 with leaf d."""
    return (
        BranchUnit(id="P1", index=1, children=(
            LeafUnit(id="a", index=1, stage_index=0),
            LeafUnit(id="b", index=2, stage_index=1),
            LeafUnit(id="c", index=3, stage_index=3),
        )),
        BranchUnit(id="P2", index=2, children=(LeafUnit(id="d", index=1, stage_index=2),)),
    )


def _ids(units):
    return [unit.id for unit in units]


class TestT1_Construction:
    """T1: Building and querying trees."""

    def test_build_unit_from_counts(self):
        """T1.1: (2, 3) builds two sub-units of three leaves each."""
        unit = build_unit((2, 3))
        assert isinstance(unit, BranchUnit)
        assert len(unit.children) == 2
        assert all(len(child.children) == 3 for child in unit.children)
        assert tree_depth((unit,)) == 3
        assert len(leaf_units((unit,))) == 6

    def test_build_unit_without_counts_is_leaf(self):
        """T1.2: No counts gives a fresh leaf at stage 0."""
        unit = build_unit((), index=4)
        assert isinstance(unit, LeafUnit)
        assert unit.stage_index == 0
        assert unit.index == 4

    def test_find_and_depth(self, tree):
        """T1.3: Lookup by id and depth from the top."""
        assert find_unit(tree, "d").stage_index == 2
        assert find_unit(tree, "zzz") is None
        assert unit_depth(tree, "P2") == 0
        assert unit_depth(tree, "c") == 1
        assert unit_depth(tree, "zzz") == -1

    def test_renumber(self):
        """T1.4: Indices become 1..n at every level."""
        messy = (
            BranchUnit(id="x", index=9, children=(LeafUnit(id="y", index=5),)),
            LeafUnit(id="z", index=0),
        )
        tidy = renumber(messy)
        assert [u.index for u in tidy] == [1, 2]
        assert tidy[0].children[0].index == 1


class TestT2_StructureEdits:
    """T2: Adding, resizing, removing and moving units."""

    def test_add_root_unit(self, tree):
        """T2.1: New top-level unit is appended with the next index."""
        edited = add_root_unit(tree, (2,))
        assert len(edited) == 3
        assert edited[2].index == 3
        assert len(edited[2].children) == 2
        assert len(tree) == 2

    def test_add_child_unit(self, tree):
        """T2.2: New child goes to the end of the branch."""
        edited = add_child_unit(tree, "P2")
        assert _ids(edited[1].children)[0] == "d"
        assert [c.index for c in edited[1].children] == [1, 2]
        assert isinstance(edited[1].children[1], LeafUnit)

    def test_add_child_to_leaf_is_ignored(self, tree):
        """T2.3: Leaves cannot get children; unknown ids change nothing."""
        assert add_child_unit(tree, "a") == tree
        assert add_child_unit(tree, "missing") == tree

    def test_set_children_count_grow_and_shrink(self, tree):
        """T2.4: Grow with fresh leaves, shrink from the end."""
        grown = set_children_count(tree, "P2", 3)
        assert len(grown[1].children) == 3
        assert grown[1].children[0].id == "d"

        shrunk = set_children_count(tree, "P1", 1)
        assert _ids(shrunk[0].children) == ["a"]

    def test_set_children_count_non_positive(self, tree):
        """T2.5: Zero or negative counts keep the tree."""
        assert set_children_count(tree, "P1", 0) == tree
        assert set_children_count(tree, "P1", -2) == tree

    def test_remove_unit(self, tree):
        """T2.6: Removal renumbers siblings, parents keep an empty tuple."""
        edited = remove_unit(tree, "b")
        assert _ids(edited[0].children) == ["a", "c"]
        assert [c.index for c in edited[0].children] == [1, 2]

        emptied = remove_unit(tree, "d")
        assert isinstance(emptied[1], BranchUnit)
        assert emptied[1].children == ()

        assert remove_unit(tree, "missing") == tree

    def test_move_unit(self, tree):
        """T2.7: Moves stay among siblings."""
        first = move_unit(tree, "c")
        assert _ids(first[0].children) == ["c", "a", "b"]
        assert [u.index for u in first[0].children] == [1, 2, 3]

        after = move_unit(tree, "a", after_id="b")
        assert _ids(after[0].children) == ["b", "a", "c"]

        pages = move_unit(tree, "P2")
        assert _ids(pages) == ["P2", "P1"]

    def test_move_unit_to_non_sibling_is_ignored(self, tree):
        """T2.8: after_id in another branch leaves the order alone."""
        assert move_unit(tree, "a", after_id="d") == tree
        assert move_unit(tree, "missing") == tree


class TestT3_StageEdits:
    """T3: Stage changes on leaves."""

    def test_advance_stage(self, tree):
        """T3.1: Advance by one, wrap to 0 after the last stage."""
        assert find_unit(advance_stage(tree, "a", 4), "a").stage_index == 1
        assert find_unit(advance_stage(tree, "c", 4), "c").stage_index == 0

    def test_advance_stage_ignores_branches(self, tree):
        """T3.2: Branches and empty stage tables are left alone."""
        assert advance_stage(tree, "P1", 4) == tree
        assert advance_stage(tree, "a", 0) == tree

    def test_set_stage_clamped(self, tree):
        """T3.3: Stage is kept within the table."""
        assert find_unit(set_stage(tree, "a", 10, stage_count=4), "a").stage_index == 3
        assert find_unit(set_stage(tree, "a", -1), "a").stage_index == 0
        assert find_unit(set_stage(tree, "a", 2), "a").stage_index == 2

    def test_edits_do_not_mutate(self, tree):
        """T3.4: The original tree is untouched."""
        advance_stage(tree, "a", 4)
        set_stage(tree, "b", 3)
        assert find_unit(tree, "a").stage_index == 0
        assert find_unit(tree, "b").stage_index == 1
