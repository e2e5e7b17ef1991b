"""Tests for the flat-array level arithmetic."""

import pytest
from pydantic import ValidationError

from imt_spec.subspecs.indexed_tree.levels import LevelTable, NodeLocation


def test_depth_3_table() -> None:
    """The layout of an 8-leaf tree."""
    table = LevelTable.for_depth(3)

    assert table.starts == (0, 8, 12)
    assert table.total_leaves == 8
    assert table.size == 14
    assert [table.level_size(level) for level in range(3)] == [8, 4, 2]


def test_depth_1_table() -> None:
    """A 2-leaf tree has a single stored level: the children of the root."""
    table = LevelTable.for_depth(1)

    assert table.starts == (0,)
    assert table.size == 2
    assert table.is_top(0)
    assert table.is_top(1)
    assert table.sibling_pair(1) == (0, 1)
    with pytest.raises(ValueError, match="child of the root"):
        table.parent_of(0)


@pytest.mark.parametrize("depth", range(1, 33))
def test_starts_recurrence(depth: int) -> None:
    """`starts[l + 1] = starts[l] + (total_leaves >> l)` and the last level has 2 slots."""
    table = LevelTable.for_depth(depth)
    total = 1 << depth

    assert len(table.starts) == depth
    assert table.starts[0] == 0
    for level in range(depth - 1):
        assert table.starts[level + 1] == table.starts[level] + (total >> level)
    assert table.starts[-1] == table.size - 2


def test_table_is_shared_per_depth() -> None:
    """Tables depend only on the depth and are built once."""
    assert LevelTable.for_depth(5) is LevelTable.for_depth(5)
    assert LevelTable.for_depth(5) is not LevelTable.for_depth(6)


def test_table_validation() -> None:
    """Inconsistent or out-of-range tables cannot be constructed."""
    with pytest.raises(ValidationError, match="do not match"):
        LevelTable(depth=3, starts=(0, 8, 11))

    with pytest.raises(ValidationError):
        LevelTable.for_depth(0)

    with pytest.raises(ValidationError):
        LevelTable.for_depth(33)


def test_locate() -> None:
    """Flat indices map to (level, offset) and back."""
    table = LevelTable.for_depth(3)

    assert table.locate(0) == NodeLocation(level=0, offset=0)
    assert table.locate(7) == NodeLocation(level=0, offset=7)
    assert table.locate(8) == NodeLocation(level=1, offset=0)
    assert table.locate(11) == NodeLocation(level=1, offset=3)
    assert table.locate(13) == NodeLocation(level=2, offset=1)
    assert table.offset_in_level(9) == 1

    for flat in range(table.size):
        level, offset = table.locate(flat)
        assert table.flat_index(level, offset) == flat


def test_parent_and_children() -> None:
    """Concrete parent/children relations of an 8-leaf tree."""
    table = LevelTable.for_depth(3)

    assert table.parent_of(0) == 8
    assert table.parent_of(5) == 10
    assert table.parent_of(7) == 11
    assert table.parent_of(9) == 12
    assert table.parent_of(10) == 13
    assert table.children_of(8) == (0, 1)
    assert table.children_of(13) == (10, 11)

    with pytest.raises(ValueError, match="child of the root"):
        table.parent_of(12)
    with pytest.raises(ValueError, match="is a leaf"):
        table.children_of(3)


def test_sibling_pair() -> None:
    """The pair is selected by parity."""
    table = LevelTable.for_depth(3)

    assert table.sibling_pair(4) == (4, 5)
    assert table.sibling_pair(5) == (4, 5)
    assert table.sibling_pair(11) == (10, 11)
    assert table.sibling_pair(12) == (12, 13)


@pytest.mark.parametrize("depth", range(1, 9))
def test_relations_are_consistent(depth: int) -> None:
    """Every non-top slot is a child of its parent; siblings share a parent."""
    table = LevelTable.for_depth(depth)

    for flat in range(table.size):
        left, right = table.sibling_pair(flat)
        assert table.level_of(left) == table.level_of(right) == table.level_of(flat)
        if table.is_top(flat):
            continue
        parent = table.parent_of(flat)
        assert table.level_of(parent) == table.level_of(flat) + 1
        assert table.children_of(parent) == (left, right)
        assert table.parent_of(left) == table.parent_of(right) == parent


def test_out_of_range_flat_indices() -> None:
    """Every accessor rejects indices outside the array."""
    table = LevelTable.for_depth(3)

    for bad in (-1, 14, 100):
        with pytest.raises(ValueError, match="outside the node array"):
            table.level_of(bad)
        with pytest.raises(ValueError, match="outside the node array"):
            table.sibling_pair(bad)

    with pytest.raises(ValueError, match="outside level"):
        table.flat_index(2, 2)
    with pytest.raises(ValueError, match="outside"):
        table.flat_index(3, 0)
