"""
Flat-array index arithmetic for a fixed-depth binary tree.

The nodes below the root are stored level by level in one flat array:

    depth = 3, total_leaves = 8, array length = 2 * 8 - 2 = 14

    level 0 (leaves)   flat  0 ..  7
    level 1            flat  8 .. 11
    level 2            flat 12 .. 13    (the two children of the root)

The root itself is not stored in the array. Every function here is pure and
depends only on the depth, so one table per depth is built and shared.
"""

from __future__ import annotations

from bisect import bisect_right
from functools import lru_cache
from typing import NamedTuple

from pydantic import Field, model_validator

from imt_spec.types import StrictBaseModel

from .constants import MAX_DEPTH, MIN_DEPTH


class NodeLocation(NamedTuple):
    """Position of a slot in the flat array."""

    level: int
    """Tree level, 0 for leaves."""
    offset: int
    """Position of the slot within its level."""


class LevelTable(StrictBaseModel):
    """
    The per-level starting offsets of a flat node array.

    `starts[0] = 0` and `starts[l + 1] = starts[l] + (total_leaves >> l)`.
    """

    depth: int = Field(ge=MIN_DEPTH, le=MAX_DEPTH)
    """The depth of the tree; there are `depth` stored levels."""

    starts: tuple[int, ...]
    """The flat offset at which each stored level begins."""

    @model_validator(mode="after")
    def check_starts(self) -> LevelTable:
        """Ensures the offsets are exactly the ones implied by the depth."""
        if self.starts != _level_starts(self.depth):
            raise ValueError("Level offsets do not match the tree depth.")
        return self

    @classmethod
    def for_depth(cls, depth: int) -> LevelTable:
        """Returns the shared, immutable table for `depth`."""
        return _table_for_depth(depth)

    @property
    def total_leaves(self) -> int:
        """Number of leaves, `2^depth`."""
        return 1 << self.depth

    @property
    def size(self) -> int:
        """Length of the flat node array, `2 * total_leaves - 2`."""
        return 2 * self.total_leaves - 2

    def level_size(self, level: int) -> int:
        """Number of slots stored at `level`."""
        return self.total_leaves >> level

    def _check_flat(self, flat: int) -> None:
        if not 0 <= flat < self.size:
            raise ValueError(f"Flat index {flat} is outside the node array of size {self.size}")

    def level_of(self, flat: int) -> int:
        """Level of the slot at `flat`."""
        self._check_flat(flat)
        return bisect_right(self.starts, flat) - 1

    def offset_in_level(self, flat: int) -> int:
        """Position of the slot at `flat` within its level."""
        return flat - self.starts[self.level_of(flat)]

    def locate(self, flat: int) -> NodeLocation:
        """Level and in-level offset of the slot at `flat`."""
        level = self.level_of(flat)
        return NodeLocation(level=level, offset=flat - self.starts[level])

    def flat_index(self, level: int, offset: int) -> int:
        """Inverse of `locate`."""
        if not 0 <= level < self.depth:
            raise ValueError(f"Level {level} is outside [0, {self.depth})")
        if not 0 <= offset < self.level_size(level):
            raise ValueError(f"Offset {offset} is outside level {level}")
        return self.starts[level] + offset

    def is_top(self, flat: int) -> bool:
        """Whether `flat` is one of the two children of the root."""
        return self.level_of(flat) == self.depth - 1

    def parent_of(self, flat: int) -> int:
        """
        Flat index of the parent of the slot at `flat`.

        Since every level starts at `2T - 2T/2^l`, the parent of any slot is
        simply `T + flat // 2` where `T` is the number of leaves.

        Raises:
            ValueError: If `flat` is a child of the root, which is not stored.
        """
        if self.is_top(flat):
            raise ValueError(f"Slot {flat} is a child of the root and has no parent slot")
        return self.total_leaves + flat // 2

    def children_of(self, flat: int) -> tuple[int, int]:
        """
        Flat indices of the (left, right) children of the slot at `flat`.

        Raises:
            ValueError: If `flat` is a leaf.
        """
        level, offset = self.locate(flat)
        if level == 0:
            raise ValueError(f"Slot {flat} is a leaf and has no children")
        left = self.starts[level - 1] + 2 * offset
        return left, left + 1

    def sibling_pair(self, flat: int) -> tuple[int, int]:
        """
        The (left, right) slots of the sibling pair containing `flat`.

        Every level starts at an even offset, so parity alone picks the side.
        """
        self._check_flat(flat)
        return flat & ~1, flat | 1


def _level_starts(depth: int) -> tuple[int, ...]:
    total_leaves = 1 << depth
    starts = [0]
    for level in range(1, depth):
        starts.append(starts[-1] + (total_leaves >> (level - 1)))
    return tuple(starts)


@lru_cache(maxsize=None)
def _table_for_depth(depth: int) -> LevelTable:
    return LevelTable(depth=depth, starts=_level_starts(depth))
