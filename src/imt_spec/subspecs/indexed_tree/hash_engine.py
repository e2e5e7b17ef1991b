"""
Node hash maintenance for the indexed Merkle tree.

### Incremental Rehashing

Every slot of the flat node array carries a status flag:

- `DIRTY`: the slot changed since the last settle, so its parent is stale.
- `CLEAN`: the parent of the slot is consistent with it.

Writing a leaf marks it dirty. Settling walks the levels bottom-up: each dirty
slot causes its parent to be recomputed once from the (left, right) pair; the
pair becomes clean and the parent becomes dirty, so the next level picks it up.
The root is recomputed last from the two top slots. Inserting one value dirties
two leaves, so a settle costs at most `2 * depth` compressions.

### Sparse Storage

A slot that was never written holds the "zero subtree" hash of its level: the
root of a subtree of that height whose leaves are all `ZERO_LEAF`. These are
computed once, so building a tree costs `depth` compressions regardless of its
capacity.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Generic, Sequence, TypeVar

from .hasher import TreeHasher
from .leaf import ZERO_LEAF
from .levels import LevelTable

logger = logging.getLogger(__name__)

H = TypeVar("H")


class NodeStatus(IntEnum):
    """Cache status of a slot of the node array."""

    DIRTY = 0
    """The slot changed and its parent has not been recomputed yet."""

    CLEAN = 1
    """The parent of the slot is up to date."""


class NodeHashes(Generic[H]):
    """The flat array of node hashes below the root, plus the root itself."""

    def __init__(self, levels: LevelTable, hasher: TreeHasher[H]):
        """Initializes every leaf to the hash of `ZERO_LEAF`."""
        self.levels = levels
        self.hasher = hasher

        # Zero subtree hash of every stored level, leaves first.
        zero_hashes = [ZERO_LEAF.hash(hasher)]
        for _ in range(levels.depth - 1):
            zero_hashes.append(hasher.compress(zero_hashes[-1], zero_hashes[-1]))
        self.zero_hashes: tuple[H, ...] = tuple(zero_hashes)

        self._nodes: dict[int, H] = {}
        self._dirty: set[int] = set()
        self.root: H = hasher.compress(zero_hashes[-1], zero_hashes[-1])

    @property
    def zero_leaf_hash(self) -> H:
        """The hash of the `{0, 0, 0}` preimage."""
        return self.zero_hashes[0]

    @property
    def pending(self) -> bool:
        """Whether some slots changed since the last settle."""
        return bool(self._dirty)

    def __len__(self) -> int:
        return self.levels.size

    def __getitem__(self, flat: int) -> H:
        level = self.levels.level_of(flat)
        return self._nodes.get(flat, self.zero_hashes[level])

    def status(self, flat: int) -> NodeStatus:
        """The cache status of the slot at `flat`."""
        self.levels.level_of(flat)
        return NodeStatus.DIRTY if flat in self._dirty else NodeStatus.CLEAN

    def set_leaf(self, index: int, digest: H) -> None:
        """
        Overwrites the hash of leaf `index` and marks it dirty.

        Ancestors are not touched until the next `settle()`.
        """
        if not 0 <= index < self.levels.total_leaves:
            raise ValueError(f"Leaf index {index} is outside [0, {self.levels.total_leaves})")
        self._nodes[index] = digest
        self._dirty.add(index)

    def settle(self) -> H:
        """
        Recomputes every stale ancestor and the root.

        Returns:
            The up-to-date root.
        """
        if not self._dirty:
            return self.root

        levels = self.levels
        dirty = self._dirty
        recomputed = 0

        # The top level has no parent slot; it feeds the root directly.
        for level in range(levels.depth - 1):
            start = levels.starts[level]
            end = start + levels.level_size(level)
            for flat in sorted(f for f in dirty if start <= f < end):
                # Already handled as the sibling of a previous slot.
                if flat not in dirty:
                    continue
                left, right = levels.sibling_pair(flat)
                parent = levels.parent_of(flat)
                self._nodes[parent] = self.hasher.compress(self[left], self[right])
                dirty.discard(left)
                dirty.discard(right)
                dirty.add(parent)
                recomputed += 1

        self.root = self.hasher.compress(self[levels.size - 2], self[levels.size - 1])
        dirty.clear()

        logger.debug("Settled node hashes: %d internal nodes recomputed", recomputed)
        return self.root

    def dump(self) -> tuple[H, ...]:
        """Materializes the full node array, leaves first."""
        return tuple(self[flat] for flat in range(self.levels.size))


def full_rehash(
    levels: LevelTable, hasher: TreeHasher[H], leaf_hashes: Sequence[H]
) -> tuple[list[H], H]:
    """
    Recomputes every node of a tree from scratch.

    This is the straightforward `O(total_leaves)` construction, without any
    caching: each internal slot is the compression of its two children, filled
    in flat order (children always precede their parent).

    Args:
        levels: The level table of the tree.
        hasher: The tree hasher.
        leaf_hashes: One digest per leaf, `total_leaves` of them.

    Returns:
        A tuple `(hashes, root)` where `hashes` is the full node array.
    """
    if len(leaf_hashes) != levels.total_leaves:
        raise ValueError(f"Expected {levels.total_leaves} leaf hashes, got {len(leaf_hashes)}")

    hashes: list[H] = list(leaf_hashes)
    for flat in range(levels.total_leaves, levels.size):
        left, right = levels.children_of(flat)
        hashes.append(hasher.compress(hashes[left], hashes[right]))

    root = hasher.compress(hashes[-2], hashes[-1])
    return hashes, root
