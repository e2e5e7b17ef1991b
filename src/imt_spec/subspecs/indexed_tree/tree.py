"""
The indexed Merkle tree.

Example (depth 3, 8 leaves), inserting 30, 10, 20 and 50 in that order:

    index       0     1     2     3     4     5     6     7
    value       0    30    10    20    50     0     0     0
    nextIndex   2     4     3     1     0     0     0     0
    nextValue  10    50    20    30     0     0     0     0

Leaves are assigned in insertion order, while the `nextIndex` chain starting at
the sentinel leaf 0 visits them in increasing value order: 0 -> 10 -> 20 -> 30 -> 50.

The tree is a single-owner structure. It takes no locks: callers sharing one
tree across threads must serialize `insert` and `hash_path` (which may settle
pending hashes) themselves.
"""

from __future__ import annotations

import logging
from typing import Generic, Iterator, TypeVar

from imt_spec.types import (
    DuplicateValueError,
    IndexOutOfRangeError,
    InvalidDepthError,
    TreeFullError,
)

from ..bn254 import Fr
from .constants import MAX_DEPTH, MIN_DEPTH
from .hash_engine import NodeHashes
from .hasher import TARGET_HASHER, TreeHasher
from .leaf import ZERO_LEAF, LeafPreimage
from .levels import LevelTable
from .proof import HashPath, MembershipProof, NonMembershipProof

logger = logging.getLogger(__name__)

H = TypeVar("H")


class IndexedMerkleTree(Generic[H]):
    """A fixed-depth Merkle tree committing to a sorted set of BN254 scalars."""

    def __init__(self, depth: int, hasher: TreeHasher[H] = TARGET_HASHER):
        """
        Creates a tree whose leaves all hold the `{0, 0, 0}` preimage.

        Only leaf 0 is occupied: it is the head of the sorted list.

        Args:
            depth: The tree depth, in [1, 32]. The tree has `2^depth` leaves.
            hasher: The tree hasher.

        Raises:
            InvalidDepthError: If `depth` is out of range.
        """
        if isinstance(depth, bool) or not isinstance(depth, int):
            raise TypeError(f"Tree depth must be an int, got {type(depth).__name__}")
        if not MIN_DEPTH <= depth <= MAX_DEPTH:
            raise InvalidDepthError(depth, min_depth=MIN_DEPTH, max_depth=MAX_DEPTH)

        self.levels = LevelTable.for_depth(depth)
        self.hasher = hasher
        self._leaves: list[LeafPreimage] = [ZERO_LEAF]
        self._hashes: NodeHashes[H] = NodeHashes(self.levels, hasher)

        logger.debug("Created indexed Merkle tree of depth %d", depth)

    @property
    def depth(self) -> int:
        """The tree depth."""
        return self.levels.depth

    @property
    def total_leaves(self) -> int:
        """The leaf capacity, `2^depth`."""
        return self.levels.total_leaves

    @property
    def leaf_count(self) -> int:
        """Number of occupied leaves, the sentinel included."""
        return len(self._leaves)

    @property
    def root(self) -> H:
        """The current root."""
        return self._hashes.settle()

    def _walk(self) -> Iterator[tuple[int, LeafPreimage]]:
        """Yields the occupied leaves in list order, starting at the sentinel."""
        index = 0
        while True:
            leaf = self._leaves[index]
            yield index, leaf
            if not leaf.has_successor():
                return
            index = leaf.next_index

    def find_low_leaf(self, value: Fr) -> tuple[int, LeafPreimage]:
        """
        Locates the leaf after which `value` belongs in the sorted list.

        This is the first leaf of the list whose successor is absent or not
        smaller than `value`. For any non-zero `value`, its own value is
        strictly smaller than `value`.

        Returns:
            A tuple `(index, leaf)`.
        """
        index, leaf = 0, self._leaves[0]
        while leaf.has_successor() and leaf.next_value < value:
            index = leaf.next_index
            leaf = self._leaves[index]
        return index, leaf

    def contains(self, value: Fr) -> bool:
        """Whether `value` is a member of the set (zero always is)."""
        if value.is_zero():
            return True
        _, low_leaf = self.find_low_leaf(value)
        return low_leaf.next_value == value

    def insert(self, value: Fr) -> H:
        """
        Inserts a new value into the sorted list and returns the new root.

        The new leaf takes the next free index and inherits the successor of its
        predecessor `p`; `p` is rewritten to point at the new leaf:

            p   = {p.value, n, value}
            new = {value, p.next_index, p.next_value}

        Raises:
            TreeFullError: If every leaf is occupied.
            DuplicateValueError: If `value` is already a member (including zero).
        """
        if len(self._leaves) == self.total_leaves:
            raise TreeFullError(self.total_leaves)
        if value.is_zero():
            raise DuplicateValueError(value)

        low_index, low_leaf = self.find_low_leaf(value)
        if low_leaf.next_value == value:
            raise DuplicateValueError(value)

        new_index = len(self._leaves)
        new_leaf = LeafPreimage(
            value=value,
            next_index=low_leaf.next_index,
            next_value=low_leaf.next_value,
        )
        updated_low_leaf = low_leaf.copy(next_index=new_index, next_value=value)

        self._leaves.append(new_leaf)
        self._leaves[low_index] = updated_low_leaf

        self._hashes.set_leaf(new_index, new_leaf.hash(self.hasher))
        self._hashes.set_leaf(low_index, updated_low_leaf.hash(self.hasher))
        root = self._hashes.settle()

        logger.debug("Inserted value at leaf %d after leaf %d", new_index, low_index)
        return root

    def hash_path(self, index: int) -> HashPath:
        """
        Fetches the hash path of leaf `index`.

        Each entry is the (left, right) pair of children of the node on the path,
        from the leaf level up to the children of the root, so the result has
        `depth` entries.

        Raises:
            IndexOutOfRangeError: If `index` is not in `[0, total_leaves)`.
        """
        if not 0 <= index < self.total_leaves:
            raise IndexOutOfRangeError(index, self.total_leaves)

        # Reading siblings must never observe stale hashes.
        self._hashes.settle()

        path: list[tuple[H, H]] = []
        flat = index
        for level in range(self.depth):
            left, right = self.levels.sibling_pair(flat)
            path.append((self._hashes[left], self._hashes[right]))
            if level < self.depth - 1:
                flat = self.levels.parent_of(flat)
        return tuple(path)

    def prove_membership(self, value: Fr) -> MembershipProof:
        """
        Builds a proof that `value` is in the set.

        Raises:
            KeyError: If `value` is not a member.
        """
        for index, leaf in self._walk():
            if leaf.value == value:
                return MembershipProof(leaf_index=index, leaf=leaf, path=self.hash_path(index))
            if leaf.value > value:
                break
        raise KeyError(value.value)

    def prove_non_membership(self, value: Fr) -> NonMembershipProof:
        """
        Builds a proof that `value` is not in the set.

        Raises:
            DuplicateValueError: If `value` is a member.
        """
        if self.contains(value):
            raise DuplicateValueError(value)
        low_index, low_leaf = self.find_low_leaf(value)
        return NonMembershipProof(
            value=value,
            low_leaf=MembershipProof(
                leaf_index=low_index, leaf=low_leaf, path=self.hash_path(low_index)
            ),
        )

    def dump_hashes(self) -> tuple[H, ...]:
        """The full node array below the root, leaves first."""
        self._hashes.settle()
        return self._hashes.dump()

    def dump_leaves(self) -> tuple[LeafPreimage, ...]:
        """All `total_leaves` leaf preimages; empty slots hold `ZERO_LEAF`."""
        return tuple(self._leaves) + (ZERO_LEAF,) * (self.total_leaves - len(self._leaves))
