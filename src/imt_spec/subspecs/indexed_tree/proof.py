"""
Membership and non-membership proofs for the indexed Merkle tree.

A hash path lists, for each level from the leaves up, the (left, right) pair of
children of the node on the path. The parity of the leaf index at each level
tells which slot of the pair the path itself goes through.

Membership of `v` is shown by a leaf whose `value` is `v`. Non-membership of
`v` is shown by the "low leaf": the leaf `{value, nextIndex, nextValue}` with
`value < v < nextValue` (or `nextValue == 0`). Since the leaves form a sorted
linked list, no leaf can hold a value in that open interval. A low leaf holding
zero must be the sentinel at index 0: empty slots hash to the same preimage.
"""

from __future__ import annotations

from typing import Any, Sequence, TypeVar

from pydantic import Field

from imt_spec.types import StrictBaseModel

from ..bn254 import Fr
from .hasher import TreeHasher
from .leaf import LeafPreimage

H = TypeVar("H")

HashPath = tuple[tuple[Any, Any], ...]
"""The (left, right) child pairs along a path, from the leaf level up."""


def root_from_path(
    hasher: TreeHasher[H], leaf_index: int, leaf_hash: H, path: Sequence[tuple[H, H]]
) -> H:
    """
    Recomputes a root by climbing a hash path.

    At each level the running node must be the pair member selected by the
    current parity bit; the pair is then compressed into the next node.

    Args:
        hasher: The tree hasher.
        leaf_index: Position of the leaf in the tree.
        leaf_hash: Digest of the leaf.
        path: The (left, right) pairs, one per level, leaves first.

    Returns:
        The candidate root.

    Raises:
        ValueError: If the index does not fit the path or the path does not
            contain the recomputed node.
    """
    if not path:
        raise ValueError("Hash path must not be empty.")
    if not 0 <= leaf_index < 1 << len(path):
        raise ValueError("Leaf index and path length do not match.")

    node = leaf_hash
    position = leaf_index
    for level, (left, right) in enumerate(path):
        on_path = right if position % 2 == 1 else left
        if on_path != node:
            raise ValueError(f"Hash path does not contain the recomputed node at level {level}.")
        node = hasher.compress(left, right)
        position //= 2

    return node


class MembershipProof(StrictBaseModel):
    """Proof that a leaf preimage sits at a given index of a tree."""

    leaf_index: int = Field(ge=0, description="Position of the leaf in the tree.")

    leaf: LeafPreimage = Field(description="The proven leaf preimage.")

    path: HashPath = Field(min_length=1, description="The hash path of the leaf.")

    @property
    def value(self) -> Fr:
        """The set member held by the proven leaf."""
        return self.leaf.value

    def compute_root(self, hasher: TreeHasher[H]) -> H:
        """Recomputes the root committed to by this proof."""
        return root_from_path(hasher, self.leaf_index, self.leaf.hash(hasher), self.path)

    def verify(self, hasher: TreeHasher[H], root: H) -> bool:
        """Verifies the proof against a known, trusted root."""
        try:
            return self.compute_root(hasher) == root
        except ValueError:
            return False


class NonMembershipProof(StrictBaseModel):
    """Proof that a value is absent, via the leaf that brackets it."""

    value: Fr = Field(description="The value claimed to be absent.")

    low_leaf: MembershipProof = Field(description="Membership proof of the bracketing leaf.")

    def verify(self, hasher: TreeHasher[H], root: H) -> bool:
        """
        Verifies the proof against a known, trusted root.

        The low leaf must bracket the value and must itself be in the tree.
        Every empty slot also commits to `{0, 0, 0}`, so a zero-valued low leaf
        is only accepted at the sentinel index.
        """
        low = self.low_leaf
        if low.leaf.value.is_zero() and low.leaf_index != 0:
            return False
        if not low.leaf.brackets(self.value):
            return False
        return low.verify(hasher, root)
