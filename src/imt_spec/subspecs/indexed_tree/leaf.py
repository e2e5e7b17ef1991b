"""
Leaf preimages of the indexed Merkle tree.

A leaf does not commit to a bare value. It commits to a node of a sorted,
singly-linked list: the value itself, plus the index and value of the next
larger member of the set. Two consecutive list nodes therefore bracket every
value that is *not* in the set, which is what makes non-membership provable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from pydantic import Field
from typing_extensions import Final

from imt_spec.types import StrictBaseModel

from ..bn254 import Fr
from ..koalabear import Fp, int_to_base_p
from .constants import INDEX_BYTES, INDEX_LIMBS, MAX_DEPTH, VALUE_LIMBS

if TYPE_CHECKING:
    from .hasher import TreeHasher

H = TypeVar("H")


class LeafPreimage(StrictBaseModel):
    """
    The plaintext `{value, nextIndex, nextValue}` hashed into a tree leaf.

    `next_index` and `next_value` are both zero when the leaf holds the largest
    member of the set (or when the slot is still empty).
    """

    value: Fr
    """The committed set member."""

    next_index: int = Field(ge=0, lt=1 << MAX_DEPTH)
    """Leaf index of the next larger member, or 0 if there is none."""

    next_value: Fr
    """Cached value of the next larger member, or 0 if there is none."""

    def has_successor(self) -> bool:
        """Whether a larger member exists in the set."""
        return not self.next_value.is_zero()

    def brackets(self, value: Fr) -> bool:
        """
        Whether `value` lies strictly between this leaf and its successor.

        For the last leaf of the list the interval is open-ended.
        """
        if not self.value < value:
            return False
        return not self.has_successor() or value < self.next_value

    def to_field_elements(self) -> list[Fp]:
        """
        Encodes the preimage as KoalaBear limbs, least significant limb first.

        Layout: 9 limbs of `value`, 2 limbs of `next_index`, 9 limbs of `next_value`.
        """
        return (
            int_to_base_p(self.value.value, VALUE_LIMBS)
            + int_to_base_p(self.next_index, INDEX_LIMBS)
            + int_to_base_p(self.next_value.value, VALUE_LIMBS)
        )

    def to_bytes(self) -> bytes:
        """Encodes the preimage as `value || next_index || next_value`, big-endian."""
        return (
            bytes(self.value)
            + self.next_index.to_bytes(INDEX_BYTES, byteorder="big")
            + bytes(self.next_value)
        )

    def hash(self, hasher: TreeHasher[H]) -> H:
        """Hashes the preimage into a leaf digest."""
        return hasher.hash_leaf(self)


ZERO_LEAF: Final = LeafPreimage(value=Fr.zero(), next_index=0, next_value=Fr.zero())
"""The `{0, 0, 0}` preimage of the sentinel leaf and of every empty slot."""
