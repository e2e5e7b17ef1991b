"""
The BN254 scalar field Fr, the value domain of the indexed Merkle tree.

Values committed by the tree are elements of this field. The tree only needs
two things from them: equality, and a total order used to keep the leaves
sorted. The order is the order of the canonical representatives in [0, R).
"""

from typing import Self

from pydantic import Field, field_validator

from imt_spec.types import StrictBaseModel

R: int = 21888242871839275222246405745257275088548364400416034343698204186575808495617
"""The BN254 scalar field modulus (the order of the BN254 G1 group)."""

R_BITS: int = 254
"""The number of bits in the modulus R."""

R_BYTES: int = 32
"""The size of a serialized BN254 scalar in bytes."""


class Fr(StrictBaseModel):
    """An element in the BN254 scalar field, totally ordered by canonical value."""

    value: int = Field(ge=0, lt=R, description="Field element value in the range [0, R)")

    @field_validator("value", mode="before")
    @classmethod
    def reduce_modulo_r(cls, v: int) -> int:
        """Reduces an integer input modulo R before validation."""
        return v % R

    @classmethod
    def zero(cls) -> Self:
        """The additive identity, also the value held by the sentinel leaf."""
        return cls(value=0)

    def is_zero(self) -> bool:
        """Whether this is the zero element."""
        return self.value == 0

    def __lt__(self, other: Self) -> bool:
        return self.value < other.value

    def __le__(self, other: Self) -> bool:
        return self.value <= other.value

    def __gt__(self, other: Self) -> bool:
        return self.value > other.value

    def __ge__(self, other: Self) -> bool:
        return self.value >= other.value

    def __bytes__(self) -> bytes:
        """32-byte big-endian representation of the canonical value."""
        return self.value.to_bytes(R_BYTES, byteorder="big")
