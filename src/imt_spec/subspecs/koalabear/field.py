"""Core definition of the KoalaBear prime field Fp."""

from typing import Self

from pydantic import Field, field_validator

from imt_spec.types import StrictBaseModel

# =================================================================
# Field Constants
#
# The prime is chosen because the cube map (x -> x^3) is an
# automorphism of the multiplicative group, which gives Poseidon2
# its degree-3 S-box.
# =================================================================

P: int = 2**31 - 2**24 + 1
"""The KoalaBear Prime: P = 2^31 - 2^24 + 1"""

P_BITS: int = 31
"""The number of bits in the prime P."""


# =================================================================
# Base Field Fp
#
# All arithmetic is performed modulo P.
# =================================================================


class Fp(StrictBaseModel):
    """An element in the KoalaBear prime field F_p."""

    value: int = Field(ge=0, lt=P, description="Field element value in the range [0, P)")

    @field_validator("value", mode="before")
    @classmethod
    def reduce_modulo_p(cls, v: int) -> int:
        """Reduces an integer input modulo P before validation."""
        return v % P

    def __add__(self, other: Self) -> Self:
        """Field addition."""
        return self.__class__(value=self.value + other.value)

    def __mul__(self, other: Self) -> Self:
        """Field multiplication."""
        return self.__class__(value=self.value * other.value)

    def __pow__(self, exponent: int) -> Self:
        """Field exponentiation."""
        return self.__class__(value=pow(self.value, exponent, P))

    def inverse(self) -> Self:
        """Computes the multiplicative inverse."""
        if self.value == 0:
            raise ZeroDivisionError("Cannot invert the zero element.")
        # a^(P-2) is the multiplicative inverse of a in F_p
        return self ** (P - 2)

    def __truediv__(self, other: Self) -> Self:
        """Field division."""
        return self * other.inverse()


def int_to_base_p(value: int, num_limbs: int) -> list[Fp]:
    """
    Decomposes a non-negative integer into a list of base-P field elements.

    Each "digit" is an element of F_p, least significant limb first.

    Args:
        value: The integer to decompose.
        num_limbs: The number of output field elements (limbs).

    Returns:
        A list of `num_limbs` field elements representing the integer.

    Raises:
        ValueError: If `value` is negative or does not fit in `num_limbs` limbs.
    """
    if value < 0 or value >= P**num_limbs:
        raise ValueError(f"Value does not fit in {num_limbs} base-P limbs")

    limbs: list[Fp] = []
    acc = value
    for _ in range(num_limbs):
        limbs.append(Fp(value=acc % P))
        acc //= P
    return limbs
