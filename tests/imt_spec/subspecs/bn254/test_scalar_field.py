"""
Tests for the BN254 scalar field Fr.
"""

import pytest
from pydantic import ValidationError

from imt_spec.subspecs.bn254.field import R, R_BYTES, Fr


def test_modulus() -> None:
    """The modulus is the BN254 group order."""
    assert R == 0x30644E72E131A029B85045B68181585D2833E84879B9709143E1F593F0000001
    assert R.bit_length() == 254
    assert R_BYTES == 32


def test_reduction_modulo_r() -> None:
    """Inputs are reduced into [0, R) on construction."""
    assert Fr(value=R) == Fr.zero()
    assert Fr(value=R + 3) == Fr(value=3)
    assert Fr(value=-1).value == R - 1


def test_zero() -> None:
    """The zero element is recognized."""
    assert Fr.zero().is_zero()
    assert not Fr(value=1).is_zero()


def test_total_order() -> None:
    """Ordering follows the canonical representative."""
    a, b = Fr(value=10), Fr(value=20)

    assert a < b
    assert a <= b
    assert b > a
    assert b >= a
    assert a <= Fr(value=10)
    assert a >= Fr(value=10)
    assert not a < Fr(value=10)
    assert sorted([Fr(value=3), Fr(value=1), Fr(value=2)]) == [
        Fr(value=1),
        Fr(value=2),
        Fr(value=3),
    ]

    # R - 1 is the largest element, even though it is "-1" in the field.
    assert Fr(value=-1) > Fr(value=2**200)


def test_bytes_encoding() -> None:
    """Serialization is 32 bytes, big-endian."""
    data = bytes(Fr(value=0x0102))
    assert len(data) == R_BYTES
    assert data == b"\x00" * 30 + b"\x01\x02"
    assert bytes(Fr(value=-1)) == (R - 1).to_bytes(32, "big")


def test_strict_and_frozen() -> None:
    """Values must be ints and elements are immutable."""
    with pytest.raises(ValidationError):
        Fr(value=5.0)  # type: ignore[arg-type]

    fr = Fr(value=5)
    with pytest.raises(ValidationError):
        fr.value = 6  # type: ignore[misc]
