"""Tests for leaf preimages and their encodings."""

import hashlib

import pytest
from pydantic import ValidationError

from imt_spec.subspecs.bn254 import Fr
from imt_spec.subspecs.indexed_tree.hasher import TEST_HASHER
from imt_spec.subspecs.indexed_tree.leaf import ZERO_LEAF, LeafPreimage
from imt_spec.subspecs.koalabear import Fp, P


def _leaf(value: int, next_index: int, next_value: int) -> LeafPreimage:
    return LeafPreimage(
        value=Fr(value=value), next_index=next_index, next_value=Fr(value=next_value)
    )


def test_zero_leaf() -> None:
    """The sentinel preimage is all zeros."""
    assert ZERO_LEAF == _leaf(0, 0, 0)
    assert not ZERO_LEAF.has_successor()
    assert ZERO_LEAF.to_field_elements() == [Fp(value=0)] * 20
    assert ZERO_LEAF.to_bytes() == b"\x00" * 72


def test_field_element_layout() -> None:
    """9 limbs of value, 2 of next index, 9 of next value."""
    leaf = _leaf(P + 5, P + 1, 3)
    elements = leaf.to_field_elements()

    assert len(elements) == 20
    assert elements[:2] == [Fp(value=5), Fp(value=1)]
    assert elements[2:9] == [Fp(value=0)] * 7
    assert elements[9:11] == [Fp(value=1), Fp(value=1)]
    assert elements[11] == Fp(value=3)
    assert elements[12:] == [Fp(value=0)] * 8


def test_field_elements_fit_the_largest_scalar() -> None:
    """The largest scalar and index still encode without loss."""
    leaf = _leaf(-1, 2**32 - 1, -1)
    elements = leaf.to_field_elements()

    value = sum(e.value * P**i for i, e in enumerate(elements[:9]))
    index = sum(e.value * P**i for i, e in enumerate(elements[9:11]))
    assert value == leaf.value.value
    assert index == 2**32 - 1


def test_byte_layout() -> None:
    """`value || next_index || next_value`, big-endian, 72 bytes."""
    leaf = _leaf(0x0A, 3, 0x14)
    data = leaf.to_bytes()

    assert len(data) == 72
    assert data[:32] == (0x0A).to_bytes(32, "big")
    assert data[32:40] == (3).to_bytes(8, "big")
    assert data[40:] == (0x14).to_bytes(32, "big")


def test_hash_uses_hasher() -> None:
    """Hashing delegates to the tree hasher."""
    leaf = _leaf(10, 3, 20)
    assert leaf.hash(TEST_HASHER) == hashlib.sha256(leaf.to_bytes()).digest()
    assert leaf.hash(TEST_HASHER) != _leaf(10, 3, 21).hash(TEST_HASHER)
    assert leaf.hash(TEST_HASHER) != _leaf(10, 2, 20).hash(TEST_HASHER)


def test_brackets() -> None:
    """A leaf brackets exactly the values strictly between it and its successor."""
    middle = _leaf(10, 3, 20)
    assert middle.brackets(Fr(value=11))
    assert middle.brackets(Fr(value=19))
    assert not middle.brackets(Fr(value=10))
    assert not middle.brackets(Fr(value=20))
    assert not middle.brackets(Fr(value=5))
    assert not middle.brackets(Fr(value=25))

    last = _leaf(50, 0, 0)
    assert last.brackets(Fr(value=51))
    assert last.brackets(Fr(value=-1))
    assert not last.brackets(Fr(value=50))
    assert not last.brackets(Fr(value=40))


def test_copy_updates_pointer() -> None:
    """Copies are validated and leave the original untouched."""
    leaf = _leaf(10, 1, 30)
    updated = leaf.copy(next_index=3, next_value=Fr(value=20))

    assert updated == _leaf(10, 3, 20)
    assert leaf == _leaf(10, 1, 30)

    with pytest.raises(ValidationError):
        leaf.copy(next_index=-1)


def test_strict_validation() -> None:
    """Field types and index range are enforced; preimages are immutable."""
    with pytest.raises(ValidationError):
        LeafPreimage(value=30, next_index=0, next_value=Fr.zero())  # type: ignore[arg-type]

    with pytest.raises(ValidationError):
        _leaf(1, 2**32, 0)

    with pytest.raises(ValidationError):
        _leaf(1, -1, 0)

    with pytest.raises(ValidationError):
        ZERO_LEAF.next_index = 1  # type: ignore[misc]


def test_camel_case_serialization() -> None:
    """Preimages serialize with the `{value, nextIndex, nextValue}` names."""
    dumped = _leaf(10, 3, 20).model_dump(by_alias=True)
    assert set(dumped) == {"value", "nextIndex", "nextValue"}
    assert dumped["nextIndex"] == 3
