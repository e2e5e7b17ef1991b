"""
Hash functions consumed by the indexed Merkle tree.

The tree treats hashes as opaque values and needs exactly two operations:

- `hash_leaf(leaf)`: the digest committed for a leaf preimage,
- `compress(left, right)`: the digest of an internal node from its children.

Child order is fixed: `left` is always the child at the even position of the
pair, `right` the child at the odd position.

Two hashers are provided:

1.  **Poseidon2 over KoalaBear**: arithmetization-friendly, so that a hash path
    can later be checked cheaply inside a zero-knowledge proof. Digests are
    tuples of 8 field elements.
2.  **SHA-256**: fast in plain Python; used by test environments. Digests are
    32-byte strings.
"""

from __future__ import annotations

import hashlib
from typing import Protocol, TypeVar

from typing_extensions import Final

from imt_spec.config import IMT_ENV

from ..koalabear import Fp
from ..poseidon2.permutation import PARAMS_16, PARAMS_24, Poseidon2Params, compress
from .constants import HASH_LEN_FE
from .leaf import LeafPreimage

H = TypeVar("H")

PoseidonDigest = tuple[Fp, ...]
"""A Poseidon2 tree digest: `HASH_LEN_FE` KoalaBear elements."""

Sha256Digest = bytes
"""A SHA-256 tree digest: 32 bytes."""


class TreeHasher(Protocol[H]):
    """The two-to-one compression and leaf hash used to build a tree."""

    def hash_leaf(self, leaf: LeafPreimage) -> H:
        """Hashes a leaf preimage into a leaf digest."""
        ...

    def compress(self, left: H, right: H) -> H:
        """Hashes two child digests, in (left, right) order, into their parent."""
        ...


class Poseidon2TreeHasher:
    """
    Tree hashing with Poseidon2 in compression mode.

    - Leaves: the 20-element encoding of the preimage is compressed with the
      width-24 permutation.
    - Nodes: the 16 elements of the two child digests are compressed with the
      width-16 permutation.

    Both truncate to `HASH_LEN_FE` elements.
    """

    def __init__(self, params16: Poseidon2Params, params24: Poseidon2Params):
        """Initializes the hasher with specific Poseidon2 permutations."""
        self.params16 = params16
        self.params24 = params24

    def hash_leaf(self, leaf: LeafPreimage) -> PoseidonDigest:
        return tuple(compress(leaf.to_field_elements(), self.params24, HASH_LEN_FE))

    def compress(self, left: PoseidonDigest, right: PoseidonDigest) -> PoseidonDigest:
        if len(left) != HASH_LEN_FE or len(right) != HASH_LEN_FE:
            raise ValueError(f"Digests must have {HASH_LEN_FE} field elements.")
        return tuple(compress([*left, *right], self.params16, HASH_LEN_FE))


class Sha256TreeHasher:
    """
    Tree hashing with SHA-256.

    Leaves hash their byte encoding, nodes hash the concatenation of their
    children. The two inputs never collide in length (72 vs 64 bytes).
    """

    def hash_leaf(self, leaf: LeafPreimage) -> Sha256Digest:
        return hashlib.sha256(leaf.to_bytes()).digest()

    def compress(self, left: Sha256Digest, right: Sha256Digest) -> Sha256Digest:
        return hashlib.sha256(left + right).digest()


PROD_HASHER: Final = Poseidon2TreeHasher(PARAMS_16, PARAMS_24)
"""The hasher used by production trees."""

TEST_HASHER: Final = Sha256TreeHasher()
"""A fast hasher for test environments."""

TARGET_HASHER: TreeHasher = PROD_HASHER if IMT_ENV == "prod" else TEST_HASHER
"""The default hasher, selected by the `IMT_ENV` environment variable."""
