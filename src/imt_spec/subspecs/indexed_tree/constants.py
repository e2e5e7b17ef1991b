"""Constants shared by the indexed Merkle tree modules."""

from typing_extensions import Final

MIN_DEPTH: Final = 1
"""The smallest supported tree depth (a tree of 2 leaves)."""

MAX_DEPTH: Final = 32
"""The largest supported tree depth (a tree of 2^32 leaves)."""

VALUE_LIMBS: Final = 9
"""Number of KoalaBear limbs encoding a BN254 scalar (9 * 31 bits >= 254 bits)."""

INDEX_LIMBS: Final = 2
"""Number of KoalaBear limbs encoding a leaf index (2 * 31 bits >= 32 bits)."""

HASH_LEN_FE: Final = 8
"""Length of a Poseidon2 tree digest in KoalaBear field elements."""

INDEX_BYTES: Final = 8
"""Width of a leaf index in the byte encoding of a leaf preimage."""
