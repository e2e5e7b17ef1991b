"""
This package provides a Python specification for the indexed Merkle tree.

It exposes the tree, its leaf preimages, the tree hashers and the proof types.
"""

from .hash_engine import NodeHashes, NodeStatus, full_rehash
from .hasher import (
    PROD_HASHER,
    TARGET_HASHER,
    TEST_HASHER,
    Poseidon2TreeHasher,
    Sha256TreeHasher,
    TreeHasher,
)
from .leaf import ZERO_LEAF, LeafPreimage
from .levels import LevelTable, NodeLocation
from .proof import HashPath, MembershipProof, NonMembershipProof, root_from_path
from .tree import IndexedMerkleTree

__all__ = [
    "IndexedMerkleTree",
    "LeafPreimage",
    "ZERO_LEAF",
    "LevelTable",
    "NodeLocation",
    "NodeHashes",
    "NodeStatus",
    "full_rehash",
    "TreeHasher",
    "Poseidon2TreeHasher",
    "Sha256TreeHasher",
    "PROD_HASHER",
    "TEST_HASHER",
    "TARGET_HASHER",
    "HashPath",
    "MembershipProof",
    "NonMembershipProof",
    "root_from_path",
]
