"""Subpackages of the indexed Merkle tree: fields, hashing and the tree itself."""

from .bn254 import Fr
from .indexed_tree import IndexedMerkleTree, LeafPreimage, MembershipProof, NonMembershipProof

__all__ = [
    "Fr",
    "IndexedMerkleTree",
    "LeafPreimage",
    "MembershipProof",
    "NonMembershipProof",
]
