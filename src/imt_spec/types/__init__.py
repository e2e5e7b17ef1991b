"""Reusable type definitions for the indexed Merkle tree."""

from .base import CamelModel, StrictBaseModel
from .exceptions import (
    DuplicateValueError,
    IndexedMerkleTreeError,
    IndexOutOfRangeError,
    InvalidDepthError,
    TreeFullError,
)

__all__ = [
    # Core types
    "CamelModel",
    "StrictBaseModel",
    # Exceptions
    "IndexedMerkleTreeError",
    "InvalidDepthError",
    "TreeFullError",
    "DuplicateValueError",
    "IndexOutOfRangeError",
]
