"""Exception hierarchy for the indexed Merkle tree."""

from __future__ import annotations

from typing import Any


class IndexedMerkleTreeError(Exception):
    """
    Base exception for all indexed Merkle tree errors.

    Every error is raised before the tree is mutated, so the tree is left
    exactly as it was when the failing call started.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class InvalidDepthError(IndexedMerkleTreeError, ValueError):
    """
    Raised when a tree is constructed with an unsupported depth.

    Attributes:
        depth: The rejected depth.
        min_depth: The smallest supported depth (inclusive).
        max_depth: The largest supported depth (inclusive).
    """

    def __init__(self, depth: int, *, min_depth: int, max_depth: int) -> None:
        self.depth = depth
        self.min_depth = min_depth
        self.max_depth = max_depth

        super().__init__(f"Tree depth must be in [{min_depth}, {max_depth}], got {depth}")


class TreeFullError(IndexedMerkleTreeError):
    """
    Raised when inserting into a tree whose leaves are all occupied.

    Attributes:
        capacity: The number of leaves of the tree.
    """

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity

        super().__init__(f"Tree is full: all {capacity} leaves are occupied")


class DuplicateValueError(IndexedMerkleTreeError):
    """
    Raised when inserting a value that is already a member of the set.

    The zero value is always a member: it is held by the head sentinel leaf.

    Attributes:
        value: The duplicate value (may be truncated for display).
    """

    def __init__(self, value: Any) -> None:
        self.value = value

        value_repr = repr(value)
        if len(value_repr) > 50:
            value_repr = value_repr[:47] + "..."

        super().__init__(f"Value is already in the tree: {value_repr}")


class IndexOutOfRangeError(IndexedMerkleTreeError, IndexError):
    """
    Raised when a leaf index lies outside the tree.

    Attributes:
        index: The rejected index.
        capacity: The number of leaves of the tree (valid range is [0, capacity)).
    """

    def __init__(self, index: int, capacity: int) -> None:
        self.index = index
        self.capacity = capacity

        super().__init__(f"Leaf index {index} is out of range (valid range: [0, {capacity}))")
