"""
Merkle Tree Errors

Exception types raised by tree construction, proof extraction and leaf
updates. All of them derive from MerkleTreeError so callers can catch the
whole family at once, and the input errors also subclass the matching
builtin (ValueError, IndexError).
"""

from typing import Optional


class MerkleTreeError(Exception):
    """Base class for merkle tree errors."""
    pass


class InvalidInputError(MerkleTreeError, ValueError):
    """Raised when a tree is built from an empty leaf sequence."""
    pass


class IndexOutOfRangeError(MerkleTreeError, IndexError):
    """
    Raised when a leaf index falls outside [0, size).

    Attributes:
        index: The offending index as supplied by the caller
        size: Number of leaves in the tree
    """

    def __init__(self, index, size: int):
        self.index = index
        self.size = size
        super().__init__(f"Leaf index {index!r} out of range (0-{size - 1})")


class HashError(MerkleTreeError):
    """
    Raised by a combine function that cannot hash its inputs.

    The tree never wraps or swallows this error: it reaches the caller of
    whichever operation invoked the combine function.

    Attributes:
        left: Left input of the failing combine call, if known
        right: Right input of the failing combine call, if known
        detail: Description of the underlying failure
    """

    def __init__(self, detail: str, left: Optional[str] = None, right: Optional[str] = None):
        self.detail = detail
        self.left = left
        self.right = right
        super().__init__(detail)
