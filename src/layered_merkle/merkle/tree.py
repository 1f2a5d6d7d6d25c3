"""
Merkle Tree Building and Manipulation

This module holds the layered binary merkle tree: construction from an
ordered leaf sequence, root lookup, inclusion path extraction and
single-leaf updates that only recompute the ancestors of the changed leaf.

Hashing is delegated to an injected combine function taking two hash
strings and returning one. A layer of odd length carries its last node up
to the next layer unchanged; it is never combined with itself or padded.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Sequence

from .errors import IndexOutOfRangeError, InvalidInputError

logger = logging.getLogger(__name__)

CombineFn = Callable[[str, str], str]


@dataclass
class MerkleProof:
    """Container for an inclusion proof of a single leaf."""
    index: int
    leaf: str
    leaf_count: int
    root: str
    path: List[str] = field(default_factory=list)


def check_leaf_index(index, size: int) -> int:
    """
    Validate a leaf index against the number of leaves.

    Negative indices are rejected rather than counted from the end.

    Raises:
        IndexOutOfRangeError: If index is not an int in [0, size)
    """
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < size:
        raise IndexOutOfRangeError(index, size)
    return index


def build_next_layer(layer: Sequence[str], combine: CombineFn) -> List[str]:
    """
    Combine consecutive pairs of a layer into the layer above it.

    Args:
        layer: Current layer, left to right
        combine: Two-input hash function

    Returns:
        The parent layer, ceil(len(layer) / 2) entries long
    """
    next_layer = []
    for i in range(0, len(layer), 2):
        if i + 1 < len(layer):
            next_layer.append(combine(layer[i], layer[i + 1]))
        else:
            # Odd node case
            next_layer.append(layer[i])
    return next_layer


def build_layers(leaves: Sequence[str], combine: CombineFn) -> List[List[str]]:
    """
    Build every layer of a merkle tree from its leaves.

    Returns the full tree structure, with leaves at index 0 and the root
    layer (a single entry) at the last index. The combine function is
    called exactly len(leaves) - 1 times.

    Args:
        leaves: Non-empty ordered sequence of leaf hashes
        combine: Two-input hash function

    Returns:
        List of tree layers, from leaves to root

    Raises:
        InvalidInputError: If leaves is empty
        HashError: Propagated from the combine function

    Examples:
        >>> build_layers(["a", "b", "c"], lambda x, y: x + y)
        [['a', 'b', 'c'], ['ab', 'c'], ['abc']]
    """
    if not leaves:
        raise InvalidInputError("Cannot build a merkle tree without leaves")

    tree = [list(leaves)]
    while len(tree[-1]) > 1:
        tree.append(build_next_layer(tree[-1], combine))
    return tree


def validate_tree_structure(tree: Sequence[Sequence[str]]) -> bool:
    """
    Validate that a tree has the correct structure for a binary merkle tree.

    Args:
        tree: List of tree layers from leaves to root

    Returns:
        True if every layer is half the size of the one below (rounded up)
        and the top layer holds exactly one node
    """
    if not tree:
        return False

    for i in range(1, len(tree)):
        expected_size = (len(tree[i - 1]) + 1) // 2
        if len(tree[i]) != expected_size:
            return False

    return len(tree[-1]) == 1


class MerkleTree:
    """
    Binary merkle tree over an ordered sequence of leaf hashes.

    The tree owns copies of its leaves and of every layer. It performs no
    locking: callers sharing one instance between threads must serialize
    access themselves.

    Examples:
        >>> tree = MerkleTree(["a", "b", "c", "d"], lambda x, y: f"({x}{y})")
        >>> tree.root()
        '((ab)(cd))'
        >>> tree.merkle_path(2)
        ['d', '(ab)']
    """

    def __init__(self, leaves: Sequence[str], combine: CombineFn):
        """
        Build the tree from leaf hashes.

        Args:
            leaves: Non-empty ordered sequence of leaf hashes; copied
            combine: Two-input hash function used for every inner node

        Raises:
            InvalidInputError: If leaves is empty
            HashError: Propagated from the combine function
        """
        self._combine = combine
        self._leaves = list(leaves)
        self._tree = build_layers(self._leaves, combine)
        logger.debug(
            f"Built merkle tree with {len(self._leaves)} leaves and {len(self._tree)} layers"
        )

    def __len__(self) -> int:
        return len(self._leaves)

    def __repr__(self) -> str:
        return f"MerkleTree(leaves={len(self._leaves)}, root={self.root()!r})"

    @property
    def leaves(self) -> List[str]:
        return list(self._leaves)

    @property
    def layers(self) -> List[List[str]]:
        return [list(layer) for layer in self._tree]

    @property
    def depth(self) -> int:
        """Number of layer transitions between the leaves and the root."""
        return len(self._tree) - 1

    def leaf(self, index: int) -> str:
        check_leaf_index(index, len(self._leaves))
        return self._leaves[index]

    def root(self) -> str:
        """Retrieve the merkle root of the tree."""
        return self._tree[-1][0]

    def merkle_path(self, index: int) -> List[str]:
        """
        Retrieve the merkle path proof for a given leaf index.

        Walks the layers below the root collecting the sibling of the
        current node at each one. A node carried up from an odd-length
        layer has no sibling at that layer and contributes nothing, so
        the path can be shorter than the tree depth.

        Args:
            index: Position of the leaf in the leaf sequence

        Returns:
            Sibling hashes, leaf-level sibling first

        Raises:
            IndexOutOfRangeError: If index is not in [0, len(leaves))
        """
        check_leaf_index(index, len(self._leaves))

        path = []
        idx = index
        for layer in self._tree[:-1]:
            sibling_index = idx + 1 if idx % 2 == 0 else idx - 1
            if sibling_index < len(layer):
                path.append(layer[sibling_index])
            idx //= 2
        return path

    def proof(self, index: int) -> MerkleProof:
        """Bundle the path for a leaf together with what a verifier needs."""
        path = self.merkle_path(index)
        return MerkleProof(
            index=index,
            leaf=self._leaves[index],
            leaf_count=len(self._leaves),
            root=self.root(),
            path=path,
        )

    def update_leaf(self, index: int, value: str) -> str:
        """
        Update a leaf and recompute the affected nodes up to the root.

        Only the ancestors of the leaf are rewritten. A parent with two
        children becomes combine(left, right); a parent whose left child
        has no right sibling is the carried child itself, matching what
        construction produces for the same leaves.

        If the combine function fails the leaf stays replaced and the
        layers above it are left stale until a later update succeeds.

        Args:
            index: Position of the leaf to replace
            value: New leaf hash

        Returns:
            The new root

        Raises:
            IndexOutOfRangeError: If index is not in [0, len(leaves))
            HashError: Propagated from the combine function
        """
        check_leaf_index(index, len(self._leaves))

        self._leaves[index] = value
        self._tree[0][index] = value

        idx = index
        for i in range(len(self._tree) - 1):
            layer = self._tree[i]
            parent_idx = idx // 2
            left = layer[parent_idx * 2]
            if parent_idx * 2 + 1 < len(layer):
                parent = self._combine(left, layer[parent_idx * 2 + 1])
            else:
                parent = left
            self._tree[i + 1][parent_idx] = parent
            idx = parent_idx

        logger.debug(f"Updated leaf {index}, new root {self.root()}")
        return self.root()


__all__ = [
    "CombineFn",
    "MerkleProof",
    "MerkleTree",
    "build_layers",
    "build_next_layer",
    "check_leaf_index",
    "validate_tree_structure",
]
