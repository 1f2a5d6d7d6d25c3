"""
Merkle Proof Verification

This module provides functions for checking inclusion paths produced by
MerkleTree.merkle_path against a known root, without access to the tree.

A node carried up from an odd-length layer has no sibling at that layer, so
the path skips it. The verifier therefore needs the leaf count to rebuild
the layer sizes and know at which levels a path element is consumed.
"""

from typing import List, Sequence

from .tree import CombineFn, check_leaf_index


def get_layer_sizes(leaf_count: int) -> List[int]:
    """
    Calculate the size of every layer of a tree with `leaf_count` leaves.

    Args:
        leaf_count: Number of leaves (at least 1)

    Returns:
        Layer sizes from the leaves up to the root layer (always 1)

    Examples:
        >>> get_layer_sizes(5)
        [5, 3, 2, 1]
    """
    if leaf_count < 1:
        raise ValueError(f"leaf_count must be positive, got {leaf_count}")

    sizes = [leaf_count]
    while sizes[-1] > 1:
        sizes.append((sizes[-1] + 1) // 2)
    return sizes


def get_proof_indices(index: int, leaf_count: int) -> List[int]:
    """
    Calculate the sibling indices for a merkle path.

    Levels where the node is carried up have no sibling and are skipped, so
    the result has the same length as the path for that leaf.

    Args:
        index: Index of the target leaf
        leaf_count: Number of leaves in the tree

    Returns:
        Sibling index within its layer, one entry per path element

    Examples:
        >>> get_proof_indices(4, 5)  # leaf 4 is carried twice
        [0]
    """
    check_leaf_index(index, leaf_count)

    indices = []
    current_index = index
    for size in get_layer_sizes(leaf_count)[:-1]:
        sibling_index = current_index ^ 1
        if sibling_index < size:
            indices.append(sibling_index)
        current_index //= 2
    return indices


def compute_root_from_proof(
    leaf: str, index: int, proof: Sequence[str], leaf_count: int, combine: CombineFn
) -> str:
    """
    Rebuild the merkle root from a leaf and its path.

    Args:
        leaf: Hash of the target leaf
        index: 0-based position of that leaf
        proof: Sibling hashes as returned by MerkleTree.merkle_path
        leaf_count: Number of leaves in the tree the proof came from
        combine: The hash function the tree was built with

    Returns:
        The reconstructed root

    Raises:
        IndexOutOfRangeError: If index is not in [0, leaf_count)
        ValueError: If the proof length does not match the tree shape
    """
    check_leaf_index(index, leaf_count)

    expected = len(get_proof_indices(index, leaf_count))
    if len(proof) != expected:
        raise ValueError(f"Proof has {len(proof)} steps, expected {expected}")

    current = leaf
    siblings = iter(proof)
    current_index = index
    for size in get_layer_sizes(leaf_count)[:-1]:
        if current_index % 2 == 0:
            if current_index + 1 < size:
                # Our node is on the left, sibling on the right
                current = combine(current, next(siblings))
        else:
            current = combine(next(siblings), current)
        current_index //= 2
    return current


def verify_merkle_proof(
    leaf: str,
    proof: Sequence[str],
    index: int,
    leaf_count: int,
    root: str,
    combine: CombineFn,
) -> bool:
    """
    Verify a merkle path against a known root.

    Args:
        leaf: The leaf value being proven
        proof: List of sibling hashes
        index: Index of the leaf in the tree
        leaf_count: Number of leaves in the tree
        root: Expected merkle root
        combine: The hash function the tree was built with

    Returns:
        True if the proof is valid; False for a root mismatch or a proof
        of the wrong length

    Raises:
        IndexOutOfRangeError: If index is not in [0, leaf_count)
        HashError: Propagated from the combine function
    """
    if len(proof) != len(get_proof_indices(index, leaf_count)):
        return False
    return compute_root_from_proof(leaf, index, proof, leaf_count, combine) == root


def batch_verify_proofs(
    leaves: Sequence[str],
    proofs: Sequence[Sequence[str]],
    indices: Sequence[int],
    leaf_count: int,
    root: str,
    combine: CombineFn,
) -> List[bool]:
    """
    Verify multiple merkle paths against the same root.

    Raises:
        ValueError: If leaves, proofs and indices differ in length
    """
    if not len(leaves) == len(proofs) == len(indices):
        raise ValueError(
            f"Got {len(leaves)} leaves, {len(proofs)} proofs and {len(indices)} indices"
        )

    results = []
    for leaf, proof, index in zip(leaves, proofs, indices):
        results.append(verify_merkle_proof(leaf, proof, index, leaf_count, root, combine))
    return results
