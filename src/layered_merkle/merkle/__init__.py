"""
Merkle Tree Operations

This package provides the layered binary merkle tree and the functions
needed to verify its inclusion paths.

The module is organized into three components:
- tree: Tree construction, path extraction and incremental leaf updates
- proof: Path verification given only the leaf count and the root
- errors: Exception types shared by both
"""

from .errors import (
    HashError,
    IndexOutOfRangeError,
    InvalidInputError,
    MerkleTreeError,
)

from .tree import (
    CombineFn,
    MerkleProof,
    MerkleTree,
    build_layers,
    build_next_layer,
    check_leaf_index,
    validate_tree_structure,
)

from .proof import (
    batch_verify_proofs,
    compute_root_from_proof,
    get_layer_sizes,
    get_proof_indices,
    verify_merkle_proof,
)

__all__ = [
    # Errors
    "HashError",
    "IndexOutOfRangeError",
    "InvalidInputError",
    "MerkleTreeError",
    # Tree
    "CombineFn",
    "MerkleProof",
    "MerkleTree",
    "build_layers",
    "build_next_layer",
    "check_leaf_index",
    "validate_tree_structure",
    # Proof functions
    "batch_verify_proofs",
    "compute_root_from_proof",
    "get_layer_sizes",
    "get_proof_indices",
    "verify_merkle_proof",
]
