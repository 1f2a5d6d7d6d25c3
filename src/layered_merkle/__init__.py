"""
Layered Merkle

A binary merkle tree over an ordered list of leaf hashes with an injected
combine function. Provides root computation, inclusion paths and
single-leaf updates that only recompute the affected ancestors.

Usage:
    from layered_merkle import MerkleTree, sha256_combine

    tree = MerkleTree(["1234", "2345", "7545", "4564"], sha256_combine)
    path = tree.merkle_path(0)
    tree.update_leaf(0, "63453")
"""

from .merkle import (
    CombineFn,
    HashError,
    IndexOutOfRangeError,
    InvalidInputError,
    MerkleProof,
    MerkleTree,
    MerkleTreeError,
    compute_root_from_proof,
    verify_merkle_proof,
)
from .hashers import concat_combine, get_combine, sha256_combine

__version__ = "0.1.0"

__all__ = [
    "CombineFn",
    "HashError",
    "IndexOutOfRangeError",
    "InvalidInputError",
    "MerkleProof",
    "MerkleTree",
    "MerkleTreeError",
    "compute_root_from_proof",
    "verify_merkle_proof",
    "concat_combine",
    "get_combine",
    "sha256_combine",
]
