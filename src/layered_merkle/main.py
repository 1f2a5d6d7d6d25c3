"""
Layered Merkle - Main proof generation module

This module contains the functions shared by the CLI and API interfaces for
loading leaf sequences and generating inclusion proofs with a named hasher.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from .hashers import get_combine
from .merkle import MerkleTree

logger = logging.getLogger(__name__)


@dataclass
class ProofResult:
    """Container for proof generation results."""
    proof: List[str]
    root: str
    metadata: Dict[str, Any]


def load_leaves(leaves_file: str) -> List[str]:
    """
    Load a leaf sequence from a JSON file.

    The file holds either a list of leaves or an object with a "leaves"
    list. Numbers are accepted and converted to their decimal string form.

    Args:
        leaves_file: Path to the JSON file

    Returns:
        List of leaf strings in file order

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the JSON does not contain a list of leaves
    """
    with open(leaves_file, "r") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("leaves")
    if not isinstance(data, list):
        raise ValueError(f"{leaves_file} must contain a list of leaves or an object with a 'leaves' list")

    leaves = []
    for i, item in enumerate(data):
        if isinstance(item, bool) or not isinstance(item, (str, int)):
            raise ValueError(f"Leaf {i} in {leaves_file} must be a string or integer, got {item!r}")
        leaves.append(str(item))

    logger.info(f"Loaded {len(leaves)} leaves from {leaves_file}")
    return leaves


def build_tree(leaves: Sequence[str], hasher: str = "sha256") -> MerkleTree:
    """Build a MerkleTree with the combine function registered as `hasher`."""
    return MerkleTree(leaves, get_combine(hasher))


def generate_proof(leaves: Sequence[str], index: int, hasher: str = "sha256") -> ProofResult:
    """Generate a Merkle proof for the leaf at `index`."""
    tree = build_tree(leaves, hasher)
    proof = tree.proof(index)

    metadata = {
        "index": index,
        "leaf": proof.leaf,
        "leaf_count": proof.leaf_count,
        "depth": tree.depth,
        "proof_length": len(proof.path),
        "hasher": hasher,
    }
    return ProofResult(proof.path, proof.root, metadata)
