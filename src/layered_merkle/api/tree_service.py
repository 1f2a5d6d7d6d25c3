"""
Tree Service Module

This module provides a service layer that keeps named merkle trees in
memory and serializes every operation on them, since MerkleTree itself has
no internal locking. Trees never leave the lock; callers get TreeSnapshot
copies taken while it is held.
"""

import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ..hashers import get_combine
from ..merkle import CombineFn, MerkleProof, MerkleTree, verify_merkle_proof

logger = logging.getLogger(__name__)


class TreeNotFoundError(KeyError):
    """Raised when a tree id is not known to the service."""

    def __init__(self, tree_id: str):
        self.tree_id = tree_id
        super().__init__(tree_id)

    def __str__(self) -> str:
        return f"Tree {self.tree_id!r} not found"


@dataclass
class TreeSnapshot:
    """Consistent copy of a stored tree."""
    tree_id: str
    root: str
    leaf_count: int
    depth: int
    layers: List[List[str]] = field(default_factory=list)

    @property
    def leaves(self) -> List[str]:
        return self.layers[0]

    @classmethod
    def of(cls, tree_id: str, tree: MerkleTree) -> "TreeSnapshot":
        return cls(
            tree_id=tree_id,
            root=tree.root(),
            leaf_count=len(tree),
            depth=tree.depth,
            layers=tree.layers,
        )


class TreeService:
    """Service holding merkle trees by id and answering root, proof and update calls."""

    def __init__(self, hasher: str = "sha256", combine: Optional[CombineFn] = None):
        """
        Initialize the tree service.

        Args:
            hasher: Name of the registered combine function to use
            combine: Explicit combine function; overrides `hasher` when given
        """
        self.hasher = hasher
        self.combine = combine if combine is not None else get_combine(hasher)
        self._trees: Dict[str, MerkleTree] = {}
        self._lock = threading.Lock()

    def _get(self, tree_id: str) -> MerkleTree:
        try:
            return self._trees[tree_id]
        except KeyError:
            raise TreeNotFoundError(tree_id) from None

    def create_tree(self, leaves: Sequence[str], tree_id: Optional[str] = None) -> TreeSnapshot:
        """
        Build a tree and store it.

        An existing tree with the same id is replaced.

        Returns:
            Snapshot of the stored tree, including the id it is stored under

        Raises:
            InvalidInputError: If leaves is empty
            HashError: Propagated from the combine function
        """
        tree_id = tree_id or uuid.uuid4().hex
        tree = MerkleTree(leaves, self.combine)
        with self._lock:
            self._trees[tree_id] = tree
            snapshot = TreeSnapshot.of(tree_id, tree)
        logger.info(f"Created tree {tree_id} with {snapshot.leaf_count} leaves, root {snapshot.root}")
        return snapshot

    def describe(self, tree_id: str) -> TreeSnapshot:
        with self._lock:
            return TreeSnapshot.of(tree_id, self._get(tree_id))

    def list_trees(self) -> List[str]:
        with self._lock:
            return sorted(self._trees)

    def delete_tree(self, tree_id: str) -> None:
        with self._lock:
            self._get(tree_id)
            del self._trees[tree_id]
        logger.info(f"Deleted tree {tree_id}")

    def get_root(self, tree_id: str) -> str:
        with self._lock:
            return self._get(tree_id).root()

    def get_proof(self, tree_id: str, index: int) -> MerkleProof:
        with self._lock:
            return self._get(tree_id).proof(index)

    def update_leaf(self, tree_id: str, index: int, value: str) -> TreeSnapshot:
        """
        Replace one leaf of a stored tree.

        Returns:
            Snapshot of the tree right after this update

        Raises:
            TreeNotFoundError: If tree_id is unknown
            IndexOutOfRangeError: If index is outside the tree
            HashError: Propagated from the combine function
        """
        with self._lock:
            tree = self._get(tree_id)
            tree.update_leaf(index, value)
            snapshot = TreeSnapshot.of(tree_id, tree)
        logger.info(f"Updated leaf {index} of tree {tree_id}, new root {snapshot.root}")
        return snapshot

    def verify(self, leaf: str, index: int, path: Sequence[str], leaf_count: int, root: str) -> bool:
        """Check an inclusion path with this service's combine function."""
        return verify_merkle_proof(leaf, path, index, leaf_count, root, self.combine)
