"""
Tree API Package

This package exposes merkle trees over HTTP. It includes:

- TreeService: in-memory, lock-protected store of named trees
- TreeAPIClient: HTTP client for a running API server
- rest_api: the FastAPI application (imported on demand)

Usage:
    from layered_merkle.api import TreeService

    service = TreeService(hasher="sha256")
    snapshot = service.create_tree(["1234", "2345"])
"""

from .client import TreeAPIClient, TreeAPIError
from .tree_service import TreeNotFoundError, TreeService, TreeSnapshot

__all__ = [
    'TreeAPIClient',
    'TreeAPIError',
    'TreeNotFoundError',
    'TreeService',
    'TreeSnapshot',
]
