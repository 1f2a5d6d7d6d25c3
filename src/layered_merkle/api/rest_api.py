"""
REST API for Layered Merkle

This module provides a FastAPI-based REST API for building merkle trees,
fetching roots and inclusion proofs, and updating leaves, with full OpenAPI
documentation.
"""

import logging
import traceback

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import get_settings
from ..merkle import HashError, IndexOutOfRangeError, InvalidInputError
from ..models.api_models import (
    CreateTreeRequest,
    ErrorResponse,
    HealthResponse,
    ProofResponse,
    TreeResponse,
    UpdateLeafRequest,
    VerifyRequest,
    VerifyResponse,
)
from .tree_service import TreeNotFoundError, TreeService, TreeSnapshot

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Layered Merkle API",
    description="""
    Build binary merkle trees over ordered leaf hashes and serve inclusion proofs.

    ## Features
    - **Trees**: Build a tree from leaves and keep it in memory under an id
    - **Proofs**: Sibling paths for any leaf, verifiable with only the root and leaf count
    - **Updates**: Replace a leaf; only its ancestors are recomputed

    ## Odd layers
    When a layer has an odd number of nodes the last one is carried up
    unchanged, so paths through carried nodes are shorter than the tree depth.
    """,
    version=__version__,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global tree service instance
tree_service = None


def get_tree_service() -> TreeService:
    """Dependency to get the tree service instance."""
    global tree_service
    if tree_service is None:
        tree_service = TreeService(hasher=get_settings().hasher)
    return tree_service


def _error(status_code: int, error: str, code: str, details: dict) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, code=code, details=details).model_dump(),
    )


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request, exc: InvalidInputError):
    """Handle empty leaf sequences."""
    logger.error(f"Invalid input: {exc}")
    return _error(400, str(exc), "INVALID_INPUT", {"error_type": "InvalidInputError"})


@app.exception_handler(IndexOutOfRangeError)
async def index_error_handler(request, exc: IndexOutOfRangeError):
    """Handle leaf indices outside the tree."""
    logger.error(f"Index error: {exc}")
    return _error(
        404,
        str(exc),
        "INDEX_OUT_OF_RANGE",
        {"error_type": "IndexOutOfRangeError", "index": exc.index, "size": exc.size},
    )


@app.exception_handler(TreeNotFoundError)
async def tree_not_found_handler(request, exc: TreeNotFoundError):
    """Handle unknown tree ids."""
    logger.error(f"Tree lookup failed: {exc}")
    return _error(
        404, str(exc), "TREE_NOT_FOUND", {"error_type": "TreeNotFoundError", "tree_id": exc.tree_id}
    )


@app.exception_handler(HashError)
async def hash_error_handler(request, exc: HashError):
    """Handle combine function failures."""
    logger.error(f"Hash error: {exc}")
    return _error(
        502,
        str(exc),
        "HASH_ERROR",
        {"error_type": "HashError", "left": exc.left, "right": exc.right},
    )


@app.exception_handler(ValueError)
async def value_error_handler(request, exc: ValueError):
    """Handle validation errors."""
    logger.error(f"Validation error: {exc}")
    return _error(400, str(exc), "VALIDATION_ERROR", {"error_type": "ValueError"})


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle unexpected errors."""
    logger.error(f"Unexpected error: {exc}\n{traceback.format_exc()}")
    return _error(500, "Internal server error", "INTERNAL_ERROR", {"error_type": type(exc).__name__})


def _tree_response(snapshot: TreeSnapshot) -> TreeResponse:
    return TreeResponse(
        tree_id=snapshot.tree_id,
        root=snapshot.root,
        leaf_count=snapshot.leaf_count,
        depth=snapshot.depth,
        layers=snapshot.layers,
    )


@app.get("/", response_model=dict)
async def root():
    """API root endpoint with basic information."""
    return {
        "name": "Layered Merkle API",
        "version": __version__,
        "description": "Build merkle trees and generate inclusion proofs",
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/health", response_model=HealthResponse)
async def health_check(service: TreeService = Depends(get_tree_service)):
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        trees=len(service.list_trees()),
        hasher=service.hasher,
        version=__version__,
    )


@app.post("/trees", response_model=TreeResponse, status_code=201)
def create_tree(request: CreateTreeRequest, service: TreeService = Depends(get_tree_service)):
    """
    Build a tree from the given leaves and store it.

    Reusing an existing tree_id replaces that tree.
    """
    return _tree_response(service.create_tree(request.leaves, request.tree_id))


@app.get("/trees", response_model=list)
def list_trees(service: TreeService = Depends(get_tree_service)):
    """List the ids of all stored trees."""
    return service.list_trees()


@app.get("/trees/{tree_id}", response_model=TreeResponse)
def get_tree(tree_id: str, service: TreeService = Depends(get_tree_service)):
    """Return the root and every layer of a stored tree."""
    return _tree_response(service.describe(tree_id))


@app.get("/trees/{tree_id}/proofs/{index}", response_model=ProofResponse)
def get_proof(tree_id: str, index: int, service: TreeService = Depends(get_tree_service)):
    """
    Generate the inclusion path for one leaf.

    The path lists sibling hashes from the leaf level upwards. Verifying it
    requires the leaf count as well as the root, returned alongside.
    """
    proof = service.get_proof(tree_id, index)
    return ProofResponse(
        tree_id=tree_id,
        index=proof.index,
        leaf=proof.leaf,
        leaf_count=proof.leaf_count,
        root=proof.root,
        path=proof.path,
    )


@app.put("/trees/{tree_id}/leaves/{index}", response_model=TreeResponse)
def update_leaf(
    tree_id: str,
    index: int,
    request: UpdateLeafRequest,
    service: TreeService = Depends(get_tree_service),
):
    """Replace one leaf and return the recomputed tree."""
    return _tree_response(service.update_leaf(tree_id, index, request.value))


@app.delete("/trees/{tree_id}", status_code=204)
def delete_tree(tree_id: str, service: TreeService = Depends(get_tree_service)):
    """Drop a stored tree."""
    service.delete_tree(tree_id)


@app.post("/verify", response_model=VerifyResponse)
def verify_proof(request: VerifyRequest, service: TreeService = Depends(get_tree_service)):
    """Check an inclusion path against a root without a stored tree."""
    valid = service.verify(request.leaf, request.index, request.path, request.leaf_count, request.root)
    return VerifyResponse(valid=valid, root=request.root)


def run_server(host: str = "127.0.0.1", port: int = 8000, dev: bool = False):
    """
    Run the API server.

    Args:
        host: Host to bind to
        port: Port to bind to
        dev: Enable development mode with auto-reload
    """
    logger.info(f"Starting Layered Merkle API server on {host}:{port}")
    uvicorn.run(
        "layered_merkle.api.rest_api:app",
        host=host,
        port=port,
        reload=dev,
        log_level="info",
    )


if __name__ == "__main__":
    settings = get_settings()
    run_server(settings.api_host, settings.api_port, dev=True)
