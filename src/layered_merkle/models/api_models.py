"""
API Models

This module defines Pydantic models for API request and response validation.
These models ensure proper data structure and type validation for the tree API.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ErrorResponse(BaseModel):
    """
    Response model for API errors.

    Attributes:
        error: Error message
        code: Error code (string identifier)
        details: Additional error details
    """
    error: str = Field(..., description="Error message")
    code: str = Field(..., description="Error code")
    details: Optional[dict] = Field(default=None, description="Additional error details")


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""
    status: str = Field(..., description="Service status")
    trees: int = Field(..., description="Number of trees held by the service")
    hasher: str = Field(..., description="Combine function in use")
    version: str = Field(..., description="Service version")
    timestamp: Optional[str] = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        description="Response timestamp",
    )


def _check_hash_value(v: str) -> str:
    if not v or not v.strip():
        raise ValueError("Hash values cannot be empty")
    return v


class CreateTreeRequest(BaseModel):
    """
    Request model for building a tree.

    Attributes:
        leaves: Ordered leaf hashes (decimal or 0x-hex field elements)
        tree_id: Optional identifier; one is generated when omitted
    """
    leaves: List[str] = Field(..., description="Ordered leaf hashes")
    tree_id: Optional[str] = Field(default=None, description="Tree identifier")

    @field_validator("leaves")
    @classmethod
    def validate_leaves(cls, v):
        """Validate each leaf is a non-empty string."""
        for leaf in v:
            _check_hash_value(leaf)
        return v

    @field_validator("tree_id")
    @classmethod
    def validate_tree_id(cls, v):
        """Validate tree_id is usable as a URL path segment."""
        if v is not None and (not v or "/" in v):
            raise ValueError("tree_id must be a non-empty string without '/'")
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "leaves": ["1234", "2345", "7545", "4564"],
                "tree_id": "example",
            }
        }
    )


class UpdateLeafRequest(BaseModel):
    """Request model for replacing a single leaf."""
    value: str = Field(..., description="New leaf hash")

    @field_validator("value")
    @classmethod
    def validate_value(cls, v):
        return _check_hash_value(v)


class VerifyRequest(BaseModel):
    """
    Request model for checking an inclusion path against a root.

    Attributes:
        leaf: Leaf hash being proven
        index: Position of the leaf
        path: Sibling hashes, leaf level first
        leaf_count: Number of leaves in the tree the path came from
        root: Expected root
    """
    leaf: str = Field(..., description="Leaf hash being proven")
    index: int = Field(..., ge=0, description="Leaf index")
    path: List[str] = Field(default_factory=list, description="Sibling hashes")
    leaf_count: int = Field(..., ge=1, description="Number of leaves in the tree")
    root: str = Field(..., description="Expected merkle root")


class TreeResponse(BaseModel):
    """
    Response model describing a tree.

    Attributes:
        tree_id: Tree identifier
        root: Current merkle root
        leaf_count: Number of leaves
        depth: Number of layer transitions from leaves to root
        layers: Every layer, leaves first
    """
    tree_id: str = Field(..., description="Tree identifier")
    root: str = Field(..., description="Merkle root")
    leaf_count: int = Field(..., description="Number of leaves")
    depth: int = Field(..., description="Tree depth")
    layers: List[List[str]] = Field(default_factory=list, description="Tree layers, leaves first")


class ProofResponse(BaseModel):
    """Response model for an inclusion proof."""
    tree_id: str = Field(..., description="Tree identifier")
    index: int = Field(..., description="Leaf index")
    leaf: str = Field(..., description="Leaf hash")
    leaf_count: int = Field(..., description="Number of leaves")
    root: str = Field(..., description="Merkle root")
    path: List[str] = Field(..., description="Sibling hashes, leaf level first")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "tree_id": "example",
                "index": 2,
                "leaf": "7545",
                "leaf_count": 3,
                "root": "0x5d7c...",
                "path": [],
            }
        }
    )


class VerifyResponse(BaseModel):
    """Response model for proof verification."""
    valid: bool = Field(..., description="Whether the path reproduces the root")
    root: str = Field(..., description="Root the path was checked against")
