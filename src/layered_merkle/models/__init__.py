"""
API Models Package

This package contains request and response models for the tree API.

Usage:
    from layered_merkle.models import CreateTreeRequest, TreeResponse

    request = CreateTreeRequest(leaves=["1234", "2345"])
"""

from .api_models import (
    CreateTreeRequest,
    ErrorResponse,
    HealthResponse,
    ProofResponse,
    TreeResponse,
    UpdateLeafRequest,
    VerifyRequest,
    VerifyResponse,
)

__all__ = [
    'CreateTreeRequest',
    'ErrorResponse',
    'HealthResponse',
    'ProofResponse',
    'TreeResponse',
    'UpdateLeafRequest',
    'VerifyRequest',
    'VerifyResponse',
]
