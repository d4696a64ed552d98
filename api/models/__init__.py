"""API request and response models."""

from api.models.requests import (
    ProofStepModel,
    ProofModel,
    BuildTreeRequest,
    ProveRequest,
    AddRootRequest,
    VerifyProofRequest,
)
from api.models.responses import (
    HealthResponse,
    TreeResponse,
    ProofResponse,
    RootResponse,
    VerifyResponse,
    ErrorDetail,
    ErrorResponse,
)

__all__ = [
    "ProofStepModel",
    "ProofModel",
    "BuildTreeRequest",
    "ProveRequest",
    "AddRootRequest",
    "VerifyProofRequest",
    "HealthResponse",
    "TreeResponse",
    "ProofResponse",
    "RootResponse",
    "VerifyResponse",
    "ErrorDetail",
    "ErrorResponse",
]
