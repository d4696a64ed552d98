"""
API Response Models

Pydantic models for API response serialization.
"""

from typing import Any

from pydantic import BaseModel, Field

from api.models.requests import ProofModel


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "merkle-proof-api"
    version: str = "v1"


class TreeResponse(BaseModel):
    """Response for POST /merkle_tree and GET /merkle_tree/{tree_id}."""

    ok: bool = True
    tree_id: str = Field(..., description="Handle for later proof requests")
    root: str = Field(..., description="Root digest, 0x-prefixed hex")
    leaf_count: int
    height: int = Field(..., description="Proof length for every leaf")
    padded_levels: list[int] = Field(
        default_factory=list,
        description="Levels padded by duplicating their last digest",
    )


class ProofResponse(BaseModel):
    """Response for POST /merkle_tree/{tree_id}/proof."""

    ok: bool = True
    tree_id: str
    root: str
    leaf_digest: str = Field(..., description="Leaf digest H(0x00 || leaf)")
    proof: ProofModel


class RootResponse(BaseModel):
    """Response for POST /add_root and GET /roots/{root_id}."""

    ok: bool = True
    registry: str
    root_id: int
    root_hash: str


class VerifyResponse(BaseModel):
    """Response for POST /verify_proof."""

    ok: bool = True
    verified: bool = Field(..., description="Whether the proof recomputes the trusted root")
    root_id: int | None = None
    root_hash: str = Field(..., description="Trusted root the proof was checked against")
    proof_length: int = 0


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail = Field(..., description="Error details")
