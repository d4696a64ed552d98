"""
API Request Models

Pydantic models for API request validation. Digests are 0x-prefixed hex
and are length-checked here, before any core call.
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from core.merkle.proof import parse_digest
from core.schemas.errors import InvalidDigestError


LeafEncoding = Literal["hex", "utf8"]


def _check_digest(value: str) -> str:
    try:
        parse_digest(value)
    except InvalidDigestError as e:
        raise ValueError(e.message) from e
    return value.lower()


class ProofStepModel(BaseModel):
    """One proof step in JSON form."""

    sibling: str = Field(..., description="Sibling digest, 0x-prefixed hex")
    side: Literal["left", "right"] = Field(..., description="Side the sibling sits on")
    is_padding: bool = Field(default=False, description="Sibling is a padding duplicate")

    @field_validator("sibling")
    @classmethod
    def _sibling_is_digest(cls, v: str) -> str:
        return _check_digest(v)


class ProofModel(BaseModel):
    """Inclusion proof in JSON form."""

    leaf_index: int | None = Field(default=None, ge=0)
    leaf_count: int | None = Field(default=None, ge=1)
    steps: list[ProofStepModel] = Field(default_factory=list)


class BuildTreeRequest(BaseModel):
    """Request body for POST /merkle_tree."""

    leaves: list[str] = Field(
        ...,
        description="Ordered leaf values, hex (0x...) or UTF-8 text depending on encoding",
    )
    encoding: LeafEncoding = Field(
        default="hex",
        description="How leaf strings are turned into bytes",
    )


class ProveRequest(BaseModel):
    """Request body for POST /merkle_tree/{tree_id}/proof."""

    leaf_index: int = Field(..., ge=0, description="0-based position of the leaf")


class AddRootRequest(BaseModel):
    """Request body for POST /add_root."""

    root_id: int = Field(..., ge=0, description="Identifier to register the root under")
    root_hash: str = Field(..., description="Root digest, 0x-prefixed hex")

    @field_validator("root_hash")
    @classmethod
    def _root_is_digest(cls, v: str) -> str:
        return _check_digest(v)


class VerifyProofRequest(BaseModel):
    """
    Request body for POST /verify_proof.

    Either `root_id` (checked against the registry) or `root_hash`
    (a caller-supplied trusted root) must be given.
    """

    leaf: str = Field(..., description="Leaf value, encoded per `encoding`")
    encoding: LeafEncoding = Field(default="hex")
    proof: ProofModel
    root_id: int | None = Field(default=None, ge=0)
    root_hash: str | None = Field(default=None)

    @field_validator("root_hash")
    @classmethod
    def _root_is_digest(cls, v: str | None) -> str | None:
        return None if v is None else _check_digest(v)
