"""
Merkle Core - Error Taxonomy
File: errors.py

Purpose: Standard error taxonomy for tree construction, proof handling
and the registry/relay glue. Defines both a Pydantic model for structured
error communication and Python exceptions for control flow.

Proof verification never raises: an invalid proof is simply `False`.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Tree construction / proof generation
    EMPTY_INPUT = "EMPTY_INPUT"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"

    # Encoding
    INVALID_DIGEST = "INVALID_DIGEST"
    PROOF_FORMAT_ERROR = "PROOF_FORMAT_ERROR"

    # Registry & relay
    UNKNOWN_ROOT = "UNKNOWN_ROOT"
    VERIFICATION_FAILED = "VERIFICATION_FAILED"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class MerkleError(BaseModel):
    """
    Structured error model, used to pass errors across a transport
    boundary without exceptions.
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.EMPTY_INPUT],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )

    def to_exception(self) -> "MerkleException":
        """Convert this error model to a raised exception."""
        return MerkleException(
            code=self.code,
            message=self.message,
            details=self.details,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class MerkleException(Exception):
    """
    Base exception for all Merkle errors.

    Carries structured error information and can be converted to a
    MerkleError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "MERKLE_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_error_model(self) -> MerkleError:
        """Convert this exception to a MerkleError model."""
        return MerkleError(
            code=self.code,
            message=self.message,
            details=self.details,
        )

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class EmptyInputError(MerkleException, ValueError):
    """Raised when a tree is built from zero leaves."""

    def __init__(self, message: str = "Cannot build a Merkle tree from an empty leaf list") -> None:
        super().__init__(message=message, code=ErrorCodes.EMPTY_INPUT)


class IndexOutOfRangeError(MerkleException, IndexError):
    """Raised when a proof is requested for a nonexistent leaf position."""

    def __init__(self, leaf_index: int, leaf_count: int) -> None:
        super().__init__(
            message=f"Leaf index {leaf_index} out of range for {leaf_count} leaves",
            code=ErrorCodes.INDEX_OUT_OF_RANGE,
            details={"leaf_index": leaf_index, "leaf_count": leaf_count},
        )
        self.leaf_index = leaf_index
        self.leaf_count = leaf_count


class InvalidDigestError(MerkleException, ValueError):
    """Raised when a digest has the wrong length or cannot be decoded."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_DIGEST,
            details=full_details,
        )


class ProofFormatError(MerkleException, ValueError):
    """Raised when a serialized proof is malformed."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.PROOF_FORMAT_ERROR,
            details=details,
        )


class UnknownRootError(MerkleException, KeyError):
    """Raised when a registry has no root under the requested id."""

    def __init__(self, root_id: int, registry: str | None = None) -> None:
        details: dict[str, Any] = {"root_id": root_id}
        if registry:
            details["registry"] = registry
        where = f" on {registry}" if registry else ""
        super().__init__(
            message=f"No root registered under id {root_id}{where}",
            code=ErrorCodes.UNKNOWN_ROOT,
            details=details,
        )
        self.root_id = root_id


__all__ = [
    "ErrorCodes",
    "MerkleError",
    "MerkleException",
    "EmptyInputError",
    "IndexOutOfRangeError",
    "InvalidDigestError",
    "ProofFormatError",
    "UnknownRootError",
]
