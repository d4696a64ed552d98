"""
Merkle Core - Schemas
File: __init__.py

Purpose: Export the error taxonomy shared by the core and its glue layers.
"""

from .errors import (
    ErrorCodes,
    MerkleError,
    MerkleException,
    EmptyInputError,
    IndexOutOfRangeError,
    InvalidDigestError,
    ProofFormatError,
    UnknownRootError,
)

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
