"""
Core cryptographic utilities.

Hashing with leaf/node domain separation for Merkle commitments.
"""
from .hashing import (
    DIGEST_SIZE,
    LEAF_TAG,
    NODE_TAG,
    SUPPORTED_ALGORITHMS,
    DEFAULT_ALGORITHM,
    DEFAULT_HASHER,
    Hasher,
    sha256,
    hash_leaf,
    hash_node,
    get_hasher,
    to_hex,
    from_hex,
)

__all__ = [
    "DIGEST_SIZE",
    "LEAF_TAG",
    "NODE_TAG",
    "SUPPORTED_ALGORITHMS",
    "DEFAULT_ALGORITHM",
    "DEFAULT_HASHER",
    "Hasher",
    "sha256",
    "hash_leaf",
    "hash_node",
    "get_hasher",
    "to_hex",
    "from_hex",
]
