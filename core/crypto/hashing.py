"""
Merkle Core - Hashing Utilities
Digest function and domain-separated leaf/node hashing.

This module provides:
- SHA-256 hashing for raw bytes (the default hash function)
- A Hasher value selecting any supported 256-bit hashlib algorithm
- Domain-separated leaf and internal-node hashing
- Hex encoding/decoding with 0x prefix

Domain Separation Rules (Hard Contracts):
1. Leaf hashing:  leaf = H(LEAF_TAG || value)         LEAF_TAG = 0x00
2. Node hashing:  node = H(NODE_TAG || left || right) NODE_TAG = 0x01

The tags keep an internal node digest from ever being accepted as the digest
of a leaf whose value happens to be `left || right`.
"""
from __future__ import annotations

import hashlib
from dataclasses import dataclass


DIGEST_SIZE: int = 32

LEAF_TAG: bytes = b"\x00"
NODE_TAG: bytes = b"\x01"

# hashlib algorithms with a 32-byte digest
SUPPORTED_ALGORITHMS: tuple[str, ...] = ("sha256", "sha3_256", "blake2s")
DEFAULT_ALGORITHM = "sha256"


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


@dataclass(frozen=True)
class Hasher:
    """
    A pure `bytes -> digest` function with leaf/node domain separation.

    The tree builder and the proof verifier must use the same Hasher;
    a proof produced under one algorithm never verifies under another.

    Attributes:
        algorithm: hashlib algorithm name, one of SUPPORTED_ALGORITHMS
    """
    algorithm: str = DEFAULT_ALGORITHM

    def __post_init__(self) -> None:
        if self.algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(
                f"Unsupported hash algorithm {self.algorithm!r}, "
                f"expected one of {', '.join(SUPPORTED_ALGORITHMS)}"
            )

    @property
    def digest_size(self) -> int:
        return DIGEST_SIZE

    def hash(self, data: bytes) -> bytes:
        """Hash raw bytes with no domain tag."""
        return hashlib.new(self.algorithm, data).digest()

    def hash_leaf(self, value: bytes) -> bytes:
        """Leaf digest: H(LEAF_TAG || value)."""
        return self.hash(LEAF_TAG + value)

    def hash_node(self, left: bytes, right: bytes) -> bytes:
        """Internal node digest: H(NODE_TAG || left || right)."""
        return self.hash(NODE_TAG + left + right)


DEFAULT_HASHER = Hasher()


def hash_leaf(value: bytes) -> bytes:
    """
    Hash a leaf value with the default hasher.

    Args:
        value: Raw leaf bytes (never interpreted)

    Returns:
        32-byte leaf digest
    """
    return DEFAULT_HASHER.hash_leaf(value)


def hash_node(left: bytes, right: bytes) -> bytes:
    """
    Hash an ordered pair of child digests with the default hasher.

    Args:
        left: Left child digest
        right: Right child digest

    Returns:
        32-byte parent digest
    """
    return DEFAULT_HASHER.hash_node(left, right)


def get_hasher(algorithm: str | None = None) -> Hasher:
    """Return the Hasher for `algorithm`, or the default one."""
    if algorithm is None or algorithm == DEFAULT_ALGORITHM:
        return DEFAULT_HASHER
    return Hasher(algorithm=algorithm)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Args:
        hex_string: Hex string with 0x prefix

    Returns:
        Decoded bytes

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


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
