"""
Merkle Core - Proof Verification
Stateless inclusion-proof verification.

Verification needs only the claimed leaf value, the proof and a trusted
root. It never consults a MerkleTree (this module does not import one), so
a proof can be checked by a party that does not hold the data set.

This module provides:
- verify: recompute the root from a leaf and proof, compare to a trusted root
- compute_root_from_proof: the recomputation step on its own
- MerkleVerifier: class-based wrappers for the JSON and binary proof forms

Verification never raises. Malformed input (wrong digest lengths, unknown
side flags, non-bytes values, odd step shapes) yields False.
"""
from __future__ import annotations

import hmac
from collections.abc import Iterable
from typing import Any

from core.crypto.hashing import DEFAULT_HASHER, DIGEST_SIZE, Hasher
from core.merkle.proof import MerkleProof, ProofStep, Side, decode_proof
from core.schemas.errors import ProofFormatError


_BYTES_TYPES = (bytes, bytearray, memoryview)


def _normalize_steps(proof: Any) -> list[tuple[bytes, Side]] | None:
    """Turn a proof into (sibling, side) pairs, or None if malformed."""
    if isinstance(proof, MerkleProof):
        raw_steps: Iterable[Any] = proof.steps
    elif isinstance(proof, (list, tuple)):
        raw_steps = proof
    elif isinstance(proof, Iterable) and not isinstance(proof, (str, dict, *_BYTES_TYPES)):
        raw_steps = list(proof)
    else:
        return None

    steps: list[tuple[bytes, Side]] = []
    for raw in raw_steps:
        if isinstance(raw, ProofStep):
            sibling, side = raw.sibling, raw.side
        elif isinstance(raw, (list, tuple)) and len(raw) == 2:
            sibling, side = raw
        else:
            return None

        if not isinstance(sibling, _BYTES_TYPES) or len(sibling) != DIGEST_SIZE:
            return None
        if not isinstance(side, Side):
            if side not in ("left", "right"):
                return None
            side = Side(side)
        steps.append((bytes(sibling), side))
    return steps


def compute_root_from_proof(
    leaf_value: bytes,
    proof: MerkleProof | Iterable[tuple[bytes, Side]],
    hasher: Hasher | None = None,
) -> bytes | None:
    """
    Recompute the root implied by a leaf value and a proof.

    Algorithm:
    1. current = H(0x00 || leaf_value)
    2. For each (sibling, side), in order:
       - side RIGHT: current = H(0x01 || current || sibling)
       - side LEFT:  current = H(0x01 || sibling || current)

    Args:
        leaf_value: Raw leaf bytes being proven
        proof: MerkleProof or iterable of (sibling, side) pairs
        hasher: Hash function (default SHA-256)

    Returns:
        The recomputed root, or None if the input is malformed
    """
    hasher = hasher or DEFAULT_HASHER
    if not isinstance(leaf_value, _BYTES_TYPES):
        return None
    steps = _normalize_steps(proof)
    if steps is None:
        return None

    current = hasher.hash_leaf(bytes(leaf_value))
    for sibling, side in steps:
        if side is Side.RIGHT:
            current = hasher.hash_node(current, sibling)
        else:
            current = hasher.hash_node(sibling, current)
    return current


def verify(
    leaf_value: bytes,
    proof: MerkleProof | Iterable[tuple[bytes, Side]],
    trusted_root: bytes,
    hasher: Hasher | None = None,
) -> bool:
    """
    Verify that `leaf_value` is included under `trusted_root`.

    Args:
        leaf_value: Raw leaf bytes being proven
        proof: MerkleProof or iterable of (sibling, side) pairs, bottom-up
        trusted_root: Root digest obtained from a trusted source
        hasher: Hash function (default SHA-256)

    Returns:
        True only if the recomputed root equals trusted_root byte for byte
    """
    if not isinstance(trusted_root, _BYTES_TYPES) or len(trusted_root) != DIGEST_SIZE:
        return False
    computed = compute_root_from_proof(leaf_value, proof, hasher=hasher)
    if computed is None:
        return False
    return hmac.compare_digest(computed, bytes(trusted_root))


class MerkleVerifier:
    """
    Convenience wrappers around `verify` for serialized proofs.

    Example:
        >>> proof = tree.prove(1)
        >>> MerkleVerifier.verify(b"b", proof, tree.root)
        True
    """

    @staticmethod
    def verify(
        leaf_value: bytes,
        proof: MerkleProof | Iterable[tuple[bytes, Side]],
        trusted_root: bytes,
        hasher: Hasher | None = None,
    ) -> bool:
        return verify(leaf_value, proof, trusted_root, hasher=hasher)

    @staticmethod
    def verify_encoded(
        leaf_value: bytes,
        encoded_proof: bytes,
        trusted_root: bytes,
        hasher: Hasher | None = None,
    ) -> bool:
        """
        Verify a proof in its binary wire form.

        A proof that cannot be decoded is treated as invalid.
        """
        if not isinstance(encoded_proof, _BYTES_TYPES):
            return False
        try:
            proof = decode_proof(bytes(encoded_proof))
        except ProofFormatError:
            return False
        return verify(leaf_value, proof, trusted_root, hasher=hasher)

    @staticmethod
    def verify_dict(
        leaf_value: bytes,
        proof_data: dict[str, Any],
        trusted_root: bytes,
        hasher: Hasher | None = None,
    ) -> bool:
        """
        Verify a proof in its JSON form.

        A proof that cannot be parsed is treated as invalid.
        """
        try:
            proof = MerkleProof.from_dict(proof_data)
        except ProofFormatError:
            return False
        return verify(leaf_value, proof, trusted_root, hasher=hasher)


__all__ = [
    "verify",
    "compute_root_from_proof",
    "MerkleVerifier",
]
