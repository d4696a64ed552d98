"""
Merkle Core - Merkle Tree and Inclusion Proofs
Deterministic Merkle tree construction + proof generation/verification.

This module provides:
- MerkleTree: static tree built once from ordered raw leaf values
- build / root / prove: the tree call contract as plain functions
- verify: stateless proof verification against a trusted root
- MerkleProof, ProofStep, Side: tree-independent proof values
- encode_proof / decode_proof: 33-byte-per-step binary wire form

Canonical Commitment Rules:
1. Leaf hashing: H(0x00 || value)
2. Parent hashing: H(0x01 || left || right)
3. Padding: Duplicate last node if odd number at any level
4. Empty tree: rejected with EmptyInputError
5. Single leaf: root = leaf digest, empty proof

Usage:
    from core.merkle import build, prove, verify

    tree = build([b"alpha", b"beta", b"gamma"])
    proof = prove(tree, 2)
    assert verify(b"gamma", proof, tree.root)
"""
from .proof import (
    STEP_SIZE,
    Side,
    ProofStep,
    MerkleProof,
    parse_digest,
    encode_proof,
    decode_proof,
)

from .merkle_tree import (
    MerkleTree,
    build,
    root,
    prove,
    compute_tree_height,
)

from .merkle_proofs import (
    verify,
    compute_root_from_proof,
    MerkleVerifier,
)


__all__ = [
    # Proof values
    "STEP_SIZE",
    "Side",
    "ProofStep",
    "MerkleProof",
    "parse_digest",
    "encode_proof",
    "decode_proof",
    # Tree
    "MerkleTree",
    "build",
    "root",
    "prove",
    "compute_tree_height",
    # Verification
    "verify",
    "compute_root_from_proof",
    "MerkleVerifier",
]
