"""
CLI Verify Command

Check an inclusion proof file against a trusted root.

Usage:
    ccmp verify --leaf 0x... --proof proof.json --root 0x... [--json]
    ccmp verify --leaf-text "hello" --proof proof.bin --root 0x...

A proof file that cannot be parsed counts as a failed verification.
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from core.crypto.hashing import from_hex, get_hasher, to_hex
from core.merkle.merkle_proofs import MerkleVerifier
from core.merkle.proof import parse_digest
from core.schemas.errors import InvalidDigestError


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of proof verification for CLI output."""
    proof_path: str = ""
    root: str = ""
    leaf_hash: str = ""
    verified: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def read_leaf(args: Namespace) -> bytes:
    if args.leaf_text is not None:
        return args.leaf_text.encode("utf-8")
    return from_hex(args.leaf)


def check_proof_file(path: Path, leaf: bytes, root: bytes, hasher) -> bool:
    """Verify a JSON or binary (.bin) proof file."""
    if path.suffix.lower() == ".bin":
        return MerkleVerifier.verify_encoded(leaf, path.read_bytes(), root, hasher=hasher)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning(f"Proof file {path} is not valid JSON")
        return False
    return MerkleVerifier.verify_dict(leaf, data, root, hasher=hasher)


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Returns:
        Exit code (2 when the proof does not recompute the root)
    """
    hasher = get_hasher(args.cli_config.hash_algorithm)
    proof_path = Path(args.proof)
    if not proof_path.exists():
        print(f"Error: Proof not found: {proof_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        leaf = read_leaf(args)
        root = parse_digest(args.root, field_path="root")
    except InvalidDigestError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except ValueError as e:
        print(f"Error: invalid leaf: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    verified = check_proof_file(proof_path, leaf, root, hasher)
    summary = VerifySummary(
        proof_path=str(proof_path),
        root=to_hex(root),
        leaf_hash=to_hex(hasher.hash_leaf(leaf)),
        verified=verified,
    )

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print(f"proof: {summary.proof_path}")
        print(f"root: {summary.root}")
        print(f"leaf_hash: {summary.leaf_hash}")
        print(f"verified: {str(summary.verified).lower()}")

    if verified:
        logger.info("Verification passed")
        return EXIT_SUCCESS
    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
