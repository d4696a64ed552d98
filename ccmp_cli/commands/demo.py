"""
CLI Demo Command

End-to-end cross-chain run: commit three leaves on a source registry,
relay the root to a destination registry and submit the proof for the
first leaf there.

Usage:
    ccmp demo [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from typing import Any

from core.chain import Relay, RootRegistry
from core.crypto.hashing import get_hasher, to_hex
from core.merkle.merkle_tree import MerkleTree


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_VERIFICATION_FAILED = 2

DEMO_LEAVES = [bytes([0]) * 32, bytes([1]) * 32, bytes([2]) * 32]
DEMO_ROOT_ID = 1


def run_demo(hash_algorithm: str | None = None) -> dict[str, Any]:
    """Run the demo and return its report."""
    hasher = get_hasher(hash_algorithm)
    tree = MerkleTree.build(DEMO_LEAVES, hasher=hasher)

    chain_a = RootRegistry(name="chain-a", hasher=hasher)
    chain_b = RootRegistry(name="chain-b", hasher=hasher)
    chain_a.add_root(DEMO_ROOT_ID, tree.root)

    relay = Relay(chain_a, chain_b)
    relay.relay_root(DEMO_ROOT_ID)

    proof = tree.prove(0)
    receipt = relay.submit_proof(DEMO_ROOT_ID, DEMO_LEAVES[0], proof)

    # Leaf 1 presented with leaf 0's proof must be rejected
    forged = relay.submit_proof(DEMO_ROOT_ID, DEMO_LEAVES[1], proof)

    return {
        "root": to_hex(tree.root),
        "leaf_count": tree.leaf_count,
        "padded_levels": list(tree.padded_levels),
        "proof": proof.to_dict(),
        "receipt": receipt.to_dict(),
        "forged_receipt": forged.to_dict(),
    }


def demo_cmd(args: Namespace) -> int:
    report = run_demo(args.cli_config.hash_algorithm)

    if args.json:
        print(json.dumps(report, indent=2))
    else:
        receipt = report["receipt"]
        print(f"Merkle root hash: {report['root']}")
        print(f"Root {receipt['root_id']} relayed {receipt['source']} -> {receipt['destination']}")
        print(f"Proof for leaf 0: {receipt['proof_length']} steps")
        print(f"verified: {str(receipt['verified']).lower()}")
        print(f"forged proof verified: {str(report['forged_receipt']['verified']).lower()}")

    if report["receipt"]["verified"] and not report["forged_receipt"]["verified"]:
        return EXIT_SUCCESS
    return EXIT_VERIFICATION_FAILED
