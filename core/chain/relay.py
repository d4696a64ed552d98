"""
Relay

Moves commitments and proofs between two root registries: a root
published on the source is copied to the destination, and inclusion
proofs are then submitted to the destination, which checks them against
its own copy of the root.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import asdict, dataclass
from typing import Any

from core.chain.registry import RootRegistry
from core.crypto.hashing import to_hex
from core.merkle.proof import MerkleProof


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RelayReceipt:
    """Outcome of a proof submitted through a relay."""
    root_id: int
    leaf_hash: str
    proof_length: int
    verified: bool
    source: str
    destination: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class Relay:
    """
    Forwards roots and proofs from `source` to `destination`.

    Usage:
        relay = Relay(chain_a, chain_b)
        relay.relay_root(1)
        receipt = relay.submit_proof(1, leaf, proof)
    """

    def __init__(self, source: RootRegistry, destination: RootRegistry) -> None:
        self.source = source
        self.destination = destination

    def relay_root(self, root_id: int) -> bytes:
        """
        Copy the root registered under `root_id` from source to destination.

        Raises:
            UnknownRootError: If the source has no such root
        """
        digest = self.source.get_root(root_id)
        self.destination.add_root(root_id, digest)
        logger.info(
            f"Relayed root {root_id} from {self.source.name} to {self.destination.name}"
        )
        return digest

    def submit_proof(
        self,
        root_id: int,
        leaf_value: bytes,
        proof: MerkleProof | Any,
    ) -> RelayReceipt:
        """
        Submit an inclusion proof to the destination registry.

        Args:
            root_id: Root on the destination the proof should recompute
            leaf_value: Raw leaf bytes being proven
            proof: MerkleProof or sequence of (sibling, side) pairs

        Returns:
            RelayReceipt recording the destination's verdict

        Raises:
            UnknownRootError: If the destination has no such root
        """
        if not isinstance(proof, (MerkleProof, list, tuple)) and isinstance(proof, Iterable):
            proof = list(proof)
        verified = self.destination.verify_proof(root_id, leaf_value, proof)
        leaf_hash = b""
        if isinstance(leaf_value, (bytes, bytearray, memoryview)):
            leaf_hash = self.destination.hasher.hash_leaf(bytes(leaf_value))

        receipt = RelayReceipt(
            root_id=root_id,
            leaf_hash=to_hex(leaf_hash),
            proof_length=len(proof) if isinstance(proof, (MerkleProof, list, tuple)) else 0,
            verified=verified,
            source=self.source.name,
            destination=self.destination.name,
        )
        if not verified:
            logger.warning(f"Proof for root {root_id} rejected by {self.destination.name}")
        return receipt


__all__ = [
    "Relay",
    "RelayReceipt",
]
