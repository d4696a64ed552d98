"""
Root Registry

In-memory store of trusted Merkle roots, standing in for a chain that
publishes commitments. Roots are addressed by a non-negative integer id.

Proofs submitted to the registry are checked with the stateless core
verifier against the registered root; the registry never holds trees.

Nothing is persisted: a registry lives as long as its process.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

from core.crypto.hashing import DEFAULT_HASHER, Hasher, to_hex
from core.merkle.merkle_proofs import verify
from core.merkle.proof import MerkleProof, parse_digest
from core.schemas.errors import UnknownRootError


logger = logging.getLogger(__name__)


class RootRegistry:
    """
    Registry of trusted roots keyed by id.

    Safe to share across threads; every access to the root map is
    serialized by an internal lock.

    Usage:
        registry = RootRegistry(name="chain-b")
        registry.add_root(1, tree.root)
        registry.verify_proof(1, b"leaf", tree.prove(0))
    """

    def __init__(self, name: str = "chain", hasher: Hasher | None = None) -> None:
        self.name = name
        self.hasher = hasher or DEFAULT_HASHER
        self._roots: dict[int, bytes] = {}
        self._lock = threading.Lock()

    @property
    def known_roots(self) -> dict[int, bytes]:
        """Snapshot of the registered roots."""
        with self._lock:
            return dict(self._roots)

    def add_root(self, root_id: int, root: bytes | str) -> bytes:
        """
        Register (or replace) the trusted root under `root_id`.

        Args:
            root_id: Non-negative identifier
            root: Root digest as bytes or 0x-hex

        Returns:
            The stored digest

        Raises:
            InvalidDigestError: If the root is malformed
            ValueError: If root_id is negative or not an integer
        """
        if isinstance(root_id, bool) or not isinstance(root_id, int) or root_id < 0:
            raise ValueError(f"Root id must be a non-negative integer, got {root_id!r}")
        digest = parse_digest(root, field_path="root")

        with self._lock:
            previous = self._roots.get(root_id)
            self._roots[root_id] = digest

        if previous is not None and previous != digest:
            logger.warning(
                f"[{self.name}] Root {root_id} replaced: {to_hex(previous)} -> {to_hex(digest)}"
            )
        else:
            logger.info(f"[{self.name}] Root {root_id} registered: {to_hex(digest)}")
        return digest

    def get_root(self, root_id: int) -> bytes:
        """
        Return the root registered under `root_id`.

        Raises:
            UnknownRootError: If nothing is registered under that id
        """
        with self._lock:
            digest = self._roots.get(root_id)
        if digest is None:
            raise UnknownRootError(root_id, registry=self.name)
        return digest

    def has_root(self, root_id: int) -> bool:
        with self._lock:
            return root_id in self._roots

    def root_ids(self) -> list[int]:
        with self._lock:
            return sorted(self._roots)

    def remove_root(self, root_id: int) -> bytes:
        """Drop a registered root and return it."""
        with self._lock:
            digest = self._roots.pop(root_id, None)
        if digest is None:
            raise UnknownRootError(root_id, registry=self.name)
        logger.info(f"[{self.name}] Root {root_id} removed")
        return digest

    def verify_proof(self, root_id: int, leaf_value: bytes, proof: MerkleProof | Any) -> bool:
        """
        Check an inclusion proof against the root registered under `root_id`.

        Args:
            root_id: Registered root to check against
            leaf_value: Raw leaf bytes being proven
            proof: MerkleProof or sequence of (sibling, side) pairs

        Returns:
            True if the proof recomputes the registered root

        Raises:
            UnknownRootError: If nothing is registered under root_id
        """
        trusted_root = self.get_root(root_id)
        ok = verify(leaf_value, proof, trusted_root, hasher=self.hasher)
        logger.info(
            f"[{self.name}] Proof against root {root_id}: {'verified' if ok else 'rejected'}"
        )
        return ok

    def __contains__(self, root_id: object) -> bool:
        return isinstance(root_id, int) and self.has_root(root_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._roots)

    def __repr__(self) -> str:
        return f"RootRegistry(name={self.name!r}, roots={len(self)})"


__all__ = [
    "RootRegistry",
]
