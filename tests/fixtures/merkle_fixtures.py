"""
Merkle test fixtures.

Factory functions for leaf sets, trees and registries used across the
unit tests. Leaves are raw bytes; the three-leaf set is the cross-chain
demo data set.
"""

from __future__ import annotations

from core.chain import RootRegistry
from core.crypto.hashing import Hasher
from core.merkle.merkle_tree import MerkleTree


def make_demo_leaves() -> list[bytes]:
    """[0x00*32, 0x01*32, 0x02*32]"""
    return [bytes([0]) * 32, bytes([1]) * 32, bytes([2]) * 32]


def make_leaves(count: int, prefix: bytes = b"leaf-") -> list[bytes]:
    """Distinct leaves prefix0, prefix1, ..."""
    return [prefix + str(i).encode() for i in range(count)]


def make_tree(leaves: list[bytes] | None = None, hasher: Hasher | None = None) -> MerkleTree:
    return MerkleTree.build(leaves if leaves is not None else make_demo_leaves(), hasher=hasher)


def make_registry(name: str = "chain-b", roots: dict[int, bytes] | None = None) -> RootRegistry:
    registry = RootRegistry(name=name)
    for root_id, root in (roots or {}).items():
        registry.add_root(root_id, root)
    return registry


def flip_bit(data: bytes, position: int = 0, bit: int = 0) -> bytes:
    """Return a copy of `data` with one bit flipped."""
    mutable = bytearray(data)
    mutable[position] ^= 1 << bit
    return bytes(mutable)
