"""
Merkle Core - Merkle Tree Implementation
Deterministic, fully materialized Merkle tree and proof generation.

This module provides:
- MerkleTree: built once from an ordered list of raw leaf values
- Root retrieval without recomputation
- Inclusion proof generation for any leaf index
- Module-level build/root/prove functions mirroring the call contract

Canonical Commitment Rules (Hard Contracts):
1. Leaf hashing: leaf = H(0x00 || value)
2. Parent hashing: parent = H(0x01 || left || right)
3. Padding rule: Duplicate last node if odd number at any level
4. Empty leaves: build([]) raises EmptyInputError
5. Single leaf: root = leaf digest, proofs are empty

Layout:
The tree is kept as flat per-level tuples of digests. Level 0 holds the
leaf digests in input order, the last level holds only the root. Levels are
stored unpadded; `padded_levels` records where the duplicate was added.
Children of node p on level k+1 are 2p and 2p+1 on level k, and the parent
of node i is i // 2.

Known Weakness:
Padding by duplication means [a, b, c] and [a, b, c, c] commit to the same
root. Callers that need distinct commitments for such sets must bind the
leaf count separately.

On a padding step the sibling equals the node being proven, so
H(0x01 || x || x) is the same for either side: flipping the side flag of a
step marked `is_padding` leaves the proof valid. Side flags are binding
only on non-padding steps.
"""
from __future__ import annotations

import logging
from typing import Sequence

from core.crypto.hashing import DEFAULT_HASHER, Hasher
from core.merkle.proof import MerkleProof, ProofStep, Side
from core.schemas.errors import EmptyInputError, IndexOutOfRangeError


logger = logging.getLogger(__name__)


class MerkleTree:
    """
    A static binary hash tree over an ordered leaf set.

    Construction is eager: once `build` returns, every level is computed
    and the tree is immutable, so it can be shared for concurrent `root`
    and `prove` calls without locking.

    Example:
        >>> tree = MerkleTree.build([b"a", b"b", b"c"])
        >>> proof = tree.prove(2)
        >>> len(proof)
        2
    """

    __slots__ = ("_levels", "_padded", "_hasher")

    def __init__(
        self,
        levels: tuple[tuple[bytes, ...], ...],
        padded: tuple[bool, ...],
        hasher: Hasher,
    ) -> None:
        self._levels = levels
        self._padded = padded
        self._hasher = hasher

    @classmethod
    def build(cls, leaves: Sequence[bytes], hasher: Hasher | None = None) -> "MerkleTree":
        """
        Build a tree from raw leaf values.

        Algorithm:
        1. Hash each value with the leaf tag, preserving order
        2. While more than one digest remains:
           - If odd, duplicate the last digest
           - Pair adjacent digests and hash with the node tag
        3. The single remaining digest is the root

        Args:
            leaves: Ordered raw leaf values (n >= 1)
            hasher: Hash function to use (default SHA-256)

        Returns:
            The constructed MerkleTree

        Raises:
            EmptyInputError: If leaves is empty
            TypeError: If a leaf is not bytes-like
        """
        hasher = hasher or DEFAULT_HASHER
        if len(leaves) == 0:
            raise EmptyInputError()

        for position, value in enumerate(leaves):
            if not isinstance(value, (bytes, bytearray, memoryview)):
                raise TypeError(
                    f"Leaf {position} must be bytes, got {type(value).__name__}"
                )

        current_level: tuple[bytes, ...] = tuple(hasher.hash_leaf(bytes(value)) for value in leaves)
        levels: list[tuple[bytes, ...]] = [current_level]
        padded: list[bool] = []

        while len(current_level) > 1:
            paired = list(current_level)
            if len(paired) % 2 == 1:
                paired.append(paired[-1])
                padded.append(True)
            else:
                padded.append(False)

            current_level = tuple(
                hasher.hash_node(paired[i], paired[i + 1])
                for i in range(0, len(paired), 2)
            )
            levels.append(current_level)

        # The root level is never paired
        padded.append(False)

        logger.debug(
            "Built Merkle tree: %d leaves, height %d, padded levels %s",
            len(leaves), len(levels) - 1, [i for i, p in enumerate(padded) if p],
        )
        return cls(tuple(levels), tuple(padded), hasher)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def root(self) -> bytes:
        """The root digest."""
        return self._levels[-1][0]

    @property
    def hasher(self) -> Hasher:
        return self._hasher

    @property
    def leaf_count(self) -> int:
        return len(self._levels[0])

    @property
    def height(self) -> int:
        """Number of pairing rounds, equal to ceil(log2(leaf_count))."""
        return len(self._levels) - 1

    @property
    def levels(self) -> tuple[tuple[bytes, ...], ...]:
        """All levels, leaves first, unpadded."""
        return self._levels

    @property
    def padded_levels(self) -> tuple[int, ...]:
        """Indices of the levels that were padded by duplicating the last digest."""
        return tuple(i for i, was_padded in enumerate(self._padded) if was_padded)

    def leaf_digest(self, leaf_index: int) -> bytes:
        self._check_index(leaf_index)
        return self._levels[0][leaf_index]

    def __len__(self) -> int:
        return self.leaf_count

    def __repr__(self) -> str:
        return f"MerkleTree(leaves={self.leaf_count}, height={self.height}, root=0x{self.root.hex()})"

    # ------------------------------------------------------------------
    # Pairing index
    # ------------------------------------------------------------------

    @staticmethod
    def parent_index(index: int) -> int:
        return index // 2

    def children(self, level: int, index: int) -> tuple[bytes, bytes]:
        """
        Return the (left, right) child digests of a node.

        Args:
            level: Level of the parent node (1..height)
            index: Position of the parent on that level

        Returns:
            Tuple of child digests; on a padded level the last parent's
            right child is a duplicate of its left child

        Raises:
            IndexError: If level or index does not name an internal node
        """
        if level < 1 or level > self.height:
            raise IndexError(f"Level {level} has no children (height {self.height})")
        if index < 0 or index >= len(self._levels[level]):
            raise IndexError(f"Node index {index} out of range on level {level}")

        below = self._levels[level - 1]
        left = below[2 * index]
        right = below[2 * index + 1] if 2 * index + 1 < len(below) else left
        return left, right

    # ------------------------------------------------------------------
    # Proofs
    # ------------------------------------------------------------------

    def prove(self, leaf_index: int) -> MerkleProof:
        """
        Generate an inclusion proof for the leaf at `leaf_index`.

        Algorithm:
        1. Start at the leaf's position on level 0
        2. At each level below the root:
           - Even index: sibling at index + 1, on the right
           - Odd index: sibling at index - 1, on the left
           - No right sibling (padded level): the node's own digest,
             marked as padding
           - Move up: index = index // 2

        Args:
            leaf_index: 0-based position in the original input order

        Returns:
            MerkleProof with steps ordered bottom-up

        Raises:
            IndexOutOfRangeError: If leaf_index is outside [0, leaf_count)
        """
        self._check_index(leaf_index)

        steps: list[ProofStep] = []
        index = leaf_index
        for level in self._levels[:-1]:
            if index % 2 == 0:
                if index + 1 < len(level):
                    steps.append(ProofStep(sibling=level[index + 1], side=Side.RIGHT))
                else:
                    steps.append(ProofStep(sibling=level[index], side=Side.RIGHT, is_padding=True))
            else:
                steps.append(ProofStep(sibling=level[index - 1], side=Side.LEFT))
            index = self.parent_index(index)

        return MerkleProof(steps=tuple(steps), leaf_index=leaf_index, leaf_count=self.leaf_count)

    def _check_index(self, leaf_index: int) -> None:
        if isinstance(leaf_index, bool) or not isinstance(leaf_index, int):
            raise TypeError(f"Leaf index must be an integer, got {type(leaf_index).__name__}")
        if leaf_index < 0 or leaf_index >= self.leaf_count:
            raise IndexOutOfRangeError(leaf_index, self.leaf_count)


def build(leaves: Sequence[bytes], hasher: Hasher | None = None) -> MerkleTree:
    """Build a MerkleTree from raw leaf values. See MerkleTree.build."""
    return MerkleTree.build(leaves, hasher=hasher)


def root(tree: MerkleTree) -> bytes:
    """Return the root digest of a built tree."""
    return tree.root


def prove(tree: MerkleTree, leaf_index: int) -> MerkleProof:
    """Generate an inclusion proof for `leaf_index`. See MerkleTree.prove."""
    return tree.prove(leaf_index)


def compute_tree_height(num_leaves: int) -> int:
    """
    Number of proof steps for a tree of `num_leaves` leaves.

    Equals ceil(log2(num_leaves)); 0 for a single leaf.
    """
    if num_leaves < 1:
        raise EmptyInputError(f"A Merkle tree needs at least one leaf, got {num_leaves}")
    return (num_leaves - 1).bit_length()


__all__ = [
    "MerkleTree",
    "build",
    "root",
    "prove",
    "compute_tree_height",
]
