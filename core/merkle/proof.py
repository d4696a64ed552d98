"""
Merkle Core - Inclusion Proof Values
Plain, tree-independent proof values and their wire encodings.

A proof is an ordered list of steps, one per tree level from the leaf up to
(but not including) the root. Each step names the sibling digest and the
side the sibling sits on. A proof holds no reference to the tree that
produced it and stays verifiable after that tree is discarded.

Wire Formats:
1. Digest: raw DIGEST_SIZE (32) bytes; text form "0x" + 64 hex chars
2. Binary proof: concatenation of 33-byte steps
   - byte 0: side (0x00 = left, 0x01 = right)
   - bytes 1..32: sibling digest
   The binary form carries neither padding markers nor metadata.
3. JSON proof: {"leaf_index", "leaf_count", "steps": [{"sibling", "side", "is_padding"}]}
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from core.crypto.hashing import DIGEST_SIZE, from_hex, to_hex
from core.schemas.errors import InvalidDigestError, ProofFormatError


STEP_SIZE: int = 1 + DIGEST_SIZE

_SIDE_BYTES = {b"\x00": "left", b"\x01": "right"}


class Side(str, Enum):
    """Position of the sibling relative to the node being proven."""
    LEFT = "left"
    RIGHT = "right"

    @property
    def flag(self) -> bytes:
        return b"\x00" if self is Side.LEFT else b"\x01"

    def flipped(self) -> "Side":
        return Side.RIGHT if self is Side.LEFT else Side.LEFT


@dataclass(frozen=True)
class ProofStep:
    """
    One level of an inclusion proof.

    Attributes:
        sibling: Sibling digest at this level
        side: Side the sibling sits on
        is_padding: True when the sibling is the duplicate used to pad an
                    odd level (the node's own digest). Informational only.
    """
    sibling: bytes
    side: Side
    is_padding: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "sibling": to_hex(self.sibling),
            "side": self.side.value,
            "is_padding": self.is_padding,
        }


@dataclass(frozen=True)
class MerkleProof:
    """
    An inclusion proof for a single leaf.

    Iterating a proof yields `(sibling, side)` pairs bottom-up, which is
    exactly what the verifier consumes.

    Attributes:
        steps: Proof steps from the leaf level upwards
        leaf_index: 0-based position of the proven leaf (informational)
        leaf_count: Number of leaves in the originating tree (informational)
    """
    steps: tuple[ProofStep, ...] = field(default_factory=tuple)
    leaf_index: int | None = None
    leaf_count: int | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.steps, tuple):
            object.__setattr__(self, "steps", tuple(self.steps))
        if self.leaf_index is not None and self.leaf_index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.leaf_index}")

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        for step in self.steps:
            yield step.sibling, step.side

    @property
    def siblings(self) -> list[bytes]:
        return [step.sibling for step in self.steps]

    @property
    def padding_steps(self) -> list[int]:
        """Levels at which the sibling is a padding duplicate."""
        return [level for level, step in enumerate(self.steps) if step.is_padding]

    def to_dict(self) -> dict[str, Any]:
        return {
            "leaf_index": self.leaf_index,
            "leaf_count": self.leaf_count,
            "steps": [step.to_dict() for step in self.steps],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MerkleProof":
        """
        Parse the JSON form of a proof.

        Raises:
            ProofFormatError: If the structure, a side or a digest is malformed
        """
        if not isinstance(data, dict) or not isinstance(data.get("steps"), list):
            raise ProofFormatError("Proof must be an object with a 'steps' list")

        steps: list[ProofStep] = []
        for level, raw in enumerate(data["steps"]):
            if not isinstance(raw, dict):
                raise ProofFormatError(f"Proof step {level} must be an object", {"level": level})
            try:
                side = Side(raw.get("side"))
            except ValueError:
                raise ProofFormatError(
                    f"Proof step {level} has invalid side {raw.get('side')!r}",
                    {"level": level},
                )
            try:
                sibling = parse_digest(raw.get("sibling"), field_path=f"steps[{level}].sibling")
            except InvalidDigestError as e:
                raise ProofFormatError(e.message, e.details) from e
            is_padding = raw.get("is_padding", False)
            if not isinstance(is_padding, bool):
                raise ProofFormatError(
                    f"Proof step {level} has non-boolean is_padding {is_padding!r}",
                    {"level": level},
                )
            steps.append(ProofStep(sibling=sibling, side=side, is_padding=is_padding))

        leaf_index = data.get("leaf_index")
        leaf_count = data.get("leaf_count")
        for name, value in (("leaf_index", leaf_index), ("leaf_count", leaf_count)):
            if value is not None and (not isinstance(value, int) or isinstance(value, bool) or value < 0):
                raise ProofFormatError(f"Proof {name} must be a non-negative integer")

        return cls(steps=tuple(steps), leaf_index=leaf_index, leaf_count=leaf_count)


def parse_digest(value: Any, field_path: str | None = None) -> bytes:
    """
    Accept a digest as raw bytes or 0x-hex text and check its length.

    Args:
        value: bytes/bytearray of DIGEST_SIZE, or a "0x..." string
        field_path: Optional location for error details

    Returns:
        The digest as bytes

    Raises:
        InvalidDigestError: On bad hex or wrong length
    """
    if isinstance(value, str):
        try:
            value = from_hex(value)
        except ValueError as e:
            raise InvalidDigestError(str(e), field_path=field_path) from e
    elif isinstance(value, (bytes, bytearray, memoryview)):
        value = bytes(value)
    else:
        raise InvalidDigestError(
            f"Digest must be bytes or a 0x-prefixed hex string, got {type(value).__name__}",
            field_path=field_path,
        )

    if len(value) != DIGEST_SIZE:
        raise InvalidDigestError(
            f"Digest must be {DIGEST_SIZE} bytes, got {len(value)}",
            field_path=field_path,
            details={"expected": DIGEST_SIZE, "actual": len(value)},
        )
    return value


def encode_proof(proof: MerkleProof) -> bytes:
    """Serialize a proof to its binary wire form (33 bytes per step)."""
    return b"".join(step.side.flag + step.sibling for step in proof.steps)


def decode_proof(data: bytes) -> MerkleProof:
    """
    Parse the binary wire form of a proof.

    Raises:
        ProofFormatError: If the length is not a multiple of STEP_SIZE or
                          a side byte is unknown
    """
    if len(data) % STEP_SIZE != 0:
        raise ProofFormatError(
            f"Proof length {len(data)} is not a multiple of {STEP_SIZE}",
            {"length": len(data)},
        )

    steps = []
    for offset in range(0, len(data), STEP_SIZE):
        flag = data[offset:offset + 1]
        if flag not in _SIDE_BYTES:
            raise ProofFormatError(
                f"Unknown side flag 0x{flag.hex()} at step {offset // STEP_SIZE}",
                {"level": offset // STEP_SIZE},
            )
        steps.append(ProofStep(
            sibling=bytes(data[offset + 1:offset + STEP_SIZE]),
            side=Side(_SIDE_BYTES[flag]),
        ))
    return MerkleProof(steps=tuple(steps))


__all__ = [
    "STEP_SIZE",
    "Side",
    "ProofStep",
    "MerkleProof",
    "parse_digest",
    "encode_proof",
    "decode_proof",
]
