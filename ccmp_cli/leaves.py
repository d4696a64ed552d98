"""
Leaf file loading shared by the build and prove commands.

Two formats are accepted:
- json: a JSON array of strings, or an object {"leaves": [...], "encoding": "hex"|"utf8"}
- lines: one leaf per line; blank lines are skipped
"""

from __future__ import annotations

import json
from pathlib import Path

from core.crypto.hashing import from_hex


class LeafFileError(ValueError):
    """Leaf file could not be read or parsed."""


def detect_format(path: Path) -> str:
    return "json" if path.suffix.lower() == ".json" else "lines"


def decode_leaf(value: str, encoding: str) -> bytes:
    if encoding == "utf8":
        return value.encode("utf-8")
    try:
        return from_hex(value.strip())
    except ValueError as e:
        raise LeafFileError(f"Invalid hex leaf {value!r}: {e}") from e


def load_leaves(path: str | Path, fmt: str | None = None, encoding: str | None = None) -> list[bytes]:
    """
    Read ordered leaves from `path`.

    Args:
        path: Leaf file
        fmt: "json" or "lines"; inferred from the suffix when None
        encoding: "hex" or "utf8"; a JSON object may carry its own,
                  otherwise defaults to hex

    Raises:
        LeafFileError: If the file is missing or malformed
    """
    path = Path(path)
    if not path.exists():
        raise LeafFileError(f"Leaf file not found: {path}")
    fmt = fmt or detect_format(path)
    text = path.read_text(encoding="utf-8")

    if fmt == "json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise LeafFileError(f"Invalid JSON in {path}: {e}") from e
        if isinstance(data, dict):
            encoding = encoding or data.get("encoding")
            data = data.get("leaves")
        if not isinstance(data, list) or not all(isinstance(v, str) for v in data):
            raise LeafFileError(f"{path} must hold a list of leaf strings")
        raw = data
    else:
        raw = [line for line in text.splitlines() if line.strip()]

    encoding = encoding or "hex"
    return [decode_leaf(v, encoding) for v in raw]
