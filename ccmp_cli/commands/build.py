"""
CLI Build Command

Build a Merkle tree from a leaf file and report its root and shape.

Usage:
    ccmp build leaves.json [--format json|lines] [--encoding hex|utf8] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from typing import Any

from ccmp_cli.leaves import LeafFileError, load_leaves
from core.crypto.hashing import get_hasher, to_hex
from core.merkle.merkle_tree import MerkleTree
from core.schemas.errors import EmptyInputError


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


@dataclass
class BuildSummary:
    """Summary of a built tree for CLI output."""
    leaves_file: str = ""
    hash_algorithm: str = ""
    root: str = ""
    leaf_count: int = 0
    height: int = 0
    padded_levels: list[int] = field(default_factory=list)
    leaf_digests: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if not d["leaf_digests"]:
            del d["leaf_digests"]
        return d


def build_summary(leaves_file: str, tree: MerkleTree, debug: bool = False) -> BuildSummary:
    summary = BuildSummary(
        leaves_file=leaves_file,
        hash_algorithm=tree.hasher.algorithm,
        root=to_hex(tree.root),
        leaf_count=tree.leaf_count,
        height=tree.height,
        padded_levels=list(tree.padded_levels),
    )
    if debug:
        summary.leaf_digests = [to_hex(d) for d in tree.levels[0][:tree.leaf_count]]
    return summary


def print_summary_human(summary: BuildSummary) -> None:
    """Print summary in human-readable format."""
    print(f"leaves: {summary.leaves_file}")
    print(f"hash: {summary.hash_algorithm}")
    print(f"root: {summary.root}")
    print(f"leaf_count: {summary.leaf_count}")
    print(f"height: {summary.height}")
    if summary.padded_levels:
        print(f"padded_levels: {', '.join(str(l) for l in summary.padded_levels)}")
    for i, digest in enumerate(summary.leaf_digests):
        print(f"  [{i}] {digest}")


def build_cmd(args: Namespace) -> int:
    """
    Execute the build command.

    Returns:
        Exit code
    """
    config = args.cli_config
    try:
        leaves = load_leaves(args.leaves_file, fmt=args.format, encoding=args.encoding)
        tree = MerkleTree.build(leaves, hasher=get_hasher(config.hash_algorithm))
    except (LeafFileError, EmptyInputError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary = build_summary(str(args.leaves_file), tree, debug=args.debug)
    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    logger.info(f"Built tree over {tree.leaf_count} leaves")
    return EXIT_SUCCESS
