"""
CLI Prove Command

Produce the inclusion proof for one leaf of a leaf file.

Usage:
    ccmp prove leaves.json --index N [--out proof.json|proof.bin]

A `.bin` output path gets the binary wire form; anything else gets JSON.
Without --out the JSON proof is printed.
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from ccmp_cli.leaves import LeafFileError, load_leaves
from core.crypto.hashing import get_hasher, to_hex
from core.merkle.merkle_tree import MerkleTree
from core.merkle.proof import encode_proof
from core.schemas.errors import EmptyInputError, IndexOutOfRangeError


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def prove_cmd(args: Namespace) -> int:
    config = args.cli_config
    try:
        leaves = load_leaves(args.leaves_file, fmt=args.format, encoding=args.encoding)
        tree = MerkleTree.build(leaves, hasher=get_hasher(config.hash_algorithm))
        proof = tree.prove(args.index)
    except (LeafFileError, EmptyInputError, IndexOutOfRangeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    document = {"root": to_hex(tree.root), **proof.to_dict()}

    if args.out is None:
        print(json.dumps(document, indent=2))
        return EXIT_SUCCESS

    out = Path(args.out)
    if out.suffix.lower() == ".bin":
        out.write_bytes(encode_proof(proof))
    else:
        out.write_text(json.dumps(document, indent=2) + "\n")
    logger.info(f"Wrote proof for leaf {args.index} ({len(proof)} steps) to {out}")
    print(f"proof: {out}")
    print(f"root: {document['root']}")
    return EXIT_SUCCESS
