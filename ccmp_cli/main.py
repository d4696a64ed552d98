"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m ccmp_cli build <leaves_file> [--format json|lines] [--encoding hex|utf8] [--json]
    python -m ccmp_cli prove <leaves_file> --index N [--out PATH]
    python -m ccmp_cli verify (--leaf HEX | --leaf-text TEXT) --proof PATH --root HEX [--json]
    python -m ccmp_cli demo [--json]
    python -m ccmp_cli serve [--host HOST] [--port PORT]
    python -m ccmp_cli config --init

Environment Variables:
    MERKLE_HASH_ALGORITHM       Hash function: sha256, sha3_256, blake2s (default: sha256)
    MERKLE_LOG_LEVEL            Log level (default: INFO)
    MERKLE_LOG_FILE             Also write logs to this file
    MERKLE_API_HOST             API bind host (default: 127.0.0.1)
    MERKLE_API_PORT             API bind port (default: 3030)
    MERKLE_MAX_LEAVES           Leaf count limit for API requests
    MERKLE_MAX_LEAF_BYTES       Per-leaf size limit for API requests
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from ccmp_cli.commands import build, prove, verify, demo, serve
from core.config.runtime import get_default_config_template, load_runtime_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def _add_leaf_file_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "leaves_file",
        type=str,
        help="File holding the ordered leaves",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "lines"],
        default=None,
        help="Leaf file format (default: json for .json files, otherwise lines)",
    )
    parser.add_argument(
        "--encoding",
        type=str,
        choices=["hex", "utf8"],
        default=None,
        help="How leaf strings become bytes (default: hex)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="ccmp",
        description="Cross-chain Merkle proof CLI - Build trees, produce and verify inclusion proofs.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./merkle.json or ~/.config/merkle/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Build a Merkle tree and print its root",
        description="Build a Merkle tree from a leaf file and report root, height and padding.",
    )
    _add_leaf_file_args(build_parser)
    build_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    build_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Include leaf digests in output",
    )
    build_parser.set_defaults(func=build.build_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Produce an inclusion proof for one leaf",
        description="Build the tree from a leaf file and write the proof for the leaf at --index.",
    )
    _add_leaf_file_args(prove_parser)
    prove_parser.add_argument(
        "--index", "-i",
        type=int,
        required=True,
        help="0-based position of the leaf to prove",
    )
    prove_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Output path (.bin for the binary form, otherwise JSON; default: stdout)",
    )
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify an inclusion proof against a trusted root",
        description="Recompute the root from a leaf and a proof file and compare it to --root.",
    )
    leaf_group = verify_parser.add_mutually_exclusive_group(required=True)
    leaf_group.add_argument(
        "--leaf",
        type=str,
        default=None,
        help="Leaf value as 0x-prefixed hex",
    )
    leaf_group.add_argument(
        "--leaf-text",
        type=str,
        default=None,
        help="Leaf value as UTF-8 text",
    )
    verify_parser.add_argument(
        "--proof", "-p",
        type=str,
        required=True,
        help="Proof file (JSON, or binary when the name ends in .bin)",
    )
    verify_parser.add_argument(
        "--root", "-r",
        type=str,
        required=True,
        help="Trusted root digest as 0x-prefixed hex",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- demo command ---
    demo_parser = subparsers.add_parser(
        "demo",
        help="Run the cross-chain relay demo",
        description="Commit three leaves, relay the root and verify the proof for leaf 0.",
    )
    demo_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    demo_parser.set_defaults(func=demo.demo_cmd)

    # --- serve command ---
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP API",
        description="Serve the Merkle proof API with uvicorn.",
    )
    serve_parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Bind host (default: from config)",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Bind port (default: from config)",
    )
    serve_parser.set_defaults(func=serve.serve_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage configuration",
        description="Initialize or show configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="merkle.json",
        help="Path for config file (default: merkle.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (MERKLE_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: ccmp config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_runtime_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
