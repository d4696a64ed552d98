"""
Merkle Proof CLI

Command-line interface for building Merkle trees, producing and checking
inclusion proofs, and running the cross-chain relay demo.

Usage:
    python -m ccmp_cli build leaves.json
    python -m ccmp_cli prove leaves.json --index 0 --out proof.json
    python -m ccmp_cli verify --leaf 0x00... --proof proof.json --root 0x...
    python -m ccmp_cli demo
    python -m ccmp_cli serve
"""

__version__ = "0.1.0"
