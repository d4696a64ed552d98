"""
Root registries and the relay between them.

Thin glue around the Merkle core: registries hold trusted roots, the relay
copies roots across registries and submits proofs for verification.
"""

from .registry import RootRegistry
from .relay import Relay, RelayReceipt

__all__ = [
    "RootRegistry",
    "Relay",
    "RelayReceipt",
]
