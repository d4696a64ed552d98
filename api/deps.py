"""
API Dependencies

Process-local service state shared by the routes: the runtime config,
the root registry and the store of built trees.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field

from core.chain.registry import RootRegistry
from core.config.runtime import RuntimeConfig, get_default_config
from core.crypto.hashing import Hasher, get_hasher, from_hex
from core.merkle.merkle_tree import MerkleTree
from api.errors import InvalidRequestError, NotFoundError

logger = logging.getLogger(__name__)


@dataclass
class ServiceState:
    """
    Mutable state behind the API.

    Built trees are immutable and may be read concurrently; only the
    tree map itself is guarded. The registry carries its own lock.
    """
    config: RuntimeConfig
    registry: RootRegistry
    trees: dict[str, MerkleTree] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def hasher(self) -> Hasher:
        return self.registry.hasher

    def store_tree(self, tree: MerkleTree) -> str:
        tree_id = uuid.uuid4().hex[:16]
        with self._lock:
            self.trees[tree_id] = tree
        logger.info(f"Stored tree {tree_id} ({tree.leaf_count} leaves)")
        return tree_id

    def get_tree(self, tree_id: str) -> MerkleTree:
        with self._lock:
            tree = self.trees.get(tree_id)
        if tree is None:
            raise NotFoundError(f"Unknown tree id: {tree_id}", {"tree_id": tree_id})
        return tree


_state: ServiceState | None = None
_state_lock = threading.Lock()


def create_state(config: RuntimeConfig | None = None) -> ServiceState:
    """Create fresh service state from `config` (default: loaded config)."""
    config = config or get_default_config()
    hasher = get_hasher(config.hash_algorithm)
    return ServiceState(config=config, registry=RootRegistry(name="api", hasher=hasher))


def get_state() -> ServiceState:
    """Return the process-wide service state, creating it on first use."""
    global _state
    with _state_lock:
        if _state is None:
            _state = create_state()
        return _state


def reset_state(config: RuntimeConfig | None = None) -> ServiceState:
    """Replace the process-wide state; used by tests and restarts."""
    global _state
    with _state_lock:
        _state = create_state(config)
        return _state


def decode_leaf(value: str, encoding: str, field_path: str = "leaf") -> bytes:
    """
    Turn a request leaf string into bytes.

    Raises:
        InvalidRequestError: On malformed hex
    """
    if encoding == "utf8":
        return value.encode("utf-8")
    try:
        return from_hex(value)
    except ValueError as e:
        raise InvalidRequestError(str(e), {"field_path": field_path})
