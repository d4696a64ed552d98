"""
Tree Routes

Build Merkle trees from request leaves and hand out inclusion proofs.
Built trees are kept in process memory under a generated id.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from api.deps import ServiceState, decode_leaf, get_state
from api.errors import InvalidRequestError
from api.models.requests import BuildTreeRequest, ProofModel, ProveRequest
from api.models.responses import ProofResponse, TreeResponse
from core.crypto.hashing import to_hex
from core.merkle.merkle_tree import MerkleTree


logger = logging.getLogger(__name__)

router = APIRouter(tags=["merkle"])


def _tree_response(tree_id: str, tree: MerkleTree) -> TreeResponse:
    return TreeResponse(
        tree_id=tree_id,
        root=to_hex(tree.root),
        leaf_count=tree.leaf_count,
        height=tree.height,
        padded_levels=list(tree.padded_levels),
    )


def _decode_leaves(request: BuildTreeRequest, state: ServiceState) -> list[bytes]:
    limits = state.config.limits
    if len(request.leaves) > limits.max_leaves:
        raise InvalidRequestError(
            f"Too many leaves: {len(request.leaves)} > {limits.max_leaves}",
            {"max_leaves": limits.max_leaves},
        )

    leaves = []
    for i, raw in enumerate(request.leaves):
        value = decode_leaf(raw, request.encoding, field_path=f"leaves[{i}]")
        if len(value) > limits.max_leaf_bytes:
            raise InvalidRequestError(
                f"Leaf {i} is {len(value)} bytes, limit is {limits.max_leaf_bytes}",
                {"field_path": f"leaves[{i}]", "max_leaf_bytes": limits.max_leaf_bytes},
            )
        leaves.append(value)
    return leaves


@router.post("/merkle_tree", response_model=TreeResponse)
def build_tree(request: BuildTreeRequest) -> TreeResponse:
    """
    Build a Merkle tree from the ordered leaves.

    An empty leaf list is rejected with EMPTY_INPUT.
    """
    state = get_state()
    leaves = _decode_leaves(request, state)
    tree = MerkleTree.build(leaves, hasher=state.hasher)
    tree_id = state.store_tree(tree)
    logger.info(f"Built tree {tree_id}: root={to_hex(tree.root)}")
    return _tree_response(tree_id, tree)


@router.get("/merkle_tree/{tree_id}", response_model=TreeResponse)
def get_tree(tree_id: str) -> TreeResponse:
    """Describe a previously built tree."""
    tree = get_state().get_tree(tree_id)
    return _tree_response(tree_id, tree)


@router.post("/merkle_tree/{tree_id}/proof", response_model=ProofResponse)
def prove_leaf(tree_id: str, request: ProveRequest) -> ProofResponse:
    """
    Produce the inclusion proof for one leaf of a stored tree.

    An index past the last leaf is rejected with INDEX_OUT_OF_RANGE.
    """
    tree = get_state().get_tree(tree_id)
    proof = tree.prove(request.leaf_index)
    return ProofResponse(
        tree_id=tree_id,
        root=to_hex(tree.root),
        leaf_digest=to_hex(tree.leaf_digest(request.leaf_index)),
        proof=ProofModel.model_validate(proof.to_dict()),
    )
