"""
Verify Route

Check an inclusion proof against a registered root or a supplied one.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from api.deps import decode_leaf, get_state
from api.errors import InvalidRequestError
from api.models.requests import VerifyProofRequest
from api.models.responses import VerifyResponse
from core.crypto.hashing import to_hex
from core.merkle.merkle_proofs import verify
from core.merkle.proof import MerkleProof, parse_digest


logger = logging.getLogger(__name__)

router = APIRouter(tags=["verification"])


@router.post("/verify_proof", response_model=VerifyResponse)
def verify_proof(request: VerifyProofRequest) -> VerifyResponse:
    """
    Verify an inclusion proof.

    When `root_id` is given the registered root is the trusted root and
    an unknown id is a 404. Otherwise `root_hash` is used as supplied.
    A proof that does not recompute the root is a normal response with
    `verified: false`, not an error.
    """
    if request.root_id is None and request.root_hash is None:
        raise InvalidRequestError("Either root_id or root_hash is required")

    state = get_state()
    leaf = decode_leaf(request.leaf, request.encoding, field_path="leaf")
    proof = MerkleProof.from_dict(request.proof.model_dump())

    if request.root_id is not None:
        trusted_root = state.registry.get_root(request.root_id)
    else:
        trusted_root = parse_digest(request.root_hash, field_path="root_hash")

    verified = verify(leaf, proof, trusted_root, hasher=state.hasher)
    logger.info(
        f"verify_proof root={to_hex(trusted_root)} steps={len(proof)} verified={verified}"
    )
    return VerifyResponse(
        verified=verified,
        root_id=request.root_id,
        root_hash=to_hex(trusted_root),
        proof_length=len(proof),
    )
