"""
Root Routes

Register trusted roots in the service registry and read them back.
"""

from fastapi import APIRouter

from api.deps import get_state
from api.models.requests import AddRootRequest
from api.models.responses import RootResponse
from core.crypto.hashing import to_hex


router = APIRouter(tags=["roots"])


@router.post("/add_root", response_model=RootResponse)
def add_root(request: AddRootRequest) -> RootResponse:
    """Register `root_hash` under `root_id`, replacing any previous root."""
    registry = get_state().registry
    digest = registry.add_root(request.root_id, request.root_hash)
    return RootResponse(
        registry=registry.name,
        root_id=request.root_id,
        root_hash=to_hex(digest),
    )


@router.get("/roots/{root_id}", response_model=RootResponse)
def get_root(root_id: int) -> RootResponse:
    registry = get_state().registry
    digest = registry.get_root(root_id)
    return RootResponse(
        registry=registry.name,
        root_id=root_id,
        root_hash=to_hex(digest),
    )
