"""
Merkle Proof API (FastAPI)

HTTP API around the Merkle core:
- POST /merkle_tree - Build a tree
- POST /merkle_tree/{tree_id}/proof - Produce an inclusion proof
- POST /add_root - Register a trusted root
- POST /verify_proof - Verify a proof
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
