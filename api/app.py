"""
FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import health, trees, roots, verify
from api.errors import (
    APIError,
    api_error_handler,
    merkle_error_handler,
    generic_error_handler,
)
from core.config.runtime import get_default_config
from core.schemas.errors import MerkleException


# Log level comes from MERKLE_LOG_LEVEL or the loaded config file
def _resolve_log_level() -> int:
    """Resolve log level from the runtime config, defaulting to INFO."""
    raw = get_default_config().log_level
    return getattr(logging, (raw or "INFO").upper(), logging.INFO)


logging.basicConfig(
    level=_resolve_log_level(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Merkle Proof API",
        description="""
HTTP API for building Merkle trees and checking inclusion proofs
against registered roots.

## Endpoints

- **POST /merkle_tree** - Build a tree from ordered leaves
- **GET /merkle_tree/{tree_id}** - Describe a built tree
- **POST /merkle_tree/{tree_id}/proof** - Inclusion proof for one leaf
- **POST /add_root** - Register a trusted root under an id
- **GET /roots/{root_id}** - Look up a registered root
- **POST /verify_proof** - Verify a proof against a registered or supplied root
- **GET /health** - Health check

Digests are 0x-prefixed lowercase hex.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(MerkleException, merkle_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(trees.router)
    app.include_router(roots.router)
    app.include_router(verify.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    config = get_default_config()
    uvicorn.run(app, host=config.api.host, port=config.api.port)
