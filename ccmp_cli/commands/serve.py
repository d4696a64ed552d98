"""
CLI Serve Command

Run the HTTP API with uvicorn.

Usage:
    ccmp serve [--host HOST] [--port PORT]
"""

from __future__ import annotations

import logging
from argparse import Namespace


logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0


def serve_cmd(args: Namespace) -> int:
    import uvicorn

    from core.config.runtime import set_default_config

    config = args.cli_config
    set_default_config(config)
    host = args.host or config.api.host
    port = args.port or config.api.port

    logger.info(f"Starting API on {host}:{port}")
    uvicorn.run("api.app:app", host=host, port=port, log_level=config.log_level.lower())
    return EXIT_SUCCESS
