"""
CLI command modules.
"""

from ccmp_cli.commands import build, prove, verify, demo, serve

__all__ = ["build", "prove", "verify", "demo", "serve"]
