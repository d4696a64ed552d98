"""API route handlers."""

from api.routes import health, trees, roots, verify

__all__ = ["health", "trees", "roots", "verify"]
