"""Test fixtures for the Merkle proof packages."""
