"""Hashing for contracts (pure; usable outside a call)."""

from __future__ import annotations

from ..runtime.hash_api import keccak256, sha3_256

__all__ = ["keccak256", "sha3_256"]
