"""
dropvm.runtime.hash_api — deterministic hashing wrappers for the host runtime.

Goals
-----
- Strictly bytes-in, bytes-out (no implicit text/encoding).
- Optional domain separation prefix for safer composition across subsystems.

Provided APIs
-------------
- keccak256(data: bytes, *, domain: bytes = b"") -> bytes      # pycryptodome
- sha3_256(data: bytes, *, domain: bytes = b"") -> bytes       # hashlib

Domain Separation
-----------------
If a non-empty `domain` is provided, the hash input becomes:

    b"\\x19merkledrop:" || domain || b"\\x00" || data

This avoids ambiguous concatenations while keeping a compact, readable tag.
"""

from __future__ import annotations

import hashlib

from Crypto.Hash import keccak as _keccak

from ..errors import VmError

DOMAIN_PREFIX = b"\x19merkledrop:"


def _ensure_bytes(buf: object, name: str) -> bytes:
    if isinstance(buf, (bytes, bytearray, memoryview)):
        return bytes(buf)
    raise VmError(f"{name} must be bytes-like (got {type(buf).__name__})", code="hash_invalid")


def _apply_domain(h, domain: bytes) -> None:
    if domain:
        h.update(DOMAIN_PREFIX)
        h.update(domain)
        h.update(b"\x00")


def _new_keccak256():
    return _keccak.new(digest_bits=256)


# ------------------------------- Hash Functions ------------------------------ #

def keccak256(data: bytes | bytearray | memoryview, *, domain: bytes = b"") -> bytes:
    """
    Keccak-256 (pre-SHA3 padding) as used by Ethereum-style Merkle drops.
    """
    d = _ensure_bytes(data, "data")
    h = _new_keccak256()
    _apply_domain(h, _ensure_bytes(domain, "domain"))
    h.update(d)
    return h.digest()


def sha3_256(data: bytes | bytearray | memoryview, *, domain: bytes = b"") -> bytes:
    d = _ensure_bytes(data, "data")
    h = hashlib.sha3_256()
    _apply_domain(h, _ensure_bytes(domain, "domain"))
    h.update(d)
    return h.digest()


__all__ = [
    "DOMAIN_PREFIX",
    "keccak256",
    "sha3_256",
]
