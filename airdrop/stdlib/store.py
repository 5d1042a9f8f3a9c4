# -*- coding: utf-8 -*-
"""
Typed storage slots shared by the airdrop contracts.

u256 values are stored as 32-byte big-endian; flags as b"1"; an unset slot
reads as 0 / False / b"".
"""

from __future__ import annotations

from dropvm.stdlib import abi, storage

from .math import require_u256


def get_u256(k: bytes) -> int:
    v = storage.get(k)
    return int.from_bytes(v, "big") if v else 0


def set_u256(k: bytes, n: int) -> None:
    require_u256(n)
    storage.set(k, int(n).to_bytes(32, "big"))


def get_bytes(k: bytes) -> bytes:
    return storage.get(k)


def set_bytes(k: bytes, v: bytes) -> None:
    if not isinstance(v, (bytes, bytearray)):
        abi.revert(b"STORE:BAD_BYTES")
    storage.set(k, bytes(v))


def get_flag(k: bytes) -> bool:
    return storage.get(k) == b"1"


def set_flag(k: bytes) -> None:
    """One-way; there is no clear counterpart."""
    storage.set(k, b"1")


__all__ = ["get_u256", "set_u256", "get_bytes", "set_bytes", "get_flag", "set_flag"]
