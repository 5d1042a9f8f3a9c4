"""Key/value storage of the executing contract. Keys and values are always bytes."""

from __future__ import annotations

from typing import Optional

from ..runtime.host import current


def get(key: bytes, default: Optional[bytes] = None) -> bytes:
    """
    Get the value stored at 'key'. If the key is missing:

      * if 'default' is provided, that default is returned
      * otherwise, an empty byte string is returned (b"")
    """
    af = current()
    value = af.host.storage_get(af, key)
    if not value and default is not None:
        return bytes(default)
    return value


def set(key: bytes, value: bytes) -> None:
    """Store 'value' at 'key'. Writing b"" deletes the key."""
    af = current()
    af.host.storage_set(af, key, value)


def delete(key: bytes) -> None:
    """Delete 'key' if present (no-op if absent)."""
    af = current()
    af.host.storage_delete(af, key)


__all__ = ["get", "set", "delete"]
