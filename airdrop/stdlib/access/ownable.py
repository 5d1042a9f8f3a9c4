# -*- coding: utf-8 -*-
"""
airdrop.stdlib.access.ownable
=============================

Minimal, deterministic **Ownable** helper for airdrop contracts.

This module provides a focused owner storage and control surface:
- read the current owner (`get_owner`)
- initialize the owner once (`init_owner`)
- check that a caller is the owner (`require_owner`)
- transfer ownership to a new account (`transfer_ownership`)
- renounce ownership (clear owner) (`renounce_ownership`)

Conventions
-----------
- Addresses are raw `bytes` of the host's fixed address width.
- The owner is stored at ``OWNER_KEY`` (``b"access:owner"``).
- Events:
    - "OwnershipTransferred" args: {"previous": bytes, "new": bytes}

Typical usage
-------------
    from dropvm.stdlib import abi
    from airdrop.stdlib.access.ownable import init_owner, require_owner

    def init() -> None:
        init_owner(abi.caller())

    def admin_only() -> None:
        require_owner(abi.caller())
        # ... privileged logic ...

Safety notes
------------
- `init_owner` does not overwrite a previously set owner.
- `transfer_ownership` rejects an empty or wrong-width `new_owner`; use `renounce_ownership`
  explicitly to leave the contract without an owner.
"""
from __future__ import annotations

from typing import Optional

from dropvm.stdlib import abi, events, storage

from . import ERR_BAD_OWNER, ERR_NEW_OWNER_EMPTY, ERR_NOT_OWNER, EVT_OWNERSHIP_TRANSFERRED, OWNER_KEY

__all__ = [
    "OWNER_KEY",
    "get_owner",
    "init_owner",
    "require_owner",
    "transfer_ownership",
    "renounce_ownership",
]


def get_owner() -> Optional[bytes]:
    """
    Return the current owner address, or None if not set.
    """
    v = storage.get(OWNER_KEY)
    return v if v else None


def init_owner(owner: bytes) -> None:
    """
    Initialize the contract owner. Does not overwrite if already set.

    Emits "OwnershipTransferred" from b"" on first initialization.
    """
    if get_owner() is None:
        storage.set(OWNER_KEY, owner)
        events.emit(EVT_OWNERSHIP_TRANSFERRED, {"previous": b"", "new": owner})


def require_owner(caller: bytes) -> None:
    """
    Revert unless `caller` equals the current owner.
    """
    owner = get_owner()
    if owner is None or owner != caller:
        abi.revert(ERR_NOT_OWNER)


def transfer_ownership(caller: bytes, new_owner: bytes) -> None:
    """
    Owner-only: transfer ownership to `new_owner` (non-empty, host address width).
    """
    require_owner(caller)

    if not isinstance(new_owner, (bytes, bytearray)) or len(new_owner) == 0:
        abi.revert(ERR_NEW_OWNER_EMPTY)
    if len(new_owner) != abi.address_len():
        abi.revert(ERR_BAD_OWNER)

    previous = get_owner() or b""
    storage.set(OWNER_KEY, bytes(new_owner))
    events.emit(EVT_OWNERSHIP_TRANSFERRED, {"previous": previous, "new": bytes(new_owner)})


def renounce_ownership(caller: bytes) -> None:
    """
    Owner-only: renounce ownership. Afterwards every `require_owner` fails.
    """
    require_owner(caller)

    previous = get_owner() or b""
    storage.delete(OWNER_KEY)
    events.emit(EVT_OWNERSHIP_TRANSFERRED, {"previous": previous, "new": b""})
