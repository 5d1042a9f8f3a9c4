# -*- coding: utf-8 -*-
"""
Fungible token ledger
=====================

Storage-backed, float-free token ledger used as a library by contracts that
*are* tokens (the distributor) or that hold them. Mutating functions take the
acting addresses explicitly; the embedding contract decides who may call them
(typically passing ``abi.caller()`` or ``abi.self_address()``).

Highlights
----------
- Deterministic storage layout using prefixes from ``airdrop.stdlib.token``.
- Events emitted via ``dropvm.stdlib.events``:
    - b"Transfer" {"from": bytes, "to": bytes, "value": int}
    - b"Approval" {"owner": bytes, "spender": bytes, "value": int}
- U256-checked math via ``airdrop.stdlib.math.safe_uint`` (no silent wrap).
- Mints are reported as transfers from the all-zero address.

Library surface
---------------
init_metadata(name: bytes, symbol: bytes, decimals: int) -> None
name() -> bytes, symbol() -> bytes, decimals() -> int, total_supply() -> int
balance_of(addr) -> int, allowance(owner, spender) -> int
transfer(src, dst, amount) -> bool
approve(owner, spender, amount) -> bool
transfer_from(spender, owner, dst, amount) -> bool
mint(to, amount) -> bool
"""

from __future__ import annotations

from typing import Final

from dropvm.stdlib import abi, events, storage

from ..math.safe_uint import u256_add, u256_sub
from ..store import get_bytes, get_u256, set_bytes, set_u256
from . import (
    ERR_ALLOWANCE_LOW,
    ERR_INSUFFICIENT_BALANCE,
    EVT_APPROVAL,
    EVT_TRANSFER,
    key_allow,
    key_balance,
    require_address,
    require_amount,
    require_decimals,
    require_name,
    require_symbol,
)

K_NAME: Final[bytes] = b"tok:meta:name"
K_SYMBOL: Final[bytes] = b"tok:meta:symbol"
K_DECIMALS: Final[bytes] = b"tok:meta:dec"
K_TOTAL: Final[bytes] = b"tok:meta:total"
K_INIT: Final[bytes] = b"tok:meta:inited"


# ------------------------------------------------------------------------------
# Metadata
# ------------------------------------------------------------------------------


def init_metadata(name: bytes, symbol: bytes, decimals: int) -> None:
    """One-time metadata initializer."""
    if storage.get(K_INIT):
        abi.revert(b"TOKEN:ALREADY_INIT")
    require_name(name)
    require_symbol(symbol)
    require_decimals(decimals)

    set_bytes(K_NAME, name)
    set_bytes(K_SYMBOL, bytes(symbol).upper())
    set_u256(K_DECIMALS, decimals)
    storage.set(K_INIT, b"1")


def name() -> bytes:
    return get_bytes(K_NAME)


def symbol() -> bytes:
    return get_bytes(K_SYMBOL)


def decimals() -> int:
    return get_u256(K_DECIMALS)


def total_supply() -> int:
    return get_u256(K_TOTAL)


# ------------------------------------------------------------------------------
# Views
# ------------------------------------------------------------------------------


def balance_of(addr: bytes) -> int:
    return get_u256(key_balance(addr))


def allowance(owner: bytes, spender: bytes) -> int:
    return get_u256(key_allow(owner, spender))


# ------------------------------------------------------------------------------
# Mutations (explicit actors)
# ------------------------------------------------------------------------------


def _move(src: bytes, dst: bytes, amount: int) -> None:
    src_key = key_balance(src)
    src_bal = get_u256(src_key)
    if src_bal < amount:
        abi.revert(ERR_INSUFFICIENT_BALANCE)
    set_u256(src_key, u256_sub(src_bal, amount))
    dst_key = key_balance(dst)
    set_u256(dst_key, u256_add(get_u256(dst_key), amount))


def transfer(src: bytes, dst: bytes, amount: int) -> bool:
    """
    Move `amount` from `src` to `dst`. A zero amount is a no-op that still
    emits Transfer.
    """
    require_address(src)
    require_address(dst)
    require_amount(amount)

    if amount:
        _move(src, dst, amount)
    events.emit(EVT_TRANSFER, {"from": bytes(src), "to": bytes(dst), "value": amount})
    return True


def approve(owner: bytes, spender: bytes, amount: int) -> bool:
    require_amount(amount)
    set_u256(key_allow(owner, spender), amount)
    events.emit(EVT_APPROVAL, {"owner": bytes(owner), "spender": bytes(spender), "value": amount})
    return True


def transfer_from(spender: bytes, owner: bytes, dst: bytes, amount: int) -> bool:
    """
    `spender` moves `amount` from `owner` to `dst` using its allowance.
    """
    require_address(dst)
    require_amount(amount)

    allow_key = key_allow(owner, spender)
    current_allow = get_u256(allow_key)
    if current_allow < amount:
        abi.revert(ERR_ALLOWANCE_LOW)

    if amount:
        set_u256(allow_key, u256_sub(current_allow, amount))
        _move(owner, dst, amount)
    events.emit(EVT_TRANSFER, {"from": bytes(owner), "to": bytes(dst), "value": amount})
    return True


def mint(to: bytes, amount: int) -> bool:
    """
    Unguarded mint; the embedding contract enforces permissions.
    """
    require_address(to)
    require_amount(amount)
    if amount == 0:
        return True

    set_u256(K_TOTAL, u256_add(total_supply(), amount))
    to_key = key_balance(to)
    set_u256(to_key, u256_add(get_u256(to_key), amount))
    events.emit(EVT_TRANSFER, {"from": bytes(len(to)), "to": bytes(to), "value": amount})
    return True


__all__ = [
    "init_metadata",
    "name",
    "symbol",
    "decimals",
    "total_supply",
    "balance_of",
    "allowance",
    "transfer",
    "approve",
    "transfer_from",
    "mint",
]
