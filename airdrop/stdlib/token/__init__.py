# -*- coding: utf-8 -*-
"""
airdrop.stdlib.token
====================

Conventions, prefixes and validation shared by fungible-token code. This
package performs no storage I/O itself; the ledger lives in :mod:`.fungible`.

Conventions
-----------
Storage keys (prefixed bytes):
  - balances:   BAL_PREFIX || <addr>
  - allowances: ALLOW_PREFIX || <owner> || b"|" || <spender>

Events (names as bytes):
  - b"Transfer" with payload { "from": bytes, "to": bytes, "value": int }
  - b"Approval" with payload { "owner": bytes, "spender": bytes, "value": int }

Symbols/Names:
  - Symbols: 1..11 printable ASCII, stored uppercased.
  - Names:   1..64 printable ASCII, mixed case allowed.
"""

from __future__ import annotations

from typing import Final

from dropvm.stdlib import abi

from ..math import is_u256

BAL_PREFIX: Final[bytes] = b"tok:bal:"
ALLOW_PREFIX: Final[bytes] = b"tok:allow:"

EVT_TRANSFER: Final[bytes] = b"Transfer"
EVT_APPROVAL: Final[bytes] = b"Approval"

DEFAULT_DECIMALS: Final[int] = 18
MAX_DECIMALS: Final[int] = 36

ERR_BAD_ADDR: Final[bytes] = b"TOKEN:BAD_ADDR"
ERR_BAD_AMOUNT: Final[bytes] = b"TOKEN:BAD_AMOUNT"
ERR_BAD_SYMBOL: Final[bytes] = b"TOKEN:BAD_SYMBOL"
ERR_BAD_NAME: Final[bytes] = b"TOKEN:BAD_NAME"
ERR_BAD_DECIMALS: Final[bytes] = b"TOKEN:BAD_DECIMALS"
ERR_INSUFFICIENT_BALANCE: Final[bytes] = b"TOKEN:INSUFFICIENT_BALANCE"
ERR_ALLOWANCE_LOW: Final[bytes] = b"TOKEN:ALLOWANCE_LOW"


def key_balance(addr: bytes) -> bytes:
    require_address(addr)
    return BAL_PREFIX + bytes(addr)


def key_allow(owner: bytes, spender: bytes) -> bytes:
    require_address(owner)
    require_address(spender)
    return ALLOW_PREFIX + bytes(owner) + b"|" + bytes(spender)


def require_address(addr: bytes) -> None:
    """Ensure `addr` is bytes of exactly the host's address width."""
    if not isinstance(addr, (bytes, bytearray)) or len(addr) != abi.address_len():
        abi.revert(ERR_BAD_ADDR)


def require_amount(n: int) -> None:
    if not is_u256(n):
        abi.revert(ERR_BAD_AMOUNT)


def is_printable_ascii(s: bytes) -> bool:
    if not isinstance(s, (bytes, bytearray)) or len(s) == 0:
        return False
    return all(32 <= b <= 126 for b in s)


def require_symbol(sym: bytes) -> None:
    if not is_printable_ascii(sym) or not (1 <= len(sym) <= 11):
        abi.revert(ERR_BAD_SYMBOL)


def require_name(name: bytes) -> None:
    if not is_printable_ascii(name) or not (1 <= len(name) <= 64):
        abi.revert(ERR_BAD_NAME)


def require_decimals(n: int) -> None:
    if not isinstance(n, int) or isinstance(n, bool) or not (0 <= n <= MAX_DECIMALS):
        abi.revert(ERR_BAD_DECIMALS)


__all__ = [
    "BAL_PREFIX",
    "ALLOW_PREFIX",
    "EVT_TRANSFER",
    "EVT_APPROVAL",
    "DEFAULT_DECIMALS",
    "MAX_DECIMALS",
    "ERR_BAD_ADDR",
    "ERR_BAD_AMOUNT",
    "ERR_BAD_SYMBOL",
    "ERR_BAD_NAME",
    "ERR_BAD_DECIMALS",
    "ERR_INSUFFICIENT_BALANCE",
    "ERR_ALLOWANCE_LOW",
    "key_balance",
    "key_allow",
    "require_address",
    "require_amount",
    "require_symbol",
    "require_name",
    "require_decimals",
    "is_printable_ascii",
]
