"""
Contract-side ABI helpers: reverting and reading the call/block environment.

    from dropvm.stdlib import abi

    abi.require(amount > 0, b"TOKEN:ZERO_AMOUNT")
    sender = abi.caller()
"""

from __future__ import annotations

from typing import NoReturn, Union

from ..errors import Revert
from ..runtime.host import current

Reason = Union[bytes, str]


def revert(reason: Reason = b"revert") -> NoReturn:
    """Abort the current operation with `reason`."""
    raise Revert(reason)


def require(condition: bool, reason: Reason = b"require failed") -> None:
    if not condition:
        raise Revert(reason)


def caller() -> bytes:
    """Immediate sender of the executing call (account or contract)."""
    return current().frame.caller


def origin() -> bytes:
    """Account that started the outermost call."""
    return current().frame.origin


def value() -> int:
    """Native units attached to the executing call."""
    return current().frame.value


def self_address() -> bytes:
    return current().frame.address


def address_len() -> int:
    """Fixed address width of the executing host."""
    return current().host.config.address_len


def block_height() -> int:
    return current().host.block.height


def block_timestamp() -> int:
    return current().host.block.timestamp


def chain_id() -> int:
    return current().host.block.chain_id


__all__ = [
    "revert",
    "require",
    "caller",
    "origin",
    "value",
    "self_address",
    "address_len",
    "block_height",
    "block_timestamp",
    "chain_id",
]
