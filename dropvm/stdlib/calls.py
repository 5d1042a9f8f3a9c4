"""Cross-contract calls."""

from __future__ import annotations

from typing import Any

from ..runtime.host import current


def call(address: bytes, fn: str, *args: Any, value: int = 0) -> Any:
    """
    Invoke `fn` on the contract at `address` with the executing contract as
    caller. The callee runs in its own checkpoint; a revert there propagates
    to the caller unchanged.
    """
    af = current()
    return af.host.nested_call(af, address, fn, args, value=value)


__all__ = ["call"]
