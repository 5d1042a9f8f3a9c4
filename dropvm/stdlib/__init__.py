"""
dropvm.stdlib
=============

Contract-facing standard library surface.

Contracts do:

    from dropvm.stdlib import abi, calls, events, hash, storage, treasury

Exports
-------
- storage  : get(key) -> bytes, set(key, value), delete(key)   (scoped to the executing contract)
- events   : emit(name: bytes, args: dict)
- hash     : keccak256(b, domain=b""), sha3_256(b, domain=b"")
- abi      : revert, require, caller, origin, value, self_address, block_height, block_timestamp, chain_id
- treasury : balance(address=None) -> int, transfer(to, amount)
- calls    : call(address, fn, *args, value=0)

Every function except those in ``hash`` requires an active call and raises
``VmError(code="no_frame")`` outside one.
"""

from __future__ import annotations

from . import abi, calls, events, hash, storage, treasury

__all__ = ("abi", "calls", "events", "hash", "storage", "treasury")
