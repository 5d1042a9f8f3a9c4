"""Native-value helpers bound to the executing contract."""

from __future__ import annotations

from typing import Optional

from ..runtime.host import current


def balance(address: Optional[bytes] = None) -> int:
    """Native balance of `address`, or of the executing contract when omitted."""
    af = current()
    return af.host.balance(af.frame.address if address is None else address)


def transfer(to: bytes, amount: int) -> None:
    """
    Pay `amount` native units from the executing contract to `to`.

    If `to` hosts a contract exporting ``receive``, that function runs as a
    nested call carrying the value. Reverts with
    ``TREASURY:INSUFFICIENT_FUNDS`` when the contract cannot cover `amount`.
    """
    af = current()
    af.host.native_transfer(af, to, amount)


__all__ = ["balance", "transfer"]
