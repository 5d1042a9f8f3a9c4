"""
airdrop — a one-time Merkle token distribution on top of :mod:`dropvm`.

Layout
------
- ``airdrop.stdlib``     contract library (ownable, u256 math, token ledger, merkle)
- ``airdrop.contracts``  deployable contracts (distributor, vesting_lock)
- ``airdrop.config``     immutable deployment configuration (DropConfig)
- ``airdrop.deploy``     helpers that deploy and wire the contracts on a Host
- ``airdrop.tools``      off-chain Merkle tree builder / prover / verifier
"""

from __future__ import annotations

from dropvm.version import __version__

__all__ = ["__version__"]
