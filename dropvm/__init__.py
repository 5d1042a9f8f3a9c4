"""
dropvm — a deterministic, in-process contract host.

Contracts are plain Python modules; their public functions are entry points.
The host gives every call all-or-nothing semantics over storage, native
balances and events.

    from dropvm import Host

    host = Host()
    addr = host.deploy("airdrop.contracts.vesting_lock.contract", token, 0, 86400, sender=admin)
    host.call(addr, "release", sender=beneficiary)

Contract code imports its surface from :mod:`dropvm.stdlib`.
"""

from __future__ import annotations

from .errors import Revert, VmError
from .runtime.host import Host
from .version import __version__


def version() -> str:
    """Return the dropvm semantic version string."""
    return __version__


__all__ = ["Host", "VmError", "Revert", "__version__", "version"]
