"""
dropvm runtime package

The deterministic host and the APIs it exposes to contracts through
``dropvm.stdlib``.

Convenience re-exports live here so callers can do:

    from dropvm.runtime import Host, BlockEnv, Journal
    from dropvm.runtime import events, hashing  # module namespaces

Notes
-----
- All code that can affect determinism is behind explicit APIs.
- No wall-clock I/O or system randomness is exposed here.
"""

from __future__ import annotations

from ..version import __version__  # re-export
from . import events_api as events
from . import hash_api as hashing  # avoid shadowing builtin `hash`
from . import loader as loader
from .context import BlockEnv, CallFrame
from .host import ActiveFrame, Host, current
from .journal import Journal

__all__ = [
    "__version__",
    "Host",
    "ActiveFrame",
    "current",
    "BlockEnv",
    "CallFrame",
    "Journal",
    "events",
    "hashing",
    "loader",
]
