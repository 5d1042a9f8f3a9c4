"""Event emission for contracts."""

from __future__ import annotations

from typing import Any, Mapping

from ..runtime.host import current


def emit(name: bytes, args: Mapping[str, Any]) -> None:
    """
    Emit an event from the executing contract.

    `name` is a short bytes tag (b"Claim"); `args` maps identifier-like str keys
    to bytes, int or bool values. Events from a call that later fails are
    discarded with the rest of its writes.
    """
    af = current()
    af.host.emit(af, name, args)


__all__ = ["emit"]
