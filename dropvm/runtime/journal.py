"""
dropvm.runtime.journal — journaling writes, checkpoints, revert/commit.

This module provides a deterministic, in-memory write journal for the contract
host. It supports nested checkpoints via a stack of overlays. Writes go to the
top overlay; reads consult overlays from top → base. `commit()` merges the top
overlay into the next layer (or the base state if it's the last layer).
`revert()` discards the top overlay.

Three kinds of state are journaled together so a failed call rolls back all of
them at once:

- contract storage, per (address, key), with explicit deletion markers
- native balances, per address
- emitted events, in emission order

Intended usage
--------------
    j = Journal()
    j.begin()                       # start a checkpoint
    j.storage_set(addr, b"k", b"v")
    j.set_balance(addr, 10)
    j.commit()                      # apply to parent/base

Notes
-----
- The journal does not enforce economic rules; the host validates transfers
  before writing balances.
- An empty value written to storage is a deletion.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..errors import VmError

# Marks a key deleted in an overlay (distinct from "not staged here").
_DELETED = None
_MISSING = object()


def _b(x: bytes | bytearray | memoryview, *, name: str) -> bytes:
    if not isinstance(x, (bytes, bytearray, memoryview)):
        raise TypeError(f"{name} must be bytes-like")
    return bytes(x)


# =============================================================================
# Overlay model
# =============================================================================


@dataclass
class _Overlay:
    """
    A single journal layer.

    - `storage`: staged storage changes. `None` means deletion for that key.
    - `balances`: staged native balances (absolute values, not deltas).
    - `events`: events emitted while this layer was on top.
    """

    storage: Dict[bytes, Dict[bytes, Optional[bytes]]] = field(default_factory=dict)
    balances: Dict[bytes, int] = field(default_factory=dict)
    events: List[Any] = field(default_factory=list)

    def storage_get_local(self, addr: bytes, key: bytes) -> Any:
        m = self.storage.get(addr)
        if m is None:
            return _MISSING
        return m.get(key, _MISSING)

    def storage_set_local(self, addr: bytes, key: bytes, value: Optional[bytes]) -> None:
        self.storage.setdefault(addr, {})[key] = value


# =============================================================================
# Journal
# =============================================================================


class Journal:
    """
    A copy-on-write write journal with nested checkpoints.

    API highlights
    --------------
    - begin() / commit() / revert() / depth()
    - storage_get(), storage_set(), storage_delete(), storage_items()
    - get_balance(), set_balance()
    - append_event(), events()

    Reads consult overlays from top to bottom and then the base. Writes always
    target the top overlay. The root overlay is never popped; committing it
    applies it to the base.
    """

    def __init__(self) -> None:
        self._base_storage: Dict[bytes, Dict[bytes, bytes]] = {}
        self._base_balances: Dict[bytes, int] = {}
        self._base_events: List[Any] = []
        self._layers: List[_Overlay] = [_Overlay()]

    # --------------------------------------------------------------------- #
    # Checkpointing
    # --------------------------------------------------------------------- #

    def depth(self) -> int:
        """Number of overlays (>= 1)."""
        return len(self._layers)

    def begin(self) -> int:
        """Start a new checkpoint. Returns the new depth marker (int)."""
        self._layers.append(_Overlay())
        return len(self._layers)

    def commit(self) -> None:
        """Commit the top overlay into its parent, or into the base if it is the root."""
        if len(self._layers) > 1:
            top = self._layers.pop()
            self._merge_layers(self._layers[-1], top)
        else:
            self._apply_to_base(self._layers[0])
            self._layers[0] = _Overlay()

    def revert(self) -> None:
        """Discard the top overlay (or clear it if it's the root)."""
        if len(self._layers) > 1:
            self._layers.pop()
        else:
            self._layers[0] = _Overlay()

    def revert_to(self, marker: int) -> None:
        """Revert repeatedly until the current depth equals `marker`."""
        if marker < 1:
            raise ValueError("marker must be >= 1")
        while len(self._layers) > marker:
            self.revert()

    # --------------------------------------------------------------------- #
    # Storage API
    # --------------------------------------------------------------------- #

    def storage_get(
        self,
        address: bytes | bytearray | memoryview,
        key: bytes | bytearray | memoryview,
        default: bytes = b"",
    ) -> bytes:
        """Read storage with overlay precedence. Returns `default` if absent."""
        addr = _b(address, name="address")
        key_b = _b(key, name="key")
        for layer in reversed(self._layers):
            local = layer.storage_get_local(addr, key_b)
            if local is _MISSING:
                continue
            return default if local is _DELETED else local
        return self._base_storage.get(addr, {}).get(key_b, default)

    def storage_set(
        self,
        address: bytes | bytearray | memoryview,
        key: bytes | bytearray | memoryview,
        value: bytes | bytearray | memoryview,
    ) -> None:
        """Stage a storage write in the top overlay. Empty value is a deletion."""
        addr = _b(address, name="address")
        key_b = _b(key, name="key")
        val_b = _b(value, name="value")
        self._layers[-1].storage_set_local(addr, key_b, val_b if val_b else _DELETED)

    def storage_delete(
        self,
        address: bytes | bytearray | memoryview,
        key: bytes | bytearray | memoryview,
    ) -> None:
        """Explicit storage deletion in the top overlay."""
        addr = _b(address, name="address")
        key_b = _b(key, name="key")
        self._layers[-1].storage_set_local(addr, key_b, _DELETED)

    def storage_items(self, address: bytes | bytearray | memoryview) -> Iterator[Tuple[bytes, bytes]]:
        """
        Iterate visible (key, value) for an address with overlay precedence.
        Stable order by key.
        """
        addr = _b(address, name="address")
        visible: Dict[bytes, bytes] = dict(self._base_storage.get(addr, {}))
        for layer in self._layers:
            for k, v in layer.storage.get(addr, {}).items():
                if v is _DELETED:
                    visible.pop(k, None)
                else:
                    visible[k] = v
        for k in sorted(visible):
            yield k, visible[k]

    # --------------------------------------------------------------------- #
    # Balances
    # --------------------------------------------------------------------- #

    def get_balance(self, address: bytes | bytearray | memoryview) -> int:
        addr = _b(address, name="address")
        for layer in reversed(self._layers):
            if addr in layer.balances:
                return layer.balances[addr]
        return self._base_balances.get(addr, 0)

    def set_balance(self, address: bytes | bytearray | memoryview, amount: int) -> None:
        addr = _b(address, name="address")
        if not isinstance(amount, int) or amount < 0:
            raise VmError("balance must be a non-negative int", code="bad_balance")
        self._layers[-1].balances[addr] = amount

    # --------------------------------------------------------------------- #
    # Events
    # --------------------------------------------------------------------- #

    def append_event(self, event: Any) -> None:
        self._layers[-1].events.append(event)

    def events(self) -> List[Any]:
        """All visible events: committed ones first, then pending in layer order."""
        out = list(self._base_events)
        for layer in self._layers:
            out.extend(layer.events)
        return out

    # --------------------------------------------------------------------- #
    # Internal merge/apply
    # --------------------------------------------------------------------- #

    @staticmethod
    def _merge_layers(dst: _Overlay, src: _Overlay) -> None:
        for addr, writes in src.storage.items():
            dst.storage.setdefault(addr, {}).update(writes)
        dst.balances.update(src.balances)
        dst.events.extend(src.events)

    def _apply_to_base(self, layer: _Overlay) -> None:
        for addr, writes in layer.storage.items():
            bucket = self._base_storage.setdefault(addr, {})
            for k, v in writes.items():
                if v is _DELETED:
                    bucket.pop(k, None)
                else:
                    bucket[k] = v
            if not bucket:
                self._base_storage.pop(addr, None)
        for addr, bal in layer.balances.items():
            if bal:
                self._base_balances[addr] = bal
            else:
                self._base_balances.pop(addr, None)
        self._base_events.extend(layer.events)


__all__ = ["Journal"]
