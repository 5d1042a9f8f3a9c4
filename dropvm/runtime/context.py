"""
dropvm.runtime.context — BlockEnv and CallFrame seen by contracts (deterministic)

These lightweight environments are maintained by the host so contracts can read
chain/call metadata in a *deterministic* way. They contain only pure data
(ints/bytes) and perform strict validation.

- Addresses are raw bytes of exactly ``VMConfig.address_len`` bytes.
- Hex strings (with or without "0x") are accepted by helpers and normalized to
  bytes.
- `timestamp` is the consensus timestamp supplied by the host, never the wall
  clock.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Union

from ..errors import VmError


# ----------------------------- helpers ----------------------------- #

class ContextError(VmError):
    """Validation or coercion failure for BlockEnv/CallFrame."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="context_invalid")


def _strip_0x(s: str) -> str:
    return s[2:] if s.startswith(("0x", "0X")) else s


def to_bytes(value: Union[bytes, bytearray, memoryview, str]) -> bytes:
    """
    Coerce `value` to bytes.
    - If str, interpret as hex (with or without '0x'); odd-length hex is rejected.
    - If a bytes-like object, copy to immutable bytes.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        h = _strip_0x(value.strip())
        if len(h) % 2 != 0:
            raise ContextError(f"hex string must have even length, got {len(h)}")
        try:
            return bytes.fromhex(h)
        except ValueError as e:
            raise ContextError(f"invalid hex string: {value!r}") from e
    raise ContextError(f"cannot convert type {type(value).__name__} to bytes")


def to_hex(b: Union[bytes, bytearray, memoryview]) -> str:
    """Encode bytes as 0x-prefixed lowercase hex."""
    return "0x" + bytes(b).hex()


def _require_non_negative_int(name: str, v: Any) -> int:
    if not isinstance(v, int) or isinstance(v, bool):
        raise ContextError(f"{name} must be int, got {type(v).__name__}")
    if v < 0:
        raise ContextError(f"{name} must be non-negative, got {v}")
    return v


# ----------------------------- models ------------------------------ #

@dataclass(frozen=True)
class BlockEnv:
    """
    Deterministic per-block environment.

    height:     Block height (0-based).
    timestamp:  Consensus timestamp (seconds since epoch).
    chain_id:   Integer chain identifier.
    """
    height: int
    timestamp: int
    chain_id: int = 1337

    def __post_init__(self) -> None:
        _require_non_negative_int("height", self.height)
        _require_non_negative_int("timestamp", self.timestamp)
        _require_non_negative_int("chain_id", self.chain_id)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "BlockEnv":
        return cls(
            height=_require_non_negative_int("height", d.get("height", 0)),
            timestamp=_require_non_negative_int("timestamp", d.get("timestamp", 0)),
            chain_id=_require_non_negative_int("chain_id", d.get("chain_id", 1337)),
        )

    def advanced(self, *, seconds: int = 0, blocks: int = 1) -> "BlockEnv":
        """Return the environment `blocks` blocks and `seconds` seconds later."""
        _require_non_negative_int("seconds", seconds)
        _require_non_negative_int("blocks", blocks)
        return replace(self, height=self.height + blocks, timestamp=self.timestamp + seconds)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CallFrame:
    """
    One active contract invocation.

    address:  the executing contract.
    caller:   the immediate sender (an account or another contract).
    origin:   the account that started the outermost call.
    value:    native units attached to this call (already credited to `address`).
    fn:       the function being executed.
    depth:    0 for the outermost call.
    """
    address: bytes
    caller: bytes
    origin: bytes
    value: int
    fn: str
    depth: int

    def __post_init__(self) -> None:
        _require_non_negative_int("value", self.value)
        _require_non_negative_int("depth", self.depth)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": to_hex(self.address),
            "caller": to_hex(self.caller),
            "origin": to_hex(self.origin),
            "value": self.value,
            "fn": self.fn,
            "depth": self.depth,
        }


__all__ = [
    "ContextError",
    "to_bytes",
    "to_hex",
    "BlockEnv",
    "CallFrame",
]
