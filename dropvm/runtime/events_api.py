"""
dropvm.runtime.events_api — event validation and the canonical receipt shape.

Contracts emit ``(name: bytes, args: mapping)``. The host validates the payload
here, stamps it with the emitting contract's address and appends it to the
journal, so events from a reverted call disappear together with its storage
writes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Sequence

from ..errors import VmError

MAX_EVENT_NAME_BYTES = 64
MAX_KEY_LEN = 64
MAX_BYTES_LEN = 4096
MAX_INT_BITS = 256

# Keys must be identifier-like: letters/underscore, then letters/digits/underscore.
_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class Event:
    """An emitted event, as stored in the host log."""

    address: bytes
    name: bytes
    args: Dict[str, Any]

    def __getitem__(self, key: str) -> Any:
        return self.args[key]


@dataclass(frozen=True)
class CanonicalEvent:
    """
    Canonical event representation for receipts:

        address: "0x" + hex of the emitting contract
        name:    event name decoded as ASCII
        args:    sequence of {"k", "t", "v"} dicts
                 t="b" => bytes encoded as 0x-prefixed hex
                 t="i" => integer
                 t="z" => boolean
    """

    address: str
    name: str
    args: Sequence[Mapping[str, Any]]


def _invalid(message: str, **context: Any) -> VmError:
    return VmError(message, code="event_invalid", context=context)


def check_name(name: Any) -> bytes:
    if not isinstance(name, (bytes, bytearray)):
        raise _invalid("event name must be bytes", where="name_type")
    b = bytes(name)
    if not b:
        raise _invalid("event name must be non-empty", where="name_empty")
    if len(b) > MAX_EVENT_NAME_BYTES:
        raise _invalid("event name too long", where="name_length", len=len(b))
    return b


def check_key(key: Any) -> str:
    if not isinstance(key, str):
        raise _invalid("event key must be str", where="key_type")
    if not key or len(key) > MAX_KEY_LEN:
        raise _invalid("event key length out of range", where="key_length", len=len(key))
    if not _KEY_RE.match(key):
        raise _invalid("event key has invalid characters", where="key_grammar", key=key)
    return key


def check_value(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        b = bytes(value)
        if len(b) > MAX_BYTES_LEN:
            raise _invalid("event bytes arg too long", where="value_bytes_length", len=len(b))
        return b
    # bool is a subclass of int, so check it before int.
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value.bit_length() > MAX_INT_BITS:
            raise _invalid("event int arg out of range", where="value_int_bits", bits=value.bit_length())
        return int(value)
    raise _invalid("unsupported event arg type", where="value_type", py_type=type(value).__name__)


def make_event(address: bytes, name: Any, args: Any) -> Event:
    """Validate a contract-supplied payload and build an :class:`Event`."""
    bname = check_name(name)
    if not isinstance(args, Mapping):
        raise _invalid("event args must be a mapping", where="args_type")
    checked = {check_key(k): check_value(v) for k, v in args.items()}
    return Event(address=bytes(address), name=bname, args=checked)


def to_canonical(events: Sequence[Event]) -> List[CanonicalEvent]:
    out: List[CanonicalEvent] = []
    for ev in events:
        enc: List[Dict[str, Any]] = []
        for k, v in ev.args.items():
            if isinstance(v, bytes):
                enc.append({"k": k, "t": "b", "v": "0x" + v.hex()})
            elif isinstance(v, bool):
                enc.append({"k": k, "t": "z", "v": v})
            else:
                enc.append({"k": k, "t": "i", "v": v})
        out.append(
            CanonicalEvent(
                address="0x" + ev.address.hex(),
                name=ev.name.decode("ascii", errors="replace"),
                args=tuple(enc),
            )
        )
    return out


__all__ = [
    "Event",
    "CanonicalEvent",
    "make_event",
    "to_canonical",
    "check_name",
    "check_key",
    "check_value",
    "MAX_EVENT_NAME_BYTES",
    "MAX_KEY_LEN",
    "MAX_BYTES_LEN",
    "MAX_INT_BITS",
]
