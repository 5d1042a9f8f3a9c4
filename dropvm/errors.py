"""
dropvm.errors — structured errors raised by the contract host.

Two families:

- :class:`VmError` — misuse of the host or runtime limits being hit (unknown
  contract, malformed address, call depth exceeded, invalid event payload).
- :class:`Revert` — a contract rejected the operation via ``abi.revert`` or
  ``abi.require``. Carries the raw ``reason`` bytes so callers can compare
  against the contract's published error tags.

Both abort the whole operation; the host rolls back every write made since the
operation started.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping


@dataclass(eq=False)
class VmError(Exception):
    """
    Structured error used inside the dropvm runtime.

    Supported call patterns:

        VmError("simple message")
        VmError("message", code="some_code", context={...})
        VmError("SOME_CODE", "message")

    Attributes:
        code: short machine-readable code string
        message: human-readable message
        context: optional extra fields for debugging / logs
    """

    code: str
    message: str
    context: Dict[str, Any]

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        code: str = kwargs.pop("code", "vm_error")
        ctx = kwargs.pop("context", None)
        context: Dict[str, Any] = dict(ctx) if isinstance(ctx, Mapping) else {}

        if len(args) == 0:
            message = ""
        elif len(args) == 1:
            message = str(args[0])
        else:
            code = str(args[0])
            message = str(args[1])

        super().__init__(message)
        object.__setattr__(self, "code", str(code))
        object.__setattr__(self, "message", message)
        object.__setattr__(self, "context", context)

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": dict(self.context),
        }


class Revert(VmError):
    """Raised when a contract calls ``abi.revert`` or a ``abi.require`` fails."""

    def __init__(self, reason: bytes | str = b"revert", **kwargs: Any) -> None:
        if isinstance(reason, str):
            reason = reason.encode("utf-8")
        self.reason: bytes = bytes(reason)
        super().__init__(
            self.reason.decode("utf-8", errors="replace"),
            code=kwargs.pop("code", "revert"),
            context=kwargs.pop("context", None),
        )

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["reason"] = self.reason.decode("utf-8", errors="replace")
        return d


__all__ = ["VmError", "Revert"]
