"""
dropvm.config — host limits and feature flags.

This module centralizes configuration for the deterministic contract host. It
has NO third-party deps and is safe to import very early.

Configuration precedence:
  1) Environment variables (DROPVM_*)
  2) Hardcoded safe defaults below

Key env vars (case-insensitive where boolean):
  - DROPVM_STRICT                  (bool)   default: true
  - DROPVM_ADDRESS_LEN             (int)    default: 32
  - DROPVM_MAX_CALL_DEPTH          (int)    default: 64
  - DROPVM_MAX_STORAGE_KEY_BYTES   (int)    default: 128
  - DROPVM_MAX_STORAGE_VAL_BYTES   (int)    default: 131_072   (128 KiB)
  - DROPVM_MAX_LOGS_PER_CALL       (int)    default: 1024

Out-of-range integers are clamped; unparsable values fall back to the default.

Usage:
    from dropvm.config import load_config
    CFG = load_config()
    if CFG.strict_mode: ...
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict

# ----------------------------- helpers ---------------------------------------


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "t", "yes", "y", "on")


def _env_int(name: str, default: int, *, min_v: int, max_v: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        v = int(raw, 0)
    except ValueError:
        return default
    if v < min_v:
        return min_v
    if v > max_v:
        return max_v
    return v


# ------------------------------- config --------------------------------------


@dataclass(frozen=True)
class VMConfig:
    # Feature flags
    strict_mode: bool

    # Account model
    address_len: int

    # Numeric caps / limits (enforced by the host and the stdlib surface)
    max_call_depth: int
    max_storage_key_bytes: int
    max_storage_value_bytes: int
    max_logs_per_call: int

    def as_dict(self) -> Dict[str, Any]:
        return {
            "strict_mode": self.strict_mode,
            "address_len": self.address_len,
            "max_call_depth": self.max_call_depth,
            "max_storage_key_bytes": self.max_storage_key_bytes,
            "max_storage_value_bytes": self.max_storage_value_bytes,
            "max_logs_per_call": self.max_logs_per_call,
        }


@lru_cache(maxsize=1)
def load_config() -> VMConfig:
    """
    Build and cache a VMConfig from environment + safe defaults.
    """
    return VMConfig(
        strict_mode=_env_bool("DROPVM_STRICT", True),
        address_len=_env_int("DROPVM_ADDRESS_LEN", 32, min_v=20, max_v=64),
        max_call_depth=_env_int("DROPVM_MAX_CALL_DEPTH", 64, min_v=8, max_v=1024),
        max_storage_key_bytes=_env_int("DROPVM_MAX_STORAGE_KEY_BYTES", 128, min_v=16, max_v=1024),
        max_storage_value_bytes=_env_int("DROPVM_MAX_STORAGE_VAL_BYTES", 131_072, min_v=32, max_v=1_048_576),
        max_logs_per_call=_env_int("DROPVM_MAX_LOGS_PER_CALL", 1024, min_v=1, max_v=10_000),
    )


__all__ = ["VMConfig", "load_config"]
