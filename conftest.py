# -*- coding: utf-8 -*-
"""
Shared pytest fixtures for dropvm and airdrop.

- Stable environment defaults (hash seed, UTC, no stray DROPVM_* overrides)
- Deterministic account addresses derived from a tag via SHA3
- A fresh :class:`dropvm.Host` per test
- Readable diffs for bytes/dict comparisons

Usage (inside a test file):
    def test_flow(host, accounts):
        alice = accounts["alice"]
        host.credit(alice, 1_000)
"""
from __future__ import annotations

import hashlib
import json
import os
from typing import Any, Dict, Iterator, List, Optional

import pytest

os.environ.setdefault("PYTHONHASHSEED", "0")
os.environ.setdefault("TZ", "UTC")

_DROPVM_ENV = (
    "DROPVM_STRICT",
    "DROPVM_ADDRESS_LEN",
    "DROPVM_MAX_CALL_DEPTH",
    "DROPVM_MAX_STORAGE_KEY_BYTES",
    "DROPVM_MAX_STORAGE_VAL_BYTES",
    "DROPVM_MAX_LOGS_PER_CALL",
)

GENESIS_TIMESTAMP = 1_700_000_000


def det_address(tag: str, length: int = 32) -> bytes:
    """Stable pseudo-address for `tag` (sha3-256 stream, truncated to `length`)."""
    out = b""
    ctr = 0
    while len(out) < length:
        out += hashlib.sha3_256(f"tests-addr-v1|{tag}|{ctr}".encode("utf-8")).digest()
        ctr += 1
    return out[:length]


@pytest.fixture(autouse=True)
def _clean_vm_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Every test starts from default VM limits."""
    from dropvm.config import load_config

    for name in _DROPVM_ENV:
        monkeypatch.delenv(name, raising=False)
    load_config.cache_clear()
    yield
    load_config.cache_clear()


@pytest.fixture
def accounts() -> Dict[str, bytes]:
    names = ("admin", "alice", "bob", "carol", "fee_sink", "liquidity", "dev", "treasury", "outsider")
    return {n: det_address(n) for n in names}


@pytest.fixture
def host():
    from dropvm import Host

    return Host(timestamp=GENESIS_TIMESTAMP)


def pytest_assertrepr_compare(op: str, left: Any, right: Any) -> Optional[List[str]]:
    if isinstance(left, (bytes, bytearray)) and isinstance(right, (bytes, bytearray)) and op == "==":
        def hexdump(b: bytes) -> str:
            return " ".join(f"{x:02x}" for x in b)
        return [
            "bytes differ:",
            f" left: {hexdump(bytes(left))}",
            f"right: {hexdump(bytes(right))}",
        ]
    if isinstance(left, dict) and isinstance(right, dict) and op == "==":
        try:
            lj = json.dumps(left, sort_keys=True, indent=2, default=lambda o: o.hex() if isinstance(o, bytes) else str(o))
            rj = json.dumps(right, sort_keys=True, indent=2, default=lambda o: o.hex() if isinstance(o, bytes) else str(o))
        except (TypeError, ValueError):
            return None
        return ["dicts differ (compact JSON):", " left:", lj, " right:", rj]
    return None


@pytest.fixture
def make_address():
    """Factory fixture: ``make_address("tag") -> bytes``."""
    return det_address
