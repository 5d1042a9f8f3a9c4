"""
airdrop.config — immutable deployment configuration for a distributor.

A :class:`DropConfig` is built once (from a dict or a JSON file), validated,
and handed to :func:`airdrop.deploy.deploy_distributor`, which persists it in
contract storage at ``init``. Nothing here is recomputed afterwards.

JSON shape (addresses as 0x-hex, integers as JSON numbers or decimal strings):

    {
      "name": "Drop Token", "symbol": "DROP", "decimals": 18,
      "total_supply": 1000000, "airdrop_pool": 600000,
      "dev_pool": 150000, "liquidity_pool": 200000,
      "claim_period_ends": 1767225600, "service_fee": 1000,
      "fee_recipient": "0x..", "liquidity_recipient": "0x..",
      "dev_beneficiary": "0x..", "treasury_recipient": "0x..",
      "enforce_claim_deadline": false,
      "vest_cliff_seconds": 0, "vest_duration_seconds": 31536000
    }

The treasury pool is derived: ``total_supply - airdrop_pool - dev_pool -
liquidity_pool`` and must not be negative.

Environment:
  AIRDROP_CONFIG   path used by :func:`load_drop_config` when none is given
"""

from __future__ import annotations

import json
import os
from dataclasses import MISSING, asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from dropvm.config import load_config

U256_MAX = 2**256 - 1
ENV_CONFIG_PATH = "AIRDROP_CONFIG"

_ADDRESS_FIELDS = ("fee_recipient", "liquidity_recipient", "dev_beneficiary", "treasury_recipient")
_INT_FIELDS = (
    "decimals",
    "total_supply",
    "airdrop_pool",
    "dev_pool",
    "liquidity_pool",
    "claim_period_ends",
    "service_fee",
    "vest_cliff_seconds",
    "vest_duration_seconds",
)


class ConfigError(ValueError):
    """Invalid deployment configuration. `problems` lists every failed check."""

    def __init__(self, problems: Union[str, List[str]]) -> None:
        self.problems = [problems] if isinstance(problems, str) else list(problems)
        super().__init__("; ".join(self.problems))


def _parse_int(name: str, v: Any) -> int:
    if isinstance(v, bool):
        raise ConfigError(f"{name}: expected integer, got bool")
    if isinstance(v, int):
        return v
    if isinstance(v, str) and v.strip().isascii() and v.strip().isdigit():
        return int(v.strip())
    raise ConfigError(f"{name}: expected integer, got {v!r}")


def _parse_address(name: str, v: Any) -> bytes:
    if isinstance(v, (bytes, bytearray)):
        return bytes(v)
    if isinstance(v, str):
        h = v[2:] if v.startswith(("0x", "0X")) else v
        try:
            return bytes.fromhex(h)
        except ValueError as e:
            raise ConfigError(f"{name}: invalid hex address {v!r}") from e
    raise ConfigError(f"{name}: expected hex address, got {type(v).__name__}")


@dataclass(frozen=True)
class DropConfig:
    name: str
    symbol: str
    total_supply: int
    airdrop_pool: int
    dev_pool: int
    liquidity_pool: int
    claim_period_ends: int
    service_fee: int
    fee_recipient: bytes
    liquidity_recipient: bytes
    dev_beneficiary: bytes
    treasury_recipient: bytes
    decimals: int = 18
    enforce_claim_deadline: bool = False
    vest_cliff_seconds: int = 0
    vest_duration_seconds: int = 365 * 24 * 3600

    @property
    def treasury_pool(self) -> int:
        return self.total_supply - self.airdrop_pool - self.dev_pool - self.liquidity_pool

    # ------------------------------------------------------------------ #
    # Validation
    # ------------------------------------------------------------------ #

    def problems(self, *, address_len: Optional[int] = None) -> List[str]:
        alen = address_len if address_len is not None else load_config().address_len
        out: List[str] = []
        if not isinstance(self.name, str) or not (1 <= len(self.name) <= 64) or not self.name.isascii():
            out.append("name: must be 1..64 ASCII characters")
        if not isinstance(self.symbol, str) or not (1 <= len(self.symbol) <= 11) or not self.symbol.isascii():
            out.append("symbol: must be 1..11 ASCII characters")
        if not isinstance(self.enforce_claim_deadline, bool):
            out.append("enforce_claim_deadline: must be a bool")

        ints_ok = True
        for f in _INT_FIELDS:
            v = getattr(self, f)
            if not isinstance(v, int) or isinstance(v, bool):
                out.append(f"{f}: must be an integer")
                ints_ok = False
            elif not (0 <= v <= U256_MAX):
                out.append(f"{f}: must be in [0, 2**256-1]")
        if isinstance(self.decimals, int) and not (0 <= self.decimals <= 36):
            out.append("decimals: must be in [0, 36]")

        for f in _ADDRESS_FIELDS:
            v = getattr(self, f)
            if not isinstance(v, (bytes, bytearray)) or len(v) != alen:
                out.append(f"{f}: address must be {alen} bytes")

        if ints_ok:
            if self.treasury_pool < 0:
                out.append("allocation: airdrop_pool + dev_pool + liquidity_pool exceeds total_supply")
            if self.vest_duration_seconds == 0 or self.vest_cliff_seconds > self.vest_duration_seconds:
                out.append("vesting: need 0 <= vest_cliff_seconds <= vest_duration_seconds and duration > 0")
        return out

    def validate(self, *, address_len: Optional[int] = None) -> "DropConfig":
        """Raise :class:`ConfigError` listing every problem; return self otherwise."""
        found = self.problems(address_len=address_len)
        if found:
            raise ConfigError(found)
        return self

    # ------------------------------------------------------------------ #
    # (De)serialization
    # ------------------------------------------------------------------ #

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "DropConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(d) - known)
        if unknown:
            raise ConfigError(f"unknown keys: {', '.join(unknown)}")
        kwargs: Dict[str, Any] = {}
        for key, raw in d.items():
            if key in _ADDRESS_FIELDS:
                kwargs[key] = _parse_address(key, raw)
            elif key in _INT_FIELDS:
                kwargs[key] = _parse_int(key, raw)
            elif key == "enforce_claim_deadline":
                if not isinstance(raw, bool):
                    raise ConfigError("enforce_claim_deadline: expected bool")
                kwargs[key] = raw
            else:
                if not isinstance(raw, str):
                    raise ConfigError(f"{key}: expected string")
                kwargs[key] = raw
        missing = sorted(
            f.name for f in fields(cls) if f.name not in kwargs and f.default is MISSING
        )
        if missing:
            raise ConfigError(f"missing keys: {', '.join(missing)}")
        return cls(**kwargs)

    @classmethod
    def from_json(cls, text: str) -> "DropConfig":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigError(f"invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError("config must be a JSON object")
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        for f in _ADDRESS_FIELDS:
            d[f] = "0x" + d[f].hex()
        return d

    def to_init_args(self) -> Tuple[Any, ...]:
        """Positional arguments for the distributor's ``init``."""
        return (
            self.name.encode("ascii"),
            self.symbol.encode("ascii"),
            self.decimals,
            self.total_supply,
            self.airdrop_pool,
            self.dev_pool,
            self.liquidity_pool,
            self.claim_period_ends,
            self.service_fee,
            self.fee_recipient,
            self.liquidity_recipient,
            self.dev_beneficiary,
            self.treasury_recipient,
            self.enforce_claim_deadline,
        )


def load_drop_config(path: Optional[Union[str, Path]] = None) -> DropConfig:
    """Load and validate a config file (`path`, else ``$AIRDROP_CONFIG``)."""
    if path is None:
        path = os.environ.get(ENV_CONFIG_PATH)
    if not path:
        raise ConfigError(f"no config path given and {ENV_CONFIG_PATH} is unset")
    p = Path(path).expanduser()
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"cannot read {p}: {e}") from e
    return DropConfig.from_json(text).validate()


__all__ = ["DropConfig", "ConfigError", "load_drop_config", "ENV_CONFIG_PATH"]
