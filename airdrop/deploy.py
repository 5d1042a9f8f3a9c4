"""
airdrop.deploy — deploy and wire the airdrop contracts on a :class:`dropvm.Host`.

    host = Host()
    cfg = load_drop_config("drop.json")
    token = deploy_distributor(host, cfg, admin=admin)
    host.call(token, "set_merkle_root", root, sender=admin)
    lock = deploy_vesting_lock(host, token, cfg, sender=admin)
    host.call(token, "start_vest", lock, sender=admin)
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from dropvm import Host
from dropvm import logging as dlog
from dropvm.runtime.context import to_hex

from .config import DropConfig

CONTRACTS_DIR = Path(__file__).resolve().parent / "contracts"
DISTRIBUTOR_MANIFEST = CONTRACTS_DIR / "distributor" / "manifest.json"
VESTING_LOCK_MANIFEST = CONTRACTS_DIR / "vesting_lock" / "manifest.json"

log = dlog.get_logger("airdrop.deploy")


def deploy_distributor(host: Host, cfg: DropConfig, *, admin: bytes) -> bytes:
    """Validate `cfg`, deploy the distributor with `admin` as owner, return its address."""
    cfg.validate(address_len=host.config.address_len)
    address = host.deploy(DISTRIBUTOR_MANIFEST, *cfg.to_init_args(), sender=admin)
    log.info(
        "distributor deployed",
        extra={
            "address": to_hex(address),
            "symbol": cfg.symbol,
            "airdrop_pool": cfg.airdrop_pool,
            "claim_period_ends": cfg.claim_period_ends,
        },
    )
    return address


def deploy_vesting_lock(
    host: Host,
    token: bytes,
    cfg: Optional[DropConfig] = None,
    *,
    sender: bytes,
    cliff_seconds: Optional[int] = None,
    duration_seconds: Optional[int] = None,
) -> bytes:
    """
    Deploy a vesting lock for `token`. Schedule parameters default to the
    ``vest_*`` fields of `cfg`; explicit arguments win.
    """
    cliff = cliff_seconds if cliff_seconds is not None else (cfg.vest_cliff_seconds if cfg else 0)
    if duration_seconds is not None:
        duration = duration_seconds
    elif cfg is not None:
        duration = cfg.vest_duration_seconds
    else:
        raise ValueError("duration_seconds is required when no DropConfig is given")

    address = host.deploy(VESTING_LOCK_MANIFEST, token, cliff, duration, sender=sender)
    log.info(
        "vesting lock deployed",
        extra={"address": to_hex(address), "token": to_hex(token), "cliff": cliff, "duration": duration},
    )
    return address


__all__ = ["deploy_distributor", "deploy_vesting_lock", "DISTRIBUTOR_MANIFEST", "VESTING_LOCK_MANIFEST"]
