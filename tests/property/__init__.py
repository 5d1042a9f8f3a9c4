# -*- coding: utf-8 -*-
"""
tests.property package bootstrap.

Shared Hypothesis configuration for the property tests of dropvm and airdrop.

What this does on import:
- Registers named Hypothesis profiles (dev/ci/fast/stress).
- Selects the active profile using HYPOTHESIS_PROFILE, otherwise "ci" on CI
  (CI env var present/truthy) and "dev" locally.
- Re-exports common Hypothesis imports (given, strategies as st) and a few
  domain strategies (addresses, u256 amounts, allocation tables).

Usage in tests:
    from tests.property import given, st, allocations

    @given(allocations())
    def test_every_claim_verifies(rows):
        ...

Environment knobs:
- HYPOTHESIS_PROFILE=dev|ci|fast|stress
- CI=true (auto-pick the 'ci' profile if HYPOTHESIS_PROFILE not set)
"""
from __future__ import annotations

import os
from typing import Final, Tuple

from hypothesis import HealthCheck, Verbosity, given, settings
from hypothesis import strategies as st

# ---- profile registry --------------------------------------------------------


def _hc(*items: HealthCheck) -> Tuple[HealthCheck, ...]:
    return items


# Host-backed examples deploy contracts, so keep example counts modest and
# deadlines off.
settings.register_profile(
    "dev",
    settings(
        max_examples=50,
        deadline=None,
        suppress_health_check=_hc(
            HealthCheck.too_slow,
            HealthCheck.filter_too_much,
            HealthCheck.function_scoped_fixture,
        ),
        verbosity=Verbosity.normal,
        derandomize=False,
    ),
)

settings.register_profile(
    "ci",
    settings(
        max_examples=100,
        deadline=None,
        suppress_health_check=_hc(
            HealthCheck.too_slow,
            HealthCheck.filter_too_much,
            HealthCheck.function_scoped_fixture,
        ),
        verbosity=Verbosity.verbose,
        derandomize=True,
    ),
)

settings.register_profile(
    "fast",
    settings(
        max_examples=15,
        deadline=None,
        suppress_health_check=_hc(HealthCheck.too_slow, HealthCheck.function_scoped_fixture),
        verbosity=Verbosity.normal,
        derandomize=False,
    ),
)

settings.register_profile(
    "stress",
    settings(
        max_examples=500,
        deadline=None,
        suppress_health_check=_hc(
            HealthCheck.too_slow,
            HealthCheck.filter_too_much,
            HealthCheck.data_too_large,
            HealthCheck.function_scoped_fixture,
        ),
        verbosity=Verbosity.normal,
        derandomize=True,
    ),
)


def _env_truthy(name: str) -> bool:
    v = os.getenv(name)
    return (v or "").lower() not in ("", "0", "false", "no", "off")


# Choose active profile (env overrides CI detection)
_active: Final[str] = os.getenv("HYPOTHESIS_PROFILE") or ("ci" if _env_truthy("CI") else "dev")
settings.load_profile(_active)

# ---- domain strategies -------------------------------------------------------

U256_MAX: Final[int] = 2**256 - 1


def active_profile() -> str:
    """Return the name of the active Hypothesis profile."""
    return _active


def addresses(length: int = 32):
    return st.binary(min_size=length, max_size=length)


def amounts(max_value: int = U256_MAX):
    return st.integers(min_value=0, max_value=max_value)


def allocations(min_size: int = 1, max_size: int = 24, max_amount: int = U256_MAX):
    """Non-empty {account: amount} tables with distinct fixed-width accounts."""
    return st.dictionaries(
        keys=addresses(),
        values=amounts(max_amount),
        min_size=min_size,
        max_size=max_size,
    ).map(lambda d: sorted(d.items()))


__all__ = [
    "st",
    "given",
    "active_profile",
    "addresses",
    "amounts",
    "allocations",
    "U256_MAX",
]
