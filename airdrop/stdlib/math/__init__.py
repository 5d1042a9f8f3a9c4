# -*- coding: utf-8 -*-
"""
airdrop.stdlib.math
===================

U256 domain helpers. All operations are integer-only; out-of-domain inputs
revert with a stable tag instead of wrapping.
"""

from __future__ import annotations

from typing import Final

from dropvm.stdlib import abi

U256_MAX: Final[int] = 2**256 - 1

ERR_OOB: Final[bytes] = b"UINT:OOB"
ERR_DIV0: Final[bytes] = b"UINT:DIV0"


def is_u256(x: object) -> bool:
    return isinstance(x, int) and not isinstance(x, bool) and 0 <= x <= U256_MAX


def require_u256(*xs: int) -> None:
    """Revert unless every argument is an int in [0, U256_MAX]."""
    for x in xs:
        if not is_u256(x):
            abi.revert(ERR_OOB)


def require_divisor(d: int) -> None:
    require_u256(d)
    if d == 0:
        abi.revert(ERR_DIV0)


def u256_mul_div_down(x: int, y: int, d: int) -> int:
    """floor(x * y / d) without intermediate overflow concerns (Python ints)."""
    require_u256(x, y)
    require_divisor(d)
    return (x * y) // d


__all__ = ["U256_MAX", "ERR_OOB", "ERR_DIV0", "is_u256", "require_u256", "require_divisor", "u256_mul_div_down"]
