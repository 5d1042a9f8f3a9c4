# -*- coding: utf-8 -*-
"""
airdrop.stdlib.math.safe_uint
=============================

Checked unsigned arithmetic: revert on overflow/underflow rather than clamp.
"""

from __future__ import annotations

from typing import Final

from dropvm.stdlib import abi

from . import U256_MAX, require_u256

ERR_OVER: Final[bytes] = b"UINT:OVERFLOW"
ERR_UNDER: Final[bytes] = b"UINT:UNDERFLOW"


def u256_add(x: int, y: int) -> int:
    require_u256(x, y)
    z = x + y
    if z > U256_MAX:
        abi.revert(ERR_OVER)
    return z


def u256_sub(x: int, y: int) -> int:
    require_u256(x, y)
    if y > x:
        abi.revert(ERR_UNDER)
    return x - y


__all__ = ["ERR_OVER", "ERR_UNDER", "u256_add", "u256_sub"]
