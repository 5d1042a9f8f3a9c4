# -*- coding: utf-8 -*-
"""
airdrop.stdlib.access
=====================

Access-control capability for airdrop contracts. Currently a single
administrator role (see :mod:`.ownable`).
"""

from __future__ import annotations

from typing import Final

OWNER_KEY: Final[bytes] = b"access:owner"
ERR_NOT_OWNER: Final[bytes] = b"ACCESS:NOT_OWNER"
ERR_NEW_OWNER_EMPTY: Final[bytes] = b"ACCESS:NEW_OWNER_EMPTY"
ERR_BAD_OWNER: Final[bytes] = b"ACCESS:BAD_OWNER"
EVT_OWNERSHIP_TRANSFERRED: Final[bytes] = b"OwnershipTransferred"

__all__ = ["OWNER_KEY", "ERR_NOT_OWNER", "ERR_NEW_OWNER_EMPTY", "ERR_BAD_OWNER", "EVT_OWNERSHIP_TRANSFERRED"]
