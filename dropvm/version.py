"""dropvm.version — semantic version with an optional environment override.

Resolution order:
- DROPVM_VERSION env var
- installed package metadata for ``merkledrop``
- BASE_VERSION
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import metadata as importlib_metadata

# Bump when host semantics visible to contracts change (journal, events, calls).
BASE_VERSION = "0.1.0"


@lru_cache(maxsize=1)
def compute_version() -> str:
    env = os.getenv("DROPVM_VERSION")
    if env:
        return env.strip()
    try:
        return importlib_metadata.version("merkledrop")
    except importlib_metadata.PackageNotFoundError:
        return BASE_VERSION


__version__ = compute_version()

__all__ = ["BASE_VERSION", "compute_version", "__version__"]
