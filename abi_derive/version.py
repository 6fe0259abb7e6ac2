"""abi_derive.version: semantic version string.

Resolution order (first match wins):
  1) ABI_DERIVE_VERSION environment variable (exact value)
  2) Installed package metadata for 'abi-derive'
  3) BASE_VERSION + '+dev'
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import metadata as importlib_metadata
from typing import Optional

# Bump when selector, manifest or dispatch outputs change.
BASE_VERSION = "0.1.0"


def _pkg_metadata_version(dist_name: str = "abi-derive") -> Optional[str]:
    try:
        v = importlib_metadata.version(dist_name)
    except importlib_metadata.PackageNotFoundError:
        return None
    return v if v and v != "0.0.0" else None


@lru_cache(maxsize=1)
def compute_version() -> str:
    val = os.getenv("ABI_DERIVE_VERSION")
    if val:
        return val
    meta_v = _pkg_metadata_version()
    if meta_v:
        return meta_v
    return f"{BASE_VERSION}+dev"


__version__ = compute_version()

__all__ = ["__version__", "BASE_VERSION", "compute_version"]
