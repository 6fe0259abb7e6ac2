"""
abi_derive.config: defaults for the compilation pass and generated clients.

This module centralizes configuration. It is safe to import very early and
only reads the environment; nothing here is consulted implicitly by the
emitters, which always receive their output sink as an explicit argument.
The CLI and `build_client` use these values as defaults.

Configuration precedence:
  1) Environment variables (ABI_DERIVE_*)
  2) Hardcoded safe defaults below

Key env vars (case-insensitive where boolean):
  - ABI_DERIVE_TARGET_DIR         (path)   default: ./target
  - ABI_DERIVE_DEFAULT_GAS        (int)    default: 200_000
  - ABI_DERIVE_LOG_LEVEL          (str)    default: INFO
  - ABI_DERIVE_VALIDATE_MANIFEST  (bool)   default: true

Usage:
    from abi_derive.config import load_config
    CFG = load_config()
    sink = DirectorySink(CFG.target_dir)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

# Gas forwarded by generated clients when the caller does not set one.
DEFAULT_GAS_LIMIT = 200_000

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


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


def _env_path(name: str, default: str) -> Path:
    raw = os.getenv(name) or default
    return Path(raw).expanduser()


def _env_level(name: str, default: str) -> str:
    raw = (os.getenv(name) or default).strip().upper()
    return raw if raw in _LOG_LEVELS else default


# ------------------------------- config --------------------------------------


@dataclass(frozen=True)
class DeriveConfig:
    target_dir: Path
    default_gas: int
    log_level: str
    validate_manifest: bool

    def as_dict(self) -> Dict[str, Any]:
        return {
            "target_dir": str(self.target_dir),
            "default_gas": self.default_gas,
            "log_level": self.log_level,
            "validate_manifest": self.validate_manifest,
        }


@lru_cache(maxsize=1)
def load_config() -> DeriveConfig:
    """
    Build and cache a DeriveConfig from environment + safe defaults.
    """
    return DeriveConfig(
        target_dir=_env_path("ABI_DERIVE_TARGET_DIR", "target"),
        default_gas=_env_int("ABI_DERIVE_DEFAULT_GAS", DEFAULT_GAS_LIMIT, min_v=21_000, max_v=30_000_000),
        log_level=_env_level("ABI_DERIVE_LOG_LEVEL", "INFO"),
        validate_manifest=_env_bool("ABI_DERIVE_VALIDATE_MANIFEST", True),
    )


__all__ = ["DEFAULT_GAS_LIMIT", "DeriveConfig", "load_config"]
