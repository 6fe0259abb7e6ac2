"""
abi_derive.hashing: Keccak-256 for selectors and event topics.

Strictly bytes-in, bytes-out. This is the pre-standard Keccak padding used by
the contract ABI convention, *not* NIST SHA3-256 (hashlib.sha3_256), which
produces different digests for the same input.
"""

from __future__ import annotations

from Crypto.Hash import keccak as _keccak

__all__ = ["keccak256"]


def _ensure_bytes(buf: object, name: str) -> bytes:
    if isinstance(buf, (bytes, bytearray, memoryview)):
        return bytes(buf)
    raise TypeError(f"{name} must be bytes-like (got {type(buf).__name__})")


def keccak256(data: bytes | bytearray | memoryview) -> bytes:
    h = _keccak.new(digest_bits=256)
    h.update(_ensure_bytes(data, "data"))
    return h.digest()
