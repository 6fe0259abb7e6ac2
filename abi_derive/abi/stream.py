"""
Word-stream adapters over the contract ABI codec (eth-abi).

Generated endpoints and clients never touch the 32-byte word layout
directly; they go through these two small collaborators:

- `Stream(payload).pop(type)` decodes the next argument of a static or
  dynamic type. Static types occupy their head slots in place; dynamic types
  store a head word holding the byte offset of their tail, relative to the
  start of the payload.
- `Sink(capacity).push(type, value)` accumulates values and
  `drain_to(buffer)` appends the standard head/tail encoding of everything
  pushed so far.

Values use eth-abi's Python mapping: ints, bools, `bytes`, checksummed
"0x…" strings for addresses, tuples for arrays.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Tuple

from eth_abi import decode as _abi_decode
from eth_abi import encode as _abi_encode
from eth_abi.exceptions import DecodingError, EncodingError
from eth_utils import to_checksum_address

from ..errors import AbiDeriveError
from .types import AbiTypeError, TypeRef, TypeSpec, parse_type

__all__ = ["StreamError", "SinkError", "Stream", "Sink", "head_size", "encode_values", "WORD"]

WORD = 32


class StreamError(AbiDeriveError):
    default_code = "stream_decode_failed"


class SinkError(AbiDeriveError):
    default_code = "sink_encode_failed"


def head_size(typ: TypeRef) -> int:
    """Bytes a value of `typ` occupies in the head section of an encoding."""
    if typ.is_dynamic():
        return WORD
    if typ.kind == "array":
        if typ.item is None or typ.length is None:
            raise AbiTypeError(f"array type without item or length: {typ!r}")
        return typ.length * head_size(typ.item)
    return WORD


def _checksum_addresses(typ: TypeRef, value: Any) -> Any:
    """Render decoded addresses, also inside arrays, in checksummed form."""
    if typ.kind == "address":
        return to_checksum_address(value)
    if typ.kind == "array" and typ.item is not None:
        return tuple(_checksum_addresses(typ.item, v) for v in value)
    return value


class Stream:
    """Sequential decoder over one ABI-encoded argument payload."""

    __slots__ = ("_payload", "_pos")

    def __init__(self, payload: bytes) -> None:
        self._payload = bytes(payload)
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._payload) - self._pos

    def _take(self, n: int) -> bytes:
        end = self._pos + n
        if end > len(self._payload):
            raise StreamError(
                "truncated payload",
                context={"need": n, "available": len(self._payload) - self._pos},
            )
        chunk = self._payload[self._pos:end]
        self._pos = end
        return chunk

    def pop(self, typ: TypeSpec) -> Any:
        ref = parse_type(typ)
        name = ref.canonical_str()
        if ref.is_dynamic():
            offset = int.from_bytes(self._take(WORD), "big")
            if offset > len(self._payload):
                raise StreamError(
                    f"offset {offset} beyond payload for {name}",
                    context={"type": name, "offset": offset},
                )
            # Re-root the tail as a one-element tuple whose head points right behind it.
            blob = WORD.to_bytes(WORD, "big") + self._payload[offset:]
        else:
            blob = self._take(head_size(ref))
        try:
            (value,) = _abi_decode([name], blob)
        except (DecodingError, ValueError, OverflowError) as e:
            raise StreamError(f"cannot decode {name}: {e}", context={"type": name}) from e
        return _checksum_addresses(ref, value)

    def pop_many(self, types: Iterable[TypeSpec]) -> List[Any]:
        return [self.pop(t) for t in types]


class Sink:
    """
    Accumulates typed values and renders their joint ABI encoding.

    `capacity` is the number of values the caller intends to push; pushing
    more raises SinkError.
    """

    __slots__ = ("_capacity", "_types", "_values")

    def __init__(self, capacity: Optional[int] = None) -> None:
        self._capacity = capacity
        self._types: List[str] = []
        self._values: List[Any] = []

    def __len__(self) -> int:
        return len(self._values)

    def push(self, typ: TypeSpec, value: Any) -> None:
        if self._capacity is not None and len(self._values) >= self._capacity:
            raise SinkError(f"sink capacity {self._capacity} exceeded")
        self._types.append(parse_type(typ).canonical_str())
        self._values.append(value)

    def finalize(self) -> bytes:
        try:
            return _abi_encode(self._types, self._values)
        except (EncodingError, TypeError, ValueError, OverflowError) as e:
            raise SinkError(
                f"cannot encode {self._signature()}: {e}",
                context={"types": list(self._types)},
            ) from e

    def drain_to(self, buffer: bytearray) -> None:
        buffer.extend(self.finalize())
        self._types.clear()
        self._values.clear()

    def _signature(self) -> str:
        return "(" + ",".join(self._types) + ")"


def encode_values(types: Iterable[TypeSpec], values: Iterable[Any]) -> bytes:
    """Convenience: push every (type, value) pair into a fresh sink."""
    pairs: List[Tuple[TypeSpec, Any]] = list(zip(types, values))
    sink = Sink(len(pairs))
    for typ, value in pairs:
        sink.push(typ, value)
    return sink.finalize()
