"""
ABI type references and the fixed type-name table.

A `TypeRef` is the canonical, hashable descriptor of an argument or return
type. Descriptions may spell types either with their canonical contract-ABI
names ("uint256", "address", "bytes", "uint8[4]") or with the native aliases
common in contract toolchains ("u32", "U256", "Address", "Vec<u8>",
"[u8; 4]", "H256"). Both normalise to the same `TypeRef`, and
`TypeRef.canonical_str()` renders the name used in canonical signatures and
in the manifest.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from ..errors import AbiDeriveError

__all__ = [
    "AbiTypeError",
    "TypeRef",
    "TypeSpec",
    "parse_type",
    "UINT256",
    "ADDRESS",
    "BOOL",
    "BYTES",
]


class AbiTypeError(AbiDeriveError, TypeError):
    """Raised when a type spec is malformed or unsupported."""

    default_code = "abi_type_error"


@dataclass(frozen=True)
class TypeRef:
    """
    Canonical type descriptor.

    Kinds:
      - "uint" | "int": `bits` in 8..256, multiple of 8
      - "bytes": `bits` set (multiple of 8, up to 256) for bytesN, None for dynamic bytes
      - "bool" | "address" | "string"
      - "array": `item` + `length` (None for a dynamically sized array)
    """

    kind: str
    bits: Optional[int] = None
    item: Optional["TypeRef"] = None
    length: Optional[int] = None

    def canonical_str(self) -> str:
        if self.kind in ("uint", "int"):
            return f"{self.kind}{self.bits}"
        if self.kind == "bytes":
            if self.bits:
                return f"bytes{self.bits // 8}"
            return "bytes"
        if self.kind in ("bool", "address", "string"):
            return self.kind
        if self.kind == "array":
            if self.item is None:
                raise AbiTypeError("array type without item type")
            suffix = f"[{self.length}]" if self.length is not None else "[]"
            return f"{self.item.canonical_str()}{suffix}"
        raise AbiTypeError(f"unsupported TypeRef kind: {self.kind}")

    def is_dynamic(self) -> bool:
        if self.kind in ("uint", "int", "bool", "address"):
            return False
        if self.kind == "bytes":
            return self.bits is None
        if self.kind == "string":
            return True
        if self.kind == "array":
            return self.length is None or bool(self.item and self.item.is_dynamic())
        return True

    def __str__(self) -> str:
        return self.canonical_str()


TypeSpec = Union[str, Mapping[str, Any], TypeRef]

UINT256 = TypeRef("uint", bits=256)
ADDRESS = TypeRef("address")
BOOL = TypeRef("bool")
BYTES = TypeRef("bytes")

# Native names with a single fixed meaning.
_ALIASES = {
    "bool": BOOL,
    "address": ADDRESS,
    "Address": ADDRESS,
    "bytes": BYTES,
    "string": TypeRef("string"),
    "String": TypeRef("string"),
    "uint": UINT256,
    "int": TypeRef("int", bits=256),
    "U256": UINT256,
    "U128": TypeRef("uint", bits=128),
    "U64": TypeRef("uint", bits=64),
    "H256": TypeRef("bytes", bits=256),
    "H160": TypeRef("bytes", bits=160),
}

_RUST_FIXED_ARRAY_RE = re.compile(r"^\[\s*(?P<item>.+?)\s*;\s*(?P<len>\d+)\s*\]$")
_VEC_RE = re.compile(r"^Vec\s*<\s*(?P<item>.+)\s*>$")
_SUFFIX_ARRAY_RE = re.compile(r"^(?P<base>.+)\[(?P<len>\d*)\]$")
_INT_RE = re.compile(r"^(?P<kind>u?int)(?P<bits>\d+)$")
_SHORT_INT_RE = re.compile(r"^(?P<kind>[ui])(?P<bits>\d+)$")
_BYTES_N_RE = re.compile(r"^bytes(?P<n>\d+)$")


def parse_type(spec: TypeSpec) -> TypeRef:
    """
    Parse a type spec (string, dict form or TypeRef) into a `TypeRef`.

    Dict forms:
      {"type": "array", "items": <spec>, "length": N?}
      {"type": "<string spec>"}
    """
    if isinstance(spec, TypeRef):
        return spec
    if isinstance(spec, Mapping):
        return _parse_mapping(spec)
    if not isinstance(spec, str) or not spec.strip():
        raise AbiTypeError(f"type spec must be a non-empty string, got {spec!r}")
    return _parse_string(spec.strip())


def _parse_mapping(spec: Mapping[str, Any]) -> TypeRef:
    kind = spec.get("type")
    if not isinstance(kind, str) or not kind:
        raise AbiTypeError("type object missing 'type' field")
    if kind == "array":
        if "items" not in spec:
            raise AbiTypeError("array type missing 'items'")
        length = spec.get("length")
        if length is not None and (isinstance(length, bool) or not isinstance(length, int) or length <= 0):
            raise AbiTypeError(f"invalid array length: {length!r}")
        return TypeRef("array", item=parse_type(spec["items"]), length=length)
    return _parse_string(kind.strip())


def _parse_string(s: str) -> TypeRef:
    alias = _ALIASES.get(s)
    if alias is not None:
        return alias

    m = _RUST_FIXED_ARRAY_RE.match(s)
    if m:
        return TypeRef("array", item=_parse_string(m.group("item")), length=_array_len(m.group("len")))

    m = _VEC_RE.match(s)
    if m:
        inner = m.group("item").strip()
        if inner == "u8":
            return BYTES
        return TypeRef("array", item=_parse_string(inner), length=None)

    # Right-most dimension is the outermost array: uint8[4][2] is two uint8[4].
    m = _SUFFIX_ARRAY_RE.match(s)
    if m:
        raw_len = m.group("len")
        length = _array_len(raw_len) if raw_len else None
        return TypeRef("array", item=_parse_string(m.group("base").strip()), length=length)

    m = _INT_RE.match(s) or _SHORT_INT_RE.match(s)
    if m:
        kind = "uint" if m.group("kind").startswith("u") else "int"
        return TypeRef(kind, bits=_int_bits(int(m.group("bits")), s))

    m = _BYTES_N_RE.match(s)
    if m:
        n = int(m.group("n"))
        if n < 1 or n > 32:
            raise AbiTypeError(f"bytesN width must be in 1..32: {s!r}")
        return TypeRef("bytes", bits=n * 8)

    raise AbiTypeError(f"unsupported type spec: {s!r}")


def _int_bits(bits: int, spec: str) -> int:
    if bits < 8 or bits > 256 or bits % 8:
        raise AbiTypeError(f"integer width must be a multiple of 8 in 8..256: {spec!r}")
    return bits


def _array_len(raw: str) -> int:
    n = int(raw)
    if n <= 0:
        raise AbiTypeError("fixed array length must be positive")
    return n
