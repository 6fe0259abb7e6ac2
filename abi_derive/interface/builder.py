from __future__ import annotations

"""
Interface model builder

Turns a raw, language-agnostic interface description into an `Interface`:

    {
      "name": "Token",
      "methods": [
        {"name": "constructor", "inputs": [["supply", "uint256"]], "constructor": true},
        {"name": "transfer",
         "inputs": [{"name": "to", "type": "address"}, {"name": "amount", "type": "uint256"}],
         "outputs": ["bool"]},
        {"name": "deposit", "payable": true},
        {"name": "Transfer", "event": true,
         "inputs": [{"name": "from", "type": "address", "indexed": true},
                    {"name": "to", "type": "address", "indexed": true},
                    {"name": "value", "type": "uint256"}]}
      ]
    }

Each declaration must have one of four shapes: plain method, payable method,
constructor, event. Anything else raises `DescriptionError`. The builder
leaves selectors and canonical strings unset; see `normalize`.
"""

import json
import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..abi.types import AbiTypeError, TypeRef, parse_type
from ..errors import DescriptionError
from .model import CONSTRUCTOR, Event, Interface, Item, Param, Signature

log = logging.getLogger(__name__)

Description = Union[str, bytes, Mapping[str, Any]]

# Log topics hold at most three indexed words after the signature topic.
MAX_INDEXED = 3

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_ALLOWED_KEYS = frozenset(
    {"name", "inputs", "arguments", "outputs", "returns", "payable", "constructor", "event"}
)


def build_interface(description: Description) -> Interface:
    """
    Build an (unannotated) `Interface` from a description mapping or JSON text.

    Raises:
        DescriptionError: on any malformed input.
    """
    raw = _load(description)

    name = _identifier(raw.get("name"), "interface name")
    decls = raw.get("methods", raw.get("items", []))
    if decls is None:
        decls = []
    if not isinstance(decls, list):
        raise DescriptionError("'methods' must be a list", context={"interface": name})

    constructor: Optional[Signature] = None
    items: List[Item] = []
    seen: Dict[str, int] = {}

    for index, decl in enumerate(decls):
        if not isinstance(decl, Mapping):
            raise DescriptionError(
                f"declaration #{index} must be an object",
                context={"interface": name, "index": index},
            )
        item, is_ctor = _build_declaration(decl, index, name)
        if item.name in seen:
            raise DescriptionError(
                f"duplicate declaration {item.name!r}",
                context={"interface": name, "index": index, "first": seen[item.name]},
            )
        seen[item.name] = index
        if is_ctor:
            if constructor is not None:
                raise DescriptionError(
                    "more than one declaration is marked constructor",
                    context={"interface": name, "index": index},
                )
            assert isinstance(item, Signature)
            constructor = item
        else:
            items.append(item)

    intf = Interface(name=name, constructor=constructor, items=tuple(items))
    log.debug(
        "built interface %s: %d items, constructor=%s",
        name, len(intf.items), constructor is not None,
    )
    return intf


# ---------------
# Helpers
# ---------------

def _load(description: Description) -> Mapping[str, Any]:
    if isinstance(description, Mapping):
        return description
    if isinstance(description, (str, bytes)):
        try:
            val = json.loads(description)
        except json.JSONDecodeError as e:
            raise DescriptionError(f"description JSON parse error: {e}") from e
        if not isinstance(val, dict):
            raise DescriptionError("description top-level must be an object")
        return val
    raise DescriptionError(f"unsupported description type: {type(description).__name__}")


def _identifier(value: Any, what: str) -> str:
    if not isinstance(value, str) or not _IDENTIFIER_RE.match(value):
        raise DescriptionError(f"{what} must be an identifier, got {value!r}")
    return value


def _flag(decl: Mapping[str, Any], key: str, where: str) -> bool:
    val = decl.get(key, False)
    if not isinstance(val, bool):
        raise DescriptionError(f"{where}: '{key}' must be a boolean, got {val!r}")
    return val


def _type(spec: Any, where: str) -> TypeRef:
    try:
        return parse_type(spec)
    except AbiTypeError as e:
        raise DescriptionError(f"{where}: {e.message}", context={"type": repr(spec)}) from e


def _build_declaration(decl: Mapping[str, Any], index: int, intf_name: str) -> Tuple[Item, bool]:
    unknown = sorted(set(decl) - _ALLOWED_KEYS)
    name = _identifier(decl.get("name"), f"{intf_name} declaration #{index} name")
    where = f"{intf_name}.{name}"
    if unknown:
        raise DescriptionError(f"{where}: unsupported attributes {unknown}", context={"keys": unknown})

    is_event = _flag(decl, "event", where)
    is_ctor = _flag(decl, "constructor", where)
    is_payable = _flag(decl, "payable", where)

    if not is_ctor and name == CONSTRUCTOR:
        raise DescriptionError(f"{where}: '{CONSTRUCTOR}' is reserved for the constructor declaration")

    raw_inputs = _aliased(decl, "inputs", "arguments", where)
    raw_outputs = _aliased(decl, "outputs", "returns", where)
    outputs = _build_outputs(raw_outputs, where)

    if is_event:
        if is_ctor or is_payable:
            raise DescriptionError(f"{where}: an event cannot be payable or a constructor")
        if outputs:
            raise DescriptionError(f"{where}: an event cannot declare return types")
        params = _build_params(raw_inputs, where, allow_indexed=True)
        _check_indexed(params, where)
        return Event(name=name, arguments=params), False

    if is_ctor and outputs:
        raise DescriptionError(f"{where}: a constructor cannot declare return types")

    params = _build_params(raw_inputs, where, allow_indexed=False)
    sig = Signature(name=name, arguments=params, return_types=outputs, is_payable=is_payable)
    return sig, is_ctor


def _aliased(decl: Mapping[str, Any], key: str, alias: str, where: str) -> Any:
    if key in decl and alias in decl:
        raise DescriptionError(f"{where}: '{key}' and '{alias}' are aliases; give only one")
    return decl.get(key, decl.get(alias, []))


def _build_params(raw: Any, where: str, *, allow_indexed: bool) -> Tuple[Param, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise DescriptionError(f"{where}: inputs must be a list")
    out: List[Param] = []
    for i, p in enumerate(raw):
        indexed = False
        if isinstance(p, Mapping):
            pname = p.get("name") or f"arg{i}"
            ptype = p.get("type")
            indexed = p.get("indexed", False)
            if not isinstance(indexed, bool):
                raise DescriptionError(f"{where}: inputs[{i}].indexed must be a boolean")
            if indexed and not allow_indexed:
                raise DescriptionError(f"{where}: 'indexed' is only allowed on event inputs")
        elif isinstance(p, Sequence) and not isinstance(p, str) and len(p) == 2:
            pname, ptype = p[0], p[1]
        else:
            raise DescriptionError(f"{where}: inputs[{i}] must be an object or a [name, type] pair")
        pname = _identifier(pname, f"{where} inputs[{i}] name")
        out.append(Param(name=pname, type=_type(ptype, f"{where} inputs[{i}]"), indexed=indexed))
    return tuple(out)


def _build_outputs(raw: Any, where: str) -> Tuple[TypeRef, ...]:
    if raw is None:
        return ()
    if isinstance(raw, (str, TypeRef)):
        raw = [raw]
    if not isinstance(raw, list):
        raise DescriptionError(f"{where}: outputs must be a list")
    out: List[TypeRef] = []
    for i, t in enumerate(raw):
        if isinstance(t, Mapping) and t.get("type") != "array":
            t = t.get("type")
        out.append(_type(t, f"{where} outputs[{i}]"))
    return tuple(out)


def _check_indexed(params: Sequence[Param], where: str) -> None:
    indexed = [p for p in params if p.indexed]
    if len(indexed) > MAX_INDEXED:
        raise DescriptionError(
            f"{where}: at most {MAX_INDEXED} indexed arguments, got {len(indexed)}"
        )
    for p in indexed:
        if p.type.is_dynamic():
            raise DescriptionError(
                f"{where}: indexed argument {p.name!r} has dynamic type {p.type}"
            )


__all__ = ["Description", "MAX_INDEXED", "build_interface"]
