"""
ABI manifest emitter.

The manifest is a deterministic JSON description of one interface, for
external tooling (explorers, deployment scripts, other-language clients):

    {
      "name": "Token",
      "constructor": {"inputs": [{"name": "supply", "type": "uint256"}], "payable": false},
      "functions": [
        {"name": "transfer",
         "inputs": [{"name": "to", "type": "address"}, {"name": "amount", "type": "uint256"}],
         "outputs": ["bool"], "payable": false, "selector": "0xa9059cbb"}
      ],
      "events": [{"name": "Transfer", "inputs": [...]}]
    }

`constructor` appears only when declared; `functions` and `events` are always
present and keep declaration order. Documents are written through an explicit
`ManifestSink`: `DirectorySink` for the build tree (`<target>/json/<Name>.json`)
or `MemorySink` when embedding.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Tuple, Union

import jsonschema

from ..errors import ManifestValidationError, ManifestWriteError
from ..interface.model import Event, Interface, Param, Signature, unknown_item

log = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schemas" / "manifest.schema.json"


# ---------------
# Document
# ---------------

def _inputs(params: Tuple[Param, ...]) -> List[Dict[str, str]]:
    return [p.to_dict() for p in params]


def build_manifest(intf: Interface) -> Dict[str, Any]:
    doc: Dict[str, Any] = {"name": intf.name}
    if intf.constructor is not None:
        doc["constructor"] = {
            "inputs": _inputs(intf.constructor.arguments),
            "payable": intf.constructor.is_payable,
        }

    functions: List[Dict[str, Any]] = []
    events: List[Dict[str, Any]] = []
    for item in intf.items:
        if isinstance(item, Signature):
            functions.append(
                {
                    "name": item.name,
                    "inputs": _inputs(item.arguments),
                    "outputs": [t.canonical_str() for t in item.return_types],
                    "payable": item.is_payable,
                    "selector": item.selector_hex,
                }
            )
        elif isinstance(item, Event):
            events.append({"name": item.name, "inputs": _inputs(item.arguments)})
        else:
            unknown_item(item)

    doc["functions"] = functions
    doc["events"] = events
    return doc


def render_manifest(doc: Dict[str, Any]) -> str:
    return json.dumps(doc, indent=2, ensure_ascii=False) + "\n"


@lru_cache(maxsize=1)
def load_schema() -> Dict[str, Any]:
    with SCHEMA_PATH.open("r", encoding="utf-8") as f:
        return json.load(f)


def validate_manifest(doc: Dict[str, Any]) -> None:
    """Check `doc` against the packaged manifest schema."""
    try:
        jsonschema.validate(instance=doc, schema=load_schema())
    except jsonschema.ValidationError as e:
        path = "/".join(str(p) for p in e.absolute_path)
        raise ManifestValidationError(
            f"manifest schema validation failed at '{path}': {e.message}",
            context={"path": path},
        ) from e


# ---------------
# Sinks
# ---------------

class ManifestSink(Protocol):
    def write(self, name: str, text: str) -> Optional[Path]: ...


class DirectorySink:
    """Writes `<target_dir>/json/<name>.json`, creating directories as needed."""

    def __init__(self, target_dir: Union[str, Path]) -> None:
        self.target_dir = Path(target_dir)

    def path_for(self, name: str) -> Path:
        return self.target_dir / "json" / f"{name}.json"

    def write(self, name: str, text: str) -> Path:
        path = self.path_for(name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as f:
                f.write(text)
        except OSError as e:
            raise ManifestWriteError(
                f"cannot write manifest {path}: {e}",
                context={"path": str(path), "interface": name},
            ) from e
        log.info("wrote manifest %s", path)
        return path


class MemorySink:
    """Keeps rendered manifests in `documents`, keyed by interface name."""

    def __init__(self) -> None:
        self.documents: Dict[str, str] = {}

    def write(self, name: str, text: str) -> None:
        self.documents[name] = text

    def load(self, name: str) -> Dict[str, Any]:
        return json.loads(self.documents[name])


def emit_manifest(
    intf: Interface,
    sink: ManifestSink,
    *,
    validate: bool = True,
) -> Tuple[Dict[str, Any], Optional[Path]]:
    """Build, optionally validate, render and write the manifest of `intf`."""
    doc = build_manifest(intf)
    if validate:
        validate_manifest(doc)
    path = sink.write(intf.name, render_manifest(doc))
    log.debug(
        "manifest %s: %d functions, %d events",
        intf.name, len(doc["functions"]), len(doc["events"]),
    )
    return doc, path


__all__ = [
    "SCHEMA_PATH",
    "ManifestSink",
    "DirectorySink",
    "MemorySink",
    "build_manifest",
    "render_manifest",
    "load_schema",
    "validate_manifest",
    "emit_manifest",
]
