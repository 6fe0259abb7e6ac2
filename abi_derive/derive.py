"""
The compilation pass: description → interface → endpoint, client, manifest.

    sink = DirectorySink("target")
    derived = derive(description, "TokenEndpoint", "TokenClient", sink=sink)
    endpoint = derived.endpoint(TokenImpl(), host=host)

The manifest is always written through `sink`; any builder, normalizer or
sink error aborts the pass before anything is returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .codegen.client import build_client
from .codegen.endpoint import build_endpoint
from .codegen.manifest import ManifestSink, emit_manifest
from .config import load_config
from .interface import Description, Interface, load_interface

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class DerivedInterface:
    interface: Interface
    endpoint: type
    client: Optional[type]
    manifest: Dict[str, Any]
    manifest_path: Optional[Path]


def derive(
    description: Description,
    endpoint_name: str,
    client_name: Optional[str] = None,
    *,
    sink: ManifestSink,
    validate: Optional[bool] = None,
    default_gas: Optional[int] = None,
) -> DerivedInterface:
    """
    Run the full pass for one interface.

    Args:
        description: mapping or JSON text describing the interface.
        endpoint_name: class name of the generated endpoint.
        client_name: class name of the generated client; None skips the client.
        sink: where the manifest is written.
        validate: check the manifest against its schema (config default when None).
        default_gas: client gas limit when the caller sets none (config default when None).

    Raises:
        DescriptionError, SelectorCollisionError, ManifestError
    """
    cfg = load_config()
    intf = load_interface(description)

    endpoint = build_endpoint(intf, endpoint_name)
    client = None
    if client_name is not None:
        client = build_client(
            intf, client_name,
            default_gas=default_gas if default_gas is not None else cfg.default_gas,
        )

    doc, path = emit_manifest(
        intf, sink, validate=cfg.validate_manifest if validate is None else validate
    )
    log.debug("derived %s: endpoint=%s client=%s", intf.name, endpoint_name, client_name)
    return DerivedInterface(
        interface=intf,
        endpoint=endpoint,
        client=client,
        manifest=doc,
        manifest_path=path,
    )


__all__ = ["DerivedInterface", "derive"]
