"""
Structured errors for abi_derive.

Every error carries a short machine-readable ``code``, a human-readable
``message`` and an optional ``context`` mapping, mirroring the VM error shape
used across the toolchain:

    DescriptionError("duplicate constructor", context={"interface": "Token"})

Compile-time errors (description, collisions, manifest I/O) abort the whole
compilation pass. Dispatch errors abort only the current call; the endpoint
stays usable for the next one.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional


class AbiDeriveError(Exception):
    """Base class for all abi_derive errors."""

    default_code = "abi_derive_error"

    def __init__(
        self,
        message: str = "",
        *,
        code: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = str(message)
        self.code = code or self.default_code
        self.context: Dict[str, Any] = dict(context or {})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": dict(self.context),
        }

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


# ──────────────────────────────────────────────────────────────────────────────
# Compile-time
# ──────────────────────────────────────────────────────────────────────────────


class DescriptionError(AbiDeriveError):
    """Malformed interface description (shape, names, types, constructors)."""

    default_code = "description_error"


class SelectorCollisionError(AbiDeriveError):
    """Two signatures of one interface hash to the same 4-byte selector."""

    default_code = "selector_collision"

    def __init__(self, selector: int, first: str, second: str) -> None:
        super().__init__(
            f"selector 0x{selector:08x} shared by {first!r} and {second!r}",
            context={"selector": selector, "first": first, "second": second},
        )
        self.selector = selector
        self.first = first
        self.second = second


class ManifestError(AbiDeriveError):
    default_code = "manifest_error"


class ManifestWriteError(ManifestError):
    """The manifest could not be written (broken build environment)."""

    default_code = "manifest_write_failed"


class ManifestValidationError(ManifestError):
    default_code = "manifest_invalid"


# ──────────────────────────────────────────────────────────────────────────────
# Dispatch (runtime, endpoint side)
# ──────────────────────────────────────────────────────────────────────────────


class DispatchError(AbiDeriveError):
    """Base for failures of a single incoming call."""

    default_code = "dispatch_error"


class InvalidPayload(DispatchError):
    default_code = "invalid_payload"


class UnknownSelector(DispatchError):
    default_code = "unknown_selector"

    def __init__(self, selector: int) -> None:
        super().__init__(
            f"no method for selector 0x{selector:08x}",
            context={"selector": selector},
        )
        self.selector = selector


class ValueNotAccepted(DispatchError):
    default_code = "value_not_accepted"


class ArgumentDecodeError(DispatchError):
    default_code = "argument_decode_failed"


class ResultEncodeError(DispatchError):
    default_code = "result_encode_failed"


# ──────────────────────────────────────────────────────────────────────────────
# Client (runtime, caller side)
# ──────────────────────────────────────────────────────────────────────────────


class ClientError(AbiDeriveError):
    default_code = "client_error"


class CallError(ClientError):
    """The execution host reported a failed outbound call."""

    default_code = "call_failed"


class ArgumentEncodeError(ClientError):
    default_code = "argument_encode_failed"


class ResultDecodeError(ClientError):
    default_code = "result_decode_failed"


class ClientMisuseError(ClientError):
    """Events and constructors are not remotely callable through a client."""

    default_code = "client_misuse"


class EventEncodeError(AbiDeriveError):
    """Event arguments could not be encoded into a log."""

    default_code = "event_encode_failed"


__all__ = [
    "AbiDeriveError",
    "DescriptionError",
    "SelectorCollisionError",
    "ManifestError",
    "ManifestWriteError",
    "ManifestValidationError",
    "DispatchError",
    "InvalidPayload",
    "UnknownSelector",
    "ValueNotAccepted",
    "ArgumentDecodeError",
    "ResultEncodeError",
    "ClientError",
    "CallError",
    "ArgumentEncodeError",
    "ResultDecodeError",
    "ClientMisuseError",
    "EventEncodeError",
]
