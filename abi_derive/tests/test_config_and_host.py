from __future__ import annotations

from pathlib import Path

import pytest

from abi_derive.config import DEFAULT_GAS_LIMIT, load_config
from abi_derive.errors import AbiDeriveError, CallError, UnknownSelector
from abi_derive.runtime.host import Dispatchable, Host, LocalHost
from abi_derive.tests import CONTRACT
from abi_derive.version import BASE_VERSION, compute_version


def test_config_defaults() -> None:
    cfg = load_config()
    assert cfg.target_dir == Path("target")
    assert cfg.default_gas == DEFAULT_GAS_LIMIT
    assert cfg.log_level == "INFO"
    assert cfg.validate_manifest is True
    assert cfg.as_dict()["target_dir"] == "target"
    assert load_config() is cfg


@pytest.mark.parametrize(
    "raw, expected",
    [("300000", 300_000), ("0x30d40", 200_000), ("1", 21_000), ("999999999", 30_000_000), ("lots", DEFAULT_GAS_LIMIT)],
)
def test_default_gas_env(monkeypatch, raw, expected) -> None:
    monkeypatch.setenv("ABI_DERIVE_DEFAULT_GAS", raw)
    assert load_config().default_gas == expected


def test_env_overrides(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("ABI_DERIVE_TARGET_DIR", str(tmp_path))
    monkeypatch.setenv("ABI_DERIVE_LOG_LEVEL", "debug")
    monkeypatch.setenv("ABI_DERIVE_VALIDATE_MANIFEST", "off")
    cfg = load_config()
    assert cfg.target_dir == tmp_path
    assert cfg.log_level == "DEBUG"
    assert cfg.validate_manifest is False


def test_unknown_log_level_falls_back(monkeypatch) -> None:
    monkeypatch.setenv("ABI_DERIVE_LOG_LEVEL", "chatty")
    assert load_config().log_level == "INFO"


def test_version_resolution(monkeypatch) -> None:
    compute_version.cache_clear()
    monkeypatch.setenv("ABI_DERIVE_VERSION", "9.9.9")
    try:
        assert compute_version() == "9.9.9"
    finally:
        compute_version.cache_clear()
    monkeypatch.delenv("ABI_DERIVE_VERSION")
    assert compute_version().startswith(BASE_VERSION.split(".")[0])


def test_error_shape() -> None:
    err = UnknownSelector(0xDEADBEEF)
    assert isinstance(err, AbiDeriveError)
    assert err.to_dict() == {
        "code": "unknown_selector",
        "message": "no method for selector 0xdeadbeef",
        "context": {"selector": 0xDEADBEEF},
    }
    assert AbiDeriveError("x", code="custom").code == "custom"


class Echo:
    def __init__(self) -> None:
        self.ctor_payloads = []

    def dispatch(self, payload: bytes) -> bytes:
        if payload == b"boom":
            raise UnknownSelector(0)
        return payload[::-1]

    def dispatch_ctor(self, payload: bytes) -> None:
        self.ctor_payloads.append(payload)


def test_local_host_protocols() -> None:
    assert isinstance(LocalHost(), Host)
    assert isinstance(Echo(), Dispatchable)


def test_local_host_routes_calls() -> None:
    host = LocalHost()
    echo = Echo()
    address = host.deploy(CONTRACT.lower(), echo, b"init", value=0)
    assert address == CONTRACT
    assert echo.ctor_payloads == [b"init"]

    out = bytearray(b"stale contents")
    host.call(21_000, address, 0, b"abc", out)
    assert bytes(out) == b"cba"
    assert host.calls[-1].payload == b"abc"

    with pytest.raises(CallError) as excinfo:
        host.call(21_000, address, 0, b"boom", bytearray())
    assert excinfo.value.context["cause"] == "unknown_selector"


def test_local_host_frames() -> None:
    host = LocalHost()
    assert host.value() == 0 and host.current_address() is None
    with host.frame(address=CONTRACT, value=5):
        assert host.value() == 5
        with host.frame(value=0):
            assert host.value() == 0
        assert host.current_address() == CONTRACT
    assert host.value() == 0
    with pytest.raises(ValueError):
        with host.frame(value=-1):
            pass


def test_local_host_deploy_validation() -> None:
    host = LocalHost()
    with pytest.raises(ValueError):
        host.deploy("nowhere", Echo())
    host.deploy(CONTRACT, Echo())
    with pytest.raises(ValueError):
        host.deploy(CONTRACT, Echo())
