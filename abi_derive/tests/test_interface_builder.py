from __future__ import annotations

import json

import pytest

from abi_derive.errors import DescriptionError
from abi_derive.interface import Event, Signature, build_interface, load_interface
from abi_derive.tests import TOKEN_DESCRIPTION


def _one(decl):
    return {"name": "I", "methods": [decl]}


def test_token_description_shapes() -> None:
    intf = build_interface(TOKEN_DESCRIPTION)
    assert intf.name == "Token"
    assert intf.constructor is not None
    assert intf.constructor.name == "constructor"
    assert [p.name for p in intf.constructor.arguments] == ["supply"]
    assert "constructor" not in [it.name for it in intf.items]
    assert [type(it) for it in intf.items] == [Signature] * 6 + [Event]

    deposit = intf.get("deposit")
    assert isinstance(deposit, Signature) and deposit.is_payable
    assert not intf.get("transfer").is_payable
    assert [str(t) for t in intf.get("stats").return_types] == ["uint256", "bool"]
    assert [str(t) for t in intf.get("echo").argument_types] == ["bytes"]

    (event,) = intf.events()
    assert [p.name for p in event.indexed] == ["from", "to"]
    assert [p.name for p in event.data_arguments] == ["value"]


def test_json_text_and_bytes_accepted() -> None:
    text = json.dumps(TOKEN_DESCRIPTION)
    assert build_interface(text) == build_interface(text.encode("utf-8"))
    assert load_interface(text) == load_interface(TOKEN_DESCRIPTION)


def test_aliases_and_defaults() -> None:
    intf = build_interface(
        {
            "name": "Alias",
            "items": [
                {"name": "f", "arguments": [{"type": "u8"}, {"type": "bool"}], "returns": "u64"},
                {"name": "g", "outputs": [{"type": "address"}, {"type": "array", "items": "u8"}]},
            ],
        }
    )
    f = intf.get("f")
    assert [p.name for p in f.arguments] == ["arg0", "arg1"]
    assert [str(t) for t in f.return_types] == ["uint64"]
    assert [str(t) for t in intf.get("g").return_types] == ["address", "uint8[]"]


def test_empty_interface() -> None:
    intf = build_interface({"name": "Empty"})
    assert intf.constructor is None and len(intf) == 0


@pytest.mark.parametrize(
    "description",
    [
        "not json",
        "[1, 2]",
        42,
        {"methods": []},
        {"name": "1Bad"},
        {"name": "I", "methods": {"a": 1}},
        {"name": "I", "methods": ["transfer"]},
        _one({"inputs": []}),
        _one({"name": "f", "view": True}),
        _one({"name": "f", "payable": "yes"}),
        _one({"name": "E", "event": True, "payable": True}),
        _one({"name": "E", "event": True, "constructor": True}),
        _one({"name": "E", "event": True, "outputs": ["bool"]}),
        _one({"name": "c", "constructor": True, "outputs": ["bool"]}),
        _one({"name": "f", "inputs": [{"name": "x", "type": "u8", "indexed": True}]}),
        _one({"name": "f", "inputs": [{"name": "x", "type": "float"}]}),
        _one({"name": "f", "inputs": [{"name": "my-arg", "type": "u8"}]}),
        _one({"name": "f", "inputs": ["u8"]}),
        _one({"name": "f", "inputs": "u8"}),
        _one({"name": "f", "outputs": {"type": "u8"}}),
        _one(
            {
                "name": "E",
                "event": True,
                "inputs": [{"name": f"a{i}", "type": "u8", "indexed": True} for i in range(4)],
            }
        ),
        _one({"name": "E", "event": True, "inputs": [{"name": "s", "type": "string", "indexed": True}]}),
        _one({"name": "f", "inputs": [], "arguments": []}),
        _one({"name": "f", "outputs": [], "returns": []}),
        _one({"name": "constructor"}),
        _one({"name": "constructor", "event": True}),
    ],
)
def test_malformed_descriptions_rejected(description) -> None:
    with pytest.raises(DescriptionError):
        build_interface(description)


def test_multiple_constructors_rejected() -> None:
    desc = {
        "name": "I",
        "methods": [
            {"name": "init", "constructor": True},
            {"name": "setup", "constructor": True},
        ],
    }
    with pytest.raises(DescriptionError, match="constructor"):
        build_interface(desc)


def test_duplicate_names_rejected() -> None:
    desc = {"name": "I", "methods": [{"name": "f"}, {"name": "f", "inputs": [["x", "u8"]]}]}
    with pytest.raises(DescriptionError) as excinfo:
        build_interface(desc)
    assert excinfo.value.code == "description_error"
    assert excinfo.value.context["first"] == 0


def test_three_static_indexed_arguments_allowed() -> None:
    desc = _one(
        {
            "name": "E",
            "event": True,
            "inputs": [{"name": f"a{i}", "type": "bytes32", "indexed": True} for i in range(3)],
        }
    )
    (event,) = build_interface(desc).events()
    assert len(event.indexed) == 3
