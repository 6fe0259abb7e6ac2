from __future__ import annotations

import pytest
from eth_abi import encode

from abi_derive.codegen.events import EventEmitter, encode_event
from abi_derive.errors import EventEncodeError
from abi_derive.interface import load_interface
from abi_derive.tests import ALICE, BOB, TRANSFER_TOPIC


def _word(address: str) -> bytes:
    return b"\x00" * 12 + bytes.fromhex(address[2:])


def test_topics_then_indexed_words(token_interface) -> None:
    (event,) = token_interface.events()
    topics, data = encode_event(event, (ALICE, BOB, 5))
    assert topics == [TRANSFER_TOPIC, _word(ALICE), _word(BOB)]
    assert data == encode(["uint256"], [5])


def test_non_indexed_dynamic_data() -> None:
    intf = load_interface(
        {
            "name": "Notes",
            "methods": [
                {
                    "name": "Noted",
                    "event": True,
                    "inputs": [
                        {"name": "id", "type": "u64", "indexed": True},
                        {"name": "text", "type": "string"},
                        {"name": "tags", "type": "bytes32[]"},
                    ],
                }
            ],
        }
    )
    (event,) = intf.events()
    assert event.canonical == "Noted(uint64,string,bytes32[])"
    topics, data = encode_event(event, (9, "hi", [b"\x01" * 32]))
    assert topics[1] == (9).to_bytes(32, "big")
    assert data == encode(["string", "bytes32[]"], ["hi", [b"\x01" * 32]])


def test_event_without_arguments() -> None:
    intf = load_interface({"name": "P", "methods": [{"name": "Paused", "event": True}]})
    (event,) = intf.events()
    assert encode_event(event, ()) == ([event.topic], b"")


def test_bad_arguments(token_interface) -> None:
    (event,) = token_interface.events()
    with pytest.raises(TypeError):
        encode_event(event, (ALICE,))
    with pytest.raises(EventEncodeError):
        encode_event(event, (ALICE, BOB, -5))


def test_emitter_logs_through_host(token_interface, host) -> None:
    events = EventEmitter(token_interface, host)
    with host.frame(address=BOB):
        events.Transfer(ALICE, BOB, 1)
    (record,) = host.logs
    assert record.address == BOB
    assert record.topics[0] == TRANSFER_TOPIC
    assert record.data == encode(["uint256"], [1])
    assert "Transfer" in dir(events)


def test_emitter_unknown_event(token_interface, host) -> None:
    events = EventEmitter(token_interface, host)
    with pytest.raises(AttributeError):
        events.Approval
    with pytest.raises(KeyError):
        events.emit("transfer", 1)
