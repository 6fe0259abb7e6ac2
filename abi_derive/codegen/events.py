"""
Event log encoding for declared events.

A log is a list of topics plus a data blob:

    topics[0]  = keccak256("Transfer(address,address,uint256)")
    topics[1:] = one 32-byte word per indexed argument, in declaration order
    data       = the non-indexed arguments, head/tail encoded

Indexed arguments are restricted to static types by the builder, so every
indexed value encodes to exactly one word.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Sequence, Tuple

from ..abi.stream import Sink, SinkError, encode_values
from ..errors import EventEncodeError
from ..interface.model import Event, Interface
from ..runtime.host import Host

log = logging.getLogger(__name__)


def encode_event(event: Event, args: Sequence[Any]) -> Tuple[List[bytes], bytes]:
    """Return (topics, data) for one emission of `event`."""
    if len(args) != len(event.arguments):
        raise TypeError(
            f"{event.name} takes {len(event.arguments)} arguments ({len(args)} given)"
        )
    topics: List[bytes] = [event.topic]
    data = Sink(len(event.data_arguments))
    try:
        for param, arg in zip(event.arguments, args):
            if param.indexed:
                topics.append(encode_values([param.type], [arg]))
            else:
                data.push(param.type, arg)
        return topics, data.finalize()
    except SinkError as e:
        raise EventEncodeError(
            f"{event.name}: {e.message}", context={"event": event.name}
        ) from e


class EventEmitter:
    """
    Contract-side helper: one method per declared event, each handing the
    encoded log to `host.log`.

        events = EventEmitter(intf, host)
        events.Transfer(sender, dest, 10)
    """

    def __init__(self, intf: Interface, host: Host) -> None:
        self._interface = intf
        self._host = host
        self._events: Dict[str, Event] = {ev.name: ev for ev in intf.events()}

    def emit(self, name: str, *args: Any) -> None:
        event = self._events.get(name)
        if event is None:
            raise KeyError(f"{self._interface.name} declares no event {name!r}")
        topics, data = encode_event(event, args)
        log.debug("emit %s.%s: %d topics, %d data bytes", self._interface.name, name, len(topics), len(data))
        self._host.log(topics, data)

    def __getattr__(self, name: str) -> Callable[..., None]:
        events = self.__dict__.get("_events", {})
        if name not in events:
            raise AttributeError(name)

        def emitter(*args: Any) -> None:
            self.emit(name, *args)

        emitter.__name__ = name
        return emitter

    def __dir__(self) -> List[str]:
        return sorted(set(super().__dir__()) | set(self._events))


__all__ = ["EventEmitter", "EventEncodeError", "encode_event"]
