"""
Tests for the event mapper: only move events with type_tag and data survive.
"""

from __future__ import annotations

from initia2aptos.initia_client.models import EventAttribute, SourceEvent
from initia2aptos.translation.events import map_events


def _event(type_: str, **attributes: str) -> SourceEvent:
    return SourceEvent(
        type=type_,
        attributes=tuple(EventAttribute(key=k, value=v) for k, v in attributes.items()),
    )


def test_move_event_kept_bank_event_dropped():
    events = [
        _event("move", type_tag="0x1::coin::Transfer", data='{"amount":"100"}'),
        _event("bank", sender="init1xyz", amount="100uinit"),
    ]
    mapped = map_events(events)
    assert len(mapped) == 1
    assert mapped[0].model_dump() == {"type": "0x1::coin::Transfer", "data": {"amount": "100"}}


def test_move_events_missing_attributes_dropped():
    events = [
        _event("move", type_tag="0x1::a::NoData"),
        _event("move", data='{"x":1}'),
        _event("move", type_tag="", data='{"x":1}'),
        _event("move", type_tag="0x1::b::Kept", data="[1, 2]"),
    ]
    mapped = map_events(events)
    assert [e.type for e in mapped] == ["0x1::b::Kept"]
    assert mapped[0].data == [1, 2]


def test_order_preserved_and_first_attribute_wins():
    first = SourceEvent(
        type="move",
        attributes=(
            EventAttribute("type_tag", "0x1::m::First"),
            EventAttribute("data", '{"n":1}'),
            EventAttribute("type_tag", "0x1::m::Shadowed"),
        ),
    )
    second = _event("move", type_tag="0x1::m::Second", data='{"n":2}')
    mapped = map_events([first, _event("wasm", a="b"), second])
    assert [(e.type, e.data) for e in mapped] == [("0x1::m::First", {"n": 1}), ("0x1::m::Second", {"n": 2})]


def test_empty_input():
    assert map_events([]) == []
    assert map_events(None) == []


def test_from_rest_event_shape():
    """ABCI events from the REST API carry an extra `index` flag per attribute."""
    event = SourceEvent.from_rest(
        {
            "type": "move",
            "attributes": [
                {"key": "type_tag", "value": "0x1::fungible_asset::DepositEvent", "index": True},
                {"key": "data", "value": '{"amount":"5"}', "index": True},
            ],
        }
    )
    assert map_events([event])[0].data == {"amount": "5"}
