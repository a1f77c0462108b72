"""
Event mapper: Initia ABCI events -> Aptos Move events.

Only `move` events carrying both a `type_tag` and a `data` attribute are
kept; everything else is dropped without a placeholder. Order is preserved.
"""

from __future__ import annotations

import json
from typing import Iterable

from initia2aptos.initia_client.models import SourceEvent
from initia2aptos.translation.models import Event

MOVE_EVENT_TYPE = "move"


def map_events(events: Iterable[SourceEvent] | None) -> list[Event]:
    if not events:
        return []
    mapped: list[Event] = []
    for event in events:
        if event.type != MOVE_EVENT_TYPE:
            continue
        type_tag = event.attribute("type_tag")
        data = event.attribute("data")
        if type_tag and data:
            mapped.append(Event(type=type_tag, data=json.loads(data)))
    return mapped
