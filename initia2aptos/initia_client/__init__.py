"""
Upstream Initia REST access: async client, response cache and source models.
"""

from initia2aptos.initia_client.cache import ResponseCache, cache_key
from initia2aptos.initia_client.client import InitiaRestClient
from initia2aptos.initia_client.models import (
    BlockHeader,
    EntryFunction,
    EventAttribute,
    ExecuteMessage,
    GenericMessage,
    MoveModule,
    MoveResource,
    OtherMessage,
    SourceEvent,
    SourceMessage,
    TxInfo,
    parse_message,
)

__all__ = [
    "BlockHeader",
    "EntryFunction",
    "EventAttribute",
    "ExecuteMessage",
    "GenericMessage",
    "InitiaRestClient",
    "MoveModule",
    "MoveResource",
    "OtherMessage",
    "ResponseCache",
    "SourceEvent",
    "SourceMessage",
    "TxInfo",
    "cache_key",
    "parse_message",
]
