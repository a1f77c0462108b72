"""
Data models for Initia REST responses.

Responsibilities:
- Normalize upstream JSON (tendermint block info, tx responses, Move
  modules/resources) into immutable records consumed by the translation layer.
- Classify transaction messages into an explicit variant type so the
  translator asks capabilities (sender, entry function) instead of probing fields.

ABI, resource and event payloads stay opaque strings here; they are parsed
only where the translation reads them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

EXECUTE_TYPE_URLS = frozenset({
    "/initia.move.v1.MsgExecute",
    "/initia.move.v1.MsgExecuteJSON",
})


@dataclass(frozen=True)
class BlockHeader:
    """
    Header fields of one tendermint block, from
    /cosmos/base/tendermint/v1beta1/blocks/{height}.
    """

    height: int
    time: str  # ISO-8601
    block_hash: str  # block_id.hash as returned upstream
    data_hash: str = ""
    proposer_address: str = ""  # not modeled in the Aptos output

    @classmethod
    def from_rest(cls, payload: dict[str, Any]) -> "BlockHeader":
        """Build from a tendermint GetBlockByHeight / GetLatestBlock response."""
        header = (payload.get("block") or {}).get("header") or {}
        return cls(
            height=int(header["height"]),
            time=header.get("time") or "",
            block_hash=(payload.get("block_id") or {}).get("hash") or "",
            data_hash=header.get("data_hash") or "",
            proposer_address=header.get("proposer_address") or "",
        )


@dataclass(frozen=True)
class EventAttribute:
    key: str
    value: str


@dataclass(frozen=True)
class SourceEvent:
    """One ABCI event emitted by a transaction."""

    type: str
    attributes: tuple[EventAttribute, ...] = ()

    def attribute(self, key: str) -> str | None:
        """Value of the first attribute named `key`, or None."""
        for attr in self.attributes:
            if attr.key == key:
                return attr.value
        return None

    @classmethod
    def from_rest(cls, item: dict[str, Any]) -> "SourceEvent":
        return cls(
            type=item.get("type") or "",
            attributes=tuple(
                EventAttribute(key=a.get("key") or "", value=a.get("value") or "")
                for a in item.get("attributes") or []
            ),
        )


# -----------------------------------------------------------------------------
# Message variants
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class EntryFunction:
    """Move entry function call carried by an execute message."""

    module_address: str
    module_name: str
    function_name: str
    type_args: tuple[str, ...] = ()
    args: tuple[Any, ...] = ()

    @property
    def function_id(self) -> str:
        return f"{self.module_address}::{self.module_name}::{self.function_name}"


@dataclass(frozen=True)
class ExecuteMessage:
    """MsgExecute / MsgExecuteJSON: a Move entry function call."""

    type_url: str
    sender_address: str | None
    call: EntryFunction

    def sender(self) -> str | None:
        return self.sender_address

    def entry_function(self) -> EntryFunction | None:
        return self.call


@dataclass(frozen=True)
class GenericMessage:
    """Any other message signed by a `sender`."""

    type_url: str
    sender_address: str

    def sender(self) -> str | None:
        return self.sender_address

    def entry_function(self) -> EntryFunction | None:
        return None


@dataclass(frozen=True)
class OtherMessage:
    """Message with neither a sender nor an entry function."""

    type_url: str

    def sender(self) -> str | None:
        return None

    def entry_function(self) -> EntryFunction | None:
        return None


SourceMessage = ExecuteMessage | GenericMessage | OtherMessage


def _is_execute(raw: dict[str, Any], type_url: str) -> bool:
    if type_url in EXECUTE_TYPE_URLS:
        return True
    # Any message carrying a full call (MsgGovExecute, untyped amino JSON) is execute-shaped
    return all(raw.get(k) for k in ("module_address", "module_name", "function_name"))


def parse_message(raw: dict[str, Any]) -> SourceMessage:
    """Classify one tx body message into its variant."""
    type_url = raw.get("@type") or ""
    sender = raw.get("sender") if isinstance(raw.get("sender"), str) else None
    if _is_execute(raw, type_url):
        return ExecuteMessage(
            type_url=type_url,
            sender_address=sender,
            call=EntryFunction(
                module_address=raw.get("module_address") or "",
                module_name=raw.get("module_name") or "",
                function_name=raw.get("function_name") or "",
                type_args=tuple(raw.get("type_args") or ()),
                args=tuple(raw.get("args") or ()),
            ),
        )
    if sender:
        return GenericMessage(type_url=type_url, sender_address=sender)
    return OtherMessage(type_url=type_url)


@dataclass(frozen=True)
class TxInfo:
    """
    One transaction of a block, from /cosmos/tx/v1beta1/txs?query=tx.height=H
    (tx_responses). The in-block index is the record's position in that list.
    """

    height: int
    txhash: str
    timestamp: str
    gas_used: int
    gas_wanted: int
    code: int = 0
    messages: tuple[SourceMessage, ...] = ()
    events: tuple[SourceEvent, ...] = ()

    @classmethod
    def from_rest(cls, item: dict[str, Any]) -> "TxInfo":
        body = ((item.get("tx") or {}).get("body")) or {}
        return cls(
            height=int(item["height"]),
            txhash=item.get("txhash") or "",
            timestamp=item.get("timestamp") or "",
            gas_used=int(item.get("gas_used") or 0),
            gas_wanted=int(item.get("gas_wanted") or 0),
            code=int(item.get("code") or 0),
            messages=tuple(parse_message(m) for m in body.get("messages") or []),
            events=tuple(SourceEvent.from_rest(e) for e in item.get("events") or []),
        )


@dataclass(frozen=True)
class MoveModule:
    """Published Move module: ABI as a JSON string plus its bytecode."""

    address: str
    module_name: str
    abi: str
    raw_bytes: str

    @classmethod
    def from_rest(cls, item: dict[str, Any]) -> "MoveModule":
        return cls(
            address=item.get("address") or "",
            module_name=item.get("module_name") or "",
            abi=item.get("abi") or "{}",
            raw_bytes=item.get("raw_bytes") or "",
        )


@dataclass(frozen=True)
class MoveResource:
    """Move resource stored under an account: struct tag plus JSON value string."""

    address: str
    struct_tag: str
    move_resource: str

    @classmethod
    def from_rest(cls, item: dict[str, Any]) -> "MoveResource":
        return cls(
            address=item.get("address") or "",
            struct_tag=item.get("struct_tag") or "",
            move_resource=item.get("move_resource") or "{}",
        )

