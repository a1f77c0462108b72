"""
Aptos REST response models produced by the translation layer.

Field names and string-encoded numbers follow the Aptos v1 API so Aptos
SDKs and indexers can consume the responses unchanged. Serialize with
model_dump().
"""

from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel, Field

BLOCK_METADATA_TRANSACTION = "block_metadata_transaction"
USER_TRANSACTION = "user_transaction"
BLOCK_EPILOGUE_TRANSACTION = "block_epilogue_transaction"


class Event(BaseModel):
    """Move event: type tag plus decoded JSON data."""

    type: str
    data: Any


class EntryFunctionPayload(BaseModel):
    type: str = ""
    function: str = "_::_::_"
    type_arguments: list[str] = Field(default_factory=list)
    arguments: list[Any] = Field(default_factory=list)


class _TransactionBase(BaseModel):
    version: str
    hash: str
    state_change_hash: str = ""
    event_root_hash: str = ""
    state_checkpoint_hash: str | None = None
    gas_used: str = "0"
    success: bool = True
    vm_status: str = ""
    accumulator_root_hash: str = ""
    changes: list[Any] = Field(default_factory=list)
    timestamp: str


class BlockMetadataTransaction(_TransactionBase):
    """Pseudo-transaction opening every block (offset 0)."""

    type: Literal["block_metadata_transaction"] = BLOCK_METADATA_TRANSACTION
    id: str
    epoch: str = "0"
    round: str = "0"
    events: list[Event] = Field(default_factory=list)
    previous_block_votes_bitvec: list[int] = Field(default_factory=list)
    proposer: str
    failed_proposer_indices: list[int] = Field(default_factory=list)


class UserTransaction(_TransactionBase):
    """A real Initia transaction rendered as an Aptos user transaction."""

    type: Literal["user_transaction"] = USER_TRANSACTION
    sender: str
    sequence_number: str
    max_gas_amount: str
    gas_unit_price: str = "0"
    expiration_timestamp_secs: str = "0"
    payload: EntryFunctionPayload = Field(default_factory=EntryFunctionPayload)
    events: list[Event] = Field(default_factory=list)


class BlockEpilogueTransaction(_TransactionBase):
    """Sentinel for a version inside a block's range that holds no transaction."""

    type: Literal["block_epilogue_transaction"] = BLOCK_EPILOGUE_TRANSACTION
    success: bool = False
    block_end_info: dict[str, Any] | None = None


TargetTransaction = Union[BlockMetadataTransaction, UserTransaction, BlockEpilogueTransaction]


class Block(BaseModel):
    block_height: str
    block_hash: str
    block_timestamp: str
    first_version: str
    last_version: str
    transactions: list[TargetTransaction] = Field(default_factory=list)


class LedgerInfo(BaseModel):
    chain_id: int
    epoch: str
    ledger_version: str
    oldest_ledger_version: str
    ledger_timestamp: str
    node_role: str
    oldest_block_height: str
    block_height: str


class MoveModuleBytecode(BaseModel):
    abi: Any
    bytecode: str


class MoveResourceResponse(BaseModel):
    type: str
    data: Any
