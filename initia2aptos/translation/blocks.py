"""
Block metadata synthesizer and block assembly.

Aptos expects every block to open with a block metadata transaction and a
by-version lookup to be defined over the whole [first_version, last_version]
range of a block. Initia has neither, so both are fabricated from the block
header alone:

- offset 0            -> BlockMetadataTransaction (hash = block hash)
- offset 1..N         -> the block's user transactions, in source order
- offset N+1..9999    -> BlockEpilogueTransaction (hash = header data_hash)
"""

from __future__ import annotations

from typing import Sequence

from initia2aptos.core.exceptions import VersionOverflowError
from initia2aptos.initia_client.models import BlockHeader, TxInfo
from initia2aptos.translation.codec import ZERO_ADDRESS, to_microseconds
from initia2aptos.translation.models import (
    Block,
    BlockEpilogueTransaction,
    BlockMetadataTransaction,
    TargetTransaction,
    UserTransaction,
)
from initia2aptos.translation.transactions import to_user_transaction
from initia2aptos.translation.versions import MAX_TXS_PER_BLOCK, METADATA_OFFSET, encode_version


def to_block_metadata_transaction(header: BlockHeader) -> BlockMetadataTransaction:
    return BlockMetadataTransaction(
        id=header.block_hash,
        version=str(encode_version(header.height, METADATA_OFFSET)),
        hash=header.block_hash,
        timestamp=to_microseconds(header.time),
        gas_used="0",
        success=True,
        epoch="0",
        round="0",
        proposer=ZERO_ADDRESS,
    )


def to_block_epilogue_transaction(header: BlockHeader, version: str) -> BlockEpilogueTransaction:
    """Epilogue sentinel; `version` is echoed back exactly as requested."""
    return BlockEpilogueTransaction(
        version=version,
        hash=header.data_hash,
        timestamp=to_microseconds(header.time),
        gas_used="0",
        success=False,
    )


def to_user_transactions(txs: Sequence[TxInfo], height: int) -> list[UserTransaction]:
    """Translate a block's transactions, assigning offsets 1..N in listing order."""
    if len(txs) > MAX_TXS_PER_BLOCK:
        raise VersionOverflowError(
            f"Block {height} has {len(txs)} transactions; at most {MAX_TXS_PER_BLOCK} fit one block",
            vm_error_code="version_overflow",
        )
    return [
        to_user_transaction(tx, encode_version(height, index + 1), index)
        for index, tx in enumerate(txs)
    ]


def to_aptos_block(header: BlockHeader, txs: Sequence[TxInfo]) -> Block:
    """Assemble the Aptos block: metadata pseudo-tx first, then user txs."""
    metadata = to_block_metadata_transaction(header)
    transactions: list[TargetTransaction] = [metadata]
    transactions.extend(to_user_transactions(txs, header.height))
    return Block(
        block_height=str(header.height),
        block_hash=header.block_hash,
        block_timestamp=metadata.timestamp,
        first_version=transactions[0].version,
        last_version=transactions[-1].version,
        transactions=transactions,
    )

