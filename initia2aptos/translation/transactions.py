"""
Transaction translator: one Initia tx response -> Aptos user transaction.

Known gaps against a native Aptos node, reported as-is to callers:
- success is always true; the source result code is not surfaced.
- sequence_number is the tx index within its block, not the account nonce.
- gas_unit_price and expiration_timestamp_secs are "0".
- hash is the Initia tx hash, not an Aptos transaction hash.
"""

from __future__ import annotations

from typing import Iterable

from initia2aptos.bridge_logging import get_logger
from initia2aptos.core.exceptions import AddressDecodeError
from initia2aptos.initia_client.models import SourceMessage, TxInfo
from initia2aptos.translation.codec import ZERO_ADDRESS, to_aptos_address, to_microseconds
from initia2aptos.translation.events import map_events
from initia2aptos.translation.models import EntryFunctionPayload, UserTransaction

logger = get_logger(__name__)

ENTRY_FUNCTION_PAYLOAD = "entry_function_payload"


def find_sender(messages: Iterable[SourceMessage]) -> str:
    """
    Aptos address of the first message that has a sender.

    Falls back to the zero address when no message has one, or when the
    sender is not valid bech32 (logged, the request still succeeds).
    """
    for message in messages:
        sender = message.sender()
        if sender is None:
            continue
        try:
            return to_aptos_address(sender)
        except AddressDecodeError as e:
            logger.warning("sender_decode_failed", sender=sender, reason=e.reason)
            return ZERO_ADDRESS
    return ZERO_ADDRESS


def build_payload(messages: Iterable[SourceMessage]) -> EntryFunctionPayload:
    """Entry function payload of the last execute message, or the empty payload."""
    payload = EntryFunctionPayload()
    for message in messages:
        call = message.entry_function()
        if call is None:
            continue
        # Later execute messages overwrite earlier ones
        payload = EntryFunctionPayload(
            type=ENTRY_FUNCTION_PAYLOAD,
            function=call.function_id,
            type_arguments=list(call.type_args),
            arguments=list(call.args),
        )
    return payload


def to_user_transaction(tx: TxInfo, version: int, seq: int) -> UserTransaction:
    """
    Render `tx` as the Aptos user transaction at ledger `version`.

    `seq` is the tx's 0-based index within its block and becomes the
    sequence_number.
    """
    return UserTransaction(
        version=str(version),
        hash=tx.txhash,
        timestamp=to_microseconds(tx.timestamp),
        success=True,
        sender=find_sender(tx.messages),
        sequence_number=str(seq),
        gas_used=str(tx.gas_used),
        max_gas_amount=str(tx.gas_wanted),
        payload=build_payload(tx.messages),
        events=map_events(tx.events),
    )
