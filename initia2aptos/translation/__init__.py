"""
Pure Initia -> Aptos translation: version codec, address/timestamp codecs,
event mapping, user transaction translation and block synthesis.

Stateless and synchronous; safe to call from concurrent requests.
"""

from initia2aptos.translation.blocks import (
    to_aptos_block,
    to_block_epilogue_transaction,
    to_block_metadata_transaction,
    to_user_transactions,
)
from initia2aptos.translation.codec import (
    ZERO_ADDRESS,
    to_aptos_address,
    to_initia_address,
    to_microseconds,
)
from initia2aptos.translation.events import map_events
from initia2aptos.translation.move import to_module_bytecode, to_resource_response
from initia2aptos.translation.transactions import to_user_transaction
from initia2aptos.translation.versions import (
    BLOCK_STRIDE,
    block_version_range,
    decode_version,
    encode_version,
    parse_height,
    parse_version,
)

__all__ = [
    "BLOCK_STRIDE",
    "ZERO_ADDRESS",
    "block_version_range",
    "decode_version",
    "encode_version",
    "map_events",
    "parse_height",
    "parse_version",
    "to_aptos_address",
    "to_aptos_block",
    "to_block_epilogue_transaction",
    "to_block_metadata_transaction",
    "to_initia_address",
    "to_microseconds",
    "to_module_bytecode",
    "to_resource_response",
    "to_user_transaction",
    "to_user_transactions",
]
