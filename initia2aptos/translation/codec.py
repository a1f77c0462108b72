"""
Address and timestamp codecs between Initia and Aptos representations.

Addresses: Initia accounts are bech32 (BIP-173) strings such as
``init1...``. They are decoded to raw bytes (5-bit words regrouped to
8-bit) and rendered as ``0x`` + lowercase hex, the Aptos account format.
to_initia_address() is the inverse. The older "strip init1 and base64-decode
the rest" scheme is not supported.

Timestamps: ISO-8601 strings (Tendermint emits up to nanosecond precision)
become the decimal string of microseconds since the Unix epoch.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

import bech32

from initia2aptos.core.exceptions import AddressDecodeError

DEFAULT_HRP = "init"
# Aptos AccountAddress.ZERO in its short string form
ZERO_ADDRESS = "0x0"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MICROSECOND = timedelta(microseconds=1)
_ISO_TIMESTAMP = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<tz>Z|z|[+-]\d{2}:?\d{2})?$"
)


def to_aptos_address(address: str) -> str:
    """
    Decode a bech32 account address to 0x-prefixed lowercase hex.

    Raises AddressDecodeError for anything that is not valid bech32
    (bad charset, checksum, mixed case, or padding).
    """
    if not address or not isinstance(address, str):
        raise AddressDecodeError(str(address), "empty address")
    hrp, words = bech32.bech32_decode(address.strip())
    if hrp is None or words is None:
        raise AddressDecodeError(address, "invalid bech32 string")
    raw = bech32.convertbits(words, 5, 8, False)
    if raw is None or not raw:
        raise AddressDecodeError(address, "invalid bech32 payload")
    return "0x" + bytes(raw).hex()


def to_initia_address(hex_address: str, hrp: str = DEFAULT_HRP) -> str:
    """Encode 0x-prefixed (or bare) hex account bytes as a bech32 address."""
    text = hex_address.strip().lower()
    if text.startswith("0x"):
        text = text[2:]
    if len(text) % 2:
        text = "0" + text
    try:
        raw = bytes.fromhex(text)
    except ValueError:
        raise AddressDecodeError(hex_address, "invalid hex string") from None
    words = bech32.convertbits(raw, 8, 5, True)
    encoded = bech32.bech32_encode(hrp, words) if words is not None else None
    if not raw or encoded is None:
        raise AddressDecodeError(hex_address, "cannot encode as bech32")
    return encoded


def to_microseconds(timestamp: str | None) -> str:
    """
    Convert an ISO-8601 timestamp to microseconds since epoch, as a string.

    Fractional digits beyond microseconds are truncated; a missing zone is
    treated as UTC. Empty input returns "". Unparseable input raises ValueError.
    """
    if not timestamp:
        return ""
    match = _ISO_TIMESTAMP.match(timestamp.strip())
    if match is None:
        raise ValueError(f"Invalid ISO-8601 timestamp: {timestamp!r}")
    fraction = (match.group("fraction") or "")[:6].ljust(6, "0")
    tz = match.group("tz") or "+00:00"
    if tz in ("Z", "z"):
        tz = "+00:00"
    elif ":" not in tz:
        tz = tz[:3] + ":" + tz[3:]
    parsed = datetime.fromisoformat(f"{match.group('base').replace(' ', 'T')}.{fraction}{tz}")
    return str((parsed - _EPOCH) // _ONE_MICROSECOND)
