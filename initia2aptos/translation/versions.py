"""
Version codec: (block height, in-block offset) <-> flat Aptos ledger version.

    version = BLOCK_STRIDE * height + offset

offset 0 is the block metadata pseudo-transaction, offsets 1..N are the
block's real transactions in source order, and N < offset < BLOCK_STRIDE are
epilogue sentinels. All versions of height h sort below those of h + 1.
"""

from __future__ import annotations

from initia2aptos.core.exceptions import InvalidHeightError, InvalidVersionError, VersionOverflowError

BLOCK_STRIDE = 10_000
METADATA_OFFSET = 0
# Highest number of real transactions one block can address
MAX_TXS_PER_BLOCK = BLOCK_STRIDE - 1


def encode_version(height: int, offset: int) -> int:
    """Return the ledger version of slot `offset` in block `height`."""
    if not (0 <= offset < BLOCK_STRIDE):
        raise VersionOverflowError(
            f"Offset {offset} at height {height} does not fit a block of {BLOCK_STRIDE} versions",
            vm_error_code="version_overflow",
        )
    return height * BLOCK_STRIDE + offset


def decode_version(version: int) -> tuple[int, int]:
    """Return (height, offset) for a ledger version."""
    return divmod(version, BLOCK_STRIDE)


def parse_version(raw: str | None) -> int:
    """
    Parse a version path parameter.

    Accepts a plain non-negative decimal integer (surrounding whitespace is
    ignored) whose height is at least 1; anything else raises InvalidVersionError.
    """
    text = (raw or "").strip()
    if not _is_decimal(text):
        raise InvalidVersionError()
    version = int(text)
    height, _ = decode_version(version)
    if height < 1:
        raise InvalidVersionError()
    return version


def parse_height(raw: str | None) -> int:
    """Parse a block height path parameter: a decimal integer >= 1, else InvalidHeightError."""
    text = (raw or "").strip()
    if not _is_decimal(text) or int(text) < 1:
        raise InvalidHeightError()
    return int(text)


def _is_decimal(text: str) -> bool:
    return text.isascii() and text.isdigit()


def block_version_range(height: int, tx_count: int) -> tuple[int, int]:
    """Return (first_version, last_version) of a block holding tx_count transactions."""
    return encode_version(height, METADATA_OFFSET), encode_version(height, tx_count)
