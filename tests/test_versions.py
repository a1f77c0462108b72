"""
Tests for the version codec: encode/decode round trip, ordering, parsing
of path parameters and the per-block overflow guard.
"""

from __future__ import annotations

import pytest

from initia2aptos.core.exceptions import InvalidHeightError, InvalidVersionError, VersionOverflowError
from initia2aptos.translation.versions import (
    BLOCK_STRIDE,
    block_version_range,
    decode_version,
    encode_version,
    parse_height,
    parse_version,
)


@pytest.mark.parametrize(
    "height,offset",
    [(1, 0), (1, 1), (123, 0), (123, 9999), (5_000_000, 42), (2**40, 7)],
)
def test_round_trip(height, offset):
    """decode(encode(h, o)) == (h, o) across small, large and boundary values."""
    assert decode_version(encode_version(height, offset)) == (height, offset)


def test_encode_layout():
    assert BLOCK_STRIDE == 10_000
    assert encode_version(123, 0) == 1_230_000
    assert encode_version(123, 1) == 1_230_001
    assert decode_version(10_000_000) == (1000, 0)


def test_monotonic_within_and_across_heights():
    """Offsets increase versions within a block; every version of h sorts below h + 1."""
    versions = [encode_version(77, o) for o in range(0, 50)]
    assert versions == sorted(versions)
    assert len(set(versions)) == len(versions)
    assert encode_version(77, BLOCK_STRIDE - 1) < encode_version(78, 0)


@pytest.mark.parametrize("offset", [-1, BLOCK_STRIDE, BLOCK_STRIDE + 5])
def test_encode_rejects_offsets_outside_block(offset):
    with pytest.raises(VersionOverflowError) as exc_info:
        encode_version(10, offset)
    assert exc_info.value.status_code == 500
    assert exc_info.value.error_code == "internal_error"


def test_block_version_range():
    assert block_version_range(123, 0) == (1_230_000, 1_230_000)
    assert block_version_range(123, 3) == (1_230_000, 1_230_003)


@pytest.mark.parametrize("raw,expected", [("1230001", 1_230_001), (" 10000 ", 10_000), ("99999999", 99_999_999)])
def test_parse_version_valid(raw, expected):
    assert parse_version(raw) == expected


@pytest.mark.parametrize("raw", ["", None, "abc", "-10000", "1.5", "9999", "0", "12e5", "١٢٣٤٥"])
def test_parse_version_invalid(raw):
    """Non-decimal input and versions below height 1 are rejected."""
    with pytest.raises(InvalidVersionError) as exc_info:
        parse_version(raw)
    assert exc_info.value.to_body() == {
        "message": "Invalid version parameter. Must be a valid number.",
        "error_code": "invalid_version",
    }


def test_parse_height():
    assert parse_height("123") == 123
    assert parse_height(" 7 ") == 7
    for raw in ("invalid", "", "0", "-1", "12abc", None):
        with pytest.raises(InvalidHeightError):
            parse_height(raw)
