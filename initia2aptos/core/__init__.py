"""
Core cross-cutting definitions shared by translation, client and API layers.
"""

from initia2aptos.core.exceptions import (
    AddressDecodeError,
    GatewayError,
    InternalGatewayError,
    InvalidHeightError,
    InvalidInputError,
    InvalidVersionError,
    UnsupportedContentTypeError,
    UnsupportedInputError,
    UpstreamFetchError,
    ValidationError,
    VersionOverflowError,
)

__all__ = [
    "AddressDecodeError",
    "GatewayError",
    "InternalGatewayError",
    "InvalidHeightError",
    "InvalidInputError",
    "InvalidVersionError",
    "UnsupportedContentTypeError",
    "UnsupportedInputError",
    "UpstreamFetchError",
    "ValidationError",
    "VersionOverflowError",
]
