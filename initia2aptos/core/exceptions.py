"""
Application-level exceptions.

Every error the API can return is a GatewayError subclass carrying its HTTP
status, an Aptos-style error_code and a message; the API server turns them
into JSON bodies. AddressDecodeError is the exception: it is raised by the
address codec and handled by the translator, never returned to clients.
"""

from __future__ import annotations

from typing import Any


class GatewayError(Exception):
    """Base class for errors rendered as a JSON error body."""

    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict[str, Any]:
        return {"message": self.message, "error_code": self.error_code}


# -----------------------------------------------------------------------------
# 4xx: client input
# -----------------------------------------------------------------------------


class ValidationError(GatewayError):
    """Malformed path parameter or request body. No upstream call is made."""

    status_code = 400
    error_code = "invalid_input"


class InvalidHeightError(ValidationError):
    error_code = "invalid_height"

    def __init__(self, message: str = "Invalid height parameter. Must be a valid number.") -> None:
        super().__init__(message)

    def to_body(self) -> dict[str, Any]:
        return {"status": "error", "error_code": self.error_code, "message": self.message}


class InvalidVersionError(ValidationError):
    error_code = "invalid_version"

    def __init__(self, message: str = "Invalid version parameter. Must be a valid number.") -> None:
        super().__init__(message)


class InvalidInputError(ValidationError):
    error_code = "invalid_input"


class UnsupportedContentTypeError(GatewayError):
    status_code = 400
    error_code = "unsupported_content_type"


class UnsupportedInputError(GatewayError):
    """BCS-encoded request bodies: recognised but not implemented."""

    status_code = 501
    error_code = "not_implemented"


# -----------------------------------------------------------------------------
# 5xx: upstream or translation failures
# -----------------------------------------------------------------------------


class InternalGatewayError(GatewayError):
    """Request failed after validation; vm_error_code carries the raw cause."""

    status_code = 500
    error_code = "internal_error"

    def __init__(self, message: str, vm_error_code: Any = None) -> None:
        super().__init__(message)
        self.vm_error_code = vm_error_code

    def to_body(self) -> dict[str, Any]:
        body = super().to_body()
        body["vm_error_code"] = self.vm_error_code
        return body


class UpstreamFetchError(InternalGatewayError):
    """Network, HTTP status or payload failure talking to the Initia REST API."""

    def __init__(self, message: str, vm_error_code: Any = None, status: int | None = None) -> None:
        super().__init__(message, vm_error_code)
        self.upstream_status = status


class VersionOverflowError(InternalGatewayError):
    """A block holds more transactions than one version stride can address."""


# -----------------------------------------------------------------------------
# Internal
# -----------------------------------------------------------------------------


class AddressDecodeError(ValueError):
    """Raised when a source account address is not valid bech32."""

    def __init__(self, address: str, reason: str) -> None:
        super().__init__(f"Cannot decode address {address!r}: {reason}")
        self.address = address
        self.reason = reason
