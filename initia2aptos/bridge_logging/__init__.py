"""
Structured logging for the Initia2Aptos bridge.

get_logger() for module loggers; bind_request()/clear_request() scope
log context to one Aptos API request.
"""

from initia2aptos.bridge_logging.logger import (
    bind_request,
    clear_request,
    configure_structlog,
    get_logger,
)

__all__ = ["bind_request", "clear_request", "configure_structlog", "get_logger"]
