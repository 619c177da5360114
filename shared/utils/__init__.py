"""
Shared utilities for the Pecha gateway

This package contains the logging utilities used by the gateway and the client core.
"""

from .logger import (
    setup_logging,
    init_logging,
    get_logger,
    get_request_logger,
    get_audit_logger,
    get_performance_logger,
    performance_timer,
)

__all__ = [
    "setup_logging",
    "init_logging",
    "get_logger",
    "get_request_logger",
    "get_audit_logger",
    "get_performance_logger",
    "performance_timer",
]

__version__ = "1.0.0"
