"""
Utility helpers shared across sqlweave packages.
"""

from .logging import StatementTimer, configure_logging, correlation_scope, get_logger, time_call
from .redaction import redact_params, redact_value

__all__ = [
    "StatementTimer",
    "configure_logging",
    "correlation_scope",
    "get_logger",
    "redact_params",
    "redact_value",
    "time_call",
]
