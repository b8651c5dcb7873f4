"""
Error hierarchy for sqlweave.

Building SQL never fails on well-typed input; these errors only cover
configuration mistakes made while setting up builders, bridges and shims.
"""

from __future__ import annotations


class SqlWeaveError(Exception):
    """Base error for sqlweave failures."""


class ConfigurationError(SqlWeaveError, ValueError):
    """Raised when an option or environment value cannot be understood."""
