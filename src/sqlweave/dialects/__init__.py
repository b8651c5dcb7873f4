"""
Dialect presets selecting a placeholder style per backend.
"""

from .base import Dialect
from .mysql import MySQLDialect
from .postgres import PostgresDialect
from .sqlite import SQLiteDialect

__all__ = ["Dialect", "SQLiteDialect", "PostgresDialect", "MySQLDialect"]
