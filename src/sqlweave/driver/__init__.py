"""
Driver shim enabling builder syntax in plain DB-API calls.

    from sqlweave import driver

    name = driver.register("sqlite3")
    conn = driver.connect(name, ":memory:")
    conn.execute("SELECT * FROM users WHERE", [{"status": "active"}])
    conn.execute("DELETE FROM users WHERE id IN", [[1, 2, 3]])

Parameters passed to ``execute`` are appended to the statement as fragments,
so plain strings among them are SQL text; wrap string values in ``Bind``.
"""

from .builder import ShimBuilder, to_fragments
from .connection import Connection
from .cursor import Cursor
from .registry import (
    DriverRegistrationError,
    connect,
    default_builder,
    register,
    registered,
    unregister,
    wrap,
)

__all__ = [
    "Connection",
    "Cursor",
    "DriverRegistrationError",
    "ShimBuilder",
    "connect",
    "default_builder",
    "register",
    "registered",
    "to_fragments",
    "unregister",
    "wrap",
]
