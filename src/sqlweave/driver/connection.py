"""
Connection proxy handing out compiling cursors.
"""

from __future__ import annotations

from typing import Any

from ..builder import Builder
from ..config import resolve_slow_query_ms
from .builder import ShimBuilder
from .cursor import Cursor


class Connection:
    """
    Wraps a DB-API connection so its cursors accept builder fragments.

    Transactions, closing and everything else are delegated unchanged.
    """

    def __init__(self, connection: Any, builder: Builder, *, slow_query_ms: int | None = None) -> None:
        self._connection = connection
        self.builder = builder
        self._shim = ShimBuilder(builder)
        self.slow_query_ms = resolve_slow_query_ms(default=100, override=slow_query_ms)

    @property
    def raw(self) -> Any:
        return self._connection

    def cursor(self, *args: Any, **kwargs: Any) -> Cursor:
        return Cursor(
            self._connection.cursor(*args, **kwargs),
            self._shim,
            slow_query_ms=self.slow_query_ms,
        )

    def execute(self, operation: str, parameters: Any = None) -> Cursor:
        """Shortcut creating a cursor and executing on it, like ``sqlite3``."""
        return self.cursor().execute(operation, parameters)

    def executemany(self, operation: str, seq_of_parameters: Any) -> Cursor:
        return self.cursor().executemany(operation, seq_of_parameters)

    def commit(self) -> None:
        self._connection.commit()

    def rollback(self) -> None:
        self._connection.rollback()

    def close(self) -> None:
        self._connection.close()

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type:
                self.rollback()
            else:
                self.commit()
        finally:
            self.close()

    def __getattr__(self, name: str) -> Any:
        return getattr(self._connection, name)
