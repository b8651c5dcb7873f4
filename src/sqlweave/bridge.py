"""
Bridges binding a builder to a DB-API 2.0 connection.

Instead of::

    sql, binds = builder.build("SELECT * FROM users WHERE", conditions)
    cursor = connection.cursor()
    cursor.execute(sql, binds)

write::

    rows = bridge.query("SELECT * FROM users WHERE", conditions)
"""

from __future__ import annotations

from typing import Any, List, Optional

from .builder import Builder
from .config import resolve_slow_query_ms
from .errors import SqlWeaveError
from .fragments import Condition
from .utils import correlation_scope, get_logger, redact_params, time_call


class TransactionError(SqlWeaveError, RuntimeError):
    """Raised when a finished transaction is used again."""


class Bridge:
    """
    Builds queries with a :class:`Builder` and runs them on ``target``.

    ``target`` is any DB-API 2.0 connection; its paramstyle must match the
    builder's placeholders.
    """

    def __init__(
        self,
        target: Any,
        builder: Optional[Builder] = None,
        *,
        slow_query_ms: int | None = None,
    ) -> None:
        self.target = target
        self.builder = builder or Builder()
        self.logger = get_logger("bridge")
        self.slow_query_ms = resolve_slow_query_ms(default=100, override=slow_query_ms)

    def build(self, *fragments: Any):
        return self.builder.build(*fragments)

    def when(self, condition: Any, *fragments: Any) -> Condition:
        return self.builder.when(condition, *fragments)

    def execute(self, *fragments: Any) -> Any:
        """
        Execute a statement and return the cursor it ran on.
        """
        query = self.builder._compile(*fragments)
        sql, binds = query.sql.value, query.binds
        cursor = self.target.cursor()
        with time_call(
            "bridge.execute",
            self.logger,
            sql=sql,
            params=redact_params(binds, query.bind_columns),
            threshold_ms=self.slow_query_ms,
        ):
            cursor.execute(sql, binds)
        return cursor

    def query(self, *fragments: Any) -> List[Any]:
        """
        Execute a statement returning rows, typically a SELECT.
        """
        cursor = self.execute(*fragments)
        try:
            return list(cursor.fetchall())
        finally:
            cursor.close()

    def query_row(self, *fragments: Any) -> Any:
        """
        Execute a statement expected to return at most one row.
        """
        cursor = self.execute(*fragments)
        try:
            return cursor.fetchone()
        finally:
            cursor.close()


class Tx:
    """
    A bridged transaction; create one with :meth:`DB.begin`.

    Transactions follow DB-API semantics: the driver opens them implicitly
    and :meth:`commit` / :meth:`rollback` end them. Used as a context manager
    the transaction commits on success and rolls back on error. Statements run
    inside the block share one correlation id in the logs.
    """

    def __init__(self, connection: Any, builder: Builder, *, slow_query_ms: int | None = None) -> None:
        self.connection = connection
        self._bridge = Bridge(connection, builder, slow_query_ms=slow_query_ms)
        self._active = True
        self._scope = None
        self.correlation_id: str | None = None

    @property
    def active(self) -> bool:
        return self._active

    @property
    def bridge(self) -> Bridge:
        self._ensure_active()
        return self._bridge

    def commit(self) -> None:
        self._ensure_active()
        self.connection.commit()
        self._active = False

    def rollback(self) -> None:
        self._ensure_active()
        self.connection.rollback()
        self._active = False

    def __enter__(self) -> "Tx":
        self._scope = correlation_scope()
        self.correlation_id = self._scope.__enter__()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if not self._active:
                return
            if exc_type:
                self.rollback()
            else:
                self.commit()
        finally:
            if self._scope is not None:
                self._scope.__exit__(None, None, None)
                self._scope = None

    def _ensure_active(self) -> None:
        if not self._active:
            raise TransactionError("Transaction has already been committed or rolled back.")


class DB:
    """
    A bridged database connection.

        db = DB(sqlite3.connect("app.db"), Builder(omit_empty()))
        db.bridge.execute("INSERT INTO users", user)
        with db.begin() as tx:
            tx.bridge.execute("UPDATE users SET", changes, "WHERE id =", user_id)

    Attributes not defined here are looked up on the wrapped connection.
    """

    def __init__(
        self,
        connection: Any,
        builder: Optional[Builder] = None,
        *,
        slow_query_ms: int | None = None,
    ) -> None:
        self.connection = connection
        self.builder = builder or Builder()
        self.slow_query_ms = slow_query_ms
        self.bridge = Bridge(connection, self.builder, slow_query_ms=slow_query_ms)

    def begin(self) -> Tx:
        return Tx(self.connection, self.builder, slow_query_ms=self.slow_query_ms)

    def commit(self) -> None:
        self.connection.commit()

    def rollback(self) -> None:
        self.connection.rollback()

    def close(self) -> None:
        self.connection.close()

    def __enter__(self) -> "DB":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __getattr__(self, name: str) -> Any:
        return getattr(self.connection, name)
