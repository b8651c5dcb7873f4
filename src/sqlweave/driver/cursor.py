"""
Cursor proxy compiling statements before handing them to the real cursor.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator, List, Sequence

from ..query import Query
from ..utils import get_logger, redact_params, time_call
from .builder import ShimBuilder


class Cursor:
    """
    Wraps a DB-API cursor; unknown attributes are forwarded to it.
    """

    def __init__(self, cursor: Any, builder: ShimBuilder, *, slow_query_ms: int = 100) -> None:
        self._cursor = cursor
        self._builder = builder
        self.slow_query_ms = slow_query_ms
        self.logger = get_logger("driver.cursor")

    @property
    def raw(self) -> Any:
        return self._cursor

    @property
    def description(self) -> Any:
        return self._cursor.description

    @property
    def rowcount(self) -> int:
        return self._cursor.rowcount

    @property
    def lastrowid(self) -> Any:
        return getattr(self._cursor, "lastrowid", None)

    def execute(self, operation: str, parameters: Any = None) -> "Cursor":
        query = self._builder.compile(operation, parameters)
        sql, binds = query.sql.value, query.binds
        with time_call(
            "driver.execute",
            self.logger,
            sql=sql,
            params=redact_params(binds, query.bind_columns),
            threshold_ms=self.slow_query_ms,
        ):
            self._cursor.execute(sql, binds)
        return self

    def executemany(self, operation: str, seq_of_parameters: Iterable[Any]) -> "Cursor":
        """
        Compile ``operation`` once per parameter set.

        The final SQL is only known once the arguments are, so compilation is
        deferred to this point. When every set yields the same SQL the real
        ``executemany`` runs once; otherwise each set is executed on its own.
        """
        compiled: List[Query] = [self._builder.compile(operation, parameters) for parameters in seq_of_parameters]
        if not compiled:
            return self

        statements = {query.sql.value for query in compiled}
        if len(statements) == 1:
            sql = compiled[0].sql.value
            with time_call(
                "driver.executemany",
                self.logger,
                sql=sql,
                params="bulk",
                threshold_ms=self.slow_query_ms,
            ):
                self._cursor.executemany(sql, [query.binds for query in compiled])
            return self

        self.logger.debug(
            "Parameter sets compiled to %d distinct statements; executing individually",
            len(statements),
        )
        for query in compiled:
            sql, binds = query.sql.value, query.binds
            with time_call(
                "driver.execute",
                self.logger,
                sql=sql,
                params=redact_params(binds, query.bind_columns),
                threshold_ms=self.slow_query_ms,
            ):
                self._cursor.execute(sql, binds)
        return self

    def fetchone(self) -> Any:
        return self._cursor.fetchone()

    def fetchmany(self, size: int | None = None) -> Sequence[Any]:
        if size is None:
            return self._cursor.fetchmany()
        return self._cursor.fetchmany(size)

    def fetchall(self) -> Sequence[Any]:
        return self._cursor.fetchall()

    def close(self) -> None:
        self._cursor.close()

    def __iter__(self) -> Iterator[Any]:
        return iter(self._cursor)

    def __enter__(self) -> "Cursor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __getattr__(self, name: str) -> Any:
        return getattr(self._cursor, name)
