"""Logging helpers: package loggers, correlation ids and statement timing."""

from __future__ import annotations

import logging
import os
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterable, Iterator, Optional

from ..errors import ConfigurationError

ROOT_LOGGER = "sqlweave"
LEVEL_ENV = "SQLWEAVE_LOG_LEVEL"

_correlation_id: ContextVar[str | None] = ContextVar("sqlweave_correlation_id", default=None)


class CorrelationIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id()
        return True


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        level = os.environ.get(LEVEL_ENV) or logging.INFO
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ConfigurationError(f"Unknown log level {level!r}")
    return resolved


def configure_logging(level: int | str | None = None) -> None:
    """
    Install the package handler on the ``sqlweave`` logger, once.

    Without an explicit ``level`` the ``SQLWEAVE_LOG_LEVEL`` variable is used,
    defaulting to INFO.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)s | %(correlation_id)s | %(name)s | %(message)s")
    )
    handler.addFilter(CorrelationIdFilter())
    logger.addHandler(handler)
    logger.setLevel(_resolve_level(level))


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def set_correlation_id(value: Optional[str] = None) -> str:
    token = value or str(uuid.uuid4())
    _correlation_id.set(token)
    return token


def get_correlation_id() -> str:
    cid = _correlation_id.get()
    if cid is None:
        cid = set_correlation_id()
    return cid


@contextmanager
def correlation_scope(value: Optional[str] = None) -> Iterator[str]:
    """
    Tag every record logged inside the block with one correlation id.

    The previous id is restored on exit.
    """
    token = _correlation_id.set(value or str(uuid.uuid4()))
    try:
        yield _correlation_id.get()
    finally:
        _correlation_id.reset(token)


class StatementTimer:
    """
    Times one statement execution.

    Statements reaching ``threshold_ms`` are logged at WARNING, quicker ones
    at DEBUG and failing ones at ERROR; the exception itself propagates.
    """

    def __init__(
        self,
        name: str,
        logger: logging.Logger,
        *,
        sql: str | None = None,
        params: Iterable[Any] | None = None,
        threshold_ms: int = 100,
    ) -> None:
        self.name = name
        self.logger = logger
        self.sql = sql
        self.params = params
        self.threshold_ms = threshold_ms
        self.elapsed_ms: float | None = None
        self._start = 0.0

    def __enter__(self) -> "StatementTimer":
        self._start = time.monotonic()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.elapsed_ms = (time.monotonic() - self._start) * 1000
        extra = {"sql": self.sql, "params": self.params, "elapsed_ms": self.elapsed_ms}
        if exc_type is not None:
            self.logger.error("%s failed after %.2fms: %s", self.name, self.elapsed_ms, exc, extra=extra)
            return
        level = logging.WARNING if self.elapsed_ms >= self.threshold_ms else logging.DEBUG
        self.logger.log(level, "%s took %.2fms", self.name, self.elapsed_ms, extra=extra)


def time_call(
    name: str,
    logger: logging.Logger,
    *,
    sql: str | None = None,
    params: Iterable[Any] | None = None,
    threshold_ms: int = 100,
) -> StatementTimer:
    return StatementTimer(name, logger, sql=sql, params=params, threshold_ms=threshold_ms)
