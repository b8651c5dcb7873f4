"""
PostgreSQL dialect implementation.
"""

from __future__ import annotations

from typing import Final

from .. import placeholders


class PostgresDialect:
    """
    PostgreSQL dialect.

    psycopg expects ``%s`` placeholders; asyncpg and server-side prepared
    statements use ``$1``, ``$2``... which ``native=True`` selects.
    """

    name: Final[str] = "postgresql"

    def __init__(self, *, native: bool = False) -> None:
        self.native = native

    @property
    def param_style(self) -> str:
        return "dollar" if self.native else "format"

    def parameter_placeholder(self, position: int) -> str:
        if self.native:
            return placeholders.dollar(position)
        return placeholders.format(position)
