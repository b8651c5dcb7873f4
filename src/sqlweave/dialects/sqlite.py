"""
SQLite dialect implementation.
"""

from __future__ import annotations

from typing import Final

from .. import placeholders


class SQLiteDialect:
    """
    SQLite dialect using qmark param style, or numbered ``?NNN`` tokens.
    """

    name: Final[str] = "sqlite"

    def __init__(self, *, numbered: bool = False) -> None:
        self.numbered = numbered

    @property
    def param_style(self) -> str:
        return "numbered_qmark" if self.numbered else "qmark"

    def parameter_placeholder(self, position: int) -> str:
        if self.numbered:
            return placeholders.numbered_qmark(position)
        return placeholders.qmark(position)
