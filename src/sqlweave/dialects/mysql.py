"""
MySQL dialect implementation.
"""

from __future__ import annotations

from typing import Final

from .. import placeholders


class MySQLDialect:
    """
    MySQL dialect using percent-style placeholders (PyMySQL, mysqlclient).
    """

    name: Final[str] = "mysql"
    param_style: Final[str] = "format"

    def parameter_placeholder(self, position: int) -> str:
        return placeholders.format(position)
