"""
The public builder interface.
"""

from __future__ import annotations

from typing import Any, List, Tuple

from .config import ENV_PREFIX, options_from_env
from .fragments import Condition, is_composite, when
from .options import Option, Options
from .query import Query
from .sift import Sifter
from .utils import get_logger, redact_params


class Builder:
    """
    Compiles SQL fragments and Python values into a query and its binds.

        builder = Builder(omit_empty())
        sql, binds = builder.build("INSERT INTO users", user)
        cursor.execute(sql, binds)

    Configure a builder before sharing it between threads; every build works
    on a private copy of the options, so inline options are always safe.
    """

    def __init__(self, *options: Option) -> None:
        self.options = Options()
        self.options.apply(*options)
        self.logger = get_logger("builder")

    @classmethod
    def from_env(cls, *options: Option, prefix: str = ENV_PREFIX) -> "Builder":
        """
        Build from ``SQLWEAVE_*`` environment variables; ``options`` win.
        """
        return cls(*options_from_env(prefix), *options)

    def set_option(self, *options: Option) -> None:
        self.options.apply(*options)

    def build(self, *fragments: Any) -> Tuple[str, List[Any]]:
        """
        Interpolate ``fragments`` into SQL text and a list of binds.

        Strings are SQL, everything else becomes binds. How records, mappings
        and sequences render depends on the SQL that precedes them:

        * after ``INSERT INTO table`` a record becomes ``( cols ) VALUES ( ... )``
          and a list of records a multi-row insert;
        * after ``SET`` a record becomes ``col = ?, col = ?``;
        * after ``IN`` a sequence becomes ``( ?, ?, ? )``;
        * elsewhere a record becomes ``col = ? AND col = ?``.
        """
        query = self._compile(*fragments)
        return query.sql.value, query.binds

    def _compile(self, *fragments: Any) -> Query:
        query = Query(self.options.copy())
        for fragment in fragments:
            query.add(fragment)

        sql, binds = query.sql.value, query.binds
        if query.options.log_query:
            self.logger.info("SQL: %s", sql)
        if query.options.log_binds:
            self.logger.info("BINDS: %s", redact_params(binds, query.bind_columns))
        return query

    def when(self, condition: Any, *fragments: Any) -> Condition:
        return when(condition, *fragments)

    def has_values(self, value: Any) -> bool:
        """
        Whether a record or mapping keeps any column under the current options.

        Useful to avoid compiling an empty ``SET`` or ``INSERT``. Other values
        always count as having values.
        """
        if not is_composite(value):
            return True
        return bool(Sifter(self.options).sift(value))
