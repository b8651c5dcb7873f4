"""
sqlweave public package initialization.

Mix SQL text and Python values; get back SQL with placeholders and the
matching list of binds.
"""

from .bridge import DB, Bridge, TransactionError, Tx  # noqa: F401
from .builder import Builder  # noqa: F401
from .errors import ConfigurationError, SqlWeaveError  # noqa: F401
from .fragments import Bind, Condition, Nullable, Ref, Valuer, when  # noqa: F401
from .options import (  # noqa: F401
    EmptyMode,
    Option,
    Options,
    dialect,
    empty_mode,
    empty_values,
    keep_empty,
    log,
    log_binds,
    log_query,
    nil_values,
    null_empty,
    omit_empty,
    paramstyle,
    placeholder,
    tag,
    with_default_empty,
    with_empty_fn,
)
from .sift import Column, column  # noqa: F401

__all__ = [
    "Bind",
    "Bridge",
    "Builder",
    "Column",
    "Condition",
    "ConfigurationError",
    "DB",
    "EmptyMode",
    "Nullable",
    "Option",
    "Options",
    "Ref",
    "SqlWeaveError",
    "TransactionError",
    "Tx",
    "Valuer",
    "column",
    "dialect",
    "empty_mode",
    "empty_values",
    "keep_empty",
    "log",
    "log_binds",
    "log_query",
    "nil_values",
    "null_empty",
    "omit_empty",
    "paramstyle",
    "placeholder",
    "tag",
    "when",
    "with_default_empty",
    "with_empty_fn",
]
