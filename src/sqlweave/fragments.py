"""
Fragment types accepted by :meth:`Builder.build` and their classification.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence, Set
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, Tuple, runtime_checkable

from .options import Option


class Bind(str):
    """
    A string to be bound as a value rather than written as SQL text.

        builder.build("WHERE name =", Bind("Frank"))
    """

    __slots__ = ()


@dataclass(frozen=True)
class Ref:
    """
    A reference that may be absent.

    ``Ref(None)`` binds ``NULL``, ``Ref("text")`` binds the string and any
    other target is compiled as if it had been passed directly.
    """

    target: Any = None


@runtime_checkable
class Valuer(Protocol):
    """
    A value that converts itself into something the database driver can bind.

    Valuers are always bound as a single value and never looked into.
    """

    def sql_value(self) -> Any: ...


@dataclass(frozen=True)
class Nullable:
    """
    Minimal :class:`Valuer` for optional values, e.g. ``Nullable("x")``.
    """

    value: Any = None

    @property
    def valid(self) -> bool:
        return self.value is not None

    def sql_value(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Condition:
    """
    Fragments that are only compiled when ``flag`` is true.
    """

    flag: bool
    fragments: Tuple[Any, ...] = ()


def when(condition: Any, *fragments: Any) -> Condition:
    """
    Conditionally include ``fragments`` in a build:

        sql, binds = builder.build(
            "SELECT u.* FROM users u",
            when(employees_only, "JOIN employees e ON u.id = e.id"),
            "WHERE u.id IN", ids,
        )
    """
    return Condition(bool(condition), fragments)


class Kind(Enum):
    VALUER = "valuer"
    CONDITION = "condition"
    OPTION = "option"
    BIND = "bind"
    LITERAL = "literal"
    NULLABLE = "nullable"
    COMPOSITE = "composite"
    SEQUENCE = "sequence"
    SCALAR = "scalar"


def is_record(value: Any) -> bool:
    if isinstance(value, (Valuer, Ref, Condition)):
        return False
    if dataclasses.is_dataclass(value):
        return not isinstance(value, type)
    return isinstance(value, tuple) and hasattr(type(value), "_fields")


def is_composite(value: Any) -> bool:
    return is_record(value) or isinstance(value, Mapping)


def is_sequence(value: Any) -> bool:
    if isinstance(value, (str, bytes, bytearray)):
        return False
    return isinstance(value, (Sequence, Set)) and not is_record(value)


def classify(fragment: Any) -> Kind:
    if isinstance(fragment, Valuer):
        return Kind.VALUER
    if isinstance(fragment, Condition):
        return Kind.CONDITION
    if isinstance(fragment, Option):
        return Kind.OPTION
    if isinstance(fragment, Bind):
        return Kind.BIND
    if isinstance(fragment, str) and not isinstance(fragment, Enum):
        return Kind.LITERAL
    if fragment is None or isinstance(fragment, Ref):
        return Kind.NULLABLE
    if is_composite(fragment):
        return Kind.COMPOSITE
    if is_sequence(fragment):
        return Kind.SEQUENCE
    return Kind.SCALAR
