"""
Builder configuration and the option directives that modify it.

An :class:`Option` can be passed to :class:`~sqlweave.builder.Builder` when it
is constructed, to :meth:`Builder.set_option`, or inline among the fragments
of a single ``build`` call, where it only affects the rest of that call.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Tuple

from . import placeholders as _placeholders
from .dialects.base import Dialect
from .errors import ConfigurationError
from .placeholders import PlaceholderFn

EmptyFn = Callable[[Any], Tuple[Any, bool]]


class EmptyMode(str, Enum):
    """
    What to do with a field or entry holding its type's zero value.
    """

    KEEP = "keep"
    OMIT = "omit"
    NULL = "null"

    @classmethod
    def parse(cls, value: "EmptyMode | str") -> "EmptyMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ConfigurationError(f"Unknown empty mode {value!r}") from None


@dataclass
class Options:
    """
    Settings consulted while compiling fragments.

    Every build works on its own :meth:`copy`, so inline options never leak
    back into the builder they came from.
    """

    tag: str = "db"
    empty: EmptyMode = EmptyMode.KEEP
    empty_fn: Optional[EmptyFn] = None
    placeholder: PlaceholderFn = _placeholders.qmark
    log_query: bool = False
    log_binds: bool = False
    empty_values: bool = False
    nil_values: bool = False

    def copy(self) -> "Options":
        return dataclasses.replace(self)

    def apply(self, *options: "Option") -> None:
        for option in options:
            option(self)


class Option:
    """
    A named directive mutating an :class:`Options` instance.
    """

    __slots__ = ("name", "_apply")

    def __init__(self, name: str, apply: Callable[[Options], None]) -> None:
        self.name = name
        self._apply = apply

    def __call__(self, options: Options) -> None:
        self._apply(options)

    def __repr__(self) -> str:
        return f"Option({self.name})"


def tag(name: str) -> Option:
    """Dataclass field metadata key holding column tags; ``""`` disables tags."""

    def apply(o: Options) -> None:
        o.tag = name

    return Option(f"tag={name!r}", apply)


def empty_mode(mode: EmptyMode | str) -> Option:
    parsed = EmptyMode.parse(mode)

    def apply(o: Options) -> None:
        o.empty = parsed

    return Option(f"empty={parsed.value}", apply)


def keep_empty() -> Option:
    return empty_mode(EmptyMode.KEEP)


def omit_empty() -> Option:
    return empty_mode(EmptyMode.OMIT)


def null_empty() -> Option:
    return empty_mode(EmptyMode.NULL)


def with_empty_fn(fn: EmptyFn) -> Option:
    """
    Decide the fate of empty values with ``fn(value) -> (value, keep)``.

    Fields carrying their own ``keepempty``/``omitempty``/``nullempty`` tag
    bypass the function.
    """

    def apply(o: Options) -> None:
        o.empty_fn = fn

    return Option("empty_fn", apply)


def with_default_empty() -> Option:
    def apply(o: Options) -> None:
        o.empty_fn = None

    return Option("default_empty", apply)


def placeholder(fn: PlaceholderFn) -> Option:
    def apply(o: Options) -> None:
        o.placeholder = fn

    return Option(f"placeholder={getattr(fn, '__name__', fn)!r}", apply)


def paramstyle(style: str) -> Option:
    fn = _placeholders.for_paramstyle(style)
    option = placeholder(fn)
    option.name = f"paramstyle={style!r}"
    return option


def dialect(target: Dialect) -> Option:
    option = placeholder(target.parameter_placeholder)
    option.name = f"dialect={target.name!r}"
    return option


def log(flag: bool = True) -> Option:
    def apply(o: Options) -> None:
        o.log_query = flag
        o.log_binds = flag

    return Option(f"log={flag}", apply)


def log_query(flag: bool = True) -> Option:
    def apply(o: Options) -> None:
        o.log_query = flag

    return Option(f"log_query={flag}", apply)


def log_binds(flag: bool = True) -> Option:
    def apply(o: Options) -> None:
        o.log_binds = flag

    return Option(f"log_binds={flag}", apply)


# Backwards compatible options. Prefer the empty modes or with_empty_fn.


def empty_values(flag: bool) -> Option:
    """Keep empty strings (deprecated)."""

    def apply(o: Options) -> None:
        o.empty_values = flag
        o.empty_fn = _compat_empty(o.empty_values, o.nil_values)

    return Option(f"empty_values={flag}", apply)


def nil_values(flag: bool) -> Option:
    """Keep ``None`` and empty containers as null binds (deprecated)."""

    def apply(o: Options) -> None:
        o.nil_values = flag
        o.empty_fn = _compat_empty(o.empty_values, o.nil_values)

    return Option(f"nil_values={flag}", apply)


def _compat_empty(keep_strings: bool, keep_nils: bool) -> EmptyFn:
    def fn(value: Any) -> Tuple[Any, bool]:
        if isinstance(value, (str, bytes)):
            return value, keep_strings
        if value is None or isinstance(value, (Mapping, list, tuple, set, frozenset)):
            return None, keep_nils
        return value, True

    return fn
