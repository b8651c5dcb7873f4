"""
Sifting records and mappings into ordered ``(column, value)`` pairs.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, List, Optional, Tuple

from .fragments import Ref, Valuer, is_composite, is_record
from .options import EmptyMode, Options

SKIP_TOKEN = "-"
INLINE_TOKEN = "inline"
EMPTY_TOKENS = {
    "keepempty": EmptyMode.KEEP,
    "omitempty": EmptyMode.OMIT,
    "nullempty": EmptyMode.NULL,
}


@dataclass(frozen=True)
class Column:
    name: str
    value: Any


@dataclass(frozen=True)
class FieldSpec:
    """
    Parsed column tag of a dataclass field.
    """

    attr: str
    name: str
    mode: Optional[EmptyMode] = None
    inline: bool = False
    skip: bool = False


def column(
    name: str | None = None,
    *,
    empty: EmptyMode | str | None = None,
    inline: bool = False,
    skip: bool = False,
    tag: str = "db",
    **kwargs: Any,
) -> Any:
    """
    ``dataclasses.field`` carrying a column tag, for example::

        @dataclass
        class User:
            id: int
            name: str = column("user_name", empty="omit")
            audit: Audit = column(inline=True, default_factory=Audit)
            password: str = column(skip=True, default="")

    The tag can also be written by hand as ``field(metadata={"db": "user_name,omitempty"})``.
    """
    if skip:
        tokens = [SKIP_TOKEN]
    else:
        tokens = [name] if name else []
        if empty is not None:
            tokens.append(f"{EmptyMode.parse(empty).value}empty")
        if inline:
            tokens.append(INLINE_TOKEN)
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[tag] = ",".join(tokens)
    return dataclasses.field(metadata=metadata, **kwargs)


def parse_tag(attr: str, tag: str | None) -> FieldSpec:
    name = ""
    mode: Optional[EmptyMode] = None
    inline = False
    for token in (tag or "").split(","):
        token = token.strip()
        if token == SKIP_TOKEN:
            return FieldSpec(attr=attr, name=attr, skip=True)
        if token in EMPTY_TOKENS:
            mode = EMPTY_TOKENS[token]
        elif token == INLINE_TOKEN:
            inline = True
        elif token:
            name = token
    return FieldSpec(attr=attr, name=name or attr, mode=mode, inline=inline)


@lru_cache(maxsize=256)
def field_specs(cls: type, tag: str) -> Tuple[FieldSpec, ...]:
    specs = []
    for field in dataclasses.fields(cls):
        if field.name.startswith("_"):
            continue
        raw = field.metadata.get(tag) if tag else None
        specs.append(parse_tag(field.name, raw))
    return tuple(specs)


def record_values(value: Any) -> List[Any]:
    if dataclasses.is_dataclass(value):
        return [getattr(value, field.name) for field in dataclasses.fields(value)]
    return list(value)


def is_zero(value: Any) -> bool:
    """
    Whether ``value`` is the zero value of its type.

    Records are zero when every field is; Valuers are judged by the value
    they convert to. A :class:`Ref` is only zero when it points at nothing.
    """
    if isinstance(value, Ref):
        return value.target is None
    if isinstance(value, Valuer):
        value = value.sql_value()
    if value is None:
        return True
    if is_record(value):
        return all(is_zero(item) for item in record_values(value))
    return not value


class Sifter:
    """
    Turns a record or mapping into columns according to the empty-value policy.

    ``keep_all`` forces every column to survive; multi-row inserts rely on it
    so each row produces the same number of binds.
    """

    def __init__(self, options: Options, *, keep_all: bool = False) -> None:
        self.options = options
        self.keep_all = keep_all

    def sift(self, value: Any) -> List[Column]:
        if isinstance(value, Mapping):
            return self._sift_mapping(value)
        if dataclasses.is_dataclass(value) and is_record(value):
            return self._sift_dataclass(value)
        if is_record(value):
            return self._sift_namedtuple(value)
        return []

    def _sift_mapping(self, src: Mapping) -> List[Column]:
        kept = {}
        for key, raw in src.items():
            value, keep = self.check_value(raw)
            if keep:
                kept[str(key)] = value
        # sorted so equal mappings always compile to the same SQL
        return [Column(name, kept[name]) for name in sorted(kept)]

    def _sift_dataclass(self, src: Any) -> List[Column]:
        columns: List[Column] = []
        for spec in field_specs(type(src), self.options.tag):
            if spec.skip:
                continue
            raw = getattr(src, spec.attr)
            if spec.inline:
                if is_composite(raw):
                    columns.extend(self.sift(raw))
                continue
            value, keep = self.check_value(raw, spec.mode)
            if keep:
                columns.append(Column(spec.name, value))
        return columns

    def _sift_namedtuple(self, src: Any) -> List[Column]:
        columns: List[Column] = []
        for name, raw in zip(type(src)._fields, src):
            value, keep = self.check_value(raw)
            if keep:
                columns.append(Column(name, value))
        return columns

    def check_value(self, value: Any, mode: Optional[EmptyMode] = None) -> Tuple[Any, bool]:
        """
        Return ``(value, keep)`` for a field or entry value.

        ``mode`` is the per-field override from the column tag, if any.
        """
        if not is_zero(value):
            return value, True

        if mode is None and self.options.empty_fn is not None:
            out, keep = self.options.empty_fn(value)
            return out, keep or self.keep_all

        effective = mode or self.options.empty
        if effective is EmptyMode.OMIT:
            if self.keep_all:
                return value, True
            return None, False
        if effective is EmptyMode.NULL:
            return None, True
        return value, True
