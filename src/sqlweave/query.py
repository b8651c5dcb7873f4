"""
The query compiler turning fragments into SQL text and binds.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from .fragments import Bind, Condition, Kind, Ref, Valuer, classify, is_composite, is_sequence
from .options import Options
from .sift import Column, Sifter


class SQLBuffer:
    """
    Accumulates SQL text, separating fragments with single spaces.

    Consecutive placeholders are joined with ``", "`` so values emitted back
    to back read as a list.
    """

    def __init__(self) -> None:
        self.value = ""
        self._after_bind = False

    def add(self, text: str) -> None:
        if not text:
            return
        self._append(text)
        self._after_bind = False

    def add_bind(self, token: str) -> None:
        if self._after_bind:
            self.value += ", " + token
        else:
            self._append(token)
        self._after_bind = True

    def _append(self, text: str) -> None:
        if not self.value:
            self.value = text
        elif text[0] == "," or text[0].isspace() or self.value[-1].isspace():
            self.value += text
        else:
            self.value += " " + text

    def __str__(self) -> str:
        return self.value


class SQLContext(Enum):
    BASE = "base"
    INSERT = "insert"
    SET = "set"
    IN = "in"


_INSERT_RX = re.compile(r"\b(?:INSERT|REPLACE)\s+(?:\w+\s+)*INTO\s+\S+\s*$", re.IGNORECASE)
_SET_RX = re.compile(r"\bSET\s*$", re.IGNORECASE)
_IN_RX = re.compile(r"\bIN\s*$", re.IGNORECASE)


def detect_context(sql: str) -> SQLContext:
    """
    Classify the insertion point at the end of ``sql``.
    """
    if _INSERT_RX.search(sql):
        return SQLContext.INSERT
    if _SET_RX.search(sql):
        return SQLContext.SET
    if _IN_RX.search(sql):
        return SQLContext.IN
    return SQLContext.BASE


class Query:
    """
    A single SQL statement being built.

    A query owns its buffer, its binds and its copy of the options; it is
    created for one build and thrown away afterwards.
    """

    def __init__(self, options: Options) -> None:
        self.options = options
        self.sql = SQLBuffer()
        self.binds: List[Any] = []
        self.bind_columns: List[Optional[str]] = []
        self._handlers: Dict[Kind, Callable[[Any], None]] = {
            Kind.VALUER: self._bind,
            Kind.CONDITION: self._add_condition,
            Kind.OPTION: self._add_option,
            Kind.BIND: self._bind,
            Kind.LITERAL: self.sql.add,
            Kind.NULLABLE: self._add_nullable,
            Kind.COMPOSITE: self._add_composite,
            Kind.SEQUENCE: self._add_sequence,
            Kind.SCALAR: self._bind,
        }

    @property
    def context(self) -> SQLContext:
        return detect_context(self.sql.value)

    def add(self, fragment: Any) -> None:
        self._handlers[classify(fragment)](fragment)

    # Helpers -----------------------------------------------------------
    def _bind(self, value: Any, column: Optional[str] = None) -> None:
        while isinstance(value, Ref):
            value = value.target
        if isinstance(value, Valuer):
            value = value.sql_value()
        elif isinstance(value, Bind):
            value = str(value)
        self.sql.add_bind(self.options.placeholder(len(self.binds) + 1))
        self.binds.append(value)
        self.bind_columns.append(column)

    def _bind_group(self, values: Sequence[Any], columns: Sequence[str]) -> None:
        self.sql.add("(")
        for value, column in zip(values, columns):
            self._bind(value, column)
        self.sql.add(")")

    def _add_condition(self, condition: Condition) -> None:
        if condition.flag:
            for fragment in condition.fragments:
                self.add(fragment)

    def _add_option(self, option) -> None:
        option(self.options)

    def _add_nullable(self, value: Any) -> None:
        target = value.target if isinstance(value, Ref) else value
        if target is None or isinstance(target, str):
            self._bind(None if target is None else str(target))
        else:
            self.add(target)

    # Sequences -----------------------------------------------------------
    def _add_sequence(self, values: Any, column: Optional[str] = None) -> None:
        context = self.context
        items = list(values)

        if context is SQLContext.IN:
            self.sql.add("(")
            for item in items:
                self._bind(item, column)
            if not items:
                self.sql.add("NULL")
            self.sql.add(")")
        elif context is SQLContext.INSERT and items and all(is_composite(item) for item in items):
            self._add_rows(items)
        else:
            for item in items:
                self.add(item)

    def _add_rows(self, rows: List[Any]) -> None:
        # every row must produce the same columns, so nothing is dropped
        sifter = Sifter(self.options, keep_all=True)
        columns = sifter.sift(rows[0])
        if not columns:
            return
        names = [col.name for col in columns]

        self.sql.add(f"( {', '.join(names)} ) VALUES")
        self._bind_group([col.value for col in columns], names)

        for row in rows[1:]:
            self.sql.add(",")
            self._bind_group(self._row_values(sifter, row, names), names)

    @staticmethod
    def _row_values(sifter: Sifter, row: Any, names: List[str]) -> List[Any]:
        if isinstance(row, Mapping):
            lookup = {str(key): value for key, value in row.items()}
            return [sifter.check_value(lookup.get(name))[0] for name in names]
        found = {col.name: col.value for col in sifter.sift(row)}
        return [found.get(name) for name in names]

    # Records and mappings ------------------------------------------------
    def _add_composite(self, value: Any) -> None:
        columns = Sifter(self.options).sift(value)
        context = self.context

        if context is SQLContext.INSERT:
            if columns:
                names = [col.name for col in columns]
                self.sql.add(f"( {', '.join(names)} ) VALUES")
                self._bind_group([col.value for col in columns], names)
        elif context is SQLContext.SET:
            for idx, col in enumerate(columns):
                if idx:
                    self.sql.add(",")
                self.sql.add(f"{col.name} =")
                self._bind(col.value, col.name)
        else:
            for idx, col in enumerate(columns):
                if idx:
                    self.sql.add("AND")
                self._add_predicate(col)

    def _add_predicate(self, col: Column) -> None:
        if is_sequence(col.value):
            self.sql.add(f"{col.name} IN")
            self._add_sequence(col.value, col.name)
        else:
            self.sql.add(f"{col.name} =")
            self._bind(col.value, col.name)
