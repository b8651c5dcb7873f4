"""
Conversion between DB-API argument lists and builder fragments.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, List

from ..builder import Builder
from ..query import Query


def to_fragments(parameters: Any) -> List[Any]:
    """
    Fragments for the ``parameters`` argument of ``cursor.execute``.

    Sequences contribute their items, mappings their values in order and any
    other object is a single fragment. Plain strings among them are SQL text,
    exactly as in :meth:`Builder.build`; wrap string values in ``Bind``.
    """
    if parameters is None:
        return []
    if isinstance(parameters, Mapping):
        return list(parameters.values())
    if isinstance(parameters, (list, tuple)):
        return list(parameters)
    return [parameters]


class ShimBuilder:
    """
    Builder front used by shimmed connections and cursors.
    """

    def __init__(self, builder: Builder) -> None:
        self.builder = builder

    def compile(self, operation: str, parameters: Any = None) -> Query:
        return self.builder._compile(operation, *to_fragments(parameters))
