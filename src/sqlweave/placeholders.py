"""
Placeholder renderers.

A renderer receives the 1-based position of a bind within the whole build and
returns the token written into the SQL text for it.
"""

from __future__ import annotations

from typing import Callable, Dict

from .errors import ConfigurationError

PlaceholderFn = Callable[[int], str]


def qmark(position: int) -> str:
    return "?"


def format(position: int) -> str:  # noqa: A001 - mirrors the DB-API paramstyle name
    return "%s"


def numeric(position: int) -> str:
    return f":{position}"


def named(position: int) -> str:
    return f":p{position}"


def numbered_qmark(position: int) -> str:
    return f"?{position}"


def dollar(position: int) -> str:
    return f"${position}"


def at_p(position: int) -> str:
    return f"@p{position}"


PARAMSTYLES: Dict[str, PlaceholderFn] = {
    "qmark": qmark,
    "format": format,
    "pyformat": format,
    "numeric": numeric,
    "named": named,
    "numbered_qmark": numbered_qmark,
    "dollar": dollar,
    "at_p": at_p,
}


def for_paramstyle(style: str) -> PlaceholderFn:
    """
    Return the renderer matching a DB-API 2.0 ``paramstyle`` value.

    Named styles render ``:p1``, ``:p2``... tokens, which drivers such as
    oracledb accept together with a positional bind list. ``numbered_qmark``,
    ``dollar`` and ``at_p`` are not DB-API names; they are the styles reported
    by dialects whose placeholders no DB-API name describes.
    """
    try:
        return PARAMSTYLES[style.strip().lower()]
    except KeyError:
        raise ConfigurationError(f"Unsupported paramstyle {style!r}") from None
