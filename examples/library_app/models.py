"""
Records for the sqlweave library example.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from sqlweave import column


@dataclass
class Writer:
    id: int
    name: str
    country: Optional[str] = column(empty="null", default=None)


@dataclass
class Genre:
    id: int
    name: str


@dataclass
class Book:
    id: int
    title: str
    author_id: int
    published: bool = False
    _genres: list = field(default_factory=list)


@dataclass
class BookGenre:
    book_id: int
    genre_id: int
