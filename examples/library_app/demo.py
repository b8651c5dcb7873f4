"""
Library example showcasing multi-row inserts, IN lists and conditional clauses.
"""

from __future__ import annotations

import sqlite3
from dataclasses import asdict
from typing import Any, Dict, List

from sqlweave import DB, Builder, omit_empty

from .models import Book, BookGenre, Genre, Writer

SCHEMA = (
    "CREATE TABLE IF NOT EXISTS writer (id INTEGER PRIMARY KEY, name TEXT NOT NULL, country TEXT)",
    "CREATE TABLE IF NOT EXISTS genre (id INTEGER PRIMARY KEY, name TEXT NOT NULL UNIQUE)",
    "CREATE TABLE IF NOT EXISTS book ("
    "id INTEGER PRIMARY KEY, title TEXT NOT NULL, author_id INTEGER NOT NULL REFERENCES writer(id),"
    " published INTEGER NOT NULL DEFAULT 0)",
    "CREATE TABLE IF NOT EXISTS book_genre (book_id INTEGER NOT NULL, genre_id INTEGER NOT NULL)",
)


def bootstrap_db(path: str = ":memory:") -> DB:
    db = DB(sqlite3.connect(path), Builder(omit_empty()))
    for statement in SCHEMA:
        db.bridge.execute(statement)
    db.commit()
    return db


def seed_sample_data(db: DB) -> Dict[str, List[Dict[str, Any]]]:
    writers = [
        Writer(1, "Octavia Butler", "USA"),
        Writer(2, "Haruki Murakami", "Japan"),
        Writer(3, "Anonymous"),
    ]
    genres = [Genre(1, "Sci-Fi"), Genre(2, "Magical Realism"), Genre(3, "Fantasy")]
    books = [
        Book(1, "Kindred", author_id=1, published=True),
        Book(2, "Kafka on the Shore", author_id=2, published=True),
        Book(3, "Untitled Draft", author_id=3),
    ]
    links = [BookGenre(1, 1), BookGenre(2, 2), BookGenre(2, 3)]

    with db.begin() as tx:
        tx.bridge.execute("INSERT INTO writer", writers)
        tx.bridge.execute("INSERT INTO genre", genres)
        tx.bridge.execute("INSERT INTO book", books)
        tx.bridge.execute("INSERT INTO book_genre", links)

    return {
        "writers": [asdict(w) for w in writers],
        "genres": [asdict(g) for g in genres],
        "books": [asdict(b) for b in books],
    }


def fetch_books_with_authors(db: DB, *, published_only: bool = True) -> List[Dict[str, Any]]:
    bridge = db.bridge
    rows = bridge.query(
        "SELECT b.id, b.title, w.name FROM book b JOIN writer w ON w.id = b.author_id",
        bridge.when(published_only, "WHERE", {"b.published": True}),
        "ORDER BY b.id",
    )
    if not rows:
        return []

    genres: Dict[int, List[str]] = {}
    for book_id, name in bridge.query(
        "SELECT bg.book_id, g.name FROM book_genre bg JOIN genre g ON g.id = bg.genre_id"
        " WHERE bg.book_id IN",
        [row[0] for row in rows],
        "ORDER BY g.name",
    ):
        genres.setdefault(book_id, []).append(name)

    return [
        {"title": title, "author": author, "genres": genres.get(book_id, [])}
        for book_id, title, author in rows
    ]


def rename_writer(db: DB, writer_id: int, *, name: str = "", country: str = "") -> int:
    changes = {"name": name, "country": country}
    if not db.builder.has_values(changes):
        return 0
    with db.begin() as tx:
        cursor = tx.bridge.execute("UPDATE writer SET", changes, "WHERE id =", writer_id)
        return cursor.rowcount


def run_demo(path: str = ":memory:") -> List[Dict[str, Any]]:
    db = bootstrap_db(path)
    try:
        seed_sample_data(db)
        return fetch_books_with_authors(db)
    finally:
        db.close()


if __name__ == "__main__":
    feed = run_demo("library_demo.db")
    for entry in feed:
        print(f"{entry['title']} by {entry['author']} [{', '.join(entry['genres'])}]")
