from .demo import (  # noqa: F401
    bootstrap_db,
    fetch_books_with_authors,
    rename_writer,
    run_demo,
    seed_sample_data,
)

__all__ = [
    "bootstrap_db",
    "seed_sample_data",
    "run_demo",
    "fetch_books_with_authors",
    "rename_writer",
]
