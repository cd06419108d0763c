#!/usr/bin/env python3
"""
Book Seeding Script.

Loads books from a JSON file into the SQLite store through the lending
service, so every record gets a store-assigned id and starts available.

The file holds a list of objects with the same fields as POST /books:

    [{"title": "Dune", "author": "Frank Herbert", "isbn": "978-0441", "publishedYear": 1965}]

Usage:
    python -m scripts.seed_books --file books.json --db-path data/lending.db
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

from lending_service.domain.services import LendingService
from lending_service.domain.value_objects import BookView, NewBook
from lending_service.infrastructure.db.sqlite_book_store import SqliteBookStore

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path("data/lending.db")


def parse_entry(entry: dict) -> NewBook:
    """
    Build a creation candidate from one JSON object.

    Raises:
        ValueError: If a field is missing or violates its constraint
    """
    try:
        return NewBook(
            title=entry["title"],
            author=entry["author"],
            isbn=entry["isbn"],
            published_year=int(entry["publishedYear"]),
        )
    except KeyError as e:
        raise ValueError(f"missing field {e}") from e


def seed_books(entries: List[dict], service: LendingService) -> List[BookView]:
    """
    Create one book per valid entry; invalid entries are logged and skipped.

    Returns:
        Views of the created books, in file order
    """
    created: List[BookView] = []
    for position, entry in enumerate(entries, start=1):
        try:
            candidate = parse_entry(entry)
        except (TypeError, ValueError) as e:
            logger.warning(f"Skipping entry {position}: {e}")
            continue

        result = service.create(candidate)
        if result.is_success:
            created.append(result.view)
        else:
            logger.warning(f"Skipping entry {position}: {result.failure.message}")

    logger.info(f"Seeded {len(created)} of {len(entries)} books")
    return created


def main(file_path: Path, db_path: Path = DEFAULT_DB_PATH) -> int:
    """
    Main entry point for the seeding script.

    Returns:
        Number of books in the store after seeding
    """
    try:
        entries = json.loads(file_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Cannot read {file_path}: {e}")
        sys.exit(1)

    if not isinstance(entries, list):
        logger.error(f"{file_path} must contain a JSON list of books")
        sys.exit(1)

    store = SqliteBookStore(db_path)
    seed_books(entries, LendingService(store=store))
    return store.count()


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    parser = argparse.ArgumentParser(description="Seed the lending store with books")
    parser.add_argument(
        "--file", "-f",
        type=Path,
        required=True,
        help="JSON file containing a list of books"
    )
    parser.add_argument(
        "--db-path", "-d",
        type=Path,
        default=DEFAULT_DB_PATH,
        help=f"SQLite database file (default: {DEFAULT_DB_PATH})"
    )

    args = parser.parse_args()
    total = main(args.file, args.db_path)
    logger.info(f"Store now holds {total} books")
