"""
Tests for the seeding script.
"""

import json
from pathlib import Path

import pytest

from lending_service.domain.services import LendingService
from lending_service.infrastructure.db.sqlite_book_store import SqliteBookStore
from lending_service.infrastructure.memory.in_memory_book_store import InMemoryBookStore
from scripts.seed_books import main, parse_entry, seed_books


VALID = {"title": "Dune", "author": "Frank Herbert", "isbn": "978-0441", "publishedYear": 1965}


class TestParseEntry:
    def test_parse_valid_entry(self):
        candidate = parse_entry(VALID)

        assert candidate.title == "Dune"
        assert candidate.published_year == 1965

    def test_parse_missing_field(self):
        with pytest.raises(ValueError, match="missing field"):
            parse_entry({"title": "Dune"})


class TestSeedBooks:
    def test_invalid_entries_are_skipped(self):
        service = LendingService(store=InMemoryBookStore())
        entries = [
            VALID,
            {**VALID, "isbn": "not an isbn"},
            {"title": "Incomplete"},
            {**VALID, "title": "Children of Dune", "publishedYear": "1976"},
        ]

        created = seed_books(entries, service)

        assert [view.title for view in created] == ["Dune", "Children of Dune"]
        assert [view.id for view in created] == [1, 2]
        assert all(view.is_available for view in created)


def test_main_seeds_sqlite_store(tmp_path: Path):
    books_file = tmp_path / "books.json"
    books_file.write_text(json.dumps([VALID, VALID]), encoding="utf-8")
    db_path = tmp_path / "lending.db"

    total = main(books_file, db_path)

    assert total == 2
    assert SqliteBookStore(db_path).get(2).title == "Dune"


def test_main_exits_on_non_list_file(tmp_path: Path):
    books_file = tmp_path / "books.json"
    books_file.write_text(json.dumps(VALID), encoding="utf-8")

    with pytest.raises(SystemExit):
        main(books_file, tmp_path / "lending.db")
