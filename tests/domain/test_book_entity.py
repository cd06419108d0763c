"""
Tests for the Book entity.
"""

import pytest

from lending_service.domain.entities import Book, validate_text_field


def make_book(**overrides) -> Book:
    fields = {
        "id": 1,
        "title": "Dune",
        "author": "Frank Herbert",
        "isbn": "978-0441013593",
        "published_year": 1965,
    }
    fields.update(overrides)
    return Book(**fields)


class TestBook:
    """Tests for the Book entity."""

    def test_create_book_with_minimum_data(self):
        """Test creating a book with only required fields."""
        book = make_book()

        assert book.id == 1
        assert book.title == "Dune"
        assert book.author == "Frank Herbert"
        assert book.is_available is True
        assert book.version == 0
        assert book.is_checked_out() is False

    def test_book_validation_non_positive_id(self):
        """Test that ids below 1 raise ValueError."""
        with pytest.raises(ValueError, match="positive integer"):
            make_book(id=0)

    def test_book_validation_empty_title(self):
        """Test that empty title raises ValueError."""
        with pytest.raises(ValueError, match="title cannot be empty"):
            make_book(title="")

    def test_book_validation_whitespace_author(self):
        """Test that whitespace-only author raises ValueError."""
        with pytest.raises(ValueError, match="author cannot be empty"):
            make_book(author="   ")

    def test_book_validation_title_too_long(self):
        """Test that titles over 100 characters raise ValueError."""
        with pytest.raises(ValueError, match="cannot exceed 100"):
            make_book(title="x" * 101)

    def test_book_accepts_title_of_exactly_100_characters(self):
        book = make_book(title="x" * 100)

        assert len(book.title) == 100

    @pytest.mark.parametrize("isbn", ["978 0441", "ISBN978", "", "12_34"])
    def test_book_validation_isbn_format(self, isbn):
        """Test that ISBNs with anything but digits and hyphens raise ValueError."""
        with pytest.raises(ValueError, match="digits and hyphens"):
            make_book(isbn=isbn)

    @pytest.mark.parametrize("year", [0, -1, 10000])
    def test_book_validation_published_year_range(self, year):
        with pytest.raises(ValueError, match="published_year"):
            make_book(published_year=year)

    def test_book_validation_negative_version(self):
        with pytest.raises(ValueError, match="version cannot be negative"):
            make_book(version=-1)

    def test_with_availability_keeps_identity_and_version(self):
        """Flipping availability must not touch id or version."""
        book = make_book(version=4)

        lent = book.with_availability(False)

        assert lent.is_available is False
        assert lent.is_checked_out() is True
        assert lent.id == book.id
        assert lent.version == 4
        assert book.is_available is True

    def test_book_immutability(self):
        """Test that stored records cannot be mutated in place."""
        book = make_book()

        with pytest.raises(Exception):
            book.is_available = False


class TestValidateTextField:
    """Tests for the title/author rule shared with the request schema."""

    @pytest.mark.parametrize("value", ["", "   ", "\t\n", "\x1c", "\x1f\x1e"])
    def test_blank_values_are_rejected(self, value):
        with pytest.raises(ValueError, match="title cannot be empty"):
            validate_text_field("title", value)

    def test_value_is_returned_unchanged(self):
        assert validate_text_field("author", "  Frank Herbert ") == "  Frank Herbert "

    def test_length_includes_surrounding_whitespace(self):
        with pytest.raises(ValueError, match="cannot exceed 100"):
            validate_text_field("title", " " + "x" * 100)
