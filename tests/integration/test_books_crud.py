"""
Integration tests for the data handles against a real PostgreSQL instance.

Run with: RUN_INTEGRATION_TESTS=1 pytest tests/integration/
"""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor

import pytest

from catalog.data import EditConflict, RecordNotFound
from catalog.domain.models import Book

pytestmark = pytest.mark.skipif(
    os.getenv("RUN_INTEGRATION_TESTS", "0") != "1",
    reason="Integration tests require RUN_INTEGRATION_TESTS=1 and reachable Postgres",
)


class TestBookLifecycle:
    """Insert, read back, update and delete a single book."""

    def test_dune_scenario(self, models):
        book = Book(title="Dune", year=1965, cost=155, genres=["scifi"])
        models.books.insert(book)

        assert book.id > 0
        assert book.version == 1
        assert book.created_at is not None

        fetched = models.books.get(book.id)
        assert (fetched.title, fetched.year, fetched.cost, fetched.genres) == (
            "Dune",
            1965,
            155,
            ["scifi"],
        )
        assert fetched.version == 1

        fetched.title = "Dune (new)"
        models.books.update(fetched)
        assert fetched.version == 2
        assert models.books.get(book.id).title == "Dune (new)"

        models.books.delete(book.id)
        with pytest.raises(RecordNotFound):
            models.books.get(book.id)

    def test_genres_round_trip_preserves_order(self, models):
        book = Book(title="Ordered", genres=["a", "b", "c"])
        models.books.insert(book)

        assert models.books.get(book.id).genres == ["a", "b", "c"]

    def test_empty_genres_round_trip(self, models):
        book = Book(title="Untagged")
        models.books.insert(book)

        assert models.books.get(book.id).genres == []

    def test_sequential_updates_increment_by_one(self, models):
        book = Book(title="Counter")
        models.books.insert(book)

        models.books.update(book)
        models.books.update(book)

        assert book.version == 3
        assert models.books.get(book.id).version == 3


class TestBookErrors:
    """Sentinel errors surfaced by the book handle."""

    def test_get_missing_id(self, models):
        with pytest.raises(RecordNotFound):
            models.books.get(999_999)

    def test_delete_twice(self, models):
        book = Book(title="Ephemeral")
        models.books.insert(book)
        models.books.delete(book.id)

        with pytest.raises(RecordNotFound):
            models.books.delete(book.id)

    def test_stale_update_conflicts(self, models):
        book = Book(title="Contested")
        models.books.insert(book)
        first = models.books.get(book.id)
        second = models.books.get(book.id)

        first.title = "First writer"
        models.books.update(first)

        second.title = "Second writer"
        with pytest.raises(EditConflict):
            models.books.update(second)

        assert models.books.get(book.id).title == "First writer"

    def test_update_vanished_row_conflicts(self, models):
        book = Book(title="Gone")
        models.books.insert(book)
        models.books.delete(book.id)

        with pytest.raises(EditConflict):
            models.books.update(book)

    def test_concurrent_updates_let_exactly_one_win(self, models):
        book = Book(title="Race")
        models.books.insert(book)
        copies = [models.books.get(book.id) for _ in range(2)]

        def attempt(copy: Book) -> bool:
            try:
                models.books.update(copy)
            except EditConflict:
                return False
            return True

        with ThreadPoolExecutor(max_workers=2) as executor:
            outcomes = list(executor.map(attempt, copies))

        assert sorted(outcomes) == [False, True]
        assert models.books.get(book.id).version == 2
