"""
Data handle for the `books` table.

Each operation borrows one connection from the shared pool and runs exactly
one parameterized statement. Leaving the pool's connection context commits on
success and rolls back on error; store errors are never retried or wrapped.
"""

from __future__ import annotations

from psycopg_pool import ConnectionPool

from catalog.data.errors import EditConflict, RecordNotFound
from catalog.domain.models import Book
from catalog.utils.logging import get_logger

log = get_logger(__name__)

_INSERT_SQL = """
    INSERT INTO books (title, year, cost, genres)
    VALUES (%s, %s, %s, %s)
    RETURNING id, created_at, version
"""

_GET_SQL = """
    SELECT id, created_at, title, year, cost, genres, version
    FROM books
    WHERE id = %s
"""

_UPDATE_SQL = """
    UPDATE books
    SET title = %s, year = %s, cost = %s, genres = %s, version = version + 1
    WHERE id = %s AND version = %s
    RETURNING version
"""

_DELETE_SQL = """
    DELETE FROM books
    WHERE id = %s
"""


class BookModel:
    """
    CRUD access to the `books` table over a shared connection pool.

    Holds no state besides the pool reference, so one instance may be shared
    by concurrent callers.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self.pool = pool

    def insert(self, book: Book) -> None:
        """
        Insert a new book and fill in its store-assigned fields.

        `id`, `created_at` and `version` on the input are ignored and
        overwritten with the values from `RETURNING`.
        """
        with self.pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(_INSERT_SQL, (book.title, book.year, book.cost, list(book.genres)))
                book.id, book.created_at, book.version = cur.fetchone()
        log.debug("book inserted", extra={"book_id": book.id, "version": book.version})

    def get(self, book_id: int) -> Book:
        """
        Fetch a book by primary key.

        Raises
        ------
        RecordNotFound
            If `book_id` is below 1 (the store is not consulted) or no row matches.
        """
        if book_id < 1:
            raise RecordNotFound()

        with self.pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(_GET_SQL, (book_id,))
                row = cur.fetchone()

        if row is None:
            log.debug("book not found", extra={"book_id": book_id})
            raise RecordNotFound()

        id_, created_at, title, year, cost, genres, version = row
        return Book(
            id=id_,
            created_at=created_at,
            title=title,
            year=year or 0,
            cost=cost or 0,
            genres=list(genres or []),
            version=version,
        )

    def update(self, book: Book) -> None:
        """
        Write title, year, cost and genres back and bump the version.

        The row must still carry `book.version`; on success `book.version`
        is replaced by the incremented value.

        Raises
        ------
        EditConflict
            If no row has both `book.id` and `book.version`, either because
            another writer got there first or because the row is gone.
        """
        args = (
            book.title,
            book.year,
            book.cost,
            list(book.genres),
            book.id,
            book.version,
        )
        with self.pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(_UPDATE_SQL, args)
                row = cur.fetchone()

        if row is None:
            log.debug("book edit conflict", extra={"book_id": book.id, "version": book.version})
            raise EditConflict()

        book.version = row[0]
        log.debug("book updated", extra={"book_id": book.id, "version": book.version})

    def delete(self, book_id: int) -> None:
        """
        Hard-delete a book by primary key.

        Raises
        ------
        RecordNotFound
            If `book_id` is below 1 (the store is not consulted) or no row was deleted.
        """
        if book_id < 1:
            raise RecordNotFound()

        with self.pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(_DELETE_SQL, (book_id,))
                rows_affected = cur.rowcount

        if rows_affected == 0:
            log.debug("book not found for delete", extra={"book_id": book_id})
            raise RecordNotFound()

        log.debug("book deleted", extra={"book_id": book_id})


__all__ = ["BookModel"]
