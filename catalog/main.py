from __future__ import annotations

import json
import sys
from typing import List, Optional

import typer

from catalog.config import get_settings
from catalog.data import EditConflict, RecordNotFound, new_models
from catalog.domain.models import Book
from catalog.infrastructure.db_factory import pool_session
from catalog.utils.logging import configure_logging

app = typer.Typer(help="Book catalog data-access CLI.")


@app.callback()
def _setup() -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)


def _echo_book(book: Book) -> None:
    typer.echo(json.dumps({"book": book.to_envelope()}, indent=2))


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"pool=({settings.db_pool_min_size},{settings.db_pool_max_size}) env={settings.app_env}"
    )


@app.command()
def add(
    title: str = typer.Option(..., "--title", "-t", help="Book title."),
    year: int = typer.Option(0, "--year", "-y", help="Release year."),
    cost: int = typer.Option(0, "--cost", "-c", help="Cost."),
    genres: Optional[List[str]] = typer.Option(None, "--genre", "-g", help="Genre tag; repeatable."),
) -> None:
    """
    Insert a book and print it.
    """
    book = Book(title=title, year=year, cost=cost, genres=genres or [])
    with pool_session() as pool:
        new_models(pool).books.insert(book)
    _echo_book(book)


@app.command()
def show(book_id: int = typer.Argument(..., help="Book id.")) -> None:
    """
    Print one book.
    """
    with pool_session() as pool:
        try:
            book = new_models(pool).books.get(book_id)
        except RecordNotFound:
            typer.echo(f"Book {book_id} not found.", err=True)
            raise typer.Exit(code=1)
    _echo_book(book)


@app.command()
def update(
    book_id: int = typer.Argument(..., help="Book id."),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="New title."),
    year: Optional[int] = typer.Option(None, "--year", "-y", help="New release year."),
    cost: Optional[int] = typer.Option(None, "--cost", "-c", help="New cost."),
    genres: Optional[List[str]] = typer.Option(None, "--genre", "-g", help="Replacement genre tag; repeatable."),
    clear_genres: bool = typer.Option(False, "--clear-genres", help="Remove every genre tag."),
) -> None:
    """
    Change the given fields of a book and bump its version.
    """
    with pool_session() as pool:
        books = new_models(pool).books
        try:
            book = books.get(book_id)
            if title is not None:
                book.title = title
            if year is not None:
                book.year = year
            if cost is not None:
                book.cost = cost
            if clear_genres:
                book.genres = []
            elif genres:
                book.genres = genres
            books.update(book)
        except RecordNotFound:
            typer.echo(f"Book {book_id} not found.", err=True)
            raise typer.Exit(code=1)
        except EditConflict:
            typer.echo(f"Book {book_id} was modified concurrently; try again.", err=True)
            raise typer.Exit(code=2)
    _echo_book(book)


@app.command()
def delete(book_id: int = typer.Argument(..., help="Book id.")) -> None:
    """
    Delete one book.
    """
    with pool_session() as pool:
        try:
            new_models(pool).books.delete(book_id)
        except RecordNotFound:
            typer.echo(f"Book {book_id} not found.", err=True)
            raise typer.Exit(code=1)
    typer.echo(f"Book {book_id} deleted.")


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
