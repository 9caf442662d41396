"""
Seed script for the book catalog.

Implements deterministic pseudo-random book generation, CSV emission, and
Postgres COPY loading into the `books` table.
"""

from __future__ import annotations

import csv
import random
import sys
import tempfile
import time
from pathlib import Path

import typer

from catalog.infrastructure.db_factory import build_dsn, get_sync_connection

app = typer.Typer(help="Generate synthetic books and load them into Postgres (CSV + COPY).")

GENRES = ["scifi", "fantasy", "romance", "comedy", "drama", "history", "horror"]
_WORDS = ["dune", "river", "silent", "empire", "glass", "winter", "last", "garden", "stone", "night"]


def _build_dsn(dsn_override: str | None) -> str:
    if dsn_override:
        return dsn_override
    return build_dsn()


def _array_literal(values: list[str]) -> str:
    """Render a text[] literal for COPY csv input; tags are plain words."""
    return "{" + ",".join(values) + "}"


def _generate_rows_csv(csv_path: Path, rows: int, batch_size: int, seed: int) -> None:
    rng = random.Random(seed)

    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["title", "year", "cost", "genres"])

        buffer: list[list[str]] = []
        for _ in range(rows):
            title = " ".join(rng.choice(_WORDS) for _ in range(rng.randint(1, 4))).title()
            year = rng.randint(1800, 2025)
            cost = rng.randint(50, 900)
            genres = rng.sample(GENRES, k=rng.randint(0, 3))
            buffer.append([title, str(year), str(cost), _array_literal(genres)])
            if len(buffer) >= batch_size:
                writer.writerows(buffer)
                buffer.clear()
        if buffer:
            writer.writerows(buffer)


def _copy_into_db(dsn: str, csv_path: Path) -> None:
    with get_sync_connection(dsn) as conn:
        with conn.cursor() as cur:
            with cur.copy(
                """
                COPY public.books (title, year, cost, genres)
                FROM STDIN WITH (FORMAT csv, HEADER TRUE)
                """
            ) as copy:
                with csv_path.open("r", encoding="utf-8") as f:
                    for line in f:
                        copy.write(line)
            conn.commit()


@app.command()
def main(
    rows: int = typer.Option(
        1_000,
        "--rows",
        "-r",
        help="Number of books to generate.",
    ),
    batch_size: int = typer.Option(
        500,
        "--batch-size",
        "-b",
        help="Batch size for CSV buffering during generation.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Optional CSV output path (if omitted, a temp file will be used).",
    ),
    dsn: str | None = typer.Option(
        None,
        "--dsn",
        help="Optional DSN override for Postgres.",
    ),
    no_load: bool = typer.Option(
        False,
        "--no-load",
        help="Only generate CSV; skip loading into Postgres.",
    ),
) -> None:
    """
    Generate synthetic books and optionally load them into Postgres using COPY.
    """
    start = time.perf_counter()
    if output:
        csv_path = output
        csv_path.parent.mkdir(parents=True, exist_ok=True)
    else:
        tmpdir = Path(tempfile.mkdtemp(prefix="catalog_csv_"))
        csv_path = tmpdir / "books.csv"

    typer.echo(f"Generating {rows:,} books -> {csv_path} (batch={batch_size}, seed={seed})")
    _generate_rows_csv(csv_path, rows=rows, batch_size=batch_size, seed=seed)
    typer.echo(f"CSV generation completed in {time.perf_counter() - start:.2f}s")

    if no_load:
        typer.echo("Skipping load (no-load flag set).")
        return

    load_start = time.perf_counter()
    typer.echo("Loading CSV into Postgres via COPY...")
    _copy_into_db(_build_dsn(dsn), csv_path)
    typer.echo(f"Load completed in {time.perf_counter() - load_start:.2f}s.")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
