"""SQLite helpers for the web application."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any, Iterable, Sequence

import click
from flask import Flask, current_app, g
from flask.cli import with_appcontext

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent.parent
MIGRATIONS_DIR = PACKAGE_DIR / "migrations"
SEEDS_DIR = PACKAGE_DIR / "seeds"
SCHEMA_VERSION = "0001_init"


class DatabaseError(RuntimeError):
    """Raised when the SQLite layer encounters an unexpected error."""


class RecordNotFoundError(LookupError):
    """Base class for lookups of unknown ids."""


def get_db() -> sqlite3.Connection:
    """Return a connection for the current application context."""
    if "db" not in g:
        conn = sqlite3.connect(current_app.config["DATABASE"])
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        g.db = conn
    return g.db  # type: ignore[return-value]


def close_db(_: object | None = None) -> None:
    conn = g.pop("db", None)
    if conn is not None:
        conn.close()


def init_app(app: Flask) -> None:
    """Attach teardown handlers and CLI commands to the app."""
    app.teardown_appcontext(close_db)
    app.cli.add_command(init_db_command)


def ensure_schema(app: Flask) -> None:
    initialize_database(app, drop_existing=False)


def initialize_database(app: Flask, *, drop_existing: bool) -> None:
    database_path = Path(app.config["DATABASE"])
    if drop_existing and database_path.exists():
        database_path.unlink()

    with app.app_context():
        conn = get_db()
        try:
            if not _has_version(conn, SCHEMA_VERSION):
                logger.info("Applying schema %s to %s", SCHEMA_VERSION, database_path)
                _apply_scripts(conn, [MIGRATIONS_DIR / f"{SCHEMA_VERSION}.sql", SEEDS_DIR / "seed.sql"])
                conn.commit()
        finally:
            close_db(None)


def _apply_scripts(conn: sqlite3.Connection, scripts: Iterable[Path]) -> None:
    for script in scripts:
        try:
            conn.executescript(script.read_text(encoding="utf-8"))
        except sqlite3.Error as exc:
            raise DatabaseError(f"{script.name}: {exc}") from exc


def _has_version(conn: sqlite3.Connection, version: str) -> bool:
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='schema_migrations'"
    )
    if cursor.fetchone() is None:
        return False
    version_cursor = conn.execute("SELECT 1 FROM schema_migrations WHERE version = ?", (version,))
    return version_cursor.fetchone() is not None


def query_one(sql: str, params: Sequence[Any] | None = None) -> sqlite3.Row | None:
    cur = get_db().execute(sql, params or [])
    try:
        return cur.fetchone()
    finally:
        cur.close()


def query_all(sql: str, params: Sequence[Any] | None = None) -> list[sqlite3.Row]:
    cur = get_db().execute(sql, params or [])
    try:
        return cur.fetchall()
    finally:
        cur.close()


def execute(sql: str, params: Sequence[Any] | None = None) -> int:
    conn = get_db()
    try:
        cur = conn.execute(sql, params or [])
        conn.commit()
    except sqlite3.Error as exc:
        conn.rollback()
        raise DatabaseError(str(exc)) from exc
    return cur.rowcount



@click.command("init-db")
@click.option("--force", is_flag=True, help="Recreate the database from scratch.")
@with_appcontext
def init_db_command(force: bool) -> None:
    """Initialize the database using the bundled migrations and seeds."""
    app = current_app._get_current_object()  # type: ignore[attr-defined]
    initialize_database(app, drop_existing=force)
    click.echo("Database initialized.")
