"""Database connection management."""
import sqlite3
import os
from contextlib import contextmanager
from typing import Iterator, Optional
from .. import config


def resolve_path(db_path: Optional[str] = None) -> str:
    """Return the database file to use, defaulting to the configured one."""
    return db_path or config.DB_PATH


def get_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """Create and return a database connection."""
    conn = sqlite3.connect(resolve_path(db_path), timeout=5.0)
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_cursor(db_path: Optional[str] = None) -> Iterator[sqlite3.Cursor]:
    """Context manager for database operations."""
    conn = get_connection(db_path)
    try:
        cursor = conn.cursor()
        yield cursor
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def _create_schema(db_path: str) -> None:
    with get_cursor(db_path) as cur:
        # fileCounts: path -> score, iterated in insertion (rowid) order
        cur.execute("""
            CREATE TABLE IF NOT EXISTS file_counts (
                path TEXT PRIMARY KEY,
                count INTEGER NOT NULL DEFAULT 0
            )
        """)
        # appNotesByPath
        cur.execute("""
            CREATE TABLE IF NOT EXISTS app_notes (
                path TEXT PRIMARY KEY,
                note TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        # Watermark, one-shot migration flags and UI flags
        cur.execute("""
            CREATE TABLE IF NOT EXISTS preferences (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
        """)


def ensure_db_exists(db_path: Optional[str] = None) -> None:
    """
    Ensure database directory and tables exist.

    A file that SQLite cannot read as a database is moved aside to
    `<path>.corrupt` and replaced by an empty store.
    """
    path = resolve_path(db_path)
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    try:
        _create_schema(path)
    except sqlite3.OperationalError:
        raise
    except sqlite3.DatabaseError as e:
        corrupt_path = path + ".corrupt"
        print(f"Database at {path} is unreadable ({e}), moving it to {corrupt_path}")
        os.replace(path, corrupt_path)
        _create_schema(path)

