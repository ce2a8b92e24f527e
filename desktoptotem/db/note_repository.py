"""Repository for quick notes (the `appNotesByPath` map)."""
import datetime
from typing import Dict, Optional
from .connection import get_cursor


class NoteRepository:
    """Path -> note text. Callers are responsible for trimming."""

    def __init__(self, db_path: Optional[str] = None) -> None:
        self.db_path = db_path

    def get(self, path: str) -> Optional[str]:
        with get_cursor(self.db_path) as cur:
            cur.execute("SELECT note FROM app_notes WHERE path = ?", (path,))
            row = cur.fetchone()
            return row[0] if row else None

    def put(self, path: str, note: str) -> None:
        ts_str = datetime.datetime.now().isoformat(timespec="seconds")
        with get_cursor(self.db_path) as cur:
            cur.execute("""
                INSERT INTO app_notes (path, note, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(path) DO UPDATE SET
                    note = excluded.note,
                    updated_at = excluded.updated_at
            """, (path, note, ts_str))

    def delete(self, path: str) -> None:
        with get_cursor(self.db_path) as cur:
            cur.execute("DELETE FROM app_notes WHERE path = ?", (path,))

    def all(self) -> Dict[str, str]:
        with get_cursor(self.db_path) as cur:
            cur.execute("SELECT path, note FROM app_notes ORDER BY rowid ASC")
            return {r[0]: r[1] for r in cur.fetchall()}
