"""Repository for per-path usage scores (the `fileCounts` map)."""
from typing import Dict, Iterable, List, Optional
from .connection import get_cursor


class CountRepository:
    """Path -> cumulative score, kept in first-seen order."""

    def __init__(self, db_path: Optional[str] = None) -> None:
        self.db_path = db_path

    def increment(self, path: str, weight: int) -> int:
        """
        Add `weight` to the score of `path` and return the new score.

        The upsert is a single statement, so concurrent increments cannot
        overwrite each other.
        """
        if weight < 0:
            raise ValueError(f"Score weights must be non-negative, got {weight}")

        with get_cursor(self.db_path) as cur:
            cur.execute("""
                INSERT INTO file_counts (path, count) VALUES (?, ?)
                ON CONFLICT(path) DO UPDATE SET count = count + excluded.count
            """, (path, weight))
            cur.execute("SELECT count FROM file_counts WHERE path = ?", (path,))
            row = cur.fetchone()
            return int(row[0])

    def get(self, path: str) -> int:
        """Return the score for `path`, 0 when unknown."""
        with get_cursor(self.db_path) as cur:
            cur.execute("SELECT count FROM file_counts WHERE path = ?", (path,))
            row = cur.fetchone()
            return int(row[0]) if row else 0

    def all(self) -> Dict[str, int]:
        """Return every score in insertion order."""
        with get_cursor(self.db_path) as cur:
            cur.execute("SELECT path, count FROM file_counts ORDER BY rowid ASC")
            return {r[0]: int(r[1]) for r in cur.fetchall()}

    def paths(self) -> List[str]:
        with get_cursor(self.db_path) as cur:
            cur.execute("SELECT path FROM file_counts ORDER BY rowid ASC")
            return [r[0] for r in cur.fetchall()]

    def delete_many(self, paths: Iterable[str]) -> int:
        """Remove the given paths, returning how many rows went away."""
        batch = [(p,) for p in paths]
        if not batch:
            return 0
        with get_cursor(self.db_path) as cur:
            cur.executemany("DELETE FROM file_counts WHERE path = ?", batch)
            return cur.rowcount

    def clear(self) -> None:
        with get_cursor(self.db_path) as cur:
            cur.execute("DELETE FROM file_counts")
