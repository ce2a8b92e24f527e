"""Quick notes attached to applications."""
from typing import Optional
from ..db.note_repository import NoteRepository


class NoteStore:
    """
    One free-text note per path.

    Blank text means "no note": it is never stored and clears any
    existing note.
    """

    def __init__(self, notes: NoteRepository) -> None:
        self.notes = notes

    def note(self, path: str) -> Optional[str]:
        text = self.notes.get(path)
        if text is None or not text.strip():
            return None
        return text

    def has_note(self, path: str) -> bool:
        return self.note(path) is not None

    def set_note(self, path: str, text: Optional[str]) -> Optional[str]:
        """Store the trimmed text, or delete the note when it is blank."""
        trimmed = (text or "").strip()
        if not trimmed:
            self.notes.delete(path)
            return None
        self.notes.put(path, trimmed)
        return trimmed
