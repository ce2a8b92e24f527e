"""Database layer."""
from .connection import get_connection, get_cursor, ensure_db_exists
from .count_repository import CountRepository
from .note_repository import NoteRepository
from .preference_repository import PreferenceRepository

__all__ = [
    'get_connection', 'get_cursor', 'ensure_db_exists',
    'CountRepository', 'NoteRepository', 'PreferenceRepository',
]
