"""
Data models for the application.
"""
import datetime
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict


class ActivationPolicy(Enum):
    """How an application presents itself to the desktop."""
    REGULAR = "regular"  # normal foreground application
    ACCESSORY = "accessory"  # background/agent process with occasional UI
    PROHIBITED = "prohibited"  # never shows UI


@dataclass(frozen=True)
class AppCandidate:
    """An observed application activation, before filtering."""
    path: str
    name: str
    activation_policy: ActivationPolicy = ActivationPolicy.REGULAR
    is_self: bool = False


@dataclass(frozen=True)
class RecentDocument:
    """A document from the desktop's recently-used list."""
    path: str
    accessed_at: datetime.datetime


@dataclass(eq=False)
class DisplayItem:
    """
    A ranked, presentation-ready entry.

    Items are rebuilt on every ranking pass; `id` changes each time and is
    ignored by equality, which compares paths only.
    """
    path: str
    name: str
    icon: str
    score: int
    last_accessed: datetime.datetime = field(default_factory=datetime.datetime.now)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DisplayItem):
            return NotImplemented
        return self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "path": self.path,
            "name": self.name,
            "icon": self.icon,
            "score": self.score,
            "last_accessed": self.last_accessed.isoformat(timespec="seconds"),
        }
