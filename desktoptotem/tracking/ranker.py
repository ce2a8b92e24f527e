"""Builds the ranked "most used" list from stored scores."""
from typing import List
from ..db.count_repository import CountRepository
from ..models import DisplayItem
from ..platform.base import PlatformBase
from .filters import EventFilter


class Ranker:
    """Read-only view over the score map."""

    def __init__(self, counts: CountRepository, event_filter: EventFilter,
                 platform: PlatformBase) -> None:
        self.counts = counts
        self.filter = event_filter
        self.platform = platform

    def top_n(self, n: int = 10) -> List[DisplayItem]:
        """
        Return at most `n` displayable items, highest score first.

        Paths that no longer exist or fail the structural filter are left
        out silently. Equal scores keep the order in which paths were first
        recorded.
        """
        if n <= 0:
            return []

        items: List[DisplayItem] = []
        for path, score in self.counts.all().items():
            if not self.filter.is_displayable(path):
                continue
            if not self.platform.path_exists(path):
                continue

            name, icon = self.platform.describe_application(path)
            if not self.filter.is_displayable(path, name):
                continue

            items.append(DisplayItem(path=path, name=name, icon=icon, score=score))

        # sorted() is stable, reverse=True included
        ranked = sorted(items, key=lambda item: item.score, reverse=True)
        return ranked[:n]
