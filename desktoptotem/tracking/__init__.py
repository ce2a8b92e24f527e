"""Usage tracking and ranking engine."""
from .filters import EventFilter
from .notes import NoteStore
from .ranker import Ranker
from .scoring import ScoringEngine
from .tracker import UsageTracker
from .watcher import ActivationWatcher

__all__ = ['EventFilter', 'NoteStore', 'Ranker', 'ScoringEngine', 'UsageTracker', 'ActivationWatcher']
