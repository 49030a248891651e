"""Core state management: ordering engine, history and the project store."""
from storyboard.core.history import HistoryManager, HistorySnapshot
from storyboard.core.state_store import ProjectStateStore

__all__ = [
    "HistoryManager",
    "HistorySnapshot",
    "ProjectStateStore",
]
