"""Goal and writing-session persistence."""

from storage.data_store import DataStore, JsonFileDataStore
from storage.models import Goal, WritingSession
from storage.stats import WritingStats, compute_writing_stats

__all__ = [
    "compute_writing_stats",
    "DataStore",
    "Goal",
    "JsonFileDataStore",
    "WritingSession",
    "WritingStats",
]
