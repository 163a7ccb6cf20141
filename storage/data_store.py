"""Persistence for goals and writing sessions.

The store answers only exact-match lookups by user and by (user, date).
Ordering and date-range filtering are done here over the user's full record
set, the same way the dashboard does them.
"""

import json
import logging
import os
import threading
from typing import Any, Protocol, runtime_checkable

from core.errors import ResourceNotFoundError, StorageError
from storage.models import Goal, WritingSession

logger = logging.getLogger(__name__)


@runtime_checkable
class DataStore(Protocol):
    """Protocol for goal and writing-session storage implementations."""

    def get_all_writing_sessions(self, user_id: str) -> list[WritingSession]:
        """All sessions of a user, newest first."""
        ...

    def get_writing_session(self, user_id: str, date: str) -> WritingSession | None:
        """The session for one day, or None."""
        ...

    def upsert_writing_session(self, session: WritingSession) -> WritingSession:
        """Create or overwrite the session for (user_id, date)."""
        ...

    def delete_writing_session(self, user_id: str, date: str) -> bool:
        """Delete one day's session."""
        ...

    def get_writing_sessions_in_range(self, user_id: str, start_date: str, end_date: str) -> list[WritingSession]:
        """Sessions between two dates (inclusive), oldest first."""
        ...

    def get_all_goals(self, user_id: str) -> list[Goal]:
        """All goals of a user, newest start date first."""
        ...

    def get_goal(self, goal_id: str) -> Goal | None:
        """A goal by id, or None."""
        ...

    def create_goal(self, goal: Goal) -> Goal:
        """Store a new goal."""
        ...

    def update_goal(self, goal: Goal) -> Goal:
        """Overwrite an existing goal."""
        ...

    def delete_goal(self, goal_id: str) -> bool:
        """Delete a goal."""
        ...

    def get_current_goal(self, user_id: str, today: str) -> Goal | None:
        """The goal whose date range contains today, or None."""
        ...


class JsonFileDataStore:
    """Stores goals and writing sessions in a single JSON file.

    The file is read once on construction and rewritten after every change.
    Thread-safe for concurrent access.
    """

    def __init__(self, data_file: str) -> None:
        self._data_file = data_file
        self._goals: dict[str, Goal] = {}  # id -> Goal
        self._sessions: dict[tuple[str, str], WritingSession] = {}  # (user_id, date) -> WritingSession
        self._lock = threading.RLock()
        self._load()

    def _load(self) -> None:
        """Load the store from disk."""
        with self._lock:
            if not os.path.exists(self._data_file):
                self._goals = {}
                self._sessions = {}
                return

            try:
                with open(self._data_file) as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                raise StorageError(f"Could not read data file {self._data_file}: {e}") from e

            for item in data.get("goals", []):
                goal = Goal.from_dict(item)
                self._goals[goal.id] = goal
            for item in data.get("writingSessions", []):
                session = WritingSession.from_dict(item)
                self._sessions[session.key] = session

            logger.info(
                f"Loaded {len(self._goals)} goals and {len(self._sessions)} writing sessions from {self._data_file}"
            )

    def _save(self) -> None:
        """Save the store to disk."""
        with self._lock:
            data_dir = os.path.dirname(self._data_file)
            if data_dir and not os.path.exists(data_dir):
                os.makedirs(data_dir, exist_ok=True)

            data: dict[str, Any] = {
                "goals": [goal.to_dict() for goal in self._goals.values()],
                "writingSessions": [session.to_dict() for session in self._sessions.values()],
            }
            try:
                with open(self._data_file, "w") as f:
                    json.dump(data, f, indent=2)
            except OSError as e:
                raise StorageError(f"Could not write data file {self._data_file}: {e}") from e

    # ------------------------------------------------------------------
    # Writing sessions
    # ------------------------------------------------------------------

    def get_all_writing_sessions(self, user_id: str) -> list[WritingSession]:
        with self._lock:
            sessions = [s for s in self._sessions.values() if s.user_id == user_id]
        return sorted(sessions, key=lambda s: s.date, reverse=True)

    def get_writing_session(self, user_id: str, date: str) -> WritingSession | None:
        with self._lock:
            return self._sessions.get((user_id, date))

    def upsert_writing_session(self, session: WritingSession) -> WritingSession:
        """Create or overwrite the session for (user_id, date).

        The word count is replaced, never added to: the caller always sends
        the full total for the day.
        """
        with self._lock:
            stored = WritingSession(user_id=session.user_id, date=session.date, word_count=session.word_count)
            self._sessions[stored.key] = stored
            self._save()
        logger.info(f"[upsert_writing_session] user={session.user_id}, date={session.date}, words={session.word_count}")
        return stored

    def delete_writing_session(self, user_id: str, date: str) -> bool:
        with self._lock:
            if (user_id, date) not in self._sessions:
                raise ResourceNotFoundError(f"No writing session for {date}", status_code=404)
            del self._sessions[(user_id, date)]
            self._save()
        return True

    def get_writing_sessions_in_range(self, user_id: str, start_date: str, end_date: str) -> list[WritingSession]:
        sessions = self.get_all_writing_sessions(user_id)
        return sorted((s for s in sessions if start_date <= s.date <= end_date), key=lambda s: s.date)

    # ------------------------------------------------------------------
    # Goals
    # ------------------------------------------------------------------

    def get_all_goals(self, user_id: str) -> list[Goal]:
        with self._lock:
            goals = [g for g in self._goals.values() if g.user_id == user_id]
        return sorted(goals, key=lambda g: g.start_date, reverse=True)

    def get_goal(self, goal_id: str) -> Goal | None:
        with self._lock:
            return self._goals.get(goal_id)

    def create_goal(self, goal: Goal) -> Goal:
        with self._lock:
            self._goals[goal.id] = goal
            self._save()
        logger.info(f"[create_goal] user={goal.user_id}, {goal.start_date}..{goal.end_date}")
        return goal

    def update_goal(self, goal: Goal) -> Goal:
        with self._lock:
            if goal.id not in self._goals:
                raise ResourceNotFoundError(f"Goal '{goal.id}' not found", status_code=404)
            self._goals[goal.id] = goal
            self._save()
        return goal

    def delete_goal(self, goal_id: str) -> bool:
        with self._lock:
            if goal_id not in self._goals:
                raise ResourceNotFoundError(f"Goal '{goal_id}' not found", status_code=404)
            del self._goals[goal_id]
            self._save()
        return True

    def get_current_goal(self, user_id: str, today: str) -> Goal | None:
        for goal in self.get_all_goals(user_id):
            if goal.covers(today):
                return goal
        return None
