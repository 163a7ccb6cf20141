"""Records kept by the data store.

- Goal: a daily word target over a date range
- WritingSession: the words written by one user on one day
"""

import uuid
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Goal:
    """A daily word target for a date range (both ends inclusive).

    Attributes:
        user_id: Owner of the goal.
        start_date: First day of the goal, YYYY-MM-DD.
        end_date: Last day of the goal, YYYY-MM-DD.
        daily_word_target: Words per day the user aims for.
        id: Generated identifier.
    """

    user_id: str
    start_date: str
    end_date: str
    daily_word_target: int
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def covers(self, date: str) -> bool:
        """True if date (YYYY-MM-DD) falls within the goal."""
        return self.start_date <= date <= self.end_date

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "userId": self.user_id,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "dailyWordTarget": self.daily_word_target,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Goal":
        """Create from dictionary (loaded from JSON)."""
        return cls(
            id=data.get("id") or uuid.uuid4().hex,
            user_id=data.get("userId", ""),
            start_date=data.get("startDate", ""),
            end_date=data.get("endDate", ""),
            daily_word_target=int(data.get("dailyWordTarget", 0)),
        )


@dataclass
class WritingSession:
    """Words written by a user on one calendar day. Unique per (user_id, date).

    Attributes:
        user_id: Owner of the session.
        date: The day, YYYY-MM-DD.
        word_count: Total words written that day. Always overwritten, never incremented.
    """

    user_id: str
    date: str
    word_count: int = 0

    @property
    def key(self) -> tuple[str, str]:
        return (self.user_id, self.date)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"userId": self.user_id, "date": self.date, "wordCount": self.word_count}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WritingSession":
        """Create from dictionary (loaded from JSON)."""
        return cls(
            user_id=data.get("userId", ""),
            date=data.get("date", ""),
            word_count=int(data.get("wordCount", 0)),
        )
