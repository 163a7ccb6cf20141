"""Dashboard statistics over a user's writing sessions."""

import datetime
from dataclasses import dataclass
from typing import Any

from core.utils import DATE_FORMAT, date_to_string
from storage.models import WritingSession


@dataclass
class WritingStats:
    total_words: int = 0
    total_days_written: int = 0
    average_words_per_day: int = 0
    current_streak: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalWords": self.total_words,
            "totalDaysWritten": self.total_days_written,
            "averageWordsPerDay": self.average_words_per_day,
            "currentStreak": self.current_streak,
        }


def compute_writing_stats(sessions: list[WritingSession], today: str) -> WritingStats:
    """
    Summarize a user's sessions.

    Only days with at least one word count as written. The streak is the
    number of consecutive written days ending today; a day without writing
    today means a streak of 0.
    """
    written = {s.date: s.word_count for s in sessions if s.word_count > 0}
    total_words = sum(written.values())
    total_days = len(written)
    # Halves round up.
    average = int(total_words / total_days + 0.5) if total_days else 0

    streak = 0
    day = datetime.datetime.strptime(today, DATE_FORMAT).date()
    while date_to_string(day) in written:
        streak += 1
        day -= datetime.timedelta(days=1)

    return WritingStats(
        total_words=total_words,
        total_days_written=total_days,
        average_words_per_day=average,
        current_streak=streak,
    )
