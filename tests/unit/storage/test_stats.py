"""Tests for writing statistics."""

from storage.models import WritingSession
from storage.stats import compute_writing_stats


def sessions(*pairs):
    return [WritingSession("u1", date, count) for date, count in pairs]


class TestComputeWritingStats:
    def test_no_sessions(self):
        stats = compute_writing_stats([], "2026-10-19")
        assert stats.to_dict() == {
            "totalWords": 0,
            "totalDaysWritten": 0,
            "averageWordsPerDay": 0,
            "currentStreak": 0,
        }

    def test_totals_ignore_empty_days(self):
        stats = compute_writing_stats(
            sessions(("2026-10-17", 100), ("2026-10-18", 0), ("2026-10-19", 201)), "2026-10-19"
        )
        assert stats.total_words == 301
        assert stats.total_days_written == 2
        assert stats.average_words_per_day == 151

    def test_streak_counts_back_from_today(self):
        stats = compute_writing_stats(
            sessions(("2026-10-15", 50), ("2026-10-17", 10), ("2026-10-18", 10), ("2026-10-19", 10)), "2026-10-19"
        )
        assert stats.current_streak == 3

    def test_streak_is_zero_without_writing_today(self):
        stats = compute_writing_stats(sessions(("2026-10-18", 10)), "2026-10-19")
        assert stats.current_streak == 0

    def test_streak_crosses_month_boundary(self):
        stats = compute_writing_stats(sessions(("2026-09-30", 1), ("2026-10-01", 1)), "2026-10-01")
        assert stats.current_streak == 2
