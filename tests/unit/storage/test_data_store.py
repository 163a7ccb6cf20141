"""Tests for the JSON file data store."""

import json
import os

import pytest

from core.errors import ResourceNotFoundError, StorageError
from storage.data_store import JsonFileDataStore
from storage.models import Goal, WritingSession


@pytest.fixture
def data_file(temp_dir):
    return os.path.join(temp_dir, "nested", "daily_write.json")


@pytest.fixture
def store(data_file):
    return JsonFileDataStore(data_file)


class TestWritingSessions:
    def test_missing_session(self, store):
        assert store.get_writing_session("u1", "2026-10-19") is None

    def test_upsert_creates_then_overwrites(self, store):
        store.upsert_writing_session(WritingSession("u1", "2026-10-19", 100))
        store.upsert_writing_session(WritingSession("u1", "2026-10-19", 80))

        assert store.get_writing_session("u1", "2026-10-19").word_count == 80
        assert len(store.get_all_writing_sessions("u1")) == 1

    def test_sessions_are_per_user(self, store):
        store.upsert_writing_session(WritingSession("u1", "2026-10-19", 1))
        store.upsert_writing_session(WritingSession("u2", "2026-10-19", 2))
        assert [s.word_count for s in store.get_all_writing_sessions("u2")] == [2]

    def test_all_sessions_newest_first(self, store):
        for date in ("2026-10-17", "2026-10-19", "2026-10-18"):
            store.upsert_writing_session(WritingSession("u1", date, 5))
        assert [s.date for s in store.get_all_writing_sessions("u1")] == ["2026-10-19", "2026-10-18", "2026-10-17"]

    def test_range_is_inclusive_and_ascending(self, store):
        for date in ("2026-10-01", "2026-10-05", "2026-10-10", "2026-10-15"):
            store.upsert_writing_session(WritingSession("u1", date, 5))
        sessions = store.get_writing_sessions_in_range("u1", "2026-10-05", "2026-10-10")
        assert [s.date for s in sessions] == ["2026-10-05", "2026-10-10"]

    def test_delete(self, store):
        store.upsert_writing_session(WritingSession("u1", "2026-10-19", 5))
        assert store.delete_writing_session("u1", "2026-10-19")
        assert store.get_writing_session("u1", "2026-10-19") is None

    def test_delete_missing(self, store):
        with pytest.raises(ResourceNotFoundError):
            store.delete_writing_session("u1", "2026-10-19")


class TestGoals:
    def test_create_and_get(self, store):
        goal = store.create_goal(Goal("u1", "2026-10-01", "2026-10-31", 500))
        assert store.get_goal(goal.id) == goal

    def test_current_goal(self, store):
        store.create_goal(Goal("u1", "2026-09-01", "2026-09-30", 300))
        october = store.create_goal(Goal("u1", "2026-10-01", "2026-10-31", 500))

        assert store.get_current_goal("u1", "2026-10-19") == october
        assert store.get_current_goal("u1", "2026-11-01") is None

    def test_goal_end_date_is_inclusive(self, store):
        goal = store.create_goal(Goal("u1", "2026-10-01", "2026-10-31", 500))
        assert store.get_current_goal("u1", "2026-10-31") == goal

    def test_update_goal(self, store):
        goal = store.create_goal(Goal("u1", "2026-10-01", "2026-10-31", 500))
        goal.daily_word_target = 750
        store.update_goal(goal)
        assert store.get_goal(goal.id).daily_word_target == 750

    def test_update_missing_goal(self, store):
        with pytest.raises(ResourceNotFoundError):
            store.update_goal(Goal("u1", "2026-10-01", "2026-10-31", 500, id="nope"))

    def test_delete_goal(self, store):
        goal = store.create_goal(Goal("u1", "2026-10-01", "2026-10-31", 500))
        store.delete_goal(goal.id)
        assert store.get_all_goals("u1") == []


class TestPersistence:
    def test_data_survives_reload(self, store, data_file):
        store.upsert_writing_session(WritingSession("u1", "2026-10-19", 42))
        goal = store.create_goal(Goal("u1", "2026-10-01", "2026-10-31", 500))

        reloaded = JsonFileDataStore(data_file)

        assert reloaded.get_writing_session("u1", "2026-10-19").word_count == 42
        assert reloaded.get_goal(goal.id) == goal

    def test_file_uses_camel_case_records(self, store, data_file):
        store.upsert_writing_session(WritingSession("u1", "2026-10-19", 42))
        with open(data_file) as f:
            data = json.load(f)
        assert data["writingSessions"] == [{"userId": "u1", "date": "2026-10-19", "wordCount": 42}]

    def test_corrupt_file(self, temp_dir):
        path = os.path.join(temp_dir, "broken.json")
        with open(path, "w") as f:
            f.write("{not json")
        with pytest.raises(StorageError):
            JsonFileDataStore(path)
