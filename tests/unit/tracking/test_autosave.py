"""Tests for the debounced auto-save scheduler."""

import asyncio
import threading
from unittest.mock import MagicMock

import pytest

from core.errors import StorageError
from tracking.autosave import AutoSaveScheduler, RetryPolicy
from tracking.session import SaveStatus, WritingSessionTracker

DELAY = 0.05
FAST_RETRIES = RetryPolicy(max_attempts=3, base_delay=0.01, max_delay=0.02)


def words(n: int) -> str:
    return " ".join(["word"] * n)


@pytest.fixture
def repository():
    repo = MagicMock()
    repo.get_writing_session.return_value = None
    return repo


@pytest.fixture
def tracker(repository):
    tracker = WritingSessionTracker("user-1", repository, today="2026-10-19")
    tracker.load_content(words(10))
    return tracker


def edit(tracker, scheduler, n):
    tracker.edit(words(n))
    scheduler.notify_edit()


class TestRetryPolicy:
    def test_delays_double(self):
        policy = RetryPolicy(max_attempts=5, base_delay=2.0, max_delay=60.0)
        assert [policy.delay_for(n) for n in (1, 2, 3, 4)] == [2.0, 4.0, 8.0, 16.0]

    def test_delay_is_capped(self):
        policy = RetryPolicy(max_attempts=10, base_delay=2.0, max_delay=5.0)
        assert policy.delay_for(4) == 5.0

    def test_attempts_are_bounded(self):
        assert RetryPolicy(max_attempts=3).delay_for(3) is None


class TestDebounce:
    @pytest.mark.asyncio
    async def test_burst_of_edits_saves_once(self, tracker, repository):
        scheduler = AutoSaveScheduler(tracker, delay=DELAY, retry_policy=FAST_RETRIES)

        for n in (11, 12, 13):
            edit(tracker, scheduler, n)
            await asyncio.sleep(DELAY / 5)
        await asyncio.sleep(DELAY * 2)
        await scheduler.wait_idle()

        assert repository.upsert_writing_session.call_count == 1
        assert repository.upsert_writing_session.call_args.args[0].word_count == 3
        assert tracker.status == SaveStatus.SAVED

    @pytest.mark.asyncio
    async def test_only_one_timer_is_live(self, tracker):
        scheduler = AutoSaveScheduler(tracker, delay=DELAY, retry_policy=FAST_RETRIES)
        edit(tracker, scheduler, 11)
        first = scheduler._timer
        edit(tracker, scheduler, 12)
        assert first.cancelled()
        assert scheduler.pending
        scheduler.close()

    @pytest.mark.asyncio
    async def test_nothing_to_save(self, tracker, repository):
        scheduler = AutoSaveScheduler(tracker, delay=DELAY, retry_policy=FAST_RETRIES)
        edit(tracker, scheduler, 10)
        await asyncio.sleep(DELAY * 2)
        repository.upsert_writing_session.assert_not_called()

    @pytest.mark.asyncio
    async def test_unchanged_total_is_not_saved_twice(self, tracker, repository):
        scheduler = AutoSaveScheduler(tracker, delay=DELAY, retry_policy=FAST_RETRIES)
        edit(tracker, scheduler, 15)
        await asyncio.sleep(DELAY * 2)
        await scheduler.wait_idle()

        scheduler.notify_edit()
        await asyncio.sleep(DELAY * 2)

        assert repository.upsert_writing_session.call_count == 1


class TestVisibility:
    @pytest.mark.asyncio
    async def test_hide_saves_immediately(self, tracker, repository):
        scheduler = AutoSaveScheduler(tracker, delay=10, retry_policy=FAST_RETRIES)
        edit(tracker, scheduler, 14)

        task = scheduler.on_visibility_change(hidden=True)
        assert task is not None
        await task

        repository.upsert_writing_session.assert_called_once()
        assert not scheduler.pending

    @pytest.mark.asyncio
    async def test_hide_fires_once_per_transition(self, tracker, repository):
        scheduler = AutoSaveScheduler(tracker, delay=10, retry_policy=FAST_RETRIES)
        edit(tracker, scheduler, 14)
        await scheduler.on_visibility_change(hidden=True)
        tracker.edit(words(20))

        assert scheduler.on_visibility_change(hidden=True) is None
        scheduler.close()

    @pytest.mark.asyncio
    async def test_hide_during_save_saves_again_afterwards(self, tracker, repository):
        release = threading.Event()
        saved = []

        def slow_upsert(session):
            saved.append(session.word_count)
            release.wait(timeout=5)

        repository.upsert_writing_session.side_effect = slow_upsert
        scheduler = AutoSaveScheduler(tracker, delay=DELAY, retry_policy=FAST_RETRIES)
        edit(tracker, scheduler, 15)
        await asyncio.sleep(DELAY * 2)
        assert scheduler.saving

        edit(tracker, scheduler, 20)
        task = scheduler.on_visibility_change(hidden=True)
        assert task is not None
        assert not scheduler.pending

        release.set()
        await scheduler.wait_idle()

        assert saved == [5, 10]
        assert tracker.state.last_persisted_count == 10
        assert tracker.status == SaveStatus.SAVED

    @pytest.mark.asyncio
    async def test_retry_runs_while_hidden(self, tracker, repository):
        repository.upsert_writing_session.side_effect = [StorageError("blip"), None]
        scheduler = AutoSaveScheduler(tracker, delay=10, retry_policy=FAST_RETRIES)
        edit(tracker, scheduler, 15)

        await scheduler.on_visibility_change(hidden=True)
        await asyncio.sleep(0.1)
        await scheduler.wait_idle()

        assert repository.upsert_writing_session.call_count == 2
        assert tracker.state.last_persisted_count == 5

    @pytest.mark.asyncio
    async def test_debounced_save_waits_while_hidden(self, tracker, repository):
        scheduler = AutoSaveScheduler(tracker, delay=DELAY, retry_policy=FAST_RETRIES)
        scheduler.on_visibility_change(hidden=True)
        edit(tracker, scheduler, 12)
        await asyncio.sleep(DELAY * 2)
        repository.upsert_writing_session.assert_not_called()


class TestClose:
    @pytest.mark.asyncio
    async def test_close_cancels_pending_save(self, tracker, repository):
        scheduler = AutoSaveScheduler(tracker, delay=DELAY, retry_policy=FAST_RETRIES)
        edit(tracker, scheduler, 15)
        scheduler.close()
        await asyncio.sleep(DELAY * 2)
        repository.upsert_writing_session.assert_not_called()

    @pytest.mark.asyncio
    async def test_in_flight_save_completes_after_close(self, tracker, repository):
        scheduler = AutoSaveScheduler(tracker, delay=10, retry_policy=FAST_RETRIES)
        edit(tracker, scheduler, 15)
        scheduler.on_visibility_change(hidden=True)
        scheduler.close()

        await scheduler.wait_idle()

        repository.upsert_writing_session.assert_called_once()


class TestRetries:
    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self, tracker, repository):
        repository.upsert_writing_session.side_effect = StorageError("offline")
        scheduler = AutoSaveScheduler(tracker, delay=DELAY, retry_policy=FAST_RETRIES)

        edit(tracker, scheduler, 15)
        await asyncio.sleep(DELAY + 0.3)
        await scheduler.wait_idle()

        assert repository.upsert_writing_session.call_count == 3
        assert scheduler.gave_up
        assert tracker.status == SaveStatus.GAVE_UP
        assert tracker.status.value == "Could not save"
        assert not scheduler.pending

    @pytest.mark.asyncio
    async def test_retry_then_success(self, tracker, repository):
        repository.upsert_writing_session.side_effect = [StorageError("blip"), None]
        scheduler = AutoSaveScheduler(tracker, delay=DELAY, retry_policy=FAST_RETRIES)

        edit(tracker, scheduler, 15)
        await asyncio.sleep(DELAY + 0.2)
        await scheduler.wait_idle()

        assert repository.upsert_writing_session.call_count == 2
        assert scheduler.failed_attempts == 0
        assert tracker.state.last_persisted_count == 5
        assert tracker.status == SaveStatus.SAVED

    @pytest.mark.asyncio
    async def test_edit_after_giving_up_starts_over(self, tracker, repository):
        repository.upsert_writing_session.side_effect = StorageError("offline")
        scheduler = AutoSaveScheduler(tracker, delay=DELAY, retry_policy=FAST_RETRIES)
        edit(tracker, scheduler, 15)
        await asyncio.sleep(DELAY + 0.3)
        await scheduler.wait_idle()
        assert scheduler.gave_up

        edit(tracker, scheduler, 16)

        assert not scheduler.gave_up
        assert scheduler.failed_attempts == 0
        assert scheduler.pending
        scheduler.close()
