"""
Debounced auto-save for a writing session.

Saves fire a fixed delay after the last edit, or immediately when the page
becomes hidden. Only one debounce timer is live at a time and at most one
save runs at once, so a user/date record never receives concurrent writes
from the same writing surface.

Failed saves are retried with bounded exponential backoff. Once the retry
attempts are exhausted the scheduler gives up (status "Could not save") until the
next edit starts a fresh cycle.
"""

import asyncio
import logging
from dataclasses import dataclass

from core.config import get_config
from tracking.session import SaveStatus, WritingSessionTracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded exponential backoff for failed saves.

    Attributes:
        max_attempts: Save attempts per edit cycle, the first one included.
        base_delay: Delay before the first retry in seconds.
        max_delay: Upper bound for any single delay.
    """

    max_attempts: int = 5
    base_delay: float = 2.0
    max_delay: float = 60.0

    def delay_for(self, failed_attempts: int) -> float | None:
        """Delay before the next attempt, or None when attempts are exhausted."""
        if failed_attempts >= self.max_attempts:
            return None
        return min(self.base_delay * (2 ** (failed_attempts - 1)), self.max_delay)

    @classmethod
    def from_config(cls) -> "RetryPolicy":
        config = get_config()
        return cls(
            max_attempts=config.save_max_attempts,
            base_delay=config.save_base_delay,
            max_delay=config.save_max_delay,
        )


class AutoSaveScheduler:
    """
    Drives WritingSessionTracker.save() from edit and visibility events.

    Must be used from inside a running event loop.

    Args:
        tracker: The session whose total is saved.
        delay: Seconds of inactivity before a save (defaults to config).
        retry_policy: Backoff for failed saves (defaults to config).
    """

    def __init__(
        self,
        tracker: WritingSessionTracker,
        delay: float | None = None,
        retry_policy: RetryPolicy | None = None,
    ):
        self.tracker = tracker
        self.delay = get_config().autosave_delay if delay is None else delay
        self.retry_policy = retry_policy or RetryPolicy.from_config()
        self.page_visible = True
        self.failed_attempts = 0
        self.gave_up = False
        self._timer: asyncio.TimerHandle | None = None
        self._save_task: asyncio.Task | None = None
        self._save_again = False
        self._closed = False

    @property
    def pending(self) -> bool:
        """True while a debounce or retry timer is waiting to fire."""
        return self._timer is not None

    @property
    def saving(self) -> bool:
        return self._save_task is not None and not self._save_task.done()

    def notify_edit(self) -> None:
        """Restart the debounce timer. An edit also ends a give-up state."""
        if self._closed:
            return
        self.failed_attempts = 0
        self.gave_up = False
        self._schedule(self.delay)

    def on_visibility_change(self, hidden: bool) -> asyncio.Task | None:
        """
        Track page visibility. Becoming hidden saves right away, bypassing the
        visibility check, once per transition.

        Returns:
            The save task that will persist the current total, if any. When a
            save is already in flight it is returned and saves again on success.
        """
        was_visible = self.page_visible
        self.page_visible = not hidden
        if self._closed or not hidden or not was_visible:
            return None

        self._cancel_timer()
        if self.saving:
            # Words typed since the in-flight save began go out right after it.
            self._save_again = True
            return self._save_task
        if not self.tracker.should_save(require_visible=False):
            return None
        return self._start_save()

    def close(self) -> None:
        """Cancel pending timers. A save already in flight is left to finish."""
        self._closed = True
        self._cancel_timer()

    async def wait_idle(self) -> None:
        """Wait for an in-flight save to finish."""
        if self._save_task is not None:
            await asyncio.shield(self._save_task)

    def _schedule(self, delay: float) -> None:
        self._cancel_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(delay, self._on_timer)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self) -> None:
        self._timer = None
        if self._closed:
            return
        if self.saving:
            # Single flight: try again once the current save has settled.
            self._schedule(self.delay)
            return
        # A retry finishes a save that was already due, even on a hidden page.
        retrying = self.failed_attempts > 0
        if self.tracker.should_save(require_visible=not retrying, page_visible=self.page_visible):
            self._start_save()

    def _start_save(self) -> asyncio.Task | None:
        if self.saving:
            return None
        self._save_task = asyncio.get_running_loop().create_task(self._run_save())
        return self._save_task

    async def _run_save(self) -> bool:
        while True:
            self._save_again = False
            saved = await self.tracker.save()
            if not saved:
                break
            self.failed_attempts = 0
            if not (self._save_again and self.tracker.should_save(require_visible=False)):
                return True
            logger.info(f"[autosave] Saving again for edits made during the last save of {self.tracker.user_id}")

        self.failed_attempts += 1
        retry_delay = self.retry_policy.delay_for(self.failed_attempts)
        if retry_delay is None:
            self.gave_up = True
            self.tracker.status = SaveStatus.GAVE_UP
            logger.warning(
                f"[autosave] Giving up after {self.failed_attempts} failed attempts for "
                f"{self.tracker.user_id} on {self.tracker.today}"
            )
            return False

        logger.info(f"[autosave] Save attempt {self.failed_attempts} failed, retrying in {retry_delay}s")
        if not self._closed:
            self._schedule(retry_delay)
        return False
