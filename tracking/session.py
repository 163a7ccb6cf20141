"""
Word-delta accounting for a writing session.

Tracks how many words a user wrote today without ever re-reading earlier
snapshots of a document. Three counters drive it:

- ``session_start_word_count``: today's total already persisted before the
  current stretch of writing
- ``doc_start_word_count``: the open document's word count when it was loaded
- ``live_word_count``: the word count of the current editor content

Words added in the open document are ``max(0, live - doc_start)``, so
deleting below the load-time baseline never subtracts. After each successful
save both baselines absorb the persisted total, which means the same words
are never counted twice.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum

from core.utils import today_string
from storage.data_store import DataStore
from storage.models import WritingSession
from tracking.word_count import count_markdown_words

logger = logging.getLogger(__name__)


class SessionPhase(Enum):
    IDLE = "idle"
    DOCUMENT_SELECTED = "document_selected"
    CONTENT_LOADED = "content_loaded"
    EDITING = "editing"
    SAVING = "saving"
    SAVED = "saved"
    SAVE_FAILED = "save_failed"


class SaveStatus(Enum):
    """User-visible save indicator."""

    SAVED = "Saved"
    SAVING = "Saving…"
    UNSAVED = "Unsaved changes"
    GAVE_UP = "Could not save"


@dataclass
class WordCountState:
    """Counters of one writing session. All values are non-negative."""

    session_start_word_count: int = 0
    doc_start_word_count: int = 0
    live_word_count: int = 0
    last_persisted_count: int = 0

    @property
    def words_added_in_document(self) -> int:
        return max(0, self.live_word_count - self.doc_start_word_count)

    @property
    def words_written_today(self) -> int:
        return self.session_start_word_count + self.words_added_in_document

    def rebase(self, persisted: int, live_at_save: int | None = None) -> None:
        """
        Absorb a persisted total so it is not counted again.

        live_at_save is the live count the total was computed from; words
        typed after that point stay pending.
        """
        self.session_start_word_count = persisted
        self.doc_start_word_count = self.live_word_count if live_at_save is None else live_at_save
        self.last_persisted_count = persisted


class WritingSessionTracker:
    """
    Client-side state of one writing surface.

    Args:
        user_id: The signed-in user. Without one nothing is ever saved.
        repository: Store the daily total is read from and written to.
        today: The calendar day the session counts toward (defaults to today).
    """

    def __init__(self, user_id: str | None, repository: DataStore, today: str | None = None):
        self.user_id = user_id
        self.repository = repository
        self.today = today or today_string()
        self.state = WordCountState()
        self.phase = SessionPhase.IDLE
        self.status = SaveStatus.SAVED
        self.document_id: str | None = None
        self.tab_id: str | None = None
        self.closed = False

    async def start(self) -> None:
        """Seed the session baseline from today's persisted total (0 if none)."""
        persisted = 0
        if self.user_id:
            session = await asyncio.to_thread(self.repository.get_writing_session, self.user_id, self.today)
            if session:
                persisted = session.word_count
        self.state = WordCountState(session_start_word_count=persisted, last_persisted_count=persisted)
        self.phase = SessionPhase.IDLE
        self.status = SaveStatus.SAVED
        logger.info(f"[start] user={self.user_id}, date={self.today}, persisted={persisted}")

    def select_document(self, document_id: str, tab_id: str | None = None) -> None:
        self.document_id = document_id
        self.tab_id = tab_id
        self.phase = SessionPhase.DOCUMENT_SELECTED

    def load_content(self, markdown: str) -> None:
        """
        Set the document baseline from freshly fetched content.

        Words written in a previously open document stay in the session
        baseline only once saved; the unsaved delta is folded in here so
        switching documents does not lose it.
        """
        if self.state.words_added_in_document:
            self.state.session_start_word_count = self.state.words_written_today
        words = count_markdown_words(markdown)
        self.state.doc_start_word_count = words
        self.state.live_word_count = words
        self.phase = SessionPhase.CONTENT_LOADED
        logger.debug(f"[load_content] doc={self.document_id}, words={words}")

    def edit(self, markdown: str) -> int:
        """Recompute the live count from the editor content. Returns words written today."""
        self.state.live_word_count = count_markdown_words(markdown)
        self.phase = SessionPhase.EDITING
        self.status = SaveStatus.UNSAVED
        return self.state.words_written_today

    def should_save(self, require_visible: bool = True, page_visible: bool = True) -> bool:
        today_total = self.state.words_written_today
        if self.closed or not self.user_id:
            return False
        if today_total <= 0 or today_total == self.state.last_persisted_count:
            return False
        if require_visible and not page_visible:
            return False
        return True

    async def save(self) -> bool:
        """
        Persist today's total as a full overwrite of the day's record.

        On failure the counters are left untouched so the next attempt sends
        the same total again.

        Returns:
            bool: True if the total was persisted.
        """
        total = self.state.words_written_today
        live_at_save = self.state.live_word_count
        self.phase = SessionPhase.SAVING
        self.status = SaveStatus.SAVING

        try:
            await asyncio.to_thread(
                self.repository.upsert_writing_session,
                WritingSession(user_id=self.user_id, date=self.today, word_count=total),
            )
        except Exception as e:
            logger.error(f"[save] Failed to save {total} words for {self.user_id} on {self.today}: {e}", exc_info=True)
            self.phase = SessionPhase.SAVE_FAILED
            self.status = SaveStatus.UNSAVED
            return False

        self.state.rebase(total, live_at_save)
        self.phase = SessionPhase.SAVED
        # An edit that arrived while the save was in flight keeps the indicator unsaved.
        self.status = SaveStatus.SAVED if self.state.words_written_today == total else SaveStatus.UNSAVED
        logger.info(f"[save] Saved {total} words for {self.user_id} on {self.today}")
        return True

    def close(self) -> None:
        """Discard the session. Unsaved words since the last save are lost."""
        if self.state.words_written_today != self.state.last_persisted_count:
            logger.info(
                f"[close] Discarding {self.state.words_written_today - self.state.last_persisted_count} unsaved words"
            )
        self.closed = True
        self.state = WordCountState()
        self.phase = SessionPhase.IDLE
