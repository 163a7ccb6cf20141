"""Word counting, daily word-delta accounting and auto-save."""

from tracking.autosave import AutoSaveScheduler, RetryPolicy
from tracking.session import SaveStatus, SessionPhase, WordCountState, WritingSessionTracker
from tracking.word_count import count_markdown_words, count_words, markdown_to_plain_text

__all__ = [
    "AutoSaveScheduler",
    "count_markdown_words",
    "count_words",
    "markdown_to_plain_text",
    "RetryPolicy",
    "SaveStatus",
    "SessionPhase",
    "WordCountState",
    "WritingSessionTracker",
]
