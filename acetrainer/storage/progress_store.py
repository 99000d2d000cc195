"""
Progress Store.

Owns the one live ProgressRecord for the process. Every operation:

1. takes the store lock,
2. reads the *current* record (never a cached snapshot),
3. computes the next record with a pure reducer from ``acetrainer.core.progress``,
4. persists it and swaps it in,
5. returns the new snapshot.

Readers only ever see immutable snapshots. A failed write is logged and the
in-memory record stays authoritative for the rest of the process lifetime.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from pathlib import Path

from loguru import logger

from acetrainer.core import mistakes, progress
from acetrainer.core.errors import PersistenceFailure
from acetrainer.core.models import Category, Item, MissedItem, ProgressRecord
from acetrainer.storage.persistence import ByteStore, FileByteStore, decode_record, encode_record

Listener = Callable[[ProgressRecord], None]


class ProgressStore:
    """
    Single-writer owner of the progress record.

    Handles:
    - XP, answer counters and per-item mastery
    - The bounded mistake registry
    - Session completion and category score aggregation
    - Persisting the whole record after each mutation
    """

    def __init__(self, byte_store: ByteStore, mistake_limit: int = mistakes.DEFAULT_LIMIT):
        """
        Initialize the store, hydrating from ``byte_store``.

        Args:
            byte_store: Persistence boundary read once here and written on every mutation
            mistake_limit: Maximum mistake registry length
        """
        self._byte_store = byte_store
        self._mistake_limit = mistake_limit
        self._lock = threading.RLock()
        self._listeners: list[Listener] = []

        record = decode_record(byte_store.load())
        if len(record.mistake_registry) > mistake_limit:
            record = record.model_copy(
                update={"mistake_registry": mistakes.trim(record.mistake_registry, mistake_limit)}
            )
        self._record = record
        self.last_persist_error: Exception | None = None

        logger.info(
            f"ProgressStore loaded (xp={record.xp}, sessions={record.completed_sessions}, "
            f"mistakes={len(record.mistake_registry)})"
        )

    @classmethod
    def from_path(cls, path: Path, mistake_limit: int = mistakes.DEFAULT_LIMIT) -> ProgressStore:
        return cls(FileByteStore(path), mistake_limit=mistake_limit)

    # =========================================================================
    # Read access
    # =========================================================================

    @property
    def snapshot(self) -> ProgressRecord:
        """Current immutable record."""
        return self._record

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a read-only observer called with every new snapshot.

        Returns:
            A callable that unsubscribes the listener
        """
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener) if listener in self._listeners else None

    # =========================================================================
    # Mutations
    # =========================================================================

    def award_xp(self, amount: int) -> ProgressRecord:
        return self._apply(lambda r: progress.award_xp(r, amount))

    def record_answer(self, is_correct: bool) -> ProgressRecord:
        return self._apply(lambda r: progress.record_answer(r, is_correct))

    def update_mastery(self, item_key: str, delta: int) -> ProgressRecord:
        return self._apply(lambda r: progress.update_mastery(r, item_key, delta))

    def log_mistake(self, item: MissedItem) -> ProgressRecord:
        return self._apply(lambda r: progress.log_mistake(r, item, self._mistake_limit))

    def resolve_mistake(self, mistake_id: str) -> ProgressRecord:
        return self._apply(lambda r: progress.resolve_mistake(r, mistake_id))

    def set_active_items(self, items: Sequence[Item]) -> ProgressRecord:
        return self._apply(lambda r: progress.set_active_items(r, items))

    def finish_session(self, score: int, total: int, category: Category) -> ProgressRecord:
        """
        Apply a completed quiz session.

        Raises:
            InvalidSessionResult: total is not positive or score is outside [0, total]
                (state is left unchanged)
        """
        record = self._apply(lambda r: progress.finish_session(r, score, total, category))
        logger.info(
            f"Session finished: {score}/{total} in {category.value} "
            f"(category={record.category_scores[category]}, average={record.average_score})"
        )
        return record

    def attempt_correction(self, mistake_id: str, choice_index: int, reward_xp: int) -> bool:
        """
        Re-evaluate a logged mistake; correct answers clear it and award XP.

        Returns:
            True if the choice was correct and the entry was removed
        """
        with self._lock:
            record, corrected = progress.apply_correction(self._record, mistake_id, choice_index, reward_xp)
            if corrected:
                self._commit(record)
            return corrected

    # =========================================================================
    # Internals
    # =========================================================================

    def _apply(self, reducer: Callable[[ProgressRecord], ProgressRecord]) -> ProgressRecord:
        with self._lock:
            record = reducer(self._record)
            if record is not self._record:
                self._commit(record)
            return self._record

    def _commit(self, record: ProgressRecord) -> None:
        self._record = record
        try:
            self._byte_store.save(encode_record(record))
            self.last_persist_error = None
        except (PersistenceFailure, OSError) as e:
            self.last_persist_error = e
            logger.warning(f"Progress not saved, keeping in-memory state: {e}")

        for listener in list(self._listeners):
            listener(record)
