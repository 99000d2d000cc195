"""
Training Session: batch lifecycle for the vocabulary games.

Holds the item pool and the current batch, and rebuilds the flashcard cursor,
matching board and race whenever a new batch is drawn. The batch is persisted
through the ProgressStore so an interrupted session resumes after a restart.
"""

from __future__ import annotations

import random
from collections.abc import Sequence

from loguru import logger

from acetrainer.config import Settings
from acetrainer.core.models import Item
from acetrainer.storage.progress_store import ProgressStore
from acetrainer.study.batch import pick_batch, shuffled
from acetrainer.study.cursor import CursorNavigator
from acetrainer.study.events import OutcomeSink, ProgressRecorder
from acetrainer.study.matching import MatchingGameEngine
from acetrainer.study.race import TimedRaceEngine
from acetrainer.study.timers import Scheduler


class TrainingSession:
    """
    One learner's vocabulary training over a shared item pool.

    Games:
    - flashcards: CursorNavigator over the batch
    - matching: MatchingGameEngine
    - race: TimedRaceEngine
    """

    def __init__(
        self,
        pool: Sequence[Item],
        store: ProgressStore,
        scheduler: Scheduler,
        settings: Settings,
        sink: OutcomeSink | None = None,
        rng: random.Random | None = None,
    ):
        self.pool = tuple(pool)
        self.store = store
        self.scheduler = scheduler
        self.settings = settings
        self.sink = sink or ProgressRecorder(store, settings)
        self.rng = rng or random.Random()

        self.flashcards: CursorNavigator[Item] = CursorNavigator()
        self.matching = self._new_matching(())
        self.race = self._new_race(())

        resumed = store.snapshot.active_session_items
        if resumed:
            logger.info(f"Resuming saved batch of {len(resumed)} items")
            self._bind(resumed)
        else:
            self.new_batch()

    @property
    def batch(self) -> tuple[Item, ...]:
        return self.store.snapshot.active_session_items

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to train on (empty pool and no saved batch)."""
        return not self.batch

    def new_batch(self) -> tuple[Item, ...]:
        """Draw a fresh batch and reset every game to its starting state."""
        items = pick_batch(self.pool, self.settings.session_size, self.rng)
        self.store.set_active_items(items)
        logger.info(f"Picked new batch of {len(items)} items from pool of {len(self.pool)}")
        self._bind(self.batch)
        return self.batch

    def verify_flashcard(self) -> None:
        """Mark the current card as known: XP, mastery gain, next card."""
        item = self.flashcards.current
        if item is None:
            return
        self.store.award_xp(self.settings.flashcard_xp)
        self.store.update_mastery(item.key, self.settings.flashcard_mastery)
        self.flashcards.next()

    def acknowledge_flashcard(self) -> None:
        """Reviewed without claiming mastery: XP only, next card."""
        if self.flashcards.current is None:
            return
        self.store.award_xp(self.settings.flashcard_xp)
        self.flashcards.next()

    def shuffle_flashcards(self) -> None:
        """Deal the batch into a new random flashcard order, starting at the first card."""
        self.flashcards.rebind(shuffled(self.batch, self.rng))

    def claim_matching_bonus(self) -> bool:
        """
        Award the board-clear bonus and move to a new batch.

        Returns:
            False (and does nothing) unless the matching board is complete
        """
        if not self.matching.is_complete:
            return False
        self.store.award_xp(self.settings.batch_bonus_xp)
        self.new_batch()
        return True

    def close(self) -> None:
        """Cancel every pending engine timer."""
        self.race.cancel()
        self.matching.clear_error()

    def _bind(self, items: Sequence[Item]) -> None:
        self.race.cancel()
        self.matching.clear_error()
        self.flashcards.rebind(items)
        self.matching = self._new_matching(items)
        self.race = self._new_race(items)

    def _new_matching(self, items: Sequence[Item]) -> MatchingGameEngine:
        return MatchingGameEngine(
            items,
            self.scheduler,
            self.sink,
            mismatch_delay=self.settings.mismatch_delay_seconds,
            rng=self.rng,
        )

    def _new_race(self, items: Sequence[Item]) -> TimedRaceEngine:
        return TimedRaceEngine(
            items,
            self.scheduler,
            self.sink,
            question_seconds=self.settings.question_timer_seconds,
            tick_seconds=self.settings.tick_seconds,
            feedback_delay=self.settings.feedback_delay_seconds,
            distractors=self.settings.race_distractors,
            base_xp=self.settings.race_base_xp,
            mastery_gain=self.settings.race_mastery,
            rng=self.rng,
        )
