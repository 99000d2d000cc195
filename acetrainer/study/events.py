"""
Outcome events emitted by the session engines.

Engines never touch the ProgressStore. They hand outcome events to a sink
(any callable); ProgressRecorder is the sink that turns them into store
operations. Tests usually pass ``list.append`` instead.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from acetrainer.config import Settings
from acetrainer.core.models import MissedItem
from acetrainer.storage.progress_store import ProgressStore


@dataclass(frozen=True)
class Answered:
    """An item was answered. XP and mastery gains are already computed by the engine."""

    item_key: str
    correct: bool
    xp: int = 0
    mastery_delta: int = 0


@dataclass(frozen=True)
class Matched:
    """A prompt/answer pair was matched in the matching game."""

    item_key: str


@dataclass(frozen=True)
class MistakeLogged:
    item: MissedItem


Outcome = Answered | Matched | MistakeLogged
OutcomeSink = Callable[[Outcome], None]


def discard(outcome: Outcome) -> None:
    """Sink that ignores every outcome."""


class ProgressRecorder:
    """Applies engine outcomes to the ProgressStore."""

    def __init__(self, store: ProgressStore, settings: Settings):
        self.store = store
        self.settings = settings

    def __call__(self, outcome: Outcome) -> None:
        if isinstance(outcome, Matched):
            self.store.award_xp(self.settings.match_xp)
            self.store.record_answer(True)
        elif isinstance(outcome, Answered):
            self.store.record_answer(outcome.correct)
            if outcome.xp:
                self.store.award_xp(outcome.xp)
            if outcome.mastery_delta:
                self.store.update_mastery(outcome.item_key, outcome.mastery_delta)
        elif isinstance(outcome, MistakeLogged):
            self.store.log_mistake(outcome.item)
        else:
            logger.warning(f"Ignoring unknown outcome {outcome!r}")
