"""
Matching game engine.

Two columns, prompts and answers, each shuffled independently so the visual
position never gives the pairing away. The player arms one side, then picks
the other side:

- same key, opposite side  -> match (revealed, Matched emitted)
- other key, opposite side -> mismatch (error highlight, miss logged, cleared after a delay)
- same side                -> the new pick replaces the armed one
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from loguru import logger

from acetrainer.core.mistakes import missed_item_for
from acetrainer.core.models import Item
from acetrainer.study.batch import shuffled
from acetrainer.study.events import Answered, Matched, MistakeLogged, OutcomeSink, discard
from acetrainer.study.timers import Scheduler, TimerHandle


class Side(str, Enum):
    PROMPT = "prompt"
    ANSWER = "answer"

    @property
    def opposite(self) -> Side:
        return Side.ANSWER if self is Side.PROMPT else Side.PROMPT


@dataclass(frozen=True)
class Selection:
    key: str
    side: Side


class MatchingGameEngine:
    """Pairing state machine for one batch."""

    def __init__(
        self,
        items: Sequence[Item],
        scheduler: Scheduler,
        sink: OutcomeSink = discard,
        mismatch_delay: float = 0.5,
        rng: random.Random | None = None,
    ):
        self.items = {item.key: item for item in items}
        self.scheduler = scheduler
        self.sink = sink
        self.mismatch_delay = mismatch_delay
        self.rng = rng or random.Random()

        self.prompts: list[Item] = shuffled(list(self.items.values()), self.rng)
        self.answers: list[Item] = shuffled(list(self.items.values()), self.rng)
        self.revealed: set[str] = set()
        self.selection: Selection | None = None
        self.error_highlight: str | None = None
        self._clear_handle: TimerHandle | None = None

    @property
    def pairs(self) -> set[str]:
        return set(self.items)

    @property
    def is_complete(self) -> bool:
        return bool(self.items) and len(self.revealed) == len(self.items)

    def select(self, key: str, side: Side) -> None:
        if key not in self.items or key in self.revealed or self.error_highlight is not None:
            return

        armed = self.selection
        if armed is None or armed.side is side:
            self.selection = Selection(key, side)
            return

        if armed.key == key:
            self.revealed.add(key)
            self.selection = None
            logger.debug(f"Matched {key} ({len(self.revealed)}/{len(self.items)})")
            self.sink(Matched(key))
            return

        self.error_highlight = f"{armed.key}-{key}"
        missed = self.items[armed.key]
        others = [item.answer_text for item in self.answers if item.key != missed.key]
        logged = MistakeLogged(missed_item_for(missed, shuffled(others, self.rng), self.rng))
        self._clear_handle = self.scheduler.call_later(self.mismatch_delay, self.clear_error)
        self.sink(Answered(missed.key, correct=False))
        self.sink(logged)

    def clear_error(self) -> None:
        """Drop the mismatch highlight and the armed selection."""
        if self._clear_handle is not None:
            self._clear_handle.cancel()
            self._clear_handle = None
        self.error_highlight = None
        self.selection = None

    def reset(self) -> None:
        """Cancel any pending highlight timer and clear all board state."""
        self.clear_error()
        self.revealed.clear()
