"""
Timed race engine.

Speed quiz over a batch: each question shows an item's prompt with its answer
among a few distractor answers from the same batch, under a per-question
countdown. Faster correct answers move the car further and earn more XP.

Phases:
    IDLE -> RUNNING -> FEEDBACK -> RUNNING ... -> FINISHED

Timer rules:
- at most one live timer (countdown tick or feedback delay) per engine
- every transition out of RUNNING cancels the countdown as part of the transition
- each scheduled callback carries a generation token; a callback from a
  cancelled or superseded timer is a no-op
- the countdown reaching zero goes through the same path as a wrong answer
"""

from __future__ import annotations

import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from loguru import logger

from acetrainer.core.mistakes import missed_item_for
from acetrainer.core.models import Item
from acetrainer.core.scoring import round_half_up
from acetrainer.study.batch import shuffled
from acetrainer.study.events import Answered, MistakeLogged, Outcome, OutcomeSink, discard
from acetrainer.study.timers import Scheduler, TimerHandle

TIMEOUT_ANSWER = ""

# (seconds remaining strictly above, multiplier), checked in order
SPEED_TIERS = ((10, 1.8), (5, 1.3))
BASE_SPEED_BONUS = 1.0


class RacePhase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    FEEDBACK = "feedback"
    FINISHED = "finished"


class RaceOutcome(str, Enum):
    CORRECT = "correct"
    WRONG = "wrong"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class RaceQuestion:
    item_key: str
    prompt_text: str
    options: tuple[str, ...]


def speed_bonus(time_remaining: int) -> float:
    """Flat multiplier tiers: more time left means a bigger bonus."""
    for threshold, bonus in SPEED_TIERS:
        if time_remaining > threshold:
            return bonus
    return BASE_SPEED_BONUS


def build_question(
    items: Sequence[Item],
    index: int,
    distractors: int,
    rng: random.Random,
) -> RaceQuestion:
    """One correct answer plus up to ``distractors`` other answers from the batch, shuffled."""
    item = items[index]
    others = list(
        dict.fromkeys(
            other.answer_text
            for other in items
            if other.key != item.key and other.answer_text != item.answer_text
        )
    )
    wrong = shuffled(others, rng)[:distractors]
    return RaceQuestion(
        item_key=item.key,
        prompt_text=item.prompt_text,
        options=tuple(shuffled([item.answer_text, *wrong], rng)),
    )


class TimedRaceEngine:
    """Per-question countdown quiz for one batch."""

    def __init__(
        self,
        items: Sequence[Item],
        scheduler: Scheduler,
        sink: OutcomeSink = discard,
        *,
        question_seconds: int = 15,
        tick_seconds: float = 1.0,
        feedback_delay: float = 1.0,
        distractors: int = 3,
        base_xp: int = 20,
        mastery_gain: int = 5,
        rng: random.Random | None = None,
    ):
        self.items = tuple(items)
        self.scheduler = scheduler
        self.sink = sink
        self.question_seconds = question_seconds
        self.tick_seconds = tick_seconds
        self.feedback_delay = feedback_delay
        self.distractors = distractors
        self.base_xp = base_xp
        self.mastery_gain = mastery_gain
        self.rng = rng or random.Random()

        self.index = 0
        self.progress = 0.0
        self.phase = RacePhase.IDLE
        self.time_remaining = question_seconds
        self.question: RaceQuestion | None = None
        self.last_outcome: RaceOutcome | None = None

        self._handle: TimerHandle | None = None
        self._generation = 0

    @property
    def current_item(self) -> Item | None:
        if self.phase in (RacePhase.IDLE, RacePhase.FINISHED) or not self.items:
            return None
        return self.items[self.index]

    @property
    def has_live_timer(self) -> bool:
        return self._handle is not None

    # =========================================================================
    # Transitions
    # =========================================================================

    def start(self) -> None:
        """Begin (or restart after finishing) the race from the first item."""
        if not self.items or self.phase in (RacePhase.RUNNING, RacePhase.FEEDBACK):
            return
        self._cancel_timer()
        self.index = 0
        self.progress = 0.0
        self.last_outcome = None
        logger.debug(f"Race started over {len(self.items)} items")
        self._begin_question()

    def answer(self, choice: str) -> RaceOutcome | None:
        """
        Submit an answer for the current question.

        Returns:
            The outcome, or None when no question is accepting answers
        """
        if self.phase is not RacePhase.RUNNING:
            return None
        return self._resolve(choice)

    def cancel(self) -> None:
        """Stop every pending timer and return to IDLE."""
        self._cancel_timer()
        self.phase = RacePhase.IDLE
        self.index = 0
        self.progress = 0.0
        self.time_remaining = self.question_seconds
        self.question = None
        self.last_outcome = None

    # =========================================================================
    # Internals
    # =========================================================================

    def _begin_question(self) -> None:
        self.question = build_question(self.items, self.index, self.distractors, self.rng)
        self.time_remaining = self.question_seconds
        self.phase = RacePhase.RUNNING
        self._schedule(self.tick_seconds, self._tick)

    def _tick(self) -> None:
        if self.phase is not RacePhase.RUNNING:
            return
        self.time_remaining -= 1
        if self.time_remaining <= 0:
            self.time_remaining = 0
            self._resolve(TIMEOUT_ANSWER)
        else:
            self._schedule(self.tick_seconds, self._tick)

    def _resolve(self, choice: str) -> RaceOutcome:
        self._cancel_timer()
        self.phase = RacePhase.FEEDBACK
        item = self.items[self.index]

        if choice == item.answer_text:
            bonus = speed_bonus(self.time_remaining)
            self.progress = min(100.0, self.progress + (100 / len(self.items)) * bonus)
            self.last_outcome = RaceOutcome.CORRECT
            events: list[Outcome] = [
                Answered(
                    item.key,
                    correct=True,
                    xp=round_half_up(self.base_xp * bonus),
                    mastery_delta=self.mastery_gain,
                )
            ]
        else:
            self.last_outcome = RaceOutcome.TIMEOUT if choice == TIMEOUT_ANSWER else RaceOutcome.WRONG
            options = self.question.options if self.question else ()
            distractors = [o for o in options if o != item.answer_text]
            events = [
                Answered(item.key, correct=False),
                MistakeLogged(missed_item_for(item, distractors, self.rng)),
            ]

        logger.debug(f"Race item {self.index + 1}/{len(self.items)}: {self.last_outcome.value}")
        # the advance timer is live before any outcome reaches the sink
        self._schedule(self.feedback_delay, self._advance)
        for event in events:
            self.sink(event)
        return self.last_outcome

    def _advance(self) -> None:
        if self.phase is not RacePhase.FEEDBACK:
            return
        if self.index + 1 < len(self.items):
            self.index += 1
            self._begin_question()
        else:
            self.phase = RacePhase.FINISHED
            self.question = None
            logger.debug(f"Race finished at {self.progress:.0f}%")

    def _schedule(self, delay: float, callback: Callable[[], None]) -> None:
        self._cancel_timer()
        generation = self._generation

        def fire() -> None:
            if generation != self._generation:
                return
            self._handle = None
            callback()

        self._handle = self.scheduler.call_later(delay, fire)

    def _cancel_timer(self) -> None:
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
