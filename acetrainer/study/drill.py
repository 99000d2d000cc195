"""
Question drill: one multiple-choice question at a time, checked on demand.

Backs the spelling lab and the grammar quick-check. Unlike a practice exam
each question is checked as soon as it is answered, and the drill cycles
through its questions until the learner stops.

Flow per question:
    select (any number of times) -> check -> advance

Checking records the answer, awards ``reward_xp`` whether or not the choice
was right, and logs the question as a mistake when it was wrong.
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from acetrainer.core.models import Question
from acetrainer.study.cursor import CursorNavigator
from acetrainer.study.events import Answered, MistakeLogged, OutcomeSink, discard


class QuestionDrill:
    """Circular check-as-you-go drill over a list of questions."""

    def __init__(self, questions: Sequence[Question], sink: OutcomeSink = discard, reward_xp: int = 0):
        self.cursor: CursorNavigator[Question] = CursorNavigator(questions)
        self.sink = sink
        self.reward_xp = reward_xp
        self.choice: int | None = None
        self.checked: bool | None = None

    def __len__(self) -> int:
        return len(self.cursor)

    @property
    def current(self) -> Question | None:
        return self.cursor.current

    @property
    def is_revealed(self) -> bool:
        return self.checked is not None

    def select(self, option_index: int) -> None:
        """Pick an option for the current question; ignored once it has been checked."""
        question = self.current
        if question is None or self.is_revealed:
            return
        if 0 <= option_index < len(question.options):
            self.choice = option_index

    def check(self) -> bool | None:
        """
        Reveal the current question.

        Returns:
            Whether the choice was correct, or None when there is nothing to
            check (no question, no choice yet, or already checked)
        """
        question = self.current
        if question is None or self.choice is None or self.is_revealed:
            return None

        self.checked = question.is_correct(self.choice)
        logger.debug(f"Drill {question.id}: {'correct' if self.checked else 'missed'}")
        self.sink(Answered(question.id, correct=self.checked, xp=self.reward_xp))
        if not self.checked:
            self.sink(MistakeLogged(question.to_missed()))
        return self.checked

    def advance(self) -> None:
        """Move to the next question (wrapping) once the current one is checked."""
        if not self.is_revealed:
            return
        self.choice = None
        self.checked = None
        self.cursor.next()
