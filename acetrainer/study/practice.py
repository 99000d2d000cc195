"""
Practice exam for one category.

The learner answers every question, submits, and each missed question goes
to the mistake registry. Finishing folds the score into the category's
rolling score through ``ProgressStore.finish_session``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from acetrainer.core.models import Category, Question
from acetrainer.storage.progress_store import ProgressStore
from acetrainer.study.events import MistakeLogged, OutcomeSink, discard


@dataclass(frozen=True)
class ExamResult:
    score: int
    total: int
    mistakes: tuple[Question, ...] = field(default_factory=tuple)

    @property
    def percent(self) -> int:
        return int(100 * self.score / self.total + 0.5) if self.total else 0


class PracticeExam:
    """Answer-all-then-submit quiz over a list of questions."""

    def __init__(self, category: Category, questions: Sequence[Question], sink: OutcomeSink = discard):
        self.category = category
        self.questions = tuple(questions)
        self.sink = sink
        self.answers: dict[str, int] = {}
        self.result: ExamResult | None = None

    @property
    def is_empty(self) -> bool:
        return not self.questions

    @property
    def is_submitted(self) -> bool:
        return self.result is not None

    @property
    def is_ready(self) -> bool:
        """Every question has an answer."""
        return not self.is_empty and all(q.id in self.answers for q in self.questions)

    def select(self, question_id: str, option_index: int) -> None:
        if self.is_submitted:
            return
        question = next((q for q in self.questions if q.id == question_id), None)
        if question is None or not 0 <= option_index < len(question.options):
            return
        self.answers[question_id] = option_index

    def submit(self) -> ExamResult:
        """
        Score the exam and log every miss.

        Raises:
            ValueError: the exam has no questions
        """
        if self.result is not None:
            return self.result
        if self.is_empty:
            raise ValueError("Cannot submit an exam without questions")

        mistakes = []
        for question in self.questions:
            if not question.is_correct(self.answers.get(question.id)):
                mistakes.append(question)
                self.sink(MistakeLogged(question.to_missed()))

        self.result = ExamResult(
            score=len(self.questions) - len(mistakes),
            total=len(self.questions),
            mistakes=tuple(mistakes),
        )
        return self.result

    def finish(self, store: ProgressStore) -> None:
        """Apply the submitted result to the progress record."""
        result = self.submit()
        store.finish_session(result.score, result.total, self.category)
