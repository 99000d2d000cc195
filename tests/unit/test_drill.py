"""
Unit tests for QuestionDrill (spelling lab and grammar quick-check).
"""

import pytest

from acetrainer.core.models import Category, Question
from acetrainer.study.drill import QuestionDrill
from acetrainer.study.events import Answered, MistakeLogged, ProgressRecorder


@pytest.fixture
def grammar_questions(sample_questions):
    return [q for q in sample_questions if q.category is Category.GRAMMAR]


@pytest.fixture
def drill(grammar_questions, outcomes):
    return QuestionDrill(grammar_questions, outcomes.append, reward_xp=25)


class TestChecking:
    def test_check_without_choice_does_nothing(self, drill, outcomes):
        assert drill.check() is None
        assert not drill.is_revealed
        assert outcomes == []

    def test_correct_choice_records_answer_with_reward(self, drill, outcomes):
        drill.select(1)
        assert drill.check() is True
        assert drill.is_revealed
        assert outcomes == [Answered("q-grammar-1", correct=True, xp=25)]

    def test_wrong_choice_still_rewards_and_logs_mistake(self, drill, outcomes, sample_question):
        drill.select(0)
        assert drill.check() is False
        assert outcomes[0] == Answered("q-grammar-1", correct=False, xp=25)
        assert outcomes[1] == MistakeLogged(sample_question.to_missed())

    def test_second_check_is_ignored(self, drill, outcomes):
        drill.select(1)
        drill.check()
        assert drill.check() is None
        assert len(outcomes) == 1

    def test_selection_frozen_after_check(self, drill):
        drill.select(0)
        drill.check()
        drill.select(1)
        assert drill.choice == 0

    def test_out_of_range_option_ignored(self, drill):
        drill.select(7)
        assert drill.choice is None


class TestAdvance:
    def test_advance_requires_check(self, drill):
        drill.select(1)
        drill.advance()
        assert drill.current.id == "q-grammar-1"

    def test_advance_resets_and_wraps(self, drill, grammar_questions):
        for _ in grammar_questions:
            drill.select(0)
            drill.check()
            drill.advance()
        assert drill.current.id == grammar_questions[0].id
        assert drill.choice is None
        assert not drill.is_revealed

    def test_empty_drill(self, outcomes):
        drill = QuestionDrill([], outcomes.append)
        drill.select(0)
        assert drill.current is None
        assert drill.check() is None
        assert len(drill) == 0


class TestRecording:
    def test_grammar_check_reaches_store(self, grammar_questions, store, settings):
        drill = QuestionDrill(grammar_questions, ProgressRecorder(store, settings), settings.grammar_check_xp)
        drill.select(0)
        drill.check()

        snapshot = store.snapshot
        assert snapshot.questions_answered == 1
        assert snapshot.total_correct == 0
        assert snapshot.xp == 25
        assert snapshot.find_mistake("q-grammar-1") is not None

    def test_spelling_lab_awards_no_xp(self, store, settings):
        word = Question(
            id="spell-1",
            category=Category.SPELLING,
            prompt_text="Pick the correct spelling",
            options=("accomodate", "accommodate"),
            correct_option_index=1,
        )
        drill = QuestionDrill([word], ProgressRecorder(store, settings), settings.spelling_check_xp)
        drill.select(1)
        drill.check()
        assert store.snapshot.xp == 0
        assert store.snapshot.total_correct == 1
        assert store.snapshot.mistake_registry == ()
