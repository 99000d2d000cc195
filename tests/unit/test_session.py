"""
Unit tests for TrainingSession and the ProgressRecorder sink.
"""

import random

import pytest

from acetrainer.core.models import Item, ProgressRecord
from acetrainer.storage import MemoryByteStore, ProgressStore, encode_record
from acetrainer.study.events import Answered, Matched, MistakeLogged, ProgressRecorder
from acetrainer.study.matching import Side
from acetrainer.study.race import RacePhase
from acetrainer.study.session import TrainingSession


@pytest.fixture
def pool(sample_items):
    extra = [Item(key=f"word{n}", prompt_text=f"Word {n}", answer_text=f"Meaning {n}") for n in range(20)]
    return [*sample_items, *extra]


@pytest.fixture
def session(pool, store, scheduler, settings):
    return TrainingSession(pool, store, scheduler, settings, rng=random.Random(5))


class TestProgressRecorder:
    def test_matched_awards_xp_and_counts_answer(self, store, settings):
        ProgressRecorder(store, settings)(Matched("abate"))
        assert store.snapshot.xp == settings.match_xp
        assert store.snapshot.total_correct == 1

    def test_answered_applies_gains(self, store, settings):
        recorder = ProgressRecorder(store, settings)
        recorder(Answered("abate", correct=True, xp=36, mastery_delta=5))
        recorder(Answered("candid", correct=False))
        snapshot = store.snapshot
        assert snapshot.xp == 36
        assert snapshot.mastery("abate") == 5
        assert snapshot.mastery("candid") == 0
        assert snapshot.questions_answered == 2
        assert snapshot.total_correct == 1

    def test_mistake_logged(self, store, settings, sample_missed):
        ProgressRecorder(store, settings)(MistakeLogged(sample_missed))
        assert store.snapshot.mistake_registry == (sample_missed,)


class TestBatchLifecycle:
    def test_new_session_draws_and_persists_batch(self, session, store, byte_store, settings):
        assert len(session.batch) == settings.session_size
        assert store.snapshot.active_session_items == session.batch
        assert byte_store.saves >= 1

    def test_games_are_bound_to_batch(self, session):
        keys = {item.key for item in session.batch}
        assert set(session.matching.items) == keys
        assert {item.key for item in session.race.items} == keys
        assert session.flashcards.items == session.batch

    def test_resumes_saved_batch(self, pool, scheduler, settings, sample_items):
        saved = ProgressRecord(active_session_items=tuple(sample_items[:3]))
        store = ProgressStore(MemoryByteStore(encode_record(saved)))
        session = TrainingSession(pool, store, scheduler, settings)
        assert session.batch == tuple(sample_items[:3])

    def test_empty_pool_gives_empty_session(self, store, scheduler, settings):
        session = TrainingSession([], store, scheduler, settings)
        assert session.is_empty
        session.verify_flashcard()
        assert store.snapshot.xp == 0

    def test_new_batch_cancels_running_race(self, session, scheduler):
        old_race = session.race
        old_race.start()
        session.new_batch()
        assert old_race.phase is RacePhase.IDLE
        assert session.race is not old_race
        assert scheduler.pending == 0


class TestFlashcards:
    def test_verify_awards_xp_and_mastery_then_advances(self, session, store, settings):
        first = session.flashcards.current
        session.verify_flashcard()
        assert store.snapshot.xp == settings.flashcard_xp
        assert store.snapshot.mastery(first.key) == settings.flashcard_mastery
        assert session.flashcards.index == 1

    def test_acknowledge_awards_xp_only(self, session, store, settings):
        first = session.flashcards.current
        session.acknowledge_flashcard()
        assert store.snapshot.xp == settings.flashcard_xp
        assert store.snapshot.mastery(first.key) == 0

    def test_shuffle_keeps_batch_and_restarts_deck(self, session):
        session.flashcards.next()
        session.flashcards.flip()
        session.shuffle_flashcards()

        assert sorted(i.key for i in session.flashcards.items) == sorted(i.key for i in session.batch)
        assert session.flashcards.index == 0
        assert not session.flashcards.flipped

    def test_shuffle_is_driven_by_session_rng(self, pool, scheduler, settings):
        orders = []
        for _ in range(2):
            store = ProgressStore(MemoryByteStore())
            session = TrainingSession(pool, store, scheduler, settings, rng=random.Random(99))
            session.shuffle_flashcards()
            orders.append([i.key for i in session.flashcards.items])
        assert orders[0] == orders[1]


class TestMatchingFlow:
    def test_bonus_only_when_complete(self, session, store):
        assert not session.claim_matching_bonus()
        assert store.snapshot.xp == 0

    def test_clearing_board_awards_bonus_and_new_batch(self, session, store, settings):
        old_batch = session.batch
        for key in list(session.matching.items):
            session.matching.select(key, Side.PROMPT)
            session.matching.select(key, Side.ANSWER)

        pairs = len(old_batch)
        assert store.snapshot.xp == pairs * settings.match_xp
        assert session.claim_matching_bonus()
        assert store.snapshot.xp == pairs * settings.match_xp + settings.batch_bonus_xp
        assert not session.matching.is_complete
        assert store.snapshot.active_session_items == session.batch

    def test_mismatch_reaches_registry(self, session, store, scheduler):
        first, second = list(session.matching.items)[:2]
        session.matching.select(first, Side.PROMPT)
        session.matching.select(second, Side.ANSWER)
        assert store.snapshot.find_mistake(f"mistake-{first}") is not None
        scheduler.advance(1)
        assert session.matching.error_highlight is None


class TestRaceFlow:
    def test_race_outcomes_reach_store(self, session, store, scheduler):
        race = session.race
        race.start()
        race.answer(race.current_item.answer_text)
        assert store.snapshot.xp == 36
        scheduler.advance(16)
        assert store.snapshot.questions_answered == 2
        assert len(store.snapshot.mistake_registry) == 1

    def test_close_stops_timers(self, session, scheduler):
        session.race.start()
        session.close()
        assert scheduler.pending == 0
