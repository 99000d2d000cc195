"""
Unit tests for the domain records.

Covers camelCase aliases, Category parsing and the defensive validators
on ProgressRecord.
"""

import pytest
from pydantic import ValidationError

from acetrainer.core.models import Category, Item, MissedItem, ProgressRecord, Question


class TestCategory:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Vocabulary", Category.VOCABULARY),
            ("VOCABULARY", Category.VOCABULARY),
            ("vocab", Category.VOCABULARY),
            ("grammar", Category.GRAMMAR),
            ("Grammar & Writing", Category.GRAMMAR),
            ("mock", Category.MOCK),
            ("  Full Mock Test ", Category.MOCK),
            ("math", Category.MATH),
        ],
    )
    def test_parse_accepts_loose_spellings(self, text, expected):
        assert Category.parse(text) is expected

    def test_parse_unknown_raises(self):
        with pytest.raises(ValueError, match="Unknown category"):
            Category.parse("astrology")


class TestItem:
    def test_accepts_camel_case_aliases(self):
        item = Item.model_validate({"key": "abate", "promptText": "Abate", "answerText": "To lessen"})
        assert item.prompt_text == "Abate"
        assert item.auxiliary_text == ""

    def test_empty_answer_rejected(self):
        with pytest.raises(ValidationError):
            Item(key="abate", prompt_text="Abate", answer_text="")

    def test_items_are_immutable(self, sample_items):
        with pytest.raises(ValidationError):
            sample_items[0].key = "other"


class TestMultipleChoice:
    def test_correct_index_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            Question(
                id="q1",
                category=Category.MATH,
                prompt_text="2 + 2?",
                options=("3", "4"),
                correct_option_index=2,
            )

    def test_single_option_rejected(self):
        with pytest.raises(ValidationError):
            Question(id="q1", category=Category.MATH, prompt_text="?", options=("4",), correct_option_index=0)

    def test_is_correct(self, sample_question):
        assert sample_question.is_correct(1)
        assert not sample_question.is_correct(0)
        assert not sample_question.is_correct(None)
        assert sample_question.correct_option == "It's raining outside."

    def test_to_missed_keeps_every_field(self, sample_question):
        missed = sample_question.to_missed()
        assert isinstance(missed, MissedItem)
        assert missed.id == sample_question.id
        assert missed.options == sample_question.options
        assert missed.correct_option_index == sample_question.correct_option_index
        assert missed.explanation_text == sample_question.explanation_text


class TestProgressRecordDefaults:
    def test_zero_record(self):
        record = ProgressRecord()
        assert record.xp == 0
        assert record.completed_sessions == 0
        assert record.accuracy == 0
        assert set(record.category_scores) == set(Category)
        assert all(score == 0 for score in record.category_scores.values())
        assert record.mistake_registry == ()
        assert record.active_session_items == ()

    def test_accuracy_rounds_half_up(self):
        record = ProgressRecord(questions_answered=8, total_correct=5)
        # 62.5% rounds up
        assert record.accuracy == 63

    def test_mastery_defaults_to_zero(self):
        record = ProgressRecord(mastery_by_item={"abate": 40})
        assert record.mastery("abate") == 40
        assert record.mastery("frugal") == 0


class TestProgressRecordHydration:
    def test_unknown_categories_ignored_and_missing_filled(self):
        record = ProgressRecord.model_validate({"categoryScores": {"Vocabulary": 80, "Astrology": 50}})
        assert record.category_scores[Category.VOCABULARY] == 80
        assert record.category_scores[Category.SPELLING] == 0
        assert "Astrology" not in {c.value for c in record.category_scores}

    def test_mastery_values_clamped(self):
        record = ProgressRecord.model_validate({"masteryByItem": {"a": 150, "b": -20, "c": "high", "d": 55}})
        assert record.mastery_by_item == {"a": 100, "b": 0, "d": 55}

    def test_category_scores_clamped_and_average_derived(self):
        record = ProgressRecord(
            category_scores={Category.VOCABULARY: 120, Category.MATH: 40},
            average_score=5,
        )
        assert record.category_scores[Category.VOCABULARY] == 100
        assert record.average_score == 70

    def test_score_mappings_are_read_only(self):
        record = ProgressRecord(mastery_by_item={"abate": 40})
        with pytest.raises(TypeError):
            record.mastery_by_item["abate"] = 90
        with pytest.raises(TypeError):
            record.category_scores[Category.READING] = 90
        assert record.model_dump()["mastery_by_item"] == {"abate": 40}

    def test_total_correct_capped_at_answered(self):
        record = ProgressRecord.model_validate({"questionsAnswered": 3, "totalCorrect": 9})
        assert record.total_correct == 3

    def test_malformed_registry_entries_dropped(self, sample_missed):
        payload = {
            "mistakeRegistry": [
                sample_missed.model_dump(by_alias=True),
                {"id": "broken"},
                sample_missed.model_dump(by_alias=True),
            ]
        }
        record = ProgressRecord.model_validate(payload)
        assert [m.id for m in record.mistake_registry] == ["mistake-abate"]

    def test_malformed_batch_items_dropped(self, sample_items):
        payload = {
            "activeSessionItems": [
                sample_items[0].model_dump(by_alias=True),
                {"key": "nope"},
                "not-an-object",
            ]
        }
        record = ProgressRecord.model_validate(payload)
        assert record.active_session_items == (sample_items[0],)

    def test_find_mistake(self, sample_missed):
        record = ProgressRecord(mistake_registry=(sample_missed,))
        assert record.find_mistake("mistake-abate") == sample_missed
        assert record.find_mistake("missing") is None
