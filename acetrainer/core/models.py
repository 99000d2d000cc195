"""
Domain records for acetrainer.

All records are immutable pydantic models. The persisted document uses
camelCase field names (``completedSessions``, ``masteryByItem``), so every
model uses a camelCase alias generator and accepts either spelling on input.

Design:
- Category: fixed enumeration of subject areas
- Item: a study word (or similar) drawn into training batches
- Question: a multiple-choice record from the content source
- MissedItem: a logged mistake, kept for spaced re-practice
- ProgressRecord: the single durable aggregate per user/device
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Annotated, Any, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializationInfo,
    ValidationError,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from acetrainer.core.scoring import average_of_attempted, clamp_percent

Score = Annotated[int, Field(ge=0, le=100)]

K = TypeVar("K")
V = TypeVar("V")


class Category(str, Enum):
    """Subject areas tracked with an independent rolling score."""

    READING = "Reading Comprehension"
    VOCABULARY = "Vocabulary"
    GRAMMAR = "Grammar & Writing"
    MATH = "Mathematics"
    MOCK = "Full Mock Test"
    SPELLING = "Spelling"

    @classmethod
    def parse(cls, value: str) -> Category:
        """
        Resolve a category from its value, member name or a loose spelling.

        Accepts "Vocabulary", "VOCABULARY", "vocab" style inputs so CLI users
        do not have to type "Grammar & Writing".
        """
        text = value.strip()
        for category in cls:
            if text == category.value or text.upper() == category.name:
                return category
        lowered = text.lower()
        for category in cls:
            if category.value.lower().startswith(lowered) or category.name.lower().startswith(lowered):
                return category
        raise ValueError(f"Unknown category: {value}")


class _Record(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Item(_Record):
    """A study item. Only ``key`` uniqueness matters to the engines."""

    key: str = Field(min_length=1)
    prompt_text: str = Field(min_length=1)
    answer_text: str = Field(min_length=1)
    auxiliary_text: str = ""


class _MultipleChoice(_Record):
    id: str = Field(min_length=1)
    category: Category
    prompt_text: str = Field(min_length=1)
    options: tuple[str, ...] = Field(min_length=2)
    correct_option_index: int = Field(ge=0)
    explanation_text: str = ""
    passage_text: str | None = None

    @model_validator(mode="after")
    def _index_in_range(self):
        if self.correct_option_index >= len(self.options):
            raise ValueError(
                f"correct_option_index {self.correct_option_index} out of range for {len(self.options)} options"
            )
        return self

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_option_index]

    def is_correct(self, choice_index: int | None) -> bool:
        return choice_index == self.correct_option_index


class Question(_MultipleChoice):
    """A quiz question supplied by the content source."""

    def to_missed(self) -> MissedItem:
        """Snapshot this question into the mistake registry shape."""
        return MissedItem.model_validate(self.model_dump())


class MissedItem(_MultipleChoice):
    """A logged mistake. Immutable once logged; only removal changes the registry."""


def _valid_entries(model: type[_Record], value: Any) -> list[_Record]:
    """Keep only the list entries that validate as ``model``."""
    if not isinstance(value, (list, tuple)):
        return []
    entries = []
    for raw in value:
        try:
            entries.append(raw if isinstance(raw, model) else model.model_validate(raw))
        except ValidationError:
            continue
    return entries


def _known_categories(value: Any) -> dict[Category, int]:
    """Every category present, unknown keys ignored, scores clamped into [0, 100]."""
    scores: dict[Category, int] = {c: 0 for c in Category}
    if not isinstance(value, Mapping):
        return scores
    for key, raw in value.items():
        try:
            category = Category(key)
        except ValueError:
            continue
        score = clamp_percent(raw)
        if score is not None:
            scores[category] = score
    return scores


def read_only(mapping: Mapping[K, V]) -> Mapping[K, V]:
    """Wrap a copy of ``mapping`` so holders of a record cannot write through it."""
    return MappingProxyType(dict(mapping))


class ProgressRecord(_Record):
    """
    The durable progress aggregate.

    Hydration is defensive: unknown categories are ignored, missing categories
    default to 0, malformed registry/batch entries are dropped and score
    values are clamped into [0, 100]. ``average_score`` is always derived from
    the category scores, whatever the stored document says.

    The score mappings are read-only views; reducers build new ones with
    ``read_only``.
    """

    completed_sessions: int = Field(default=0, ge=0)
    average_score: Score = 0
    category_scores: Mapping[Category, Score] = Field(default_factory=lambda: read_only({c: 0 for c in Category}))
    questions_answered: int = Field(default=0, ge=0)
    total_correct: int = Field(default=0, ge=0)
    xp: int = Field(default=0, ge=0)
    mastery_by_item: Mapping[str, Score] = Field(default_factory=lambda: read_only({}))
    active_session_items: tuple[Item, ...] = ()
    mistake_registry: tuple[MissedItem, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _derived_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        answered = data.get("questionsAnswered", data.get("questions_answered"))
        for key in ("totalCorrect", "total_correct"):
            correct = data.get(key)
            if isinstance(answered, int) and isinstance(correct, int) and correct > answered:
                data[key] = answered

        raw_scores = data.pop("categoryScores", data.pop("category_scores", None))
        scores = _known_categories(raw_scores)
        data.pop("average_score", None)
        data["categoryScores"] = scores
        data["averageScore"] = average_of_attempted(scores)
        return data

    @field_validator("mastery_by_item", mode="before")
    @classmethod
    def _clamped_mastery(cls, value: Any) -> dict[str, int]:
        if not isinstance(value, Mapping):
            return {}
        mastery = {}
        for key, raw in value.items():
            score = clamp_percent(raw)
            if score is not None:
                mastery[str(key)] = score
        return mastery

    @field_validator("category_scores", "mastery_by_item", mode="after")
    @classmethod
    def _freeze_mapping(cls, value: Mapping[Any, int]) -> Mapping[Any, int]:
        return read_only(value)

    @field_serializer("category_scores", "mastery_by_item")
    def _plain_mapping(self, value: Mapping[Any, int], info: SerializationInfo) -> dict[Any, int]:
        if info.mode_is_json():
            return {getattr(key, "value", key): score for key, score in value.items()}
        return dict(value)

    @field_validator("active_session_items", mode="before")
    @classmethod
    def _valid_items(cls, value: Any) -> list[Item]:
        return _valid_entries(Item, value)

    @field_validator("mistake_registry", mode="before")
    @classmethod
    def _unique_mistakes(cls, value: Any) -> list[MissedItem]:
        seen: set[str] = set()
        unique = []
        for entry in _valid_entries(MissedItem, value):
            if entry.id not in seen:
                seen.add(entry.id)
                unique.append(entry)
        return unique

    @property
    def accuracy(self) -> int:
        """Global accuracy in percent (0 when nothing has been answered)."""
        if self.questions_answered == 0:
            return 0
        return int(100 * self.total_correct / self.questions_answered + 0.5)

    def mastery(self, item_key: str) -> int:
        return self.mastery_by_item.get(item_key, 0)

    def find_mistake(self, mistake_id: str) -> MissedItem | None:
        return next((m for m in self.mistake_registry if m.id == mistake_id), None)
