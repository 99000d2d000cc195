"""
Content source boundary.

Study items and quiz questions come from an external generator; the core only
consumes their shapes. Records are validated one by one and malformed ones are
dropped with a warning instead of failing the whole batch.

Two record spellings are accepted:
- the native camelCase shape (``promptText``, ``answerText``, ``correctOptionIndex``)
- the generator's vocabulary/question shape (``word``/``definition``/``exampleSentence``,
  ``questionText``/``correctAnswer``/``explanation``/``passage``)
"""

from __future__ import annotations

import json
import random
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Protocol

from loguru import logger
from pydantic import ValidationError

from acetrainer.core.errors import MalformedContent
from acetrainer.core.models import Category, Item, Question
from acetrainer.study.batch import pick_batch

DEFAULT_QUESTION_COUNT = 10
MOCK_QUESTION_COUNT = 20

_QUESTION_FIELD_ALIASES = {
    "questionText": "promptText",
    "correctAnswer": "correctOptionIndex",
    "explanation": "explanationText",
    "passage": "passageText",
}


class ContentSource(Protocol):
    def load_items(self) -> list[Item]: ...

    def load_questions(self, category: Category, count: int) -> list[Question]: ...


def parse_item(record: Any) -> Item:
    """
    Validate one study item record.

    Raises:
        MalformedContent: required fields are missing or empty
    """
    if not isinstance(record, dict):
        raise MalformedContent(record, "item record is not an object")
    data = dict(record)
    if "word" in data:
        data.setdefault("key", data["word"])
        data.setdefault("promptText", data["word"])
        data.setdefault("answerText", data.get("definition"))
        data.setdefault("auxiliaryText", data.get("exampleSentence") or "")
    try:
        return Item.model_validate(data)
    except ValidationError as e:
        raise MalformedContent(record, f"{e.error_count()} invalid item field(s)") from e


def parse_question(record: Any) -> Question:
    """
    Validate one quiz question record.

    Raises:
        MalformedContent: required fields are missing, or the answer index is out of range
    """
    if not isinstance(record, dict):
        raise MalformedContent(record, "question record is not an object")
    data = dict(record)
    for source_key, native_key in _QUESTION_FIELD_ALIASES.items():
        if source_key in data:
            data.setdefault(native_key, data.pop(source_key))
    try:
        return Question.model_validate(data)
    except ValidationError as e:
        raise MalformedContent(record, f"{e.error_count()} invalid question field(s)") from e


def parse_items(records: Iterable[Any]) -> list[Item]:
    """Validate item records, dropping malformed ones and duplicate keys."""
    items: dict[str, Item] = {}
    for record in records:
        try:
            item = parse_item(record)
        except MalformedContent as e:
            logger.warning(f"Dropping item: {e.reason}")
            continue
        items.setdefault(item.key, item)
    return list(items.values())


def parse_questions(records: Iterable[Any]) -> list[Question]:
    """Validate question records, dropping malformed ones."""
    questions = []
    for record in records:
        try:
            questions.append(parse_question(record))
        except MalformedContent as e:
            logger.warning(f"Dropping question: {e.reason}")
    return questions


def default_question_count(category: Category) -> int:
    return MOCK_QUESTION_COUNT if category is Category.MOCK else DEFAULT_QUESTION_COUNT


def search_items(items: Iterable[Item], query: str = "") -> list[Item]:
    """
    Word bank lookup: items whose prompt or answer contains ``query``
    (case-insensitive), sorted alphabetically by prompt.
    """
    needle = query.strip().casefold()
    found = [
        item for item in items
        if needle in item.prompt_text.casefold() or needle in item.answer_text.casefold()
    ]
    return sorted(found, key=lambda item: item.prompt_text.casefold())


class JsonContentSource:
    """
    Content pack stored as a JSON document::

        {"items": [...], "questions": [...]}

    A missing or unreadable file yields empty content.
    """

    def __init__(self, path: Path, rng: random.Random | None = None):
        self.path = Path(path).expanduser()
        self.rng = rng or random.Random()
        self._document: dict | None = None

    def _load(self) -> dict:
        if self._document is None:
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    document = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Could not load content pack {self.path}: {e}")
                document = {}
            self._document = document if isinstance(document, dict) else {}
        return self._document

    def load_items(self) -> list[Item]:
        return parse_items(self._load().get("items") or [])

    def load_questions(self, category: Category, count: int) -> list[Question]:
        """
        Draw up to ``count`` questions for ``category``.

        Full mock tests draw from every category.
        """
        questions = parse_questions(self._load().get("questions") or [])
        if category is not Category.MOCK:
            questions = [q for q in questions if q.category is category]
        return pick_batch(questions, count, self.rng)


class StaticContentSource:
    """In-memory content, for tests and embedding."""

    def __init__(self, items: Iterable[Item] = (), questions: Iterable[Question] = ()):
        self.items = list(items)
        self.questions = list(questions)

    def load_items(self) -> list[Item]:
        return list(self.items)

    def load_questions(self, category: Category, count: int) -> list[Question]:
        pool = self.questions if category is Category.MOCK else [q for q in self.questions if q.category is category]
        return pool[:count]
