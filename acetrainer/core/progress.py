"""
Progress reducers.

Pure functions taking the current ProgressRecord and returning the next one.
ProgressStore applies them under its lock and persists the result; nothing
here touches storage.

Derived fields (average_score) are recomputed from category_scores on every
session completion, never patched incrementally.
"""

from __future__ import annotations

from collections.abc import Sequence

from acetrainer.core import mastery, mistakes
from acetrainer.core.errors import InvalidSessionResult
from acetrainer.core.models import Category, Item, MissedItem, ProgressRecord, read_only
from acetrainer.core.scoring import average_of_attempted, round_half_up

__all__ = [
    "apply_correction",
    "average_of_attempted",
    "award_xp",
    "finish_session",
    "log_mistake",
    "record_answer",
    "resolve_mistake",
    "round_half_up",
    "session_xp",
    "set_active_items",
    "update_mastery",
]

SESSION_COMPLETION_XP = 50
ACCURACY_XP_FACTOR = 3


def award_xp(record: ProgressRecord, amount: int) -> ProgressRecord:
    if amount < 0:
        raise ValueError(f"XP amount must be non-negative, got {amount}")
    return record.model_copy(update={"xp": record.xp + amount})


def record_answer(record: ProgressRecord, is_correct: bool) -> ProgressRecord:
    return record.model_copy(
        update={
            "questions_answered": record.questions_answered + 1,
            "total_correct": record.total_correct + (1 if is_correct else 0),
        }
    )


def update_mastery(record: ProgressRecord, item_key: str, delta: int) -> ProgressRecord:
    return record.model_copy(
        update={"mastery_by_item": read_only(mastery.apply_delta(record.mastery_by_item, item_key, delta))}
    )


def log_mistake(
    record: ProgressRecord,
    item: MissedItem,
    limit: int = mistakes.DEFAULT_LIMIT,
) -> ProgressRecord:
    registry = mistakes.insert_if_absent(record.mistake_registry, item, limit)
    if registry == record.mistake_registry:
        return record
    return record.model_copy(update={"mistake_registry": registry})


def resolve_mistake(record: ProgressRecord, mistake_id: str) -> ProgressRecord:
    registry = mistakes.remove_by_id(record.mistake_registry, mistake_id)
    if len(registry) == len(record.mistake_registry):
        return record
    return record.model_copy(update={"mistake_registry": registry})


def set_active_items(record: ProgressRecord, items: Sequence[Item]) -> ProgressRecord:
    return record.model_copy(update={"active_session_items": tuple(items)})


def session_xp(accuracy: int) -> int:
    """Flat completion bonus plus an accuracy-scaled bonus."""
    return round_half_up(accuracy * ACCURACY_XP_FACTOR) + SESSION_COMPLETION_XP


def finish_session(record: ProgressRecord, score: int, total: int, category: Category) -> ProgressRecord:
    """
    Fold a completed quiz session into the record.

    The category score starts at the session accuracy and afterwards moves
    halfway toward each new session: ``round((previous + accuracy) / 2)``.

    Raises:
        InvalidSessionResult: total is not positive or score is outside [0, total]
    """
    if total <= 0 or score < 0 or score > total:
        raise InvalidSessionResult(score, total)

    accuracy = round_half_up(100 * score / total)
    previous = record.category_scores.get(category, 0)
    category_score = accuracy if previous == 0 else round_half_up((previous + accuracy) / 2)
    category_scores = {**record.category_scores, category: category_score}

    return record.model_copy(
        update={
            "category_scores": read_only(category_scores),
            "average_score": average_of_attempted(category_scores),
            "completed_sessions": record.completed_sessions + 1,
            "questions_answered": record.questions_answered + total,
            "total_correct": record.total_correct + score,
            "xp": record.xp + session_xp(accuracy),
        }
    )


def apply_correction(
    record: ProgressRecord,
    mistake_id: str,
    choice_index: int,
    reward_xp: int,
) -> tuple[ProgressRecord, bool]:
    """
    Re-evaluate a logged mistake.

    A correct choice removes the entry and awards ``reward_xp``; a wrong
    choice (or unknown id) leaves the record untouched.
    """
    entry = record.find_mistake(mistake_id)
    if entry is None or not entry.is_correct(choice_index):
        return record, False
    resolved = resolve_mistake(record, mistake_id)
    return award_xp(resolved, reward_xp), True
