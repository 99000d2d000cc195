"""
Mistake Registry.

A bounded, most-recent-first, id-deduplicated sequence of missed items used
for spaced re-practice. All functions are pure and return new tuples.
"""

from __future__ import annotations

import random
from collections.abc import Sequence

from acetrainer.core.models import Category, Item, MissedItem

DEFAULT_LIMIT = 100

# Used when a batch is too small to supply real distractor definitions
FALLBACK_DECOYS = (
    "To act with haste without consideration",
    "A state of complete tranquility",
    "None of the above",
)


def insert_if_absent(
    registry: Sequence[MissedItem],
    item: MissedItem,
    limit: int = DEFAULT_LIMIT,
) -> tuple[MissedItem, ...]:
    """
    Prepend ``item`` unless an entry with the same id exists.

    The result is truncated to ``limit`` entries, dropping the oldest (last).
    """
    if any(entry.id == item.id for entry in registry):
        return tuple(registry)
    return (item, *registry)[:limit]


def remove_by_id(registry: Sequence[MissedItem], mistake_id: str) -> tuple[MissedItem, ...]:
    """Drop the entry with ``mistake_id``; unchanged when absent."""
    return tuple(entry for entry in registry if entry.id != mistake_id)


def trim(registry: Sequence[MissedItem], limit: int = DEFAULT_LIMIT) -> tuple[MissedItem, ...]:
    return tuple(registry[:limit])


def missed_item_for(
    item: Item,
    distractors: Sequence[str] = (),
    rng: random.Random | None = None,
) -> MissedItem:
    """
    Build the re-practice question logged when a study item is missed.

    The question asks for the item's answer text among up to three distractor
    answers taken from ``distractors`` (padded with stock decoys). The id is
    derived from the item key, so repeated misses of the same item collapse
    into a single registry entry.
    """
    rng = rng or random.Random()
    decoys = [d for d in dict.fromkeys(distractors) if d != item.answer_text][:3]
    for fallback in FALLBACK_DECOYS:
        if len(decoys) >= 3:
            break
        if fallback not in decoys:
            decoys.append(fallback)

    options = [item.answer_text, *decoys]
    rng.shuffle(options)
    explanation = f"Full Definition: {item.answer_text}."
    if item.auxiliary_text:
        explanation += f' Context Usage: "{item.auxiliary_text}"'

    return MissedItem(
        id=f"mistake-{item.key}",
        category=Category.VOCABULARY,
        prompt_text=f"Identify the primary definition for: {item.prompt_text}",
        options=tuple(options),
        correct_option_index=options.index(item.answer_text),
        explanation_text=explanation,
    )
