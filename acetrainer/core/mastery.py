"""
Mastery Ledger.

Per-item mastery scores live in ``ProgressRecord.mastery_by_item`` as integers
in [0, 100]. Scores only move through ``apply_delta``, which clamps instead of
wrapping, so any sequence of increments and decrements stays in range.

Design:
- MasteryLevel: Enum for categorizing mastery scores
- clamp_score: bound any integer into [0, 100]
- apply_delta: pure update returning a new mastery mapping
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum

MIN_SCORE = 0
MAX_SCORE = 100


class MasteryLevel(str, Enum):
    """
    Mastery level categorization for a 0-100 item score.
    """

    NOT_STARTED = "not_started"  # 0
    NOVICE = "novice"  # 1-39
    DEVELOPING = "developing"  # 40-69
    PROFICIENT = "proficient"  # 70-79
    MASTERED = "mastered"  # 80-100

    @classmethod
    def from_score(cls, score: int) -> MasteryLevel:
        """
        Convert a 0-100 mastery score to a level.

        Args:
            score: Mastery score between 0 and 100

        Returns:
            Corresponding MasteryLevel
        """
        if score <= 0:
            return cls.NOT_STARTED
        elif score < 40:
            return cls.NOVICE
        elif score < 70:
            return cls.DEVELOPING
        elif score < 80:
            return cls.PROFICIENT
        else:
            return cls.MASTERED

    @property
    def display_name(self) -> str:
        """Human-readable name."""
        return self.value.replace("_", " ").title()

    @property
    def emoji(self) -> str:
        """Status glyph for CLI display."""
        return {
            MasteryLevel.NOT_STARTED: "○",
            MasteryLevel.NOVICE: "◔",
            MasteryLevel.DEVELOPING: "◑",
            MasteryLevel.PROFICIENT: "◕",
            MasteryLevel.MASTERED: "●",
        }[self]

    @property
    def color(self) -> str:
        """Rich color for CLI display."""
        return {
            MasteryLevel.NOT_STARTED: "dim",
            MasteryLevel.NOVICE: "red",
            MasteryLevel.DEVELOPING: "yellow",
            MasteryLevel.PROFICIENT: "cyan",
            MasteryLevel.MASTERED: "green",
        }[self]


def clamp_score(value: int) -> int:
    """Bound a score into [0, 100]."""
    return min(MAX_SCORE, max(MIN_SCORE, value))


def apply_delta(mastery: Mapping[str, int], item_key: str, delta: int) -> dict[str, int]:
    """
    Return a copy of ``mastery`` with ``item_key`` moved by ``delta``.

    An absent key counts as 0 before clamping.
    """
    updated = dict(mastery)
    updated[item_key] = clamp_score(updated.get(item_key, 0) + delta)
    return updated
