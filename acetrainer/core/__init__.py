"""
Core Module - Shared domain models and progress rules.

Components:
- models: Category, Item, Question, MissedItem, ProgressRecord
- mastery: Clamped per-item mastery ledger and MasteryLevel
- mistakes: Bounded, deduplicated mistake registry
- progress: Pure reducers turning outcomes into the next ProgressRecord
- scoring: Half-up rounding and category averages
- errors: InvalidSessionResult, PersistenceFailure, MalformedContent
"""

from acetrainer.core.errors import (
    AceTrainerError,
    InvalidSessionResult,
    MalformedContent,
    PersistenceFailure,
)
from acetrainer.core.mastery import MasteryLevel
from acetrainer.core.models import Category, Item, MissedItem, ProgressRecord, Question

__all__ = [
    "AceTrainerError",
    "Category",
    "InvalidSessionResult",
    "Item",
    "MalformedContent",
    "MasteryLevel",
    "MissedItem",
    "PersistenceFailure",
    "ProgressRecord",
    "Question",
]
