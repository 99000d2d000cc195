"""
Circular cursor over an ordered list (flashcards, root cards).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Generic, TypeVar

T = TypeVar("T")


class CursorNavigator(Generic[T]):
    """Index that wraps in both directions; navigation unflips the card."""

    def __init__(self, items: Sequence[T] = ()):
        self.items: tuple[T, ...] = tuple(items)
        self.index = 0
        self.flipped = False

    def __len__(self) -> int:
        return len(self.items)

    @property
    def current(self) -> T | None:
        if not self.items:
            return None
        return self.items[self.index]

    def next(self) -> None:
        if not self.items:
            return
        self.index = (self.index + 1) % len(self.items)
        self.flipped = False

    def prev(self) -> None:
        if not self.items:
            return
        self.index = (self.index - 1 + len(self.items)) % len(self.items)
        self.flipped = False

    def flip(self) -> None:
        if self.items:
            self.flipped = not self.flipped

    def rebind(self, items: Sequence[T]) -> None:
        """Switch to a different source sequence, starting over at the first card."""
        self.items = tuple(items)
        self.index = 0
        self.flipped = False
