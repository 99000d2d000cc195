"""
Content: the boundary to the external quiz/word generator.
"""

from acetrainer.content.source import (
    ContentSource,
    JsonContentSource,
    StaticContentSource,
    default_question_count,
    parse_item,
    parse_items,
    parse_question,
    parse_questions,
    search_items,
)

__all__ = [
    "ContentSource",
    "JsonContentSource",
    "StaticContentSource",
    "default_question_count",
    "parse_item",
    "parse_items",
    "parse_question",
    "parse_questions",
    "search_items",
]
