"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from acetrainer.config import Settings  # noqa: E402
from acetrainer.core.models import Category, Item, MissedItem, Question  # noqa: E402
from acetrainer.storage import MemoryByteStore, ProgressStore  # noqa: E402
from acetrainer.study.timers import ManualScheduler  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


WORDS = [
    ("abate", "To become less intense or widespread", "The storm began to abate by evening."),
    ("benevolent", "Well meaning and kindly", "A benevolent smile crossed her face."),
    ("candid", "Truthful and straightforward", "He gave a candid account of the events."),
    ("diligent", "Showing care in one's work", "A diligent student checks every answer."),
    ("eloquent", "Fluent or persuasive in speaking", "She gave an eloquent speech."),
    ("frugal", "Sparing or economical with money", "They lived a frugal life."),
]


@pytest.fixture
def sample_items() -> list[Item]:
    """Six vocabulary study items with distinct answers."""
    return [
        Item(key=word, prompt_text=word.capitalize(), answer_text=definition, auxiliary_text=example)
        for word, definition, example in WORDS
    ]


@pytest.fixture
def sample_question() -> Question:
    return Question(
        id="q-grammar-1",
        category=Category.GRAMMAR,
        prompt_text="Which sentence is punctuated correctly?",
        options=(
            "Its raining outside.",
            "It's raining outside.",
            "Its' raining outside.",
            "It is' raining outside.",
        ),
        correct_option_index=1,
        explanation_text="'It's' is the contraction of 'it is'.",
    )


@pytest.fixture
def sample_questions(sample_question) -> list[Question]:
    """Three grammar questions and one vocabulary question."""
    extra = [
        Question(
            id=f"q-grammar-{n}",
            category=Category.GRAMMAR,
            prompt_text=f"Grammar question {n}",
            options=("right", "wrong"),
            correct_option_index=0,
        )
        for n in (2, 3)
    ]
    vocab = Question(
        id="q-vocab-1",
        category=Category.VOCABULARY,
        prompt_text="What does 'candid' mean?",
        options=("Secretive", "Truthful and straightforward", "Angry"),
        correct_option_index=1,
    )
    return [sample_question, *extra, vocab]


@pytest.fixture
def sample_missed() -> MissedItem:
    return MissedItem(
        id="mistake-abate",
        category=Category.VOCABULARY,
        prompt_text="Identify the primary definition for: Abate",
        options=("A state of complete tranquility", "To become less intense or widespread"),
        correct_option_index=1,
        explanation_text="Full Definition: To become less intense or widespread.",
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Default settings with the state file redirected into the test's tmp dir."""
    return Settings(state_path=tmp_path / "progress.json", _env_file=None)


@pytest.fixture
def byte_store() -> MemoryByteStore:
    return MemoryByteStore()


@pytest.fixture
def store(byte_store) -> ProgressStore:
    return ProgressStore(byte_store)


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def outcomes() -> list:
    """Collecting outcome sink: pass ``outcomes.append`` to an engine."""
    return []
