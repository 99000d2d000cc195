"""
Configuration settings for acetrainer.

Uses Pydantic Settings for environment variable management with .env file support.
Every field can be overridden with an ``ACETRAINER_`` prefixed variable, e.g.
``ACETRAINER_SESSION_SIZE=10``.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STATE_PATH = Path.home() / ".acetrainer" / "progress.json"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ACETRAINER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Storage & Content
    # ========================================
    state_path: Path = Field(
        default=DEFAULT_STATE_PATH,
        description="JSON file holding the persisted progress record",
    )
    content_path: Path | None = Field(
        default=None,
        description="JSON content pack with 'items' and 'questions' arrays",
    )

    # ========================================
    # Session Shape
    # ========================================
    session_size: int = Field(
        default=15,
        ge=1,
        description="Number of items drawn into a training batch",
    )
    mistake_registry_limit: int = Field(
        default=100,
        ge=1,
        description="Maximum entries kept in the mistake registry",
    )
    race_distractors: int = Field(
        default=3,
        ge=1,
        description="Wrong options shown next to the correct one in a race question",
    )

    # ========================================
    # Timers (seconds)
    # ========================================
    question_timer_seconds: int = Field(
        default=15,
        ge=1,
        description="Countdown per race question",
    )
    tick_seconds: float = Field(
        default=1.0,
        gt=0,
        description="Interval between countdown decrements",
    )
    feedback_delay_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Pause on the race feedback screen before the next question",
    )
    mismatch_delay_seconds: float = Field(
        default=0.5,
        ge=0,
        description="How long a mismatched pair stays highlighted in the matching game",
    )

    # ========================================
    # Rewards
    # ========================================
    match_xp: int = Field(default=10, ge=0, description="XP per matched pair")
    batch_bonus_xp: int = Field(default=250, ge=0, description="XP for clearing a matching board")
    flashcard_xp: int = Field(default=10, ge=0, description="XP per verified flashcard")
    flashcard_mastery: int = Field(default=10, description="Mastery gain per verified flashcard")
    race_base_xp: int = Field(default=20, ge=0, description="Race XP before the speed bonus multiplier")
    race_mastery: int = Field(default=5, description="Mastery gain per correct race answer")
    correction_xp: int = Field(default=75, ge=0, description="XP for correcting a logged mistake")
    grammar_check_xp: int = Field(
        default=25,
        ge=0,
        description="XP per checked grammar quick-check question, right or wrong",
    )
    spelling_check_xp: int = Field(default=0, ge=0, description="XP per checked spelling lab question")

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Minimum loguru level written to stderr by the CLI",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
