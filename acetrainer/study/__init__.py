"""
Study Module - interactive training engines.

Provides:
- batch: random session batch selection
- cursor: flashcard navigation
- matching: two-column matching game
- race: timed speed quiz
- practice: category practice exams
- drill: check-as-you-go spelling and grammar drills
- session: batch lifecycle tying the games to the ProgressStore
"""

from acetrainer.study.batch import pick_batch, shuffled
from acetrainer.study.cursor import CursorNavigator
from acetrainer.study.drill import QuestionDrill
from acetrainer.study.events import Answered, Matched, MistakeLogged, ProgressRecorder
from acetrainer.study.matching import MatchingGameEngine, Side
from acetrainer.study.practice import ExamResult, PracticeExam
from acetrainer.study.race import RaceOutcome, RacePhase, TimedRaceEngine
from acetrainer.study.session import TrainingSession
from acetrainer.study.timers import AsyncioScheduler, ManualScheduler

__all__ = [
    "Answered",
    "AsyncioScheduler",
    "CursorNavigator",
    "ExamResult",
    "ManualScheduler",
    "Matched",
    "MatchingGameEngine",
    "MistakeLogged",
    "PracticeExam",
    "ProgressRecorder",
    "QuestionDrill",
    "RaceOutcome",
    "RacePhase",
    "Side",
    "TimedRaceEngine",
    "TrainingSession",
    "pick_batch",
    "shuffled",
]
