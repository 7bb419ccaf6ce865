"""Data handling modules for adaptquiz."""

from .loader import DataFormatError, load_answers, load_questions
from .schemas import (
    AttemptRecord,
    Difficulty,
    Highlight,
    Option,
    Question,
    QuestionKind,
    TranscriptSegment,
    UserAnswer,
    normalize_difficulty,
)

__all__ = [
    "AttemptRecord",
    "DataFormatError",
    "Difficulty",
    "Highlight",
    "Option",
    "Question",
    "QuestionKind",
    "TranscriptSegment",
    "UserAnswer",
    "load_answers",
    "load_questions",
    "normalize_difficulty",
]
