"""Adaptive quiz logic: question picking, grading and session flow."""

from .evaluator import build_user_answer, evaluate, normalize_text
from .picker import next_difficulty, pick_next
from .results import missed_question_ids, summarize_attempts
from .session import (
    SessionError,
    SessionState,
    advance,
    progress,
    score_percent,
    skip_question,
    start_session,
    submit_answer,
)

__all__ = [
    # Picker
    "pick_next",
    "next_difficulty",
    # Evaluator
    "evaluate",
    "build_user_answer",
    "normalize_text",
    # Session
    "SessionState",
    "SessionError",
    "start_session",
    "submit_answer",
    "skip_question",
    "advance",
    "score_percent",
    "progress",
    # Results
    "summarize_attempts",
    "missed_question_ids",
]
