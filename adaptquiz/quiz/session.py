"""Immutable adaptive quiz session.

Each interaction takes a ``SessionState`` and returns a new one; nothing is
mutated in place. Persisting ``AttemptRecord`` rows is left to the caller.
"""

from __future__ import annotations

import logging
import random
import uuid
from dataclasses import dataclass, replace
from typing import FrozenSet, Optional, Sequence, Tuple, Union

from ..data.schemas import AttemptRecord, Difficulty, Question, UserAnswer
from .evaluator import evaluate
from .picker import next_difficulty, pick_next

logger = logging.getLogger(__name__)

DEFAULT_TOTAL_QUESTIONS = 8


class SessionError(RuntimeError):
    """Raised when a session transition is not valid for the current state."""
    pass


@dataclass(frozen=True)
class SessionState:
    attempt_id: str
    total_questions: int
    target_difficulty: Difficulty = Difficulty.MEDIUM
    asked_ids: FrozenSet[str] = frozenset()
    current_question_id: Optional[str] = None
    submitted: bool = False
    correct_count: int = 0
    records: Tuple[AttemptRecord, ...] = ()
    finished: bool = False

    @property
    def asked_count(self) -> int:
        return len(self.asked_ids)

    @property
    def answered_count(self) -> int:
        return len(self.records)


def start_session(
    pool: Sequence[Question],
    total_questions: int = DEFAULT_TOTAL_QUESTIONS,
    rng: Optional[random.Random] = None,
    attempt_id: Optional[str] = None,
    start_difficulty: Union[Difficulty, str] = Difficulty.MEDIUM,
) -> SessionState:
    """Open a session and present the first question.

    The first pick prefers ``start_difficulty``; afterwards the target
    follows the first question's own difficulty. An empty pool gives a
    finished session.
    """
    if total_questions < 1:
        raise SessionError(f"total_questions must be at least 1, got {total_questions}")

    attempt_id = attempt_id or str(uuid.uuid4())
    first = pick_next(pool, frozenset(), start_difficulty, rng=rng)
    if first is None:
        logger.info("Session %s: empty question pool", attempt_id)
        return SessionState(attempt_id=attempt_id, total_questions=0, finished=True)

    total = min(total_questions, len(pool))
    logger.info("Session %s started with %d questions (pool=%d)", attempt_id, total, len(pool))
    return SessionState(
        attempt_id=attempt_id,
        total_questions=total,
        target_difficulty=first.difficulty,
        asked_ids=frozenset([first.id]),
        current_question_id=first.id,
    )


def _check_current(state: SessionState, question: Question) -> None:
    if state.finished:
        raise SessionError(f"Session {state.attempt_id} is finished")
    if question.id != state.current_question_id:
        raise SessionError(
            f"Question {question.id} is not the current question ({state.current_question_id})"
        )
    if state.submitted:
        raise SessionError(f"Question {question.id} was already answered")


def submit_answer(
    state: SessionState,
    question: Question,
    user_answer: Union[UserAnswer, dict, None],
) -> Tuple[SessionState, AttemptRecord]:
    """Grade the current question and adapt the target difficulty."""
    _check_current(state, question)
    if isinstance(user_answer, dict):
        user_answer = UserAnswer.from_dict(user_answer)
    correct = evaluate(question, user_answer)
    record = AttemptRecord(
        attempt_id=state.attempt_id,
        question_id=question.id,
        user_answer=user_answer.to_dict() if user_answer is not None else None,
        is_correct=correct,
        score=1 if correct else 0,
        difficulty=question.difficulty,
    )
    new_target = next_difficulty(state.target_difficulty, correct)
    logger.debug(
        "Session %s: question %s graded %s, difficulty %s -> %s",
        state.attempt_id, question.id, correct, state.target_difficulty.value, new_target.value,
    )
    return (
        replace(
            state,
            submitted=True,
            correct_count=state.correct_count + (1 if correct else 0),
            records=state.records + (record,),
            target_difficulty=new_target,
        ),
        record,
    )


def skip_question(state: SessionState, question: Question) -> Tuple[SessionState, AttemptRecord]:
    """Record the current question as skipped: wrong, no answer, difficulty kept."""
    _check_current(state, question)
    record = AttemptRecord(
        attempt_id=state.attempt_id,
        question_id=question.id,
        user_answer=None,
        is_correct=False,
        score=0,
        difficulty=question.difficulty,
    )
    return replace(state, submitted=True, records=state.records + (record,)), record


def advance(
    state: SessionState,
    pool: Sequence[Question],
    rng: Optional[random.Random] = None,
) -> SessionState:
    """Move to the next question, or finish once enough have been asked."""
    if state.finished:
        return state
    if state.current_question_id is not None and not state.submitted:
        raise SessionError(f"Question {state.current_question_id} has not been answered or skipped")
    if state.asked_count >= state.total_questions:
        logger.info(
            "Session %s finished: %d/%d correct",
            state.attempt_id, state.correct_count, state.total_questions,
        )
        return replace(state, current_question_id=None, submitted=False, finished=True)

    nxt = pick_next(pool, state.asked_ids, state.target_difficulty, rng=rng)
    if nxt is None:
        return replace(state, current_question_id=None, submitted=False, finished=True)
    return replace(
        state,
        asked_ids=state.asked_ids | {nxt.id},
        current_question_id=nxt.id,
        submitted=False,
    )


def current_question(state: SessionState, pool: Sequence[Question]) -> Optional[Question]:
    if state.current_question_id is None:
        return None
    for q in pool:
        if q.id == state.current_question_id:
            return q
    return None


def score_percent(state: SessionState, cancelled: bool = False) -> float:
    """Session score in percent.

    A completed session divides by its length; a cancelled one by the number
    of questions presented so far.
    """
    denominator = max(1, state.asked_count) if cancelled else state.total_questions
    if denominator <= 0:
        return 0.0
    return state.correct_count / denominator * 100


def progress(state: SessionState) -> int:
    if state.total_questions <= 0:
        return 100
    return round(min(state.asked_count, state.total_questions) / state.total_questions * 100)
