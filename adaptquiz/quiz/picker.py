"""Difficulty-bucketed question selection and difficulty adaptation."""

from __future__ import annotations

import random
from typing import Collection, Dict, Iterable, List, Optional, Sequence

from ..data.schemas import Difficulty, Question, normalize_difficulty

# Fallback chain after the requested difficulty.
FALLBACK_ORDER: Sequence[Difficulty] = (
    Difficulty.MEDIUM,
    Difficulty.EASY,
    Difficulty.HARD,
    Difficulty.UNKNOWN,
)

# Scale used when adapting the target difficulty.
DIFFICULTY_SCALE: Sequence[Difficulty] = (Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD)


def resolution_order(target: Difficulty | str) -> List[Difficulty]:
    """Target first, then the fallback chain, without repeats."""
    order: List[Difficulty] = []
    for d in [normalize_difficulty(target), *FALLBACK_ORDER]:
        if d not in order:
            order.append(d)
    return order


def bucket_by_difficulty(questions: Iterable[Question]) -> Dict[Difficulty, List[Question]]:
    buckets: Dict[Difficulty, List[Question]] = {d: [] for d in Difficulty}
    for q in questions:
        buckets[normalize_difficulty(q.difficulty)].append(q)
    return buckets


def pick_next(
    questions: Sequence[Question],
    asked_ids: Collection[str],
    target_difficulty: Difficulty | str = Difficulty.MEDIUM,
    rng: Optional[random.Random] = None,
) -> Optional[Question]:
    """Pick the next question to ask, or ``None`` when the pool is exhausted.

    Questions already in ``asked_ids`` are never returned. The pick is uniform
    within the first non-empty bucket of ``resolution_order(target_difficulty)``.

    Args:
        questions: Question pool, in its original order
        asked_ids: Ids already presented this session
        target_difficulty: Preferred difficulty bucket
        rng: Random source; the module-level generator when omitted

    Returns:
        A question from the pool, or None
    """
    remaining = [q for q in questions if q.id not in asked_ids]
    if not remaining:
        return None

    buckets = bucket_by_difficulty(remaining)
    chooser = rng if rng is not None else random
    for key in resolution_order(target_difficulty):
        bucket = buckets[key]
        if bucket:
            return bucket[chooser.randrange(len(bucket))]
    return remaining[0]


def next_difficulty(current: Difficulty | str, correct: Optional[bool]) -> Difficulty:
    """Step the target difficulty after an answer.

    One step up on a correct answer, one step down on a wrong one, unchanged
    when the answer was ungraded. An unknown target steps up from easy and
    stays unknown on a wrong answer.
    """
    current = normalize_difficulty(current)
    if correct is None:
        return current
    idx = DIFFICULTY_SCALE.index(current) if current in DIFFICULTY_SCALE else 0
    if correct and idx < len(DIFFICULTY_SCALE) - 1:
        return DIFFICULTY_SCALE[idx + 1]
    if not correct and idx > 0:
        return DIFFICULTY_SCALE[idx - 1]
    return current
