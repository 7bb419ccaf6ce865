"""Result summaries for graded attempts."""

from __future__ import annotations

from typing import Iterable, List, Sequence

import numpy as np
import pandas as pd

from ..data.schemas import AttemptRecord, Difficulty

SUMMARY_COLUMNS = ["difficulty", "answered", "correct", "ungraded", "accuracy"]


def records_frame(records: Iterable[AttemptRecord]) -> pd.DataFrame:
    rows = [
        {
            "question_id": r.question_id,
            "difficulty": r.difficulty.value,
            "is_correct": r.is_correct,
            "score": r.score,
        }
        for r in records
    ]
    return pd.DataFrame(rows, columns=["question_id", "difficulty", "is_correct", "score"])


def summarize_attempts(records: Sequence[AttemptRecord]) -> pd.DataFrame:
    """Per-difficulty accuracy table.

    One row per difficulty bucket in scale order, plus an ``all`` row.
    Ungraded attempts (``is_correct is None``) are excluded from accuracy;
    accuracy is NaN for a bucket with nothing gradable.
    """
    df = records_frame(records)
    out = []
    for label in [d.value for d in Difficulty] + ["all"]:
        sub = df if label == "all" else df[df["difficulty"] == label]
        graded = sub[sub["is_correct"].notna()]
        correct = int((graded["is_correct"] == True).sum())  # noqa: E712
        out.append({
            "difficulty": label,
            "answered": int(len(sub)),
            "correct": correct,
            "ungraded": int(len(sub) - len(graded)),
            "accuracy": correct / len(graded) if len(graded) else np.nan,
        })
    return pd.DataFrame(out, columns=SUMMARY_COLUMNS)


def missed_question_ids(records: Iterable[AttemptRecord]) -> List[str]:
    """Ids answered wrong (or skipped), first occurrence order, no repeats."""
    seen = []
    for r in records:
        if r.is_correct is False and r.question_id not in seen:
            seen.append(r.question_id)
    return seen
