"""Tests for attempt summaries."""

import math

from adaptquiz.data.schemas import AttemptRecord, Difficulty
from adaptquiz.quiz.results import missed_question_ids, records_frame, summarize_attempts


def _rec(qid, correct, difficulty):
    return AttemptRecord("att", qid, None, correct, 1 if correct else 0, difficulty)


RECORDS = [
    _rec("e1", True, Difficulty.EASY),
    _rec("e2", False, Difficulty.EASY),
    _rec("m1", True, Difficulty.MEDIUM),
    _rec("h1", None, Difficulty.HARD),
    _rec("e2", False, Difficulty.EASY),
]


class TestSummarize:
    def test_rows_per_bucket(self):
        df = summarize_attempts(RECORDS)
        assert list(df["difficulty"]) == ["easy", "medium", "hard", "unknown", "all"]
        rows = df.set_index("difficulty")
        assert rows.loc["easy", "answered"] == 3
        assert rows.loc["easy", "correct"] == 1
        assert abs(rows.loc["easy", "accuracy"] - 1 / 3) < 1e-9
        assert rows.loc["hard", "ungraded"] == 1
        assert math.isnan(rows.loc["hard", "accuracy"])
        assert math.isnan(rows.loc["unknown", "accuracy"])
        assert rows.loc["all", "answered"] == 5
        assert rows.loc["all", "accuracy"] == 0.5

    def test_empty(self):
        df = summarize_attempts([])
        assert (df["answered"] == 0).all()
        assert df["accuracy"].isna().all()

    def test_frame_columns(self):
        assert list(records_frame(RECORDS).columns) == ["question_id", "difficulty", "is_correct", "score"]


def test_missed_ids_unique_in_order():
    assert missed_question_ids(RECORDS) == ["e2"]
