"""Tests for difficulty-bucketed question selection."""

import random

import pytest

from adaptquiz.data.schemas import Difficulty, Question
from adaptquiz.quiz.picker import (
    bucket_by_difficulty,
    next_difficulty,
    pick_next,
    resolution_order,
)


def _q(qid, difficulty):
    return Question.from_record({"id": qid, "prompt": f"prompt {qid}", "difficulty": difficulty})


class TestResolutionOrder:
    def test_target_first_then_fallback(self):
        assert resolution_order("hard") == [
            Difficulty.HARD, Difficulty.MEDIUM, Difficulty.EASY, Difficulty.UNKNOWN,
        ]

    def test_medium_is_not_repeated(self):
        assert resolution_order(Difficulty.MEDIUM) == [
            Difficulty.MEDIUM, Difficulty.EASY, Difficulty.HARD, Difficulty.UNKNOWN,
        ]

    def test_free_text_target_is_normalized(self):
        assert resolution_order("Very Difficult")[0] is Difficulty.HARD
        assert resolution_order("whatever")[0] is Difficulty.UNKNOWN


class TestPickNext:
    def test_exhausted_pool_returns_none(self, pool):
        asked = {q.id for q in pool}
        assert pick_next(pool, asked, "hard") is None

    def test_empty_pool_returns_none(self):
        assert pick_next([], set()) is None

    def test_never_returns_asked_question(self, pool):
        asked = {q.id for q in pool[:-1]}
        assert pick_next(pool, asked, "easy").id == pool[-1].id

    def test_prefers_target_bucket(self, pool):
        rng = random.Random(0)
        for _ in range(50):
            q = pick_next(pool, set(), "hard", rng=rng)
            assert q.difficulty is Difficulty.HARD

    def test_fallback_skips_to_easy_before_unknown(self):
        pool = [_q("u1", None), _q("e1", "easy"), _q("u2", "???"), _q("e2", "EASY")]
        rng = random.Random(3)
        picks = {pick_next(pool, set(), "hard", rng=rng).id for _ in range(50)}
        assert picks <= {"e1", "e2"}

    def test_unknown_bucket_used_last(self):
        pool = [_q("u1", None), _q("e1", "easy")]
        assert pick_next(pool, {"e1"}, "hard").id == "u1"

    def test_seeded_generator_is_reproducible(self, pool):
        first = pick_next(pool, set(), "easy", rng=random.Random(11))
        second = pick_next(pool, set(), "easy", rng=random.Random(11))
        assert first == second

    def test_uniform_within_bucket(self):
        pool = [_q(f"m{i}", "medium") for i in range(3)]
        rng = random.Random(5)
        picks = {pick_next(pool, set(), "medium", rng=rng).id for _ in range(100)}
        assert picks == {"m0", "m1", "m2"}

    def test_pool_is_not_mutated(self, pool):
        snapshot = list(pool)
        pick_next(pool, {"q-easy-1"}, "easy", rng=random.Random(1))
        assert pool == snapshot


class TestBuckets:
    def test_every_bucket_present(self, pool):
        buckets = bucket_by_difficulty(pool)
        assert set(buckets) == set(Difficulty)
        assert [q.id for q in buckets[Difficulty.UNKNOWN]] == ["q-unknown-1"]
        assert len(buckets[Difficulty.EASY]) == 2


class TestNextDifficulty:
    @pytest.mark.parametrize("current,correct,expected", [
        (Difficulty.EASY, True, Difficulty.MEDIUM),
        (Difficulty.MEDIUM, True, Difficulty.HARD),
        (Difficulty.HARD, True, Difficulty.HARD),
        (Difficulty.HARD, False, Difficulty.MEDIUM),
        (Difficulty.MEDIUM, False, Difficulty.EASY),
        (Difficulty.EASY, False, Difficulty.EASY),
        (Difficulty.MEDIUM, None, Difficulty.MEDIUM),
        (Difficulty.UNKNOWN, True, Difficulty.MEDIUM),
        (Difficulty.UNKNOWN, False, Difficulty.UNKNOWN),
    ])
    def test_steps(self, current, correct, expected):
        assert next_difficulty(current, correct) is expected

    def test_accepts_strings(self):
        assert next_difficulty("medium", True) is Difficulty.HARD
