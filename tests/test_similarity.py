"""Tests for the transcript similarity scorer."""

import pytest

from adaptquiz.align.similarity import (
    MatchResult,
    best_match,
    containment,
    jaccard,
    similarity,
    tokenize,
)
from adaptquiz.data.schemas import TranscriptSegment


class TestTokenize:
    def test_punctuation_and_symbols_removed(self):
        assert tokenize("Hello, World! $5 + tax") == ["hello", "world", "5", "tax"]

    def test_unicode_punctuation(self):
        assert tokenize("«Bonjour» — ça va?") == ["bonjour", "ça", "va"]

    def test_empty(self):
        assert tokenize("") == []
        assert tokenize("...") == []


class TestScores:
    def test_jaccard(self):
        assert jaccard({"a", "b"}, {"b", "c"}) == pytest.approx(1 / 3)
        assert jaccard(set(), set()) == 0.0

    def test_containment_counts_repeats(self):
        assert containment(["a", "a", "b"], ["a"]) == pytest.approx(2 / 3)
        assert containment([], ["a"]) == 0.0

    def test_weighted_combination(self):
        # containment 1/2, jaccard 1/3
        assert similarity(["a", "b"], ["a", "c"]) == pytest.approx(0.7 * 0.5 + 0.3 / 3)


class TestBestMatch:
    def test_identical_segment_scores_one(self):
        segs = [
            TranscriptSegment(start=5.0, text="welcome everyone"),
            TranscriptSegment(start=42.0, text="the budget is approved"),
        ]
        result = best_match("The budget is approved.", segs)
        assert result.timestamp == 42.0
        assert result.score == pytest.approx(1.0)

    def test_no_segments(self):
        assert best_match("anything", []) == MatchResult(None, 0.0)

    def test_empty_query(self):
        segs = [TranscriptSegment(start=1.0, text="hello")]
        assert best_match("!!", segs) == MatchResult(None, 0.0)

    def test_tie_keeps_earliest(self):
        segs = [
            TranscriptSegment(start=10.0, text="launch date"),
            TranscriptSegment(start=20.0, text="launch date"),
        ]
        assert best_match("launch date", segs).timestamp == 10.0

    def test_zero_score_never_selected(self):
        segs = [TranscriptSegment(start=3.0, text="completely unrelated")]
        result = best_match("budget", segs)
        assert result.timestamp is None
        assert not result.accepted()

    def test_threshold(self):
        assert MatchResult(1.0, 0.18).accepted()
        assert not MatchResult(1.0, 0.17).accepted()
        assert not MatchResult(None, 0.9).accepted()
