"""Token similarity used to place highlights on a transcript timeline."""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Set

from ..data.schemas import TranscriptSegment

CONTAINMENT_WEIGHT = 0.7
JACCARD_WEIGHT = 0.3

# Minimum score for an inferred timestamp to be applied.
MATCH_THRESHOLD = 0.18


@dataclass(frozen=True)
class MatchResult:
    timestamp: Optional[float]
    score: float

    def accepted(self, threshold: float = MATCH_THRESHOLD) -> bool:
        return self.timestamp is not None and self.score >= threshold


def _strip_punct_symbols(s: str) -> str:
    # Unicode categories P* (punctuation) and S* (symbols) become spaces.
    return "".join(" " if unicodedata.category(ch)[0] in "PS" else ch for ch in s)


def tokenize(s: str) -> List[str]:
    """Lowercase, drop punctuation and symbols, split on whitespace."""
    if not s:
        return []
    return _strip_punct_symbols(s.lower()).split()


def jaccard(a: Set[str], b: Set[str]) -> float:
    """Intersection over union; 0.0 when both sets are empty."""
    union = len(a | b)
    if union == 0:
        return 0.0
    return len(a & b) / union


def containment(query: Sequence[str], candidate: Iterable[str]) -> float:
    """Fraction of query tokens (with repeats) present in the candidate."""
    cand = set(candidate)
    if not query or not cand:
        return 0.0
    return sum(1 for t in query if t in cand) / len(query)


def similarity(query: Sequence[str], candidate: Sequence[str]) -> float:
    return (
        CONTAINMENT_WEIGHT * containment(query, candidate)
        + JACCARD_WEIGHT * jaccard(set(query), set(candidate))
    )


def best_match(text: str, segments: Sequence[TranscriptSegment]) -> MatchResult:
    """Find the transcript segment that best matches ``text``.

    Ties keep the earliest segment, and a segment scoring zero is never
    chosen. Empty input yields ``MatchResult(None, 0.0)``.
    """
    query = tokenize(text)
    if not query or not segments:
        return MatchResult(None, 0.0)

    best = MatchResult(None, 0.0)
    for seg in segments:
        tokens = tokenize(seg.text)
        if not tokens:
            continue
        score = similarity(query, tokens)
        if score > best.score:
            best = MatchResult(seg.start, score)
    return best
