"""Highlight/transcript alignment."""

from .similarity import MATCH_THRESHOLD, MatchResult, best_match, tokenize
from .transcript import (
    align_highlights,
    format_timestamp,
    parse_highlights,
    parse_timestamp,
    parse_transcript,
)

__all__ = [
    "MATCH_THRESHOLD",
    "MatchResult",
    "best_match",
    "tokenize",
    "align_highlights",
    "format_timestamp",
    "parse_highlights",
    "parse_timestamp",
    "parse_transcript",
]
