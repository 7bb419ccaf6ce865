"""Parsing of highlight notes and transcripts, and timestamp alignment.

Supported transcript inputs are SRT blocks and plain lines carrying a
``[H:]MM:SS[.mmm]`` timestamp. Highlight notes are one item per line, with an
optional timestamp anywhere in the line.
"""

from __future__ import annotations

import logging
import math
import re
import uuid
from dataclasses import replace
from typing import Iterable, List, Optional, Sequence, Tuple

from ..data.schemas import Highlight, TranscriptSegment
from .similarity import MATCH_THRESHOLD, best_match

logger = logging.getLogger(__name__)

# Ten days, in seconds.
MAX_TIMESTAMP = 24 * 3600 * 10

_TS_RE = re.compile(r"(?:(\d{1,2}):)?(\d{1,2}):(\d{2})(?:[.,](\d{1,3}))?")
_BRACKETED_TS_RE = re.compile(r"\[?(?:(\d{1,2}):)?(\d{1,2}):(\d{2})(?:[.,](\d{1,3}))?\]?")
_SRT_RANGE_RE = re.compile(
    r"(\d{2}):(\d{2}):(\d{2})[.,](\d{1,3})\s*-->\s*(\d{2}):(\d{2}):(\d{2})[.,](\d{1,3})"
)
_BULLET_RE = re.compile(r"[\-–—|•·]+")
_WS = re.compile(r"\s+")


def clamp(v: float, lo: float = 0.0, hi: float = MAX_TIMESTAMP) -> float:
    return max(lo, min(hi, v))


def _to_seconds(hours: Optional[str], minutes: Optional[str], seconds: Optional[str], millis: Optional[str]) -> float:
    h = int(hours) if hours else 0
    m = int(minutes or 0)
    s = int(seconds or 0)
    ms = int(millis.ljust(3, "0")) if millis else 0
    return h * 3600 + m * 60 + s + ms / 1000


def parse_timestamp(value: str) -> Optional[float]:
    """Seconds for the first timestamp found in ``value``, else None."""
    if not value:
        return None
    m = _TS_RE.search(value.strip())
    if not m:
        return None
    return _to_seconds(*m.groups())


def format_timestamp(total_seconds: Optional[float]) -> str:
    """``MM:SS`` or ``HH:MM:SS``; empty for missing or negative values."""
    if total_seconds is None or math.isnan(total_seconds) or total_seconds < 0:
        return ""
    hours = int(total_seconds // 3600)
    minutes = int((total_seconds % 3600) // 60)
    seconds = int(total_seconds % 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


def extract_first_timestamp(line: str) -> Tuple[Optional[float], str]:
    """Split a line into its first timestamp and the remaining text.

    The timestamp (brackets included) and the first dash or bullet run are
    removed from the content.
    """
    m = _BRACKETED_TS_RE.search(line)
    if not m:
        return None, line.strip()
    ts = _to_seconds(*m.groups())
    content = line[: m.start()] + line[m.end():]
    content = _BULLET_RE.sub(" ", content, count=1)
    content = _WS.sub(" ", content).strip()
    return ts, content or line.replace(m.group(0), "", 1).strip()


def dedupe_highlights(items: Iterable[Highlight]) -> List[Highlight]:
    """Drop repeats of the same text at the same timestamp (case-insensitive)."""
    seen = set()
    out: List[Highlight] = []
    for it in items:
        ts = it.timestamp if it.timestamp is not None else -1
        key = (f"{ts:.3f}", it.text.lower())
        if key in seen:
            continue
        seen.add(key)
        out.append(it)
    return out


def parse_highlights(text: str, source: str = "paste") -> List[Highlight]:
    """One highlight per non-empty line, de-duplicated."""
    items: List[Highlight] = []
    for raw in text.splitlines():
        raw = raw.strip()
        if not raw:
            continue
        ts, content = extract_first_timestamp(raw)
        content = content.strip()
        if not content:
            continue
        items.append(Highlight(id=str(uuid.uuid4()), text=content, timestamp=ts, source=source))
    return dedupe_highlights(items)


def compact_transcript(segments: Iterable[TranscriptSegment]) -> List[TranscriptSegment]:
    """Sort by start and merge contiguous duplicates (same text, start within 1 ms)."""
    out: List[TranscriptSegment] = []
    for seg in sorted(segments, key=lambda s: s.start):
        last = out[-1] if out else None
        if last is not None and abs(last.start - seg.start) < 0.001 and last.text == seg.text:
            end = seg.end if seg.end is not None else last.end
            out[-1] = replace(last, end=end)
        else:
            out.append(seg)
    return out


def _parse_srt(lines: Sequence[str]) -> List[TranscriptSegment]:
    segments: List[TranscriptSegment] = []
    i = 0
    while i < len(lines):
        maybe_time = lines[i + 1].strip() if i + 1 < len(lines) else ""
        m = _SRT_RANGE_RE.search(maybe_time)
        if not m:
            i += 1
            continue
        g = m.groups()
        start = _to_seconds(*g[:4])
        end = _to_seconds(*g[4:])
        text_lines = []
        i += 2
        while i < len(lines) and lines[i].strip():
            text_lines.append(lines[i].strip())
            i += 1
        segments.append(TranscriptSegment(start=start, end=end, text=" ".join(text_lines)))
        while i < len(lines) and not lines[i].strip():
            i += 1
    return segments


def parse_transcript(text: str) -> List[TranscriptSegment]:
    """Parse SRT blocks, or timestamped lines when no SRT block is present."""
    lines = text.splitlines()
    segments = _parse_srt(lines)
    if segments:
        logger.debug("Parsed %d SRT segments", len(segments))
        return compact_transcript(segments)

    for raw in lines:
        ts, content = extract_first_timestamp(raw)
        if ts is not None and content.strip():
            segments.append(TranscriptSegment(start=ts, end=None, text=content.strip()))
    logger.debug("Parsed %d timestamped transcript lines", len(segments))
    return compact_transcript(segments)


def align_highlights(
    highlights: Sequence[Highlight],
    segments: Sequence[TranscriptSegment],
    offset: float = 0.0,
    threshold: float = MATCH_THRESHOLD,
) -> List[Highlight]:
    """Shift explicit timestamps by ``offset`` and infer the missing ones.

    A highlight without a timestamp takes the start of its best matching
    segment (plus ``offset``) when the match score reaches ``threshold``; it
    is then flagged ``approximate``. Timestamps are clamped to
    ``[0, MAX_TIMESTAMP]``.
    """
    aligned: List[Highlight] = []
    inferred = 0
    for it in highlights:
        if it.timestamp is not None:
            aligned.append(replace(it, timestamp=clamp(it.timestamp + offset)))
            continue
        if segments:
            match = best_match(it.text, segments)
            if match.accepted(threshold):
                inferred += 1
                aligned.append(replace(it, timestamp=clamp(match.timestamp + offset), approximate=True))
                continue
        aligned.append(it)
    logger.info(
        "Aligned %d highlights: %d with timestamps, %d inferred from transcript",
        len(aligned), sum(1 for a in aligned if a.timestamp is not None), inferred,
    )
    return aligned
