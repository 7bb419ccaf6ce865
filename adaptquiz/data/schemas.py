"""Data schemas for adaptquiz.

Questions are classified once, when they enter the package: the free-form
difficulty and question-type strings become enums and the loosely shaped
``correct_answer`` payload becomes one of the ``CorrectAnswer`` variants.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    UNKNOWN = "unknown"


class QuestionKind(str, Enum):
    CHOICE = "choice"
    BOOLEAN = "boolean"
    TEXT = "text"


def normalize_difficulty(label: Any) -> Difficulty:
    """Map a free-text difficulty label onto a difficulty bucket.

    Single letters only count as a whole value ("e", "m", "h").
    """
    if isinstance(label, Difficulty):
        return label
    if not label:
        return Difficulty.UNKNOWN
    v = str(label).strip().lower()
    if "easy" in v or v == "e":
        return Difficulty.EASY
    if "medium" in v or "normal" in v or v == "m":
        return Difficulty.MEDIUM
    if "hard" in v or "difficult" in v or v == "h":
        return Difficulty.HARD
    return Difficulty.UNKNOWN


def scalar_text(val: Any) -> str:
    """Stringify a scalar the way it is displayed to users."""
    if val is None:
        return ""
    if isinstance(val, bool):
        return "true" if val else "false"
    if isinstance(val, float) and math.isfinite(val) and val.is_integer():
        return str(int(val))
    return str(val)


def is_scalar(val: Any) -> bool:
    return isinstance(val, (str, bool, int, float))


def to_label(val: Any) -> str:
    """Reduce an option descriptor to its display label."""
    if val is None:
        return ""
    if is_scalar(val):
        return scalar_text(val)
    if isinstance(val, Mapping):
        if isinstance(val.get("label"), str):
            return val["label"]
        if isinstance(val.get("text"), str):
            return val["text"]
    try:
        return json.dumps(val, ensure_ascii=False, sort_keys=True)
    except (TypeError, ValueError):
        return str(val)


@dataclass(frozen=True)
class Option:
    label: str
    value: Any


def sanitize_options(options: Any) -> Tuple[Option, ...]:
    """Turn a stored options payload into an ordered tuple of ``Option``.

    Anything that is not a list yields no options. A missing option value
    falls back to its position.
    """
    if not isinstance(options, (list, tuple)):
        return ()
    return tuple(
        Option(label=to_label(opt), value=opt if opt is not None else idx)
        for idx, opt in enumerate(options)
    )


# Correct-answer variants


@dataclass(frozen=True)
class Literal:
    """A bare scalar answer (string, boolean or number)."""
    value: Union[str, bool, int, float]


@dataclass(frozen=True)
class ByIndex:
    index: Union[int, float]


@dataclass(frozen=True)
class ByValue:
    value: Any


@dataclass(frozen=True)
class ByLabel:
    label: Any


@dataclass(frozen=True)
class ByText:
    text: str


CorrectAnswer = Union[Literal, ByIndex, ByValue, ByLabel, ByText]


def parse_correct_answer(raw: Any, kind: Optional[QuestionKind] = None) -> Optional[CorrectAnswer]:
    """Classify a stored correct-answer payload.

    Returns ``None`` when the shape is not recognized. Objects are matched on
    the first recognized key, in the order index, value, label, text; for
    text questions a string ``text`` key is taken first.
    """
    if raw is None:
        return None
    if is_scalar(raw):
        return Literal(raw)
    if isinstance(raw, Mapping):
        if kind is QuestionKind.TEXT and isinstance(raw.get("text"), str):
            return ByText(raw["text"])
        idx = raw.get("index")
        if isinstance(idx, (int, float)) and not isinstance(idx, bool):
            return ByIndex(idx)
        if "value" in raw:
            return ByValue(raw["value"])
        if "label" in raw:
            return ByLabel(raw["label"])
        if isinstance(raw.get("text"), str):
            return ByText(raw["text"])
    return None


def classify_question_type(question_type: Optional[str], options: Tuple[Option, ...]) -> QuestionKind:
    t = (question_type or "").lower()
    if "choice" in t or (options and "short" not in t):
        return QuestionKind.CHOICE
    if "true" in t or "boolean" in t:
        return QuestionKind.BOOLEAN
    return QuestionKind.TEXT


@dataclass(frozen=True)
class Question:
    """Question as consumed by the picker and the evaluator."""
    id: str
    question_type: str = ""
    kind: QuestionKind = QuestionKind.TEXT
    difficulty: Difficulty = Difficulty.UNKNOWN
    options: Tuple[Option, ...] = ()
    correct_answer: Optional[CorrectAnswer] = None
    prompt: str = ""
    explanation: Optional[str] = None

    @classmethod
    def from_record(cls, row: Mapping[str, Any]) -> "Question":
        """Build a question from a stored row (``type`` is accepted for ``question_type``)."""
        qtype = str(row.get("question_type", row.get("type")) or "")
        options = sanitize_options(row.get("options"))
        kind = classify_question_type(qtype, options)
        return cls(
            id=str(row.get("id", "")),
            question_type=qtype,
            kind=kind,
            difficulty=normalize_difficulty(row.get("difficulty")),
            options=options,
            correct_answer=parse_correct_answer(row.get("correct_answer"), kind),
            prompt=str(row.get("prompt") or ""),
            explanation=row.get("explanation"),
        )

    def option_at(self, index: int) -> Optional[Option]:
        if 0 <= index < len(self.options):
            return self.options[index]
        return None


@dataclass(frozen=True)
class UserAnswer:
    """A submitted answer; which field is set depends on the question kind."""
    selected_option_index: Optional[int] = None
    value: Any = None
    text: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "UserAnswer":
        idx = payload.get("selected_option_index", payload.get("selectedOptionIndex"))
        if isinstance(idx, bool) or not isinstance(idx, int):
            idx = None
        return cls(selected_option_index=idx, value=payload.get("value"), text=payload.get("text"))

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.selected_option_index is not None:
            out["selected_option_index"] = self.selected_option_index
        if self.value is not None:
            out["value"] = self.value
        if self.text is not None:
            out["text"] = self.text
        return out


@dataclass(frozen=True)
class TranscriptSegment:
    start: float
    end: Optional[float] = None
    text: str = ""
    speaker: Optional[str] = None


@dataclass(frozen=True)
class Highlight:
    id: str
    text: str
    timestamp: Optional[float] = None
    source: str = "paste"  # file | paste | manual
    approximate: bool = False


@dataclass(frozen=True)
class AttemptRecord:
    """One graded question attempt, shaped for the external data store."""
    attempt_id: str
    question_id: str
    user_answer: Optional[Dict[str, Any]]
    is_correct: Optional[bool]
    score: int
    difficulty: Difficulty = Difficulty.UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        return {
            "quiz_attempt_id": self.attempt_id,
            "question_id": self.question_id,
            "user_answer": self.user_answer,
            "is_correct": self.is_correct,
            "score": self.score,
            "difficulty": self.difficulty.value,
        }
