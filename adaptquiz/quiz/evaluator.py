"""Answer evaluation across choice, true/false and free-text questions.

``evaluate`` answers ``True``/``False`` when correctness can be decided and
``None`` when the stored correct answer has a shape that does not fit the
question. Callers treat ``None`` as ungraded, not as an error.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping, Optional, Union

from ..data.schemas import (
    ByIndex,
    ByLabel,
    ByText,
    ByValue,
    Literal,
    Question,
    QuestionKind,
    UserAnswer,
    scalar_text,
)

logger = logging.getLogger(__name__)

_WS = re.compile(r"\s+")

TRUTHY_WORDS = {"true", "t", "1", "yes", "y"}


def normalize_text(value: Any) -> str:
    """Trim, collapse internal whitespace to single spaces, lowercase."""
    return _WS.sub(" ", scalar_text(value).strip()).lower()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _same_value(a: Any, b: Any) -> bool:
    # Strict equality; True must not equal 1.
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    return a == b


def _evaluate_choice(question: Question, answer: UserAnswer) -> Optional[bool]:
    user_index = answer.selected_option_index
    if user_index is None:
        # Choice questions without a selection count as wrong.
        return False

    ca = question.correct_answer
    option = question.option_at(user_index)
    user_value = option.value if option is not None else None
    user_label = option.label if option is not None else ""

    if isinstance(ca, Literal):
        if _is_number(ca.value):
            return user_index == ca.value
        if option is not None and _same_value(user_value, ca.value):
            return True
        return normalize_text(user_label) == normalize_text(ca.value)
    if isinstance(ca, ByIndex):
        return user_index == ca.index
    if isinstance(ca, ByValue):
        return option is not None and _same_value(user_value, ca.value)
    if isinstance(ca, ByLabel):
        return normalize_text(user_label) == normalize_text(ca.label)
    return None


def _evaluate_boolean(question: Question, answer: UserAnswer) -> Optional[bool]:
    ca = question.correct_answer
    if not isinstance(ca, Literal):
        return None
    if isinstance(ca.value, bool) and isinstance(answer.value, bool):
        return answer.value == ca.value
    return normalize_text(answer.value) == normalize_text(ca.value)


def _evaluate_text(question: Question, answer: UserAnswer) -> Optional[bool]:
    ca = question.correct_answer
    user_text = normalize_text(answer.text)
    if isinstance(ca, Literal):
        expected = ca.value
    elif isinstance(ca, ByText):
        expected = ca.text
    else:
        return None
    return user_text != "" and user_text == normalize_text(expected)


def evaluate(
    question: Question,
    user_answer: Union[UserAnswer, Mapping[str, Any], None],
) -> Optional[bool]:
    """Decide whether ``user_answer`` is correct for ``question``.

    Returns:
        True or False when gradable, None when the correct-answer shape is
        not recognized for this kind of question
    """
    if user_answer is None:
        answer = UserAnswer()
    elif isinstance(user_answer, UserAnswer):
        answer = user_answer
    else:
        answer = UserAnswer.from_dict(user_answer)

    if question.kind is QuestionKind.CHOICE:
        result = _evaluate_choice(question, answer)
    elif question.kind is QuestionKind.BOOLEAN:
        result = _evaluate_boolean(question, answer)
    else:
        result = _evaluate_text(question, answer)

    if result is None:
        logger.debug("Question %s is ungraded: correct answer shape not recognized", question.id)
    return result


def build_user_answer(
    question: Question,
    selected_option_index: Optional[int] = None,
    text: str = "",
) -> UserAnswer:
    """Shape raw input into the answer form the question expects.

    Questions with options take the selected index (and its option value).
    True/false questions parse ``text`` into a boolean. Everything else keeps
    the text.
    """
    if question.options:
        option = question.option_at(selected_option_index) if selected_option_index is not None else None
        return UserAnswer(
            selected_option_index=selected_option_index,
            value=option.value if option is not None else None,
        )
    if question.kind is QuestionKind.BOOLEAN:
        return UserAnswer(value=normalize_text(text) in TRUTHY_WORDS, text=text)
    return UserAnswer(text=text)
