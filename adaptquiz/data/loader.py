"""Data loading utilities for adaptquiz."""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from .schemas import Question, UserAnswer
from ..utils.io import read_jsonl
from ..utils.logging_config import log_performance
from ..utils.validation import ANSWER_FILE_SCHEMA, QUESTION_POOL_SCHEMA, SchemaValidator

logger = logging.getLogger(__name__)


class DataFormatError(ValueError):
    """Raised when a question pool or answer file is malformed."""
    pass


def _check_path(filepath: Path) -> None:
    if not filepath.exists():
        raise FileNotFoundError(f"Dataset file not found: {filepath}")
    if not filepath.is_file():
        raise DataFormatError(f"Path is not a file: {filepath}")
    if filepath.suffix not in {".jsonl", ".json"}:
        raise DataFormatError(f"Expected .jsonl or .json file, got: {filepath.suffix}")


@log_performance()
def load_questions(
    path: Union[str, Path],
    max_items: Optional[int] = None,
) -> List[Question]:
    """Load a question pool from a JSONL file.

    Rows without a prompt are skipped. Difficulty, question kind and the
    correct-answer shape are classified here, once.

    Args:
        path: Path to JSONL file
        max_items: Optional limit on number of questions to load

    Returns:
        List of Question objects

    Raises:
        FileNotFoundError: If file doesn't exist
        DataFormatError: If a row is malformed or the pool is empty
    """
    filepath = Path(path).resolve()
    _check_path(filepath)

    validator = SchemaValidator(QUESTION_POOL_SCHEMA)
    questions: List[Question] = []
    seen_ids = set()
    skipped = 0
    for line_no, row in enumerate(read_jsonl(filepath), 1):
        errors = validator.validate_record(row)
        if errors:
            raise DataFormatError(f"Row {line_no} in {filepath.name}: {'; '.join(errors)}")

        question = Question.from_record(row)
        if not question.prompt.strip():
            skipped += 1
            continue
        if question.id in seen_ids:
            raise DataFormatError(f"Row {line_no} in {filepath.name}: duplicate question id {question.id}")
        seen_ids.add(question.id)
        if question.correct_answer is None:
            logger.warning("Question %s has an unrecognized correct_answer; it will be ungraded", question.id)
        questions.append(question)

        if max_items is not None and len(questions) >= max_items:
            break

    if skipped:
        logger.info("Skipped %d rows without a prompt", skipped)
    if not questions:
        raise DataFormatError(f"Dataset is empty or no valid rows found in {filepath}")
    return questions


def load_answers(path: Union[str, Path]) -> Dict[str, UserAnswer]:
    """Load ``{question_id, answer}`` rows keyed by question id.

    A row with a null answer maps to an empty ``UserAnswer``.
    """
    filepath = Path(path).resolve()
    _check_path(filepath)

    validator = SchemaValidator(ANSWER_FILE_SCHEMA)
    answers: Dict[str, UserAnswer] = {}
    for line_no, row in enumerate(read_jsonl(filepath), 1):
        errors = validator.validate_record(row)
        if errors:
            raise DataFormatError(f"Row {line_no} in {filepath.name}: {'; '.join(errors)}")
        payload = row.get("answer") or {}
        answers[str(row["question_id"])] = UserAnswer.from_dict(payload)
    return answers
