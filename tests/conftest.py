from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from adaptquiz.data.schemas import Question  # noqa: E402
from adaptquiz.utils.logging import reset_logging  # noqa: E402


# ====================
# Question Pool Fixtures
# ====================

@pytest.fixture
def pool_rows() -> List[Dict[str, Any]]:
    """Raw question rows covering every difficulty bucket and question kind."""
    return [
        {
            "id": "q-easy-1",
            "question_type": "multiple_choice",
            "prompt": "What is the capital of France?",
            "options": ["Paris", "Lyon", "Nice"],
            "correct_answer": "paris",
            "difficulty": "Easy",
            "explanation": "Paris has been the capital since 987.",
        },
        {
            "id": "q-easy-2",
            "question_type": "true_false",
            "prompt": "Water boils at 100 C at sea level.",
            "correct_answer": True,
            "difficulty": "e",
        },
        {
            "id": "q-med-1",
            "question_type": "multiple_choice",
            "prompt": "Which number is prime?",
            "options": ["4", "6", "7"],
            "correct_answer": 2,
            "difficulty": "medium",
        },
        {
            "id": "q-med-2",
            "question_type": "short_answer",
            "prompt": "Largest animal on Earth?",
            "correct_answer": "  Blue Whale ",
            "difficulty": "Normal",
        },
        {
            "id": "q-hard-1",
            "question_type": "multiple_choice",
            "prompt": "Pick the noble gas.",
            "options": ["Neon", "Sodium"],
            "correct_answer": {"value": "Neon"},
            "difficulty": "Hard",
        },
        {
            "id": "q-hard-2",
            "question_type": "short_answer",
            "prompt": "Chemical symbol for gold?",
            "correct_answer": {"text": "Au"},
            "difficulty": "very difficult",
        },
        {
            "id": "q-unknown-1",
            "question_type": "short_answer",
            "prompt": "Name a primary colour.",
            "correct_answer": "red",
            "difficulty": None,
        },
    ]


@pytest.fixture
def pool(pool_rows) -> List[Question]:
    return [Question.from_record(r) for r in pool_rows]


@pytest.fixture
def pool_file(tmp_path, pool_rows) -> Path:
    path = tmp_path / "questions.jsonl"
    with open(path, "w", encoding="utf-8") as f:
        for row in pool_rows:
            f.write(json.dumps(row) + "\n")
    return path


@pytest.fixture
def config_file(tmp_path) -> Path:
    """Config that keeps log files inside the test's temp directory."""
    path = tmp_path / "config.json"
    payload = {
        "logging": {"level": "INFO", "log_dir": str(tmp_path / "logs"), "filename": "test.log"},
        "determinism": {"seed": 7, "python_hash_seed": 0},
        "quiz": {"total_questions": 3, "session_lengths": [3, 5], "start_difficulty": "medium"},
        "alignment": {"threshold": 0.18, "offset_seconds": 0.0},
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    yield
    reset_logging()
