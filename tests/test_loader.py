"""Tests for question pool and answer file loading."""

import json
import logging

import pytest

from adaptquiz.data.loader import DataFormatError, load_answers, load_questions
from adaptquiz.data.schemas import Difficulty, UserAnswer


def _write(path, rows):
    with open(path, "w", encoding="utf-8") as f:
        for row in rows:
            f.write((row if isinstance(row, str) else json.dumps(row)) + "\n")
    return path


class TestLoadQuestions:
    def test_loads_pool(self, pool_file):
        questions = load_questions(pool_file)
        assert len(questions) == 7
        assert questions[0].id == "q-easy-1"
        assert questions[-1].difficulty is Difficulty.UNKNOWN

    def test_max_items(self, pool_file):
        assert len(load_questions(pool_file, max_items=2)) == 2

    def test_rows_without_prompt_skipped(self, tmp_path, caplog):
        path = _write(tmp_path / "q.jsonl", [
            {"id": "a", "prompt": "Kept?"},
            {"id": "b", "prompt": "   "},
            {"id": "c"},
        ])
        with caplog.at_level(logging.INFO):
            questions = load_questions(path)
        assert [q.id for q in questions] == ["a"]
        assert "Skipped 2 rows" in caplog.text

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_questions(tmp_path / "nope.jsonl")

    def test_wrong_suffix(self, tmp_path):
        path = tmp_path / "q.csv"
        path.write_text("id,prompt\n", encoding="utf-8")
        with pytest.raises(DataFormatError, match="Expected .jsonl"):
            load_questions(path)

    def test_missing_id(self, tmp_path):
        path = _write(tmp_path / "q.jsonl", [{"prompt": "no id"}])
        with pytest.raises(DataFormatError, match="Missing required field: id"):
            load_questions(path)

    def test_duplicate_id(self, tmp_path):
        path = _write(tmp_path / "q.jsonl", [{"id": "a", "prompt": "1"}, {"id": "a", "prompt": "2"}])
        with pytest.raises(DataFormatError, match="duplicate"):
            load_questions(path)

    def test_empty_pool(self, tmp_path):
        path = _write(tmp_path / "q.jsonl", [])
        with pytest.raises(DataFormatError, match="empty"):
            load_questions(path)

    def test_invalid_json_line(self, tmp_path):
        path = _write(tmp_path / "q.jsonl", ['{"id": "a", "prompt": "x"}', "{oops"])
        with pytest.raises(json.JSONDecodeError):
            load_questions(path)

    def test_data_format_error_is_value_error(self):
        assert issubclass(DataFormatError, ValueError)

    def test_unrecognized_answer_warns(self, tmp_path, caplog):
        path = _write(tmp_path / "q.jsonl", [{"id": "a", "prompt": "x", "correct_answer": {"foo": 1}}])
        with caplog.at_level(logging.WARNING):
            questions = load_questions(path)
        assert questions[0].correct_answer is None
        assert "ungraded" in caplog.text

    def test_odd_payload_shapes_degrade(self, tmp_path):
        path = _write(tmp_path / "pool.jsonl", [
            {"id": "a", "prompt": "Pick one", "options": ["A", "B"], "correct_answer": 0},
            {"id": "b", "prompt": "Pick again", "options": {"A": 1}, "correct_answer": ["A"], "difficulty": 3},
        ])
        questions = load_questions(path)
        assert [q.id for q in questions] == ["a", "b"]
        assert questions[1].options == ()
        assert questions[1].correct_answer is None
        assert questions[1].difficulty is Difficulty.UNKNOWN


class TestLoadAnswers:
    def test_keyed_by_question_id(self, tmp_path):
        path = _write(tmp_path / "a.jsonl", [
            {"question_id": "q1", "answer": {"selected_option_index": 2}},
            {"question_id": 7, "answer": {"text": "Blue whale"}},
            {"question_id": "q3", "answer": None},
        ])
        answers = load_answers(path)
        assert answers["q1"] == UserAnswer(selected_option_index=2)
        assert answers["7"].text == "Blue whale"
        assert answers["q3"] == UserAnswer()

    def test_answer_must_be_object(self, tmp_path):
        path = _write(tmp_path / "a.jsonl", [{"question_id": "q1", "answer": "B"}])
        with pytest.raises(DataFormatError, match="wrong type"):
            load_answers(path)
