from __future__ import annotations

import argparse
import json
import sys
import uuid
from typing import Callable, List, Optional

from adaptquiz.align.transcript import align_highlights, format_timestamp, parse_highlights, parse_transcript
from adaptquiz.config import AppConfig
from adaptquiz.data.loader import load_answers, load_questions
from adaptquiz.data.schemas import AttemptRecord, Question
from adaptquiz.quiz.evaluator import build_user_answer, evaluate
from adaptquiz.quiz.results import missed_question_ids, summarize_attempts
from adaptquiz.quiz.session import (
    SessionState,
    advance,
    current_question,
    score_percent,
    skip_question,
    start_session,
    submit_answer,
)
from adaptquiz.utils.determinism import set_determinism
from adaptquiz.utils.io import read_text, write_json, write_jsonl
from adaptquiz.utils.logging import setup_logging
from adaptquiz.utils.validation import QUESTION_POOL_SCHEMA, SchemaValidationError, SchemaValidator

QUIT_WORDS = {"q", "quit", "exit"}
SKIP_WORDS = {"s", "skip"}
# Commands typed with this prefix work on every question; bare words only
# where the answer is an option number.
COMMAND_PREFIX = ":"


def _summary_records(records: List[AttemptRecord]) -> list[dict]:
    df = summarize_attempts(records)
    return df.astype(object).where(df.notna(), None).to_dict("records")


def _result_word(correct: Optional[bool]) -> str:
    if correct is True:
        return "Correct"
    if correct is False:
        return "Wrong"
    return "Ungraded"


def _command(raw: str, has_options: bool) -> Optional[str]:
    word = raw.lower()
    if word.startswith(COMMAND_PREFIX):
        word = word[len(COMMAND_PREFIX):]
    elif not has_options:
        return None
    if word in QUIT_WORDS:
        return "quit"
    if word in SKIP_WORDS:
        return "skip"
    return None


def _show_question(q: Question, state: SessionState, out: Callable[[str], None]) -> None:
    out("")
    out(f"Question {state.asked_count}/{state.total_questions} [{q.difficulty.value}]")
    out(q.prompt)
    for i, opt in enumerate(q.options, 1):
        out(f"  {i}. {opt.label}")


def run_interactive_quiz(
    pool: List[Question],
    total_questions: int,
    rng,
    start_difficulty: str = "medium",
    read: Optional[Callable[[str], str]] = None,
    out: Callable[[str], None] = print,
) -> tuple[SessionState, bool]:
    """Drive an adaptive session on a line-based terminal.

    Type a number for option questions and free text otherwise; ":s" skips
    and ":q" quits on any question.

    Returns the final state and whether the user cancelled early.
    """
    read = read or input
    state = start_session(pool, total_questions, rng=rng, start_difficulty=start_difficulty)
    cancelled = False
    while not state.finished:
        q = current_question(state, pool)
        if q is None:
            break
        _show_question(q, state, out)
        while True:
            try:
                raw = read("> ").strip()
            except EOFError:
                raw = ":quit"
            command = _command(raw, bool(q.options))
            if command == "quit":
                cancelled = True
                break
            if command == "skip":
                state, record = skip_question(state, q)
                break
            if q.options:
                if not raw.isdigit() or not 1 <= int(raw) <= len(q.options):
                    out(f"Enter a number between 1 and {len(q.options)}, ':s' to skip or ':q' to quit")
                    continue
                answer = build_user_answer(q, selected_option_index=int(raw) - 1)
            else:
                if not raw:
                    continue
                answer = build_user_answer(q, text=raw)
            state, record = submit_answer(state, q, answer)
            break
        if cancelled:
            break
        out(_result_word(record.is_correct))
        if q.explanation:
            out(q.explanation)
        state = advance(state, pool, rng=rng)
    return state, cancelled


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="adaptquiz CLI - adaptive quiz sessions, grading and highlight alignment",
        epilog="""Examples:
  # Load and preview a question pool
  python -m adaptquiz.cli.main load data/questions.jsonl

  # Take an 8-question adaptive quiz in the terminal
  python -m adaptquiz.cli.main quiz data/questions.jsonl --count 8 --output results/attempts.jsonl

  # Grade a file of answers
  python -m adaptquiz.cli.main grade data/questions.jsonl --answers data/answers.jsonl --output results/grade.json

  # Place highlight notes on a transcript timeline
  python -m adaptquiz.cli.main align --highlights notes.txt --transcript talk.srt --output results/highlights.json
""",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("--config", "-c", default="configs/default.json", help="Path to config JSON (default: configs/default.json)")
    parser.add_argument("--json-logs", action="store_true", help="Emit structured JSON log lines")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    load_parser = subparsers.add_parser("load", help="Load, validate and preview a question pool")
    load_parser.add_argument("path", help="Path to question pool JSONL")

    quiz_parser = subparsers.add_parser("quiz", help="Run an interactive adaptive quiz session")
    quiz_parser.add_argument("path", help="Path to question pool JSONL")
    quiz_parser.add_argument("--count", "-n", type=int, help="Questions per session (default from config)")
    quiz_parser.add_argument("--seed", type=int, help="Random seed (default from config)")
    quiz_parser.add_argument("--output", "-o", help="Write attempt records to this JSONL file")

    grade_parser = subparsers.add_parser("grade", help="Grade a file of answers against a question pool")
    grade_parser.add_argument("path", help="Path to question pool JSONL")
    grade_parser.add_argument("--answers", "-a", required=True, help="JSONL rows of {question_id, answer}")
    grade_parser.add_argument("--attempt-id", default=None, help="Attempt id stamped on records (default: random)")
    grade_parser.add_argument("--output", "-o", help="Output file path for results (JSON format)")

    align_parser = subparsers.add_parser("align", help="Align highlight notes with a transcript")
    align_parser.add_argument("--highlights", required=True, help="Text file with one highlight per line")
    align_parser.add_argument("--transcript", help="SRT or timestamped-lines transcript")
    align_parser.add_argument("--offset", type=float, help="Seconds added to every timestamp (default from config)")
    align_parser.add_argument("--output", "-o", help="Output file path for results (JSON format)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    try:
        cfg = AppConfig.from_json(args.config)
    except FileNotFoundError:
        print(f"Error: Config file '{args.config}' not found")
        return 1
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON format in '{args.config}': {e}")
        return 1
    except TypeError as e:
        print(f"Error: Unknown setting in '{args.config}': {e}")
        return 1

    logger = setup_logging(
        cfg.logging.log_dir,
        cfg.logging.filename,
        cfg.logging.level,
        structured=args.json_logs or cfg.logging.structured,
    )

    try:
        if args.command == "load":
            SchemaValidator(QUESTION_POOL_SCHEMA).validate_file(args.path)
            pool = load_questions(args.path)
            logger.info("Loaded %d questions from %s", len(pool), args.path)
            for q in pool[:3]:
                logger.info(
                    "%s | %s | %s | options=%d | difficulty=%s",
                    q.id, q.prompt[:50].replace("\n", " "), q.kind.value, len(q.options), q.difficulty.value,
                )
            return 0

        elif args.command == "quiz":
            count = args.count if args.count is not None else cfg.quiz.total_questions
            if cfg.quiz.session_lengths and count not in cfg.quiz.session_lengths:
                print(f"Error: --count must be one of {cfg.quiz.session_lengths}")
                return 1
            seed = args.seed if args.seed is not None else cfg.determinism.seed
            rng = set_determinism(seed, python_hash_seed=cfg.determinism.python_hash_seed)
            pool = load_questions(args.path)
            state, cancelled = run_interactive_quiz(pool, count, rng, cfg.quiz.start_difficulty)
            pct = score_percent(state, cancelled=cancelled)
            print("")
            out_of = max(1, state.asked_count) if cancelled else state.total_questions
            print(f"Score: {state.correct_count} / {out_of} ({round(pct)}%)")
            logger.info(
                "Session %s %s with score %.1f%%",
                state.attempt_id, "cancelled" if cancelled else "completed", pct,
            )
            if args.output:
                write_jsonl(args.output, [r.to_dict() for r in state.records])
                logger.info("Wrote %d attempt records to %s", len(state.records), args.output)
            return 0

        elif args.command == "grade":
            pool = load_questions(args.path)
            answers = load_answers(args.answers)
            by_id = {q.id: q for q in pool}
            attempt_id = args.attempt_id or str(uuid.uuid4())
            records: List[AttemptRecord] = []
            for qid, answer in answers.items():
                q = by_id.get(qid)
                if q is None:
                    logger.warning("Answer for unknown question %s ignored", qid)
                    continue
                correct = evaluate(q, answer)
                records.append(AttemptRecord(
                    attempt_id=attempt_id,
                    question_id=qid,
                    user_answer=answer.to_dict(),
                    is_correct=correct,
                    score=1 if correct else 0,
                    difficulty=q.difficulty,
                ))
            summary = summarize_attempts(records)
            print(summary.to_string(index=False))
            correct_total = sum(r.score for r in records)
            result = {
                "attempt_id": attempt_id,
                "score_percent": correct_total / len(records) * 100 if records else 0.0,
                "records": [r.to_dict() for r in records],
                "summary": _summary_records(records),
                "missed": missed_question_ids(records),
            }
            logger.info("Graded %d answers: %d correct", len(records), correct_total)
            if args.output:
                write_json(args.output, result)
                logger.info("Results written to %s", args.output)
            return 0

        elif args.command == "align":
            highlights = parse_highlights(read_text(args.highlights), source="file")
            segments = parse_transcript(read_text(args.transcript)) if args.transcript else []
            offset = args.offset if args.offset is not None else cfg.alignment.offset_seconds
            aligned = align_highlights(highlights, segments, offset=offset, threshold=cfg.alignment.threshold)
            if not segments:
                print("Highlights without timestamps stay unaligned; add a transcript to place them.")
            rows = [
                {
                    "id": h.id,
                    "text": h.text,
                    "timestamp": h.timestamp,
                    "display": format_timestamp(h.timestamp),
                    "approximate": h.approximate,
                }
                for h in aligned
            ]
            for row in rows:
                marker = "~" if row["approximate"] else " "
                print(f"{marker}{row['display'] or '--:--':>9}  {row['text']}")
            if args.output:
                write_json(args.output, {"segments": len(segments), "highlights": rows})
                logger.info("Results written to %s", args.output)
            return 0

    except FileNotFoundError as e:
        print(f"Error: {e}")
        logger.error("FileNotFoundError: %s", e)
        return 1
    except SchemaValidationError as e:
        print(f"Error: {e}")
        for err in e.errors[:10]:
            print(f"  - {err}")
        logger.error("SchemaValidationError: %s", e)
        return 1
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON format - {e}")
        logger.error("JSONDecodeError: %s", e, exc_info=True)
        return 1
    except ValueError as e:
        print(f"Error: Invalid data format - {e}")
        logger.error("ValueError: %s", e, exc_info=True)
        return 1

    return 1


if __name__ == "__main__":
    sys.exit(main())
