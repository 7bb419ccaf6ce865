from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List


def _env_int(name: str, default: int) -> int:
    val = os.getenv(name)
    return int(val) if val else default


@dataclass
class LoggingConfig:
    level: str = field(default_factory=lambda: os.getenv("ADAPTQUIZ_LOG_LEVEL", "INFO"))
    log_dir: str = field(default_factory=lambda: os.getenv("ADAPTQUIZ_LOG_DIR", "logs"))
    filename: str = "adaptquiz.log"
    structured: bool = False

    def file_path(self) -> Path:
        return Path(self.log_dir) / self.filename


@dataclass
class DeterminismConfig:
    seed: int = field(default_factory=lambda: _env_int("ADAPTQUIZ_SEED", 42))
    python_hash_seed: int = 0


@dataclass
class QuizConfig:
    """Adaptive session settings."""

    total_questions: int = 8
    session_lengths: List[int] = field(default_factory=lambda: [5, 8, 12])
    start_difficulty: str = "medium"


@dataclass
class AlignmentConfig:
    """Highlight alignment settings."""

    threshold: float = 0.18
    offset_seconds: float = 0.0


@dataclass
class AppConfig:
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    determinism: DeterminismConfig = field(default_factory=DeterminismConfig)
    quiz: QuizConfig = field(default_factory=QuizConfig)
    alignment: AlignmentConfig = field(default_factory=AlignmentConfig)

    @staticmethod
    def from_dict(payload: dict) -> "AppConfig":
        return AppConfig(
            logging=LoggingConfig(**payload.get("logging", {})),
            determinism=DeterminismConfig(**payload.get("determinism", {})),
            quiz=QuizConfig(**payload.get("quiz", {})),
            alignment=AlignmentConfig(**payload.get("alignment", {})),
        )

    @staticmethod
    def from_json(path: str | Path) -> "AppConfig":
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
        return AppConfig.from_dict(payload)

    def to_json(self, path: str | Path) -> None:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        with open(p, "w", encoding="utf-8") as f:
            json.dump(asdict(self), f, indent=2, ensure_ascii=False)


# Provide safe defaults via a factory function for top-level config
def default_app_config() -> AppConfig:
    return AppConfig()
