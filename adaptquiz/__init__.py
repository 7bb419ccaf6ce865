"""adaptquiz package.

Adaptive quiz question selection and grading, and highlight/transcript
alignment, as plain in-memory functions.
"""

from .align import align_highlights, best_match
from .config import AppConfig, default_app_config
from .data import Question, load_questions
from .quiz import evaluate, pick_next, start_session
from .utils import set_determinism, setup_logging

__all__ = [
    "__version__",
    "AppConfig",
    "default_app_config",
    "Question",
    "load_questions",
    "pick_next",
    "evaluate",
    "start_session",
    "best_match",
    "align_highlights",
    "setup_logging",
    "set_determinism",
]

__version__ = "0.1.0"
