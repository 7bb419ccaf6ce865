from __future__ import annotations

import os
import random

np = None  # lazy import


def set_determinism(seed: int = 42, python_hash_seed: int = 0) -> random.Random:
    """Seed Python ``random`` and NumPy, and return a dedicated generator.

    The returned ``random.Random`` is what session code should be handed so
    picks are reproducible without relying on global state.
    """
    os.environ["PYTHONHASHSEED"] = str(python_hash_seed)

    random.seed(seed)
    global np
    if np is None:
        import numpy as _np

        np = _np
    np.random.seed(seed)
    return random.Random(seed)
