from __future__ import annotations

import random

from corpus import build_catalog
from quiz_engine import QuizEngine


def make_engine(*sentences: str, seed: int = 0, glossary: dict | None = None) -> QuizEngine:
    """Engine over a catalog built from the given sentences."""
    records = [{"id": str(i), "audio": f"clip{i}.mp3", "sentence": s} for i, s in enumerate(sentences)]
    return QuizEngine(build_catalog(records), rng=random.Random(seed), glossary=glossary)
