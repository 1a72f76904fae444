"""Static question-of-the-day list."""

import json
import logging
import os
import random
from typing import Optional

logger = logging.getLogger(__name__)


def load_questions(filepath: str) -> list:
    """
    Load trivia questions from a JSON array.

    A missing file means the feature is off and gives an empty list.
    Entries without a ``question`` string are skipped.
    """
    if not os.path.isfile(filepath):
        logger.info("No questions file at %s -- /today disabled.", filepath)
        return []
    with open(filepath, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, list):
        raise ValueError(f"{filepath} must contain a JSON array.")

    valid = []
    for idx, q in enumerate(data):
        if not isinstance(q, dict) or not isinstance(q.get("question"), str):
            logger.warning("Question #%d has no question text -- skipping.", idx + 1)
            continue
        valid.append(q)
    return valid


def pick_daily_question(questions: list, rng: Optional[random.Random] = None) -> Optional[dict]:
    if not questions:
        return None
    return (rng or random).choice(questions)


def format_daily_question(q: dict) -> str:
    msg = "📘 Question of the day\n" + q["question"]
    choices = q.get("choices") or []
    if q.get("type") == "vocab" and choices:
        for i, choice in enumerate(choices):
            msg += f"\n{chr(ord('A') + i)}. {choice}"
    return msg
