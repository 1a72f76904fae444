"""Word-info lookup shown alongside revealed answers."""

import json
import logging
import os

logger = logging.getLogger(__name__)

UNKNOWN_MEANING = "unknown"
NO_SYNONYMS = "none"


def load_glossary(filepath: str) -> dict:
    """
    Load ``{word: [meaning, synonyms]}`` from a JSON object.

    Keys are lowercased. A missing file gives an empty glossary; malformed
    entries are skipped with a warning.
    """
    if not filepath or not os.path.isfile(filepath):
        return {}
    with open(filepath, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"{filepath} must contain a JSON object.")

    glossary = {}
    for word, info in data.items():
        if not isinstance(info, list) or len(info) != 2:
            logger.warning("Glossary entry %r is not [meaning, synonyms] -- skipping.", word)
            continue
        glossary[word.lower()] = (str(info[0]), str(info[1]))
    return glossary


def word_info(word: str, glossary: dict) -> tuple:
    return glossary.get(word.lower(), (UNKNOWN_MEANING, NO_SYNONYMS))


def format_word_info(sentence: str, glossary: dict) -> str:
    lines = []
    for word in sentence.split():
        clean = word.rstrip(".,!?")
        meaning, synonyms = word_info(clean, glossary)
        lines.append(f"{clean}: {meaning} ({synonyms})")
    return "\n".join(lines)
