"""
Listening corpus: Common Voice loading and difficulty buckets.

Reads a Common Voice ``validated.tsv`` into plain records and partitions them
into easy / normal / hard buckets by word count.
"""

import csv
import logging
import os
from dataclasses import dataclass
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

EASY = "easy"
NORMAL = "normal"
HARD = "hard"
ALL = "all"
LEVELS = (EASY, NORMAL, HARD)

MIN_WORDS = 3
EASY_MAX_WORDS = 5
HARD_MIN_WORDS = 10


@dataclass(frozen=True)
class CorpusItem:
    """One audio clip and its transcript."""

    audio: str
    sentence: str
    difficulty: str

    @property
    def words(self) -> list:
        return self.sentence.split()


def difficulty_for(word_count: int) -> str:
    if word_count <= EASY_MAX_WORDS:
        return EASY
    if word_count >= HARD_MIN_WORDS:
        return HARD
    return NORMAL


def empty_catalog() -> dict:
    return {level: [] for level in LEVELS}


def build_catalog(records: Optional[Iterable]) -> dict:
    """
    Partition parsed corpus records into difficulty buckets.

    Each record is a mapping with ``audio`` and ``sentence`` keys (``id`` is
    carried along by the loader but not needed here). Records that are not
    mappings, lack either field, or have fewer than MIN_WORDS words are
    skipped. Relative order is kept within each bucket.
    """
    catalog = empty_catalog()
    if not records:
        return catalog
    try:
        rows = list(records)
    except TypeError:
        return catalog

    for row in rows:
        if not isinstance(row, dict):
            continue
        audio, sentence = row.get("audio"), row.get("sentence")
        if not isinstance(audio, str) or not isinstance(sentence, str):
            continue
        words = sentence.split()
        if len(words) < MIN_WORDS:
            continue
        level = difficulty_for(len(words))
        catalog[level].append(CorpusItem(audio=audio, sentence=sentence, difficulty=level))
    return catalog


def pool_for(catalog: dict, level: Optional[str] = None) -> list:
    """Return the items eligible for *level*; ``all`` (or None) is every bucket."""
    key = (level or ALL).strip().lower()
    if key == ALL:
        return [item for lvl in LEVELS for item in catalog.get(lvl, [])]
    return list(catalog.get(key, []))


def catalog_counts(catalog: dict) -> dict:
    return {level: len(catalog.get(level, [])) for level in LEVELS}


def load_common_voice(tsv_path: str, clips_dir: Optional[str] = None) -> list:
    """
    Read a Common Voice TSV file into ``{id, audio, sentence}`` records.

    Only the ``path`` and ``sentence`` columns are used. Quotes carry no
    meaning in these files, so they are read verbatim. Audio paths are joined
    onto *clips_dir*, which defaults to ``clips/`` beside the TSV file.
    Raises OSError if the file cannot be read and UnicodeDecodeError if it is
    not valid UTF-8.
    """
    if clips_dir is None:
        clips_dir = os.path.join(os.path.dirname(os.path.abspath(tsv_path)), "clips")

    records = []
    with open(tsv_path, "r", encoding="utf-8", newline="") as fh:
        reader = csv.DictReader(fh, delimiter="\t", quoting=csv.QUOTE_NONE)
        for idx, row in enumerate(reader):
            clip, sentence = row.get("path"), row.get("sentence")
            if not clip or not sentence:
                continue
            records.append({
                "id": row.get("sentence_id") or str(idx),
                "audio": os.path.join(clips_dir, clip),
                "sentence": sentence,
            })

    logger.info("Read %d records from %s", len(records), tsv_path)
    return records


def load_catalog(tsv_path: str, clips_dir: Optional[str] = None) -> dict:
    """Load and partition the corpus; an unreadable or undecodable file gives an empty catalog."""
    try:
        records = load_common_voice(tsv_path, clips_dir)
    except (OSError, ValueError, csv.Error) as exc:
        logger.error("Failed to load corpus from %s: %s", tsv_path, exc)
        return empty_catalog()
    catalog = build_catalog(records)
    counts = catalog_counts(catalog)
    logger.info("Loaded corpus items: easy=%d, normal=%d, hard=%d",
                counts[EASY], counts[NORMAL], counts[HARD])
    return catalog
