"""Bot configuration from environment variables (and ``.env``)."""

import datetime
import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from scheduler import parse_time_of_day

DEFAULT_CORPUS_TSV = os.path.join("cv-corpus", "validated.tsv")
DEFAULT_QUESTIONS_FILE = "questions.json"
DEFAULT_GLOSSARY_FILE = "glossary.json"
DEFAULT_DAILY_TIME = "09:00"


class ConfigError(Exception):
    """Raised when required settings are missing or malformed."""


@dataclass(frozen=True)
class BotConfig:
    token: str
    corpus_tsv: str
    clips_dir: Optional[str]
    questions_file: str
    glossary_file: str
    daily_chat_id: Optional[int]
    daily_time: datetime.time
    log_level: str


def load_config(environ: Optional[dict] = None) -> BotConfig:
    """
    Build a BotConfig from *environ* (default: ``os.environ`` after loading
    ``.env``). Only TELEGRAM_TOKEN is required.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    token = environ.get("TELEGRAM_TOKEN", "").strip()
    if not token:
        raise ConfigError("TELEGRAM_TOKEN environment variable is not set.")

    chat_raw = environ.get("DAILY_CHAT_ID", "").strip()
    daily_chat_id = None
    if chat_raw:
        try:
            daily_chat_id = int(chat_raw)
        except ValueError:
            raise ConfigError(f"DAILY_CHAT_ID must be a numeric chat id, got {chat_raw!r}") from None

    try:
        daily_time = parse_time_of_day(environ.get("DAILY_TIME", DEFAULT_DAILY_TIME))
    except ValueError as exc:
        raise ConfigError(f"DAILY_TIME: {exc}") from None

    log_level = environ.get("LOG_LEVEL", "INFO").strip().upper()
    # getLevelName maps a known name to its number and anything else to a string.
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(f"LOG_LEVEL: unknown logging level {log_level!r}")

    return BotConfig(
        token=token,
        corpus_tsv=environ.get("CORPUS_TSV", DEFAULT_CORPUS_TSV),
        clips_dir=environ.get("CLIPS_DIR") or None,
        questions_file=environ.get("QUESTIONS_FILE", DEFAULT_QUESTIONS_FILE),
        glossary_file=environ.get("GLOSSARY_FILE", DEFAULT_GLOSSARY_FILE),
        daily_chat_id=daily_chat_id,
        daily_time=daily_time,
        log_level=log_level,
    )
