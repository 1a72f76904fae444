"""
Listening quiz session engine.

One quiz item is active at a time for the whole bot. Mistake and hint
counters are tracked per user in a ProgressStore. Every operation returns a
Reply: an ordered list of text and audio parts for the transport to deliver.
"""

import logging
import random
import threading
from dataclasses import dataclass, field
from typing import Optional

from corpus import ALL, CorpusItem, pool_for
from glossary import format_word_info
from hints import hint as ladder_hint
from matching import is_exact_match, partial_overlap

logger = logging.getLogger(__name__)

MAX_MISTAKES = 3

OK = "ok"
EMPTY_POOL = "empty_pool"
NO_SESSION = "no_session"

TEXT = "text"
AUDIO = "audio"

LISTEN_PROMPT = "Listen to the audio and type the sentence!"
NO_SESSION_TEXT = "No active quiz item. Use /cv first."


@dataclass
class Reply:
    status: str = OK
    parts: list = field(default_factory=list)

    def say(self, text: str) -> "Reply":
        self.parts.append((TEXT, text))
        return self

    def play(self, audio: str) -> "Reply":
        self.parts.append((AUDIO, audio))
        return self

    @property
    def texts(self) -> list:
        return [value for kind, value in self.parts if kind == TEXT]

    @property
    def audio(self) -> Optional[str]:
        for kind, value in self.parts:
            if kind == AUDIO:
                return value
        return None

    @property
    def text(self) -> str:
        return "\n".join(self.texts)


class ProgressStore:
    """Per-user mistake counts and hint levels, created lazily."""

    def __init__(self) -> None:
        self._mistakes: dict = {}
        self._hint_levels: dict = {}

    def mistakes(self, user_id) -> int:
        return self._mistakes.get(user_id, 0)

    def add_mistake(self, user_id) -> int:
        self._mistakes[user_id] = self.mistakes(user_id) + 1
        return self._mistakes[user_id]

    def reset_mistakes(self, user_id) -> None:
        self._mistakes[user_id] = 0

    def hint_level(self, user_id) -> int:
        return self._hint_levels.get(user_id, 0)

    def advance_hint(self, user_id) -> int:
        self._hint_levels[user_id] = self.hint_level(user_id) + 1
        return self._hint_levels[user_id]

    def reset_hints(self, user_id) -> None:
        self._hint_levels[user_id] = 0


class QuizEngine:
    """Owns the active item and per-user progress; all calls are serialized."""

    def __init__(self, catalog: dict, rng: Optional[random.Random] = None,
                 glossary: Optional[dict] = None, progress: Optional[ProgressStore] = None) -> None:
        self.catalog = catalog
        self.rng = rng or random.Random()
        self.glossary = glossary or {}
        self.progress = progress or ProgressStore()
        self._active: Optional[CorpusItem] = None
        self._lock = threading.Lock()

    @property
    def active_item(self) -> Optional[CorpusItem]:
        return self._active

    # --- Transitions ---

    def start(self, level: Optional[str] = ALL, user_id=None) -> Reply:
        """
        Pick a new item from *level*'s pool, surfacing any unresolved one first.

        The pool is checked before anything else: an empty pool leaves the
        active item in place and does not reveal its answer.
        """
        level = (level or ALL).strip().lower()
        with self._lock:
            pool = pool_for(self.catalog, level)
            if not pool:
                logger.info("No items for level %r", level)
                return Reply(status=EMPTY_POOL).say(f"No items loaded for level: {level}")

            reply = Reply()
            if self._active is not None:
                reply.say(f"The previous item was unresolved. The answer was: {self._active.sentence}")

            item = self.rng.choice(pool)
            self._active = item
            if user_id is not None:
                self.progress.reset_hints(user_id)
            logger.info("Started %s item (level=%s, user=%s)", item.difficulty, level, user_id)
            return reply.play(item.audio).say(LISTEN_PROMPT)

    def submit(self, user_id, candidate: str) -> Reply:
        with self._lock:
            item = self._active
            if item is None:
                return Reply(status=NO_SESSION).say(NO_SESSION_TEXT)

            if is_exact_match(candidate, item.sentence):
                self.progress.reset_mistakes(user_id)
                self._active = None
                logger.info("User %s solved the item", user_id)
                return Reply().say(self._with_word_info("Correct! 🎉", item))

            matched = partial_overlap(candidate, item.sentence)
            mistakes = self.progress.add_mistake(user_id)
            remaining = max(0, MAX_MISTAKES - mistakes)
            lines = []
            if matched:
                lines.append("Matched words: " + ", ".join(matched))

            if mistakes >= MAX_MISTAKES:
                self.progress.reset_mistakes(user_id)
                self._active = None
                logger.info("User %s ran out of attempts", user_id)
                lines.append(f"Incorrect. No attempts left. The answer was: {item.sentence}")
                return Reply().say(self._with_word_info("\n".join(lines), item))

            if matched:
                lines.append(f"Still incorrect. Attempts left: {remaining}")
            else:
                lines.append(f"Incorrect. Attempts left: {remaining}")
            return Reply().say("\n".join(lines))

    def hint(self, user_id) -> Reply:
        with self._lock:
            item = self._active
            if item is None:
                return Reply(status=NO_SESSION).say(NO_SESSION_TEXT)
            text, closes = ladder_hint(item.sentence, self.progress.hint_level(user_id))
            self.progress.advance_hint(user_id)
            if closes:
                self._active = None
                logger.info("Hint ladder exhausted by user %s", user_id)
            return Reply().say(text)

    def reveal(self, user_id) -> Reply:
        with self._lock:
            item = self._active
            if item is None:
                return Reply(status=NO_SESSION).say(NO_SESSION_TEXT)
            self.progress.reset_mistakes(user_id)
            self.progress.reset_hints(user_id)
            self._active = None
            logger.info("User %s revealed the answer", user_id)
            return Reply().say(self._with_word_info(f"Answer: {item.sentence}", item))

    # --- Helpers ---

    def _with_word_info(self, text: str, item: CorpusItem) -> str:
        if not self.glossary:
            return text
        return f"{text}\n\nWord info:\n{format_word_info(item.sentence, self.glossary)}"
