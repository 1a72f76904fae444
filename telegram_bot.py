#!/usr/bin/env python3
"""
Listening Quiz - Telegram Bot

Plays a Common Voice clip, lets the chat type what they heard, and scores
attempts with partial matches, hints and a three-strike reveal.
"""

import asyncio
import logging
import sys

from telegram import Update
from telegram.ext import Application, CommandHandler, ContextTypes, MessageHandler, filters

from config import ConfigError, load_config
from corpus import ALL, LEVELS, catalog_counts, load_catalog
from glossary import load_glossary
from quiz_engine import AUDIO, NO_SESSION, QuizEngine, Reply
from scheduler import run_daily
from trivia import format_daily_question, load_questions, pick_daily_question

logger = logging.getLogger(__name__)

AUDIO_FILENAME = "listening.mp3"
AUDIO_ERROR_TEXT = "Error opening audio file"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

HELP_TEXT = (
    "🎧 Listening quiz\n\n"
    "/cv [easy|normal|hard|all] - play a new clip\n"
    "/hint - get a hint (each one reveals more)\n"
    "/answer - show the answer\n"
    "/today - question of the day\n\n"
    "Type what you hear as a normal message. Three wrong tries reveal the answer."
)


# --- Delivery ---

async def deliver(bot, chat_id: int, reply: Reply) -> None:
    """Send reply parts in order. A clip that cannot be opened stops the reply."""
    for kind, value in reply.parts:
        if kind == AUDIO:
            try:
                with open(value, "rb") as fh:
                    await bot.send_audio(chat_id=chat_id, audio=fh, filename=AUDIO_FILENAME)
            except OSError as exc:
                logger.warning("Cannot open audio %s: %s", value, exc)
                await bot.send_message(chat_id=chat_id, text=AUDIO_ERROR_TEXT)
                return
        else:
            await bot.send_message(chat_id=chat_id, text=value)


def engine_of(context: ContextTypes.DEFAULT_TYPE) -> QuizEngine:
    return context.bot_data["engine"]


# --- Command handlers ---

async def cmd_help(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.effective_message.reply_text(HELP_TEXT)


async def cmd_ping(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.effective_message.reply_text("pong")


async def cmd_cv(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    level = context.args[0] if context.args else ALL
    reply = engine_of(context).start(level, update.effective_user.id)
    await deliver(context.bot, update.effective_chat.id, reply)


async def cmd_hint(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    reply = engine_of(context).hint(update.effective_user.id)
    await deliver(context.bot, update.effective_chat.id, reply)


async def cmd_answer(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    reply = engine_of(context).reveal(update.effective_user.id)
    await deliver(context.bot, update.effective_chat.id, reply)


async def cmd_today(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    q = pick_daily_question(context.bot_data.get("questions", []))
    if q is None:
        await update.effective_message.reply_text("No questions of the day are loaded.")
        return
    await update.effective_message.reply_text(format_daily_question(q))


async def message_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    reply = engine_of(context).submit(update.effective_user.id, update.effective_message.text)
    # Plain chatter with no clip playing gets no answer.
    if reply.status == NO_SESSION:
        return
    await deliver(context.bot, update.effective_chat.id, reply)


async def on_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    logger.exception("Unhandled error while processing an update", exc_info=context.error)


# --- Daily prompt ---

async def post_init(application: Application) -> None:
    config = application.bot_data["config"]
    if config.daily_chat_id is None:
        logger.info("DAILY_CHAT_ID not set -- daily prompt disabled.")
        return

    async def fire() -> None:
        reply = application.bot_data["engine"].start(ALL)
        await deliver(application.bot, config.daily_chat_id, reply)

    application.bot_data["daily_task"] = asyncio.create_task(run_daily(config.daily_time, fire))


async def post_shutdown(application: Application) -> None:
    task = application.bot_data.get("daily_task")
    if task is None:
        return
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass


# --- Startup ---

def load_optional(loader, filepath: str, default):
    """Run a data loader, logging failures and falling back to *default*."""
    try:
        return loader(filepath)
    except (OSError, ValueError) as exc:
        logger.error("Failed to load %s: %s", filepath, exc)
        return default


def build_application(config) -> Application:
    catalog = load_catalog(config.corpus_tsv, config.clips_dir)
    glossary = load_optional(load_glossary, config.glossary_file, {})
    questions = load_optional(load_questions, config.questions_file, [])

    app = Application.builder().token(config.token).post_init(post_init).post_shutdown(post_shutdown).build()
    app.bot_data["config"] = config
    app.bot_data["engine"] = QuizEngine(catalog, glossary=glossary)
    app.bot_data["questions"] = questions

    app.add_handler(CommandHandler(["start", "help"], cmd_help))
    app.add_handler(CommandHandler("ping", cmd_ping))
    app.add_handler(CommandHandler("cv", cmd_cv))
    app.add_handler(CommandHandler("hint", cmd_hint))
    app.add_handler(CommandHandler("answer", cmd_answer))
    app.add_handler(CommandHandler("today", cmd_today))
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, message_handler))
    app.add_error_handler(on_error)
    return app


def main() -> None:
    try:
        config = load_config()
    except ConfigError as exc:
        print(f"ERROR: {exc}")
        sys.exit(1)

    logging.basicConfig(level=config.log_level, format=LOG_FORMAT)
    app = build_application(config)
    counts = catalog_counts(app.bot_data["engine"].catalog)
    print("Loaded clips: " + ", ".join(f"{level}={counts[level]}" for level in LEVELS))
    print("Bot is running. Press Ctrl+C to stop.")
    app.run_polling(drop_pending_updates=True)


if __name__ == "__main__":
    main()
