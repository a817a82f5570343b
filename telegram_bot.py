# ---------------- TELEGRAM BOT (Expense Relay) ----------------
import asyncio
import logging
import sys
from datetime import datetime

import requests
from telegram import Update
from telegram.ext import (
    ApplicationBuilder,
    CommandHandler,
    MessageHandler,
    ContextTypes,
    filters
)

# ---------------- IMPORTS ----------------
from config import load_env, load_settings
from errors import ConfigError, ExpenseBotError
from expense_parser import parse_line, split_lines
from expense_recorder import record_expense
from reply_composer import Failure, Success, compose_reply_groups, help_message

logger = logging.getLogger(__name__)


# ---------------- PIPELINE ----------------
def process_line(index, line, settings, session=None):
    """Parse, normalize and record one line. Never raises line-scoped errors."""
    try:
        record = parse_line(line, index).to_record()
        record_expense(settings, record, session=session)
    except ExpenseBotError as e:
        logger.info("❌ Line %d failed: %s", index, e)
        return Failure(index, line, e)
    return Success(index, record)


async def process_batch(lines, settings, session=None):
    """Run the lines one after another; each HTTP call finishes before the next starts."""
    outcomes = []
    for index, line in enumerate(lines, start=1):
        outcome = await asyncio.to_thread(process_line, index, line, settings, session)
        outcomes.append(outcome)
    return outcomes


# ---------------- COMMAND HANDLERS ----------------
async def start(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handles /start and /help."""
    await update.message.reply_text(help_message())


# ---------------- MESSAGE HANDLER ----------------
async def send_group(bot, chat_id, bodies):
    """Send dependent bodies in order; a failed send stops only this group."""
    try:
        for body in bodies:
            await bot.send_message(chat_id=chat_id, text=body)
    except Exception:
        logger.exception("❌ Failed to send reply to chat %s", chat_id)


async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Main handler for expense messages."""
    message = update.message
    if message is None:
        # edited messages and channel posts are not expense input
        return

    chat_id = update.effective_chat.id
    settings = context.bot_data["settings"]
    session = context.bot_data.get("http")

    lines = split_lines(message.text)
    if not lines:
        return

    logger.info("📥 Chat %s sent %d line(s)", chat_id, len(lines))
    try:
        outcomes = await process_batch(lines, settings, session)
        now = datetime.now(settings.tzinfo())
        groups = compose_reply_groups(outcomes, now)
    except Exception as e:
        logger.exception("❌ Error handling message from chat %s", chat_id)
        await context.bot.send_message(chat_id=chat_id, text=f"⚠️ Terjadi kesalahan: {e}")
        return

    # Error block (then example) first, success block after; each sent on its own
    for bodies in groups:
        await send_group(context.bot, chat_id, bodies)


# ---------------- MAIN ENTRY POINT ----------------
def configure_logging(level="INFO"):
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=(level or "INFO").upper(),
    )
    # python-telegram-bot logs every polling request through httpx
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_application(settings):
    """Create the bot application with its handlers and shared state."""
    app = ApplicationBuilder().token(settings.token).build()
    app.bot_data["settings"] = settings
    app.bot_data["http"] = requests.Session()

    app.add_handler(CommandHandler(["start", "help"], start))
    app.add_handler(MessageHandler(
        filters.UpdateType.MESSAGE & filters.TEXT & ~filters.COMMAND,
        handle_message,
    ))
    return app


def main():
    """Start the Telegram bot."""
    env = load_env()
    configure_logging(env.get("LOG_LEVEL"))

    try:
        settings = load_settings(env=env)
    except ConfigError as e:
        if e.missing:
            logger.error("❌ ERROR: Missing .env values! %s", e)
        else:
            logger.error("❌ ERROR: Invalid configuration: %s", e)
        sys.exit(1)

    app = build_application(settings)
    logger.info("🤖 Bot is running...")
    app.run_polling()


if __name__ == "__main__":
    main()
