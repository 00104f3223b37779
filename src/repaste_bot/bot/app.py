"""Telegram bot application setup and lifecycle."""

from __future__ import annotations

import asyncio
import logging
import signal

from telegram import BotCommand
from telegram.ext import Application, CommandHandler, MessageHandler, filters

from repaste_bot.bot.handlers import close_services, command_handler, text_handler
from repaste_bot.config import AppConfig

logger = logging.getLogger(__name__)

BOT_COMMANDS = [
    BotCommand("repaste", "Repaste the latest paste link (optionally a URL or a user)"),
    BotCommand("unpaste", "Delete a gist created by repaste"),
]


async def run_bot(config: AppConfig) -> None:
    """Start and run the Telegram bot."""
    if not config.bot.token:
        raise ValueError("Bot token not configured. Run 'repaste-bot init' first.")

    app = Application.builder().token(config.bot.token).build()

    app.add_handler(CommandHandler(["repaste", "unpaste"], command_handler))
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, text_handler))

    await app.initialize()
    await app.bot.set_my_commands(BOT_COMMANDS)
    await app.start()
    assert app.updater is not None
    await app.updater.start_polling(drop_pending_updates=True)

    logger.info("Bot started. Watching for paste links...")

    # Wait for shutdown signal
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    def _signal_handler() -> None:
        logger.info("Shutdown signal received")
        stop_event.set()

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, _signal_handler)

    await stop_event.wait()

    logger.info("Shutting down bot...")
    await app.updater.stop()
    await app.stop()
    await app.shutdown()
    await close_services()
    logger.info("Bot stopped.")
