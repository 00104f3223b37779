"""Telegram handlers: record chat lines and dispatch repaste commands."""

from __future__ import annotations

import logging
from typing import Sequence

import httpx
from telegram import Chat, Update, User
from telegram.constants import ChatAction
from telegram.ext import ContextTypes

from repaste_bot.bot.history import ChatHistory
from repaste_bot.bot.security import allowed_users_only
from repaste_bot.config import get_config
from repaste_bot.models import LogEntry
from repaste_bot.services.repaste import RepastePlugin

logger = logging.getLogger(__name__)
verbose_logger = logging.getLogger("repaste_bot.verbose")

PLAIN_COMMANDS = ("repaste", "unpaste")

# Lazy-initialized shared state
_history: ChatHistory | None = None
_plugin: RepastePlugin | None = None


def _get_history() -> ChatHistory:
    global _history
    if _history is None:
        _history = ChatHistory(get_config().repaste.log_window)
    return _history


def _get_plugin() -> RepastePlugin:
    global _plugin
    if _plugin is None:
        config = get_config()
        client = httpx.AsyncClient(timeout=httpx.Timeout(float(config.repaste.http_timeout)))
        _plugin = RepastePlugin(config, client)
    return _plugin


async def close_services() -> None:
    """Close the shared HTTP client and drop the chat history."""
    global _plugin, _history
    if _plugin is not None:
        await _plugin.client.aclose()
        _plugin = None
    _history = None


def chat_key(chat: Chat) -> str:
    """Identify a chat the way jsx_chats lists it: @username, or the numeric id."""
    return f"@{chat.username}" if chat.username else str(chat.id)


def sender_name(user: User | None) -> str:
    if user is None:
        return "unknown"
    return user.username or user.first_name


class TelegramCommand:
    """One repaste/unpaste command received from Telegram."""

    def __init__(
        self,
        update: Update,
        context: ContextTypes.DEFAULT_TYPE,
        command: str,
        logs: Sequence[LogEntry],
    ) -> None:
        self.update = update
        self.context = context
        self.command: str | None = command
        self.logs = logs
        self.to = chat_key(update.effective_chat)  # type: ignore[arg-type]
        self.github_token: str | None = get_config().github.token or None

    async def respond_with_mention(self, text: str) -> None:
        name = sender_name(self.update.effective_user)
        await self.update.message.reply_text(f"{name}: {text}")  # type: ignore[union-attr]

    async def handling(self) -> None:
        await self.context.bot.send_chat_action(
            chat_id=self.update.effective_chat.id,  # type: ignore[union-attr]
            action=ChatAction.TYPING,
        )

    def vlog(self, text: str) -> None:
        verbose_logger.debug("[%s] %s", self.to, text)


async def _dispatch(update: Update, context: ContextTypes.DEFAULT_TYPE, command: str) -> None:
    chat = chat_key(update.effective_chat)  # type: ignore[arg-type]
    logs = _get_history().snapshot(chat).logs
    try:
        await _get_plugin().handle(TelegramCommand(update, context, command, logs))
    except Exception:
        logger.exception("Unhandled error for command %r", command)


# --- Handlers ---


@allowed_users_only
async def command_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /repaste [url|user] and /unpaste <gist id>."""
    if update.message is None:
        return
    text = update.message.text or ""
    name = text.split()[0].lstrip("/").split("@")[0] if text.strip() else ""
    command = " ".join([name, *(context.args or [])])
    await _dispatch(update, context, command)


@allowed_users_only
async def plain_command_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle a plain "repaste ..." or "unpaste ..." line."""
    await _dispatch(update, context, update.message.text.strip())  # type: ignore[union-attr]


async def text_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Record every text line; run IRC-style ``repaste ...`` lines as commands."""
    message = update.message
    if message is None or not message.text:
        return

    text = message.text.strip()
    if text.split(" ")[0] in PLAIN_COMMANDS:
        await plain_command_handler(update, context)

    _get_history().record(
        chat_key(update.effective_chat),  # type: ignore[arg-type]
        sender_name(update.effective_user),
        text,
    )
