"""Restrict bot commands to configured Telegram users."""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Coroutine

from telegram import Update
from telegram.ext import ContextTypes

from repaste_bot.config import get_config

logger = logging.getLogger(__name__)

Handler = Callable[[Update, ContextTypes.DEFAULT_TYPE], Coroutine[Any, Any, None]]


def is_allowed_user(user_id: int) -> bool:
    """Everyone may use the bot unless allowed_users is set."""
    allowed = get_config().bot.allowed_users
    return not allowed or user_id in allowed


def allowed_users_only(func: Handler) -> Handler:
    """Drop commands from users outside the allow list."""

    @functools.wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        user = update.effective_user
        if user is None:
            return
        if not is_allowed_user(user.id):
            logger.warning("Ignoring command from user_id=%d username=%s", user.id, user.username)
            return
        return await func(update, context)

    return wrapper
