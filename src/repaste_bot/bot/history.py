"""In-memory log of recent chat lines, per chat."""

from __future__ import annotations

from collections import deque

from repaste_bot.models import ChatMessage, LogEntry


class ChatHistory:
    """Keep the last ``window`` lines of every chat, newest first."""

    def __init__(self, window: int) -> None:
        self.window = window
        self._chats: dict[str, deque[LogEntry]] = {}

    def record(self, chat: str, sender: str, message: str) -> None:
        lines = self._chats.get(chat)
        if lines is None:
            lines = self._chats[chat] = deque(maxlen=self.window)
        lines.appendleft(LogEntry(sender=sender, message=message))

    def snapshot(self, chat: str) -> ChatMessage:
        return ChatMessage(logs=tuple(self._chats.get(chat, ())))

    def clear(self, chat: str | None = None) -> None:
        if chat is None:
            self._chats.clear()
        else:
            self._chats.pop(chat, None)
