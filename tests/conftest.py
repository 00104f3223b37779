"""Shared test fixtures."""

from __future__ import annotations

from typing import Sequence

import pytest

from repaste_bot.config import (
    AppConfig,
    BotConfig,
    FormatterConfig,
    GithubConfig,
    LoggingConfig,
    RepasteConfig,
)
from repaste_bot.models import LogEntry


class FakeMessage:
    """In-memory chat host for driving the plugin."""

    def __init__(
        self,
        command: str | None,
        logs: Sequence[LogEntry] = (),
        to: str = "@general",
        github_token: str | None = None,
    ) -> None:
        self.command = command
        self.logs = logs
        self.to = to
        self.github_token = github_token
        self.replies: list[str] = []
        self.verbose: list[str] = []
        self.handled = False

    async def respond_with_mention(self, text: str) -> None:
        self.replies.append(text)

    async def handling(self) -> None:
        self.handled = True

    def vlog(self, text: str) -> None:
        self.verbose.append(text)


@pytest.fixture
def app_config(tmp_path):
    """Create a test configuration."""
    return AppConfig(
        bot=BotConfig(token="test-token", allowed_users=[12345]),
        github=GithubConfig(token="gh-token"),
        repaste=RepasteConfig(log_window=500, jsx_chats=["@reactjs"]),
        formatter=FormatterConfig(command="prettier", timeout=5),
        logging=LoggingConfig(level="DEBUG", file=str(tmp_path / "test.log")),
    )
