"""Data models for repaste-bot."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Protocol, Sequence

Transform = Callable[[str], str]

FILE_KINDS = ("js", "css", "html")


def identity(text: str) -> str:
    return text


@dataclass(frozen=True)
class LogEntry:
    """A single chat line seen by the bot."""

    sender: str
    message: str


@dataclass(frozen=True)
class ChatMessage:
    """The window of recent chat lines handed to the plugin."""

    logs: tuple[LogEntry, ...] = ()


@dataclass(frozen=True)
class ResolvedPaste:
    """A link found in the logs, with its author when it came from a scan."""

    url: str
    user: str | None = None


@dataclass(frozen=True)
class RawFileSpec:
    """Where to fetch one file kind of a paste, and how to clean it up."""

    extension: str
    source_url: str
    transform: Transform = field(default=identity, compare=False)


@dataclass(frozen=True)
class FetchedFile:
    extension: str
    text: str


@dataclass(frozen=True)
class PasteFiles:
    """Fetched paste content by file kind. Missing kinds are None, never ''."""

    js: str | None = None
    css: str | None = None
    html: str | None = None

    @classmethod
    def from_fetched(cls, files: Sequence[FetchedFile]) -> PasteFiles:
        found = {f.extension: f.text for f in files if f.text}
        return cls(**{kind: found.get(kind) for kind in FILE_KINDS})

    def is_empty(self) -> bool:
        return not (self.js or self.css or self.html)


@dataclass(frozen=True)
class SnippetRequest:
    """Payload for creating a gist."""

    files: dict[str, str]
    try_short_url: bool = True
    auth_token: str | None = None
    description: str = ""


@dataclass(frozen=True)
class SnippetResult:
    url: str
    id: str = ""


class CommandMessage(Protocol):
    """What the plugin needs from the chat host for one incoming command."""

    command: str | None
    logs: Sequence[LogEntry]
    to: str
    github_token: str | None

    async def respond_with_mention(self, text: str) -> None:
        ...

    async def handling(self) -> None:
        ...

    def vlog(self, text: str) -> None:
        ...
