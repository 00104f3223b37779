"""Exceptions raised by the repaste pipeline."""

from __future__ import annotations


class RepasteError(Exception):
    """Base class for all repaste failures."""


class UnknownPasteService(RepasteError):
    def __init__(self, url: str) -> None:
        super().__init__(f"Unknown paste service: {url}")
        self.url = url


class FetchFailure(RepasteError):
    """A raw paste file could not be retrieved or parsed."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class NothingToRepaste(RepasteError):
    def __init__(self, url: str) -> None:
        super().__init__(f"No content found at {url}")
        self.url = url


class FormatFailure(RepasteError):
    pass


class SnippetHostError(RepasteError):
    """The gist host answered with an error status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SnippetHostRateLimited(SnippetHostError):
    pass


class SnippetHostUnknownError(RepasteError):
    pass


class NoCredentialConfigured(RepasteError):
    def __init__(self) -> None:
        super().__init__("No GitHub token configured")
