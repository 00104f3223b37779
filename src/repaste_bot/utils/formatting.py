"""Chat reply text."""

from __future__ import annotations

from repaste_bot.models import ResolvedPaste

MAX_ERROR_LENGTH = 200


def truncate(text: str, max_len: int = MAX_ERROR_LENGTH) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def format_repasted(found: ResolvedPaste, gist_url: str) -> str:
    if found.user:
        return f"Repasted {found.user}'s paste to {gist_url}"
    return f"Repasted {found.url} to {gist_url}"


def format_no_link(user: str | None, window: int) -> str:
    if user:
        return f"I couldn't find a link from {user}"
    return f"I couldn't find a link in the past {window} messages. Maybe I was restarted recently."


def format_unknown_service(url: str, maintainer: str) -> str:
    return f'I don\'t know the paste service at "{url}". {maintainer}, ping!'


def format_unknown_error(error: BaseException, maintainer: str) -> str:
    return f"Failed due to an unknown error. {maintainer}, ping! {truncate(str(error))}"


def format_delete_failed(message: str) -> str:
    return f'Failed to delete the gist. Message: "{truncate(message) or "unknown"}"'
