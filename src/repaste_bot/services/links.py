"""Find paste links in chat lines."""

from __future__ import annotations

import re
from typing import Sequence

from repaste_bot.models import LogEntry, ResolvedPaste

URL_PATTERN = re.compile(
    r"(?:http|https)://[\w-]+(?:\.[\w-]+)+(?:[\w.,@?^=%&;:/~+#-]*[\w@?^=%&;/~+#-])?"
)


def match_url(text: str) -> str | None:
    """Return the first absolute http(s) URL in ``text``, or None."""
    match = URL_PATTERN.search(text)
    return match.group(0) if match else None


def find_link_in_logs(logs: Sequence[LogEntry], user: str | None = None) -> ResolvedPaste | None:
    """Return the first link in ``logs`` (in the order given), optionally from ``user`` only."""
    for entry in logs:
        if user and entry.sender != user:
            continue
        url = match_url(entry.message)
        if url:
            return ResolvedPaste(url=url, user=entry.sender)
    return None
