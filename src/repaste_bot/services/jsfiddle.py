"""jsfiddle support.

jsfiddle has no raw endpoints, so the editor page is fetched and the three
panes are read from its textareas.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import urlsplit

import httpx
from bs4 import BeautifulSoup

from repaste_bot.errors import FetchFailure
from repaste_bot.models import FILE_KINDS, FetchedFile, PasteFiles
from repaste_bot.services.fetch import fetch_url

logger = logging.getLogger(__name__)

VIEW_SEGMENTS = {"show", "embedded", "light", "edit"}
REVISION = re.compile(r"^\d+$")


def fiddle_page_url(url: str) -> str:
    """Canonical editor URL for any jsfiddle link (show/embedded variants included)."""
    segments = []
    for segment in urlsplit(url).path.split("/"):
        if segment in VIEW_SEGMENTS:
            break
        if segment:
            segments.append(segment)

    revision = segments.pop() if len(segments) > 1 and REVISION.match(segments[-1]) else None
    if not 1 <= len(segments) <= 2:
        raise FetchFailure(url, "not a jsfiddle link")
    if revision:
        segments.append(revision)
    return "https://jsfiddle.net/" + "/".join(segments) + "/"


def parse_fiddle(html: str) -> PasteFiles:
    soup = BeautifulSoup(html, "html.parser")
    files = []
    for kind in FILE_KINDS:
        pane = soup.find("textarea", id=f"id_code_{kind}")
        if pane is not None:
            files.append(FetchedFile(extension=kind, text=pane.get_text()))
    return PasteFiles.from_fetched(files)


async def fetch_fiddle(client: httpx.AsyncClient, url: str) -> PasteFiles:
    """Fetch a fiddle and return its js/css/html panes."""
    page_url = fiddle_page_url(url)
    logger.debug("Fetching fiddle %s", page_url)
    response = await fetch_url(client, page_url)
    return parse_fiddle(response.text)
