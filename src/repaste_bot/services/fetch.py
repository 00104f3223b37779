"""Concurrent download of raw paste files."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Callable, Sequence

import httpx
from bs4 import BeautifulSoup

from repaste_bot.errors import FetchFailure
from repaste_bot.models import FetchedFile, PasteFiles, RawFileSpec

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPE = re.compile(r"text/html", re.IGNORECASE)


def is_html(response: httpx.Response) -> bool:
    return bool(HTML_CONTENT_TYPE.search(response.headers.get("content-type", "")))


def extract_body_text(html: str) -> str:
    """Visible text of the document body, or '' when there is none."""
    soup = BeautifulSoup(html, "html.parser")
    if soup.body is None:
        return ""
    return soup.body.get_text()


async def fetch_url(client: httpx.AsyncClient, url: str) -> httpx.Response:
    """GET ``url`` and return the response, translating failures to FetchFailure."""
    try:
        response = await client.get(url, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise FetchFailure(url, f"HTTP {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise FetchFailure(url, str(e) or type(e).__name__) from e
    return response


class FetchPipeline:
    """Fetch every raw file of a paste at once and collect the non-empty ones."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        vlog: Callable[[str], None] | None = None,
    ) -> None:
        self.client = client
        self._vlog = vlog or logger.debug

    async def fetch_one(self, spec: RawFileSpec) -> FetchedFile | None:
        response = await fetch_url(self.client, spec.source_url)
        text = spec.transform(response.text)
        if not text:
            return None

        if is_html(response):
            from_html = extract_body_text(text)
            if from_html:
                text = from_html

        self._vlog(f"Fetched {spec.source_url} with body length {len(text)}")
        return FetchedFile(extension=spec.extension, text=text)

    async def fetch(self, specs: Sequence[RawFileSpec]) -> PasteFiles:
        """Fetch all ``specs``; the first failure cancels the rest and is raised."""
        self._vlog("Fetching " + ", ".join(spec.source_url for spec in specs))
        tasks = [asyncio.ensure_future(self.fetch_one(spec)) for spec in specs]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return PasteFiles.from_fetched([r for r in results if r is not None])
