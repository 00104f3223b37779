"""GitHub Gist client."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from repaste_bot import __version__
from repaste_bot.config import AppConfig
from repaste_bot.errors import (
    SnippetHostError,
    SnippetHostRateLimited,
    SnippetHostUnknownError,
)
from repaste_bot.models import SnippetRequest, SnippetResult

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json().get("message", "") or f"HTTP {response.status_code}"
    except (ValueError, AttributeError):
        return f"HTTP {response.status_code}"


def _is_rate_limited(response: httpx.Response) -> bool:
    if response.status_code == 429:
        return True
    return response.status_code == 403 and response.headers.get("x-ratelimit-remaining") == "0"


class GistClient:
    """Create and delete gists through the GitHub REST API."""

    def __init__(self, config: AppConfig, client: httpx.AsyncClient) -> None:
        self.config = config
        self.client = client

    def _headers(self, token: str | None) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": f"repaste-bot/{__version__}",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _url(self, path: str) -> str:
        return f"{self.config.github.api_url.rstrip('/')}/{path.lstrip('/')}"

    async def create(self, request: SnippetRequest) -> SnippetResult:
        """Create a gist from ``request.files`` and return its (possibly shortened) URL."""
        payload: dict[str, Any] = {
            "description": request.description,
            "public": self.config.github.public,
            "files": {name: {"content": content} for name, content in request.files.items()},
        }
        try:
            response = await self.client.post(
                self._url("/gists"),
                json=payload,
                headers=self._headers(request.auth_token),
            )
        except httpx.HTTPError as e:
            raise SnippetHostUnknownError(str(e) or type(e).__name__) from e

        if _is_rate_limited(response):
            raise SnippetHostRateLimited(_error_message(response), response.status_code)
        if response.status_code >= 400:
            raise SnippetHostError(_error_message(response), response.status_code)

        try:
            data = response.json()
            result = SnippetResult(url=data["html_url"], id=data["id"])
        except (ValueError, KeyError, TypeError) as e:
            raise SnippetHostUnknownError(f"Unexpected gist response: {e}") from e

        logger.info("Created gist %s", result.id)
        if request.try_short_url:
            return SnippetResult(url=await self.shorten(result.url), id=result.id)
        return result

    async def shorten(self, url: str) -> str:
        """Ask the configured shortener for an alias; fall back to ``url``."""
        shortener = self.config.github.shortener_url
        if not shortener:
            return url
        try:
            response = await self.client.post(shortener, data={"url": url})
        except httpx.HTTPError:
            logger.warning("URL shortener unreachable, using %s", url)
            return url
        location = response.headers.get("location")
        if response.status_code == 201 and location:
            return location
        logger.warning("URL shortener returned HTTP %d, using %s", response.status_code, url)
        return url

    async def delete(self, gist_id: str, token: str) -> None:
        """Delete a gist. Raises SnippetHostError when GitHub refuses."""
        try:
            response = await self.client.delete(
                self._url(f"/gists/{gist_id}"),
                headers=self._headers(token),
            )
        except httpx.HTTPError as e:
            raise SnippetHostError(str(e) or type(e).__name__) from e

        if response.status_code >= 400:
            raise SnippetHostError(_error_message(response), response.status_code)
        logger.info("Deleted gist %s", gist_id)
