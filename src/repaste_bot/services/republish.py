"""Turn fetched paste files into a gist, or remove one."""

from __future__ import annotations

import logging

from repaste_bot.config import AppConfig
from repaste_bot.errors import FormatFailure, NoCredentialConfigured
from repaste_bot.models import PasteFiles, SnippetRequest, SnippetResult
from repaste_bot.services.formatter import PrettierFormatter
from repaste_bot.services.gist import GistClient

logger = logging.getLogger(__name__)


class RepublishService:
    """Format a paste and publish it to the snippet host."""

    def __init__(self, config: AppConfig, gists: GistClient, formatter: PrettierFormatter) -> None:
        self.config = config
        self.gists = gists
        self.formatter = formatter

    def script_suffix(self, chat: str) -> str:
        return ".jsx" if chat in self.config.repaste.jsx_chats else ".js"

    async def build_files(self, files: PasteFiles, chat: str) -> dict[str, str]:
        """Map gist filenames to content. The script is formatted when prettier allows it."""
        result: dict[str, str] = {}
        if files.js:
            name = f"code{self.script_suffix(chat)}"
            try:
                result[name] = await self.formatter.format(files.js, filename=name)
            except FormatFailure as e:
                logger.info("Formatting failed, keeping original script: %s", e)
                result[name] = files.js
        if files.html:
            result["code.html"] = files.html
        if files.css:
            result["code.css"] = files.css
        return result

    async def create(
        self,
        files: PasteFiles,
        chat: str,
        token: str | None,
        source_url: str = "",
    ) -> SnippetResult:
        """Publish ``files``. Raises SnippetHostError or SnippetHostUnknownError."""
        request = SnippetRequest(
            files=await self.build_files(files, chat),
            try_short_url=True,
            auth_token=token,
            description=f"Repasted from {source_url}" if source_url else "",
        )
        return await self.gists.create(request)

    async def delete(self, gist_id: str, token: str | None) -> None:
        if not token:
            raise NoCredentialConfigured()
        await self.gists.delete(gist_id, token)
