"""The repaste/unpaste command plugin.

``RepastePlugin.handle`` receives one chat command together with the recent
chat log and answers with exactly one reply. Every failure is turned into a
chat message here; diagnostics only go to the logs.
"""

from __future__ import annotations

import logging
import re

import httpx

from repaste_bot.config import AppConfig
from repaste_bot.errors import (
    FetchFailure,
    NoCredentialConfigured,
    NothingToRepaste,
    SnippetHostError,
    UnknownPasteService,
)
from repaste_bot.models import CommandMessage, PasteFiles, ResolvedPaste
from repaste_bot.services.fetch import FetchPipeline
from repaste_bot.services.formatter import PrettierFormatter
from repaste_bot.services.gist import GistClient
from repaste_bot.services.jsfiddle import fetch_fiddle
from repaste_bot.services.links import find_link_in_logs
from repaste_bot.services.paste_sites import PasteSiteResolver, is_fiddle
from repaste_bot.services.republish import RepublishService
from repaste_bot.utils.formatting import (
    format_delete_failed,
    format_no_link,
    format_repasted,
    format_unknown_error,
    format_unknown_service,
)

logger = logging.getLogger(__name__)

URL_ARGUMENT = re.compile(r"^https?:")
NOT_CONFIGURED_REPLY = "I'm not configured with a github token, so I can't delete the gist."


def gist_id_from(argument: str) -> str:
    """Accept a bare gist id or a full gist URL."""
    return argument.rstrip("/").rsplit("/", 1)[-1]


class RepastePlugin:
    """Handle ``repaste`` and ``unpaste`` commands."""

    def __init__(
        self,
        config: AppConfig,
        client: httpx.AsyncClient,
        resolver: PasteSiteResolver | None = None,
        republisher: RepublishService | None = None,
    ) -> None:
        self.config = config
        self.client = client
        self.resolver = resolver or PasteSiteResolver()
        self.republisher = republisher or RepublishService(
            config, GistClient(config, client), PrettierFormatter(config)
        )

    async def handle(self, msg: CommandMessage) -> None:
        if not msg.command:
            return
        words = msg.command.split(" ")
        if words[0] == "unpaste":
            await msg.handling()
            await self.unpaste(msg, words[1] if len(words) > 1 else "")
        elif words[0] == "repaste":
            await msg.handling()
            await self.repaste(msg, words[1] if len(words) > 1 else "")

    async def unpaste(self, msg: CommandMessage, argument: str) -> None:
        if not msg.github_token:
            await msg.respond_with_mention(NOT_CONFIGURED_REPLY)
            return
        if not argument:
            await msg.respond_with_mention("Usage: unpaste <gist id>")
            return

        gist_id = gist_id_from(argument)
        try:
            await self.republisher.delete(gist_id, msg.github_token)
        except NoCredentialConfigured:
            await msg.respond_with_mention(NOT_CONFIGURED_REPLY)
        except SnippetHostError as e:
            logger.error("Failed to delete gist %s: %s", gist_id, e)
            await msg.respond_with_mention(format_delete_failed(str(e)))
        else:
            await msg.respond_with_mention(f"Deleted {gist_id}")

    def find_paste(self, msg: CommandMessage, argument: str) -> ResolvedPaste | None:
        if URL_ARGUMENT.match(argument):
            return ResolvedPaste(url=argument)
        return find_link_in_logs(msg.logs, argument or None)

    async def get_code(self, msg: CommandMessage, url: str) -> PasteFiles:
        """Fetch the paste at ``url``. Tells the user when the service is unknown."""
        if is_fiddle(url):
            msg.vlog(f"Fetching fiddle {url}")
            files = await fetch_fiddle(self.client, url)
        else:
            try:
                specs = self.resolver.resolve(url)
            except UnknownPasteService:
                await msg.respond_with_mention(
                    format_unknown_service(url, self.config.repaste.maintainer)
                )
                raise
            files = await FetchPipeline(self.client, vlog=msg.vlog).fetch(specs)

        if files.is_empty():
            raise NothingToRepaste(url)
        return files

    async def repaste(self, msg: CommandMessage, argument: str) -> None:
        found = self.find_paste(msg, argument)
        if found is None:
            await msg.respond_with_mention(
                format_no_link(argument or None, self.config.repaste.log_window)
            )
            return

        try:
            files = await self.get_code(msg, found.url)
        except UnknownPasteService:
            return
        except NothingToRepaste:
            await msg.respond_with_mention(
                f"The paste at {found.url} is empty, so there is nothing to repaste."
            )
            return
        except FetchFailure as e:
            await msg.respond_with_mention("Failed to get raw paste data.")
            msg.vlog(str(e))
            return
        except Exception as e:
            logger.exception("Unexpected error fetching %s", found.url)
            await msg.respond_with_mention("Failed to get raw paste data.")
            msg.vlog(f"Fetch error: {e!r}")
            return

        try:
            result = await self.republisher.create(files, msg.to, msg.github_token, source_url=found.url)
        except SnippetHostError as e:
            logger.warning("Gist host refused repaste of %s: %s", found.url, e)
            await msg.respond_with_mention("Failed to create gist. Possibly a rate limit")
            return
        except Exception as e:
            logger.exception("Failed to create gist for %s", found.url)
            await msg.respond_with_mention(format_unknown_error(e, self.config.repaste.maintainer))
            return

        await msg.respond_with_mention(format_repasted(found, result.url))
