"""Prettier code formatter service."""

from __future__ import annotations

import asyncio
import logging

from repaste_bot.config import AppConfig
from repaste_bot.errors import FormatFailure

logger = logging.getLogger(__name__)

PRETTIER_OPTIONS: list[str] = [
    "--single-quote",
    "--trailing-comma",
    "es5",
    "--no-bracket-spacing",
]


class PrettierFormatter:
    """Format code by piping it through the prettier CLI."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    async def format(self, code: str, filename: str = "code.js") -> str:
        """Return formatted ``code``. Raises FormatFailure when prettier can't format it."""
        if not self.config.formatter.enabled:
            raise FormatFailure("Formatter disabled in configuration")

        # exec, not shell: the filename ends up on the command line
        cmd: list[str] = [
            self.config.formatter.command,
            "--stdin-filepath",
            filename,
            *PRETTIER_OPTIONS,
        ]

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise FormatFailure(f"{self.config.formatter.command} not found") from e
        except OSError as e:
            raise FormatFailure(f"Could not run {self.config.formatter.command}: {e}") from e

        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(
                proc.communicate(code.encode("utf-8")),
                timeout=self.config.formatter.timeout,
            )
        except asyncio.TimeoutError as e:
            proc.kill()
            await proc.communicate()
            raise FormatFailure(f"Formatter timed out after {self.config.formatter.timeout}s") from e

        if proc.returncode != 0:
            stderr = stderr_bytes.decode("utf-8", errors="replace").strip()
            raise FormatFailure(stderr.splitlines()[0] if stderr else f"exit code {proc.returncode}")

        return stdout_bytes.decode("utf-8", errors="replace")
