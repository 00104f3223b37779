"""Tests for the prettier formatter service."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from repaste_bot.errors import FormatFailure
from repaste_bot.services.formatter import PrettierFormatter


@pytest.fixture
def formatter(app_config):
    return PrettierFormatter(app_config)


class TestPrettierFormatter:
    @pytest.mark.asyncio
    async def test_format_success(self, formatter):
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(return_value=(b"var x = 1;\n", b""))
        mock_proc.returncode = 0

        with patch(
            "repaste_bot.services.formatter.asyncio.create_subprocess_exec", return_value=mock_proc
        ) as create:
            result = await formatter.format("var x=1", filename="code.jsx")

        assert result == "var x = 1;\n"
        args = create.call_args.args
        assert args[:3] == ("prettier", "--stdin-filepath", "code.jsx")
        assert "--single-quote" in args
        assert "--no-bracket-spacing" in args
        mock_proc.communicate.assert_awaited_once_with(b"var x=1")

    @pytest.mark.asyncio
    async def test_syntax_error(self, formatter):
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(return_value=(b"", b"[error] SyntaxError: Unexpected token (1:5)\n"))
        mock_proc.returncode = 2

        with patch("repaste_bot.services.formatter.asyncio.create_subprocess_exec", return_value=mock_proc):
            with pytest.raises(FormatFailure) as exc:
                await formatter.format("var = ;")
        assert "SyntaxError" in str(exc.value)

    @pytest.mark.asyncio
    async def test_prettier_missing(self, formatter):
        with patch(
            "repaste_bot.services.formatter.asyncio.create_subprocess_exec", side_effect=FileNotFoundError
        ):
            with pytest.raises(FormatFailure) as exc:
                await formatter.format("var x=1")
        assert "not found" in str(exc.value)

    @pytest.mark.asyncio
    async def test_timeout(self, formatter):
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(side_effect=[asyncio.TimeoutError, (b"", b"")])
        mock_proc.kill = MagicMock()

        with patch("repaste_bot.services.formatter.asyncio.create_subprocess_exec", return_value=mock_proc):
            with pytest.raises(FormatFailure) as exc:
                await formatter.format("while(true){}")
        assert "timed out" in str(exc.value)
        mock_proc.kill.assert_called_once()

    @pytest.mark.asyncio
    async def test_disabled(self, app_config):
        app_config.formatter.enabled = False
        with patch("repaste_bot.services.formatter.asyncio.create_subprocess_exec") as create:
            with pytest.raises(FormatFailure):
                await PrettierFormatter(app_config).format("var x=1")
        create.assert_not_called()

    @pytest.mark.asyncio
    async def test_command_not_executable(self, app_config, tmp_path):
        script = tmp_path / "prettier"
        script.write_text("#!/bin/sh\ncat\n")
        script.chmod(0o644)
        app_config.formatter.command = str(script)

        with pytest.raises(FormatFailure) as exc:
            await PrettierFormatter(app_config).format("var x=1")
        assert str(script) in str(exc.value)
