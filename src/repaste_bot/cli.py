"""CLI entry point using typer."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Sequence

import httpx
import typer
from rich.console import Console
from rich.table import Table

from repaste_bot import __version__
from repaste_bot.config import (
    CONFIG_FILE,
    LOG_FILE,
    PID_FILE,
    AppConfig,
    BotConfig,
    GithubConfig,
    RepasteConfig,
    ensure_config_dir,
    load_config,
    save_config,
)
from repaste_bot.daemon import PidFile, daemonize
from repaste_bot.models import LogEntry
from repaste_bot.utils.system import check_prettier_cli

app = typer.Typer(
    name="repaste-bot",
    help="Repaste code from paste sites to GitHub gists from Telegram.",
    add_completion=False,
)
console = Console()


class ConsoleCommand:
    """Run a repaste/unpaste command from the terminal instead of a chat."""

    def __init__(self, command: str, config: AppConfig) -> None:
        self.command: str | None = command
        self.logs: Sequence[LogEntry] = ()
        self.to = "console"
        self.github_token: str | None = config.github.token or None
        self.replies: list[str] = []

    async def respond_with_mention(self, text: str) -> None:
        self.replies.append(text)
        console.print(text)

    async def handling(self) -> None:
        console.print("[dim]Working...[/dim]")

    def vlog(self, text: str) -> None:
        console.print(f"[dim]{text}[/dim]")


async def _run_command(config: AppConfig, command: str) -> ConsoleCommand:
    from repaste_bot.services.repaste import RepastePlugin

    msg = ConsoleCommand(command, config)
    async with httpx.AsyncClient(timeout=httpx.Timeout(float(config.repaste.http_timeout))) as client:
        await RepastePlugin(config, client).handle(msg)
    return msg


async def _preview(config: AppConfig, url: str) -> dict[str, str]:
    from repaste_bot.services.fetch import FetchPipeline
    from repaste_bot.services.jsfiddle import fetch_fiddle
    from repaste_bot.services.paste_sites import PasteSiteResolver, is_fiddle

    async with httpx.AsyncClient(timeout=httpx.Timeout(float(config.repaste.http_timeout))) as client:
        if is_fiddle(url):
            files = await fetch_fiddle(client, url)
        else:
            specs = PasteSiteResolver().resolve(url)
            files = await FetchPipeline(client).fetch(specs)
    return {kind: text for kind, text in (("js", files.js), ("css", files.css), ("html", files.html)) if text}


@app.command()
def init() -> None:
    """Interactive setup wizard."""
    console.print(f"\n[bold]repaste-bot v{__version__}[/bold]")
    console.print("Interactive Setup\n")

    console.print("[dim]Checking prettier...[/dim]")
    installed, version_info = check_prettier_cli()
    if installed:
        console.print(f"  prettier: [green]{version_info}[/green]")
    else:
        console.print(f"  [yellow]Warning: {version_info}[/yellow]")
        console.print("  Repasted code will be published unformatted.\n")

    console.print("\n[bold]Step 1:[/bold] Telegram Bot Token")
    console.print("  Create a bot at https://t.me/BotFather and paste the token below.")
    token = typer.prompt("  Bot Token", default="", show_default=False)
    if not token:
        console.print("[red]Bot token is required.[/red]")
        raise typer.Exit(1)

    console.print("\n[bold]Step 2:[/bold] GitHub Token")
    console.print("  A token with the 'gist' scope. Needed to create and delete gists.")
    github_token = typer.prompt("  GitHub Token", default="", show_default=False)
    if not github_token:
        console.print("  [yellow]Without a token gists can't be created or deleted.[/yellow]")

    console.print("\n[bold]Step 3:[/bold] Allowed Telegram User IDs")
    console.print("  Enter multiple IDs separated by commas, or leave empty to allow all.")
    user_ids_str = typer.prompt("  User IDs", default="", show_default=False)
    allowed_users: list[int] = []
    if user_ids_str:
        try:
            allowed_users = [int(uid.strip()) for uid in user_ids_str.split(",") if uid.strip()]
        except ValueError:
            console.print("[red]Invalid user ID format. Use numbers only.[/red]")
            raise typer.Exit(1)

    console.print("\n[bold]Step 4:[/bold] JSX chats")
    console.print("  Chats (@username or id) whose repastes are saved as code.jsx.")
    jsx_str = typer.prompt("  Chats", default="@reactjs")
    jsx_chats = [c.strip() for c in jsx_str.split(",") if c.strip()]

    config = AppConfig(
        bot=BotConfig(token=token, allowed_users=allowed_users),
        github=GithubConfig(token=github_token),
        repaste=RepasteConfig(jsx_chats=jsx_chats),
    )
    save_config(config)

    console.print(f"\n[green]Configuration saved to {CONFIG_FILE}[/green]")
    console.print("\nNext steps:")
    console.print("  [bold]repaste-bot start[/bold]          Start the bot")
    console.print("  [bold]repaste-bot start --daemon[/bold] Start in background\n")


@app.command()
def start(
    daemon: bool = typer.Option(False, "--daemon", "-d", help="Run in background"),
) -> None:
    """Start the Telegram bot."""
    if not CONFIG_FILE.exists():
        console.print("[red]Configuration not found.[/red]")
        console.print("Run [bold]repaste-bot init[/bold] first.")
        raise typer.Exit(1)

    config = load_config()
    if not config.bot.token:
        console.print("[red]Bot token not configured.[/red]")
        console.print("Run [bold]repaste-bot init[/bold] to set it up.")
        raise typer.Exit(1)

    pid_file = PidFile(PID_FILE)
    existing_pid = pid_file.read()
    if existing_pid is not None:
        console.print(f"[yellow]Bot is already running (PID: {existing_pid}).[/yellow]")
        console.print("Use [bold]repaste-bot stop[/bold] to stop it first.")
        raise typer.Exit(1)

    installed, version_info = check_prettier_cli(config.formatter.command)
    if config.formatter.enabled and not installed:
        console.print(f"[yellow]Warning: {version_info}[/yellow]")
        console.print("Repastes will not be formatted.\n")

    ensure_config_dir()
    log_path = Path(config.logging.file).expanduser().resolve()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, config.logging.level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(str(log_path)),
            *([] if daemon else [logging.StreamHandler()]),
        ],
    )
    # httpx logs every request at INFO, including the bot token in the URL
    logging.getLogger("httpx").setLevel(logging.WARNING)

    if daemon:
        console.print("Starting bot in background...")
        daemonize(log_path)

    pid_file.write()

    if not daemon:
        console.print("[green]Bot started![/green] Use /repaste in a chat with your bot.")
        console.print("Press Ctrl+C to stop.\n")

    try:
        from repaste_bot.bot.app import run_bot

        asyncio.run(run_bot(config))
    except KeyboardInterrupt:
        pass
    finally:
        pid_file.remove()
        if not daemon:
            console.print("\n[dim]Bot stopped.[/dim]")


@app.command()
def stop() -> None:
    """Stop the running bot."""
    if PidFile(PID_FILE).stop():
        console.print("[green]Bot stopped.[/green]")
    else:
        console.print("[yellow]Bot is not running.[/yellow]")


@app.command()
def status() -> None:
    """Check bot running status."""
    pid = PidFile(PID_FILE).read()
    if pid is not None:
        console.print(f"[green]Bot is running[/green] (PID: {pid})")
    else:
        console.print("[dim]Bot is not running.[/dim]")

    if CONFIG_FILE.exists():
        config = load_config()
        console.print(f"\nConfig: {CONFIG_FILE}")
        console.print(f"GitHub token: {'set' if config.github.token else 'not set'}")
        console.print(f"Log window: {config.repaste.log_window} messages")
        console.print(f"Users: {config.bot.allowed_users or 'all'}")
    else:
        console.print("\n[yellow]Not configured. Run 'repaste-bot init'.[/yellow]")


def _mask(secret: str) -> str:
    return secret[:8] + "..." if secret else "(not set)"


@app.command()
def config(
    key: str = typer.Argument(None, help="Config key (e.g., repaste.log_window)"),
    value: str = typer.Argument(None, help="New value"),
) -> None:
    """View or modify configuration."""
    if not CONFIG_FILE.exists():
        console.print("[red]Not configured. Run 'repaste-bot init'.[/red]")
        raise typer.Exit(1)

    cfg = load_config()
    section_map = {
        "bot": cfg.bot,
        "github": cfg.github,
        "repaste": cfg.repaste,
        "formatter": cfg.formatter,
        "logging": cfg.logging,
    }

    if key is None:
        table = Table(title="Configuration")
        table.add_column("Key", style="cyan")
        table.add_column("Value", style="green")
        for section, obj in section_map.items():
            for attr, current in vars(obj).items():
                shown = _mask(current) if attr == "token" else str(current)
                table.add_row(f"{section}.{attr}", shown)
        console.print(table)
        return

    if value is None:
        console.print("[red]Usage: repaste-bot config <key> <value>[/red]")
        raise typer.Exit(1)

    parts = key.split(".")
    if len(parts) != 2:
        console.print("[red]Key format: section.key (e.g., repaste.log_window)[/red]")
        raise typer.Exit(1)

    section, attr = parts
    if section not in section_map:
        console.print(f"[red]Unknown section: {section}[/red]")
        raise typer.Exit(1)

    obj = section_map[section]
    if not hasattr(obj, attr):
        console.print(f"[red]Unknown key: {key}[/red]")
        raise typer.Exit(1)

    current = getattr(obj, attr)
    try:
        if isinstance(current, bool):
            typed_value = value.lower() in ("true", "1", "yes")
        elif isinstance(current, int):
            typed_value = int(value)
        elif key == "bot.allowed_users":
            typed_value = [int(v.strip()) for v in value.split(",") if v.strip()]
        elif isinstance(current, list):
            typed_value = [v.strip() for v in value.split(",") if v.strip()]
        else:
            typed_value = value
    except ValueError:
        console.print(f"[red]Invalid value type for {key}[/red]")
        raise typer.Exit(1)

    setattr(obj, attr, typed_value)
    save_config(cfg)
    console.print(f"[green]{key} = {_mask(typed_value) if attr == 'token' else typed_value}[/green]")


@app.command()
def repaste(
    url: str = typer.Argument(..., help="Paste URL to republish"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Fetch and show the files without creating a gist"),
) -> None:
    """Repaste a URL to a gist without going through Telegram."""
    cfg = load_config()
    if dry_run:
        from repaste_bot.errors import RepasteError

        try:
            files = asyncio.run(_preview(cfg, url))
        except RepasteError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)

        table = Table(title=url)
        table.add_column("File", style="cyan")
        table.add_column("Characters", style="green")
        for kind, text in files.items():
            table.add_row(f"code.{kind}", str(len(text)))
        console.print(table)
        return

    msg = asyncio.run(_run_command(cfg, f"repaste {url}"))
    if not any(reply.startswith("Repasted") for reply in msg.replies):
        raise typer.Exit(1)


@app.command()
def unpaste(gist_id: str = typer.Argument(..., help="Gist id or URL")) -> None:
    """Delete a gist created by repaste."""
    msg = asyncio.run(_run_command(load_config(), f"unpaste {gist_id}"))
    if not any(reply.startswith("Deleted") for reply in msg.replies):
        raise typer.Exit(1)


@app.command()
def logs(
    lines: int = typer.Option(50, "--lines", "-n", help="Number of lines"),
    follow: bool = typer.Option(False, "--follow", "-f", help="Follow log output"),
) -> None:
    """View bot logs."""
    log_path = Path(LOG_FILE).expanduser().resolve()
    if not log_path.exists():
        console.print("[dim]No log file found.[/dim]")
        return

    if follow:
        import subprocess

        try:
            subprocess.run(["tail", "-f", "-n", str(lines), str(log_path)])
        except KeyboardInterrupt:
            pass
    else:
        log_lines = log_path.read_text().strip().split("\n")
        for line in log_lines[-lines:]:
            console.print(line, markup=False)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"repaste-bot v{__version__}")

    installed, version_info = check_prettier_cli()
    if installed:
        console.print(f"prettier: {version_info}")
    else:
        console.print("prettier: [yellow]not installed[/yellow]")

    console.print(f"Python: {sys.version.split()[0]}")
    console.print(f"Config: {CONFIG_FILE}")


if __name__ == "__main__":
    app()
