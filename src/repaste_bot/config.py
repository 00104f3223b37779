"""Configuration management using TOML + environment variables."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[no-redef]

import tomli_w

CONFIG_DIR = Path.home() / ".repaste-bot"
CONFIG_FILE = CONFIG_DIR / "config.toml"
PID_FILE = CONFIG_DIR / "bot.pid"
LOG_FILE = CONFIG_DIR / "bot.log"

GITHUB_API_URL = "https://api.github.com"


@dataclass
class BotConfig:
    token: str = ""
    allowed_users: list[int] = field(default_factory=list)


@dataclass
class GithubConfig:
    token: str = ""
    api_url: str = GITHUB_API_URL
    public: bool = True
    shortener_url: str = ""


@dataclass
class RepasteConfig:
    log_window: int = 500
    jsx_chats: list[str] = field(default_factory=lambda: ["@reactjs"])
    maintainer: str = "ljharb"
    http_timeout: int = 30


@dataclass
class FormatterConfig:
    command: str = "prettier"
    timeout: int = 15
    enabled: bool = True


@dataclass
class LoggingConfig:
    level: str = "WARNING"
    file: str = "~/.repaste-bot/bot.log"


@dataclass
class AppConfig:
    bot: BotConfig = field(default_factory=BotConfig)
    github: GithubConfig = field(default_factory=GithubConfig)
    repaste: RepasteConfig = field(default_factory=RepasteConfig)
    formatter: FormatterConfig = field(default_factory=FormatterConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def ensure_config_dir() -> None:
    """Create config directory with secure permissions."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    os.chmod(CONFIG_DIR, 0o700)


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def load_config() -> AppConfig:
    """Load configuration from TOML file with env var overrides."""
    config = AppConfig()

    if CONFIG_FILE.exists():
        with open(CONFIG_FILE, "rb") as f:
            data = tomllib.load(f)

        bot = data.get("bot", {})
        config.bot.token = bot.get("token", "")
        config.bot.allowed_users = bot.get("allowed_users", [])

        github = data.get("github", {})
        config.github.token = github.get("token", "")
        config.github.api_url = github.get("api_url", config.github.api_url)
        config.github.public = github.get("public", config.github.public)
        config.github.shortener_url = github.get("shortener_url", config.github.shortener_url)

        repaste = data.get("repaste", {})
        config.repaste.log_window = repaste.get("log_window", config.repaste.log_window)
        config.repaste.jsx_chats = repaste.get("jsx_chats", config.repaste.jsx_chats)
        config.repaste.maintainer = repaste.get("maintainer", config.repaste.maintainer)
        config.repaste.http_timeout = repaste.get("http_timeout", config.repaste.http_timeout)

        formatter = data.get("formatter", {})
        config.formatter.command = formatter.get("command", config.formatter.command)
        config.formatter.timeout = formatter.get("timeout", config.formatter.timeout)
        config.formatter.enabled = formatter.get("enabled", config.formatter.enabled)

        logging_cfg = data.get("logging", {})
        config.logging.level = logging_cfg.get("level", config.logging.level)
        config.logging.file = logging_cfg.get("file", config.logging.file)

    # Environment variable overrides
    if env_token := os.environ.get("REPASTE_BOT_TOKEN"):
        config.bot.token = env_token
    if env_users := os.environ.get("REPASTE_ALLOWED_USERS"):
        config.bot.allowed_users = [int(u) for u in _split_list(env_users)]
    if env_github := os.environ.get("REPASTE_GITHUB_TOKEN"):
        config.github.token = env_github
    if env_window := os.environ.get("REPASTE_LOG_WINDOW"):
        config.repaste.log_window = int(env_window)
    if env_jsx := os.environ.get("REPASTE_JSX_CHATS"):
        config.repaste.jsx_chats = _split_list(env_jsx)
    if env_prettier := os.environ.get("REPASTE_PRETTIER"):
        config.formatter.command = env_prettier
    if env_log_level := os.environ.get("REPASTE_LOG_LEVEL"):
        config.logging.level = env_log_level

    return config


def save_config(config: AppConfig) -> None:
    """Save configuration to TOML file."""
    ensure_config_dir()

    data = {
        "bot": {
            "token": config.bot.token,
            "allowed_users": config.bot.allowed_users,
        },
        "github": {
            "token": config.github.token,
            "api_url": config.github.api_url,
            "public": config.github.public,
            "shortener_url": config.github.shortener_url,
        },
        "repaste": {
            "log_window": config.repaste.log_window,
            "jsx_chats": config.repaste.jsx_chats,
            "maintainer": config.repaste.maintainer,
            "http_timeout": config.repaste.http_timeout,
        },
        "formatter": {
            "command": config.formatter.command,
            "timeout": config.formatter.timeout,
            "enabled": config.formatter.enabled,
        },
        "logging": {
            "level": config.logging.level,
            "file": config.logging.file,
        },
    }

    with open(CONFIG_FILE, "wb") as f:
        tomli_w.dump(data, f)

    os.chmod(CONFIG_FILE, 0o600)


# Global singleton
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get or load the global config singleton."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset the global config (for testing)."""
    global _config
    _config = None
