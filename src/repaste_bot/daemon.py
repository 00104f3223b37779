"""Background process support: PID file and double-fork daemonize."""

from __future__ import annotations

import logging
import os
import signal
import sys
import time
from pathlib import Path

logger = logging.getLogger(__name__)

STOP_TIMEOUT = 5.0


class PidFile:
    """PID file of the running bot, validated against the process table."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(str(os.getpid()))

    def remove(self) -> None:
        self.path.unlink(missing_ok=True)

    def read(self) -> int | None:
        """PID of the live bot process, or None (stale files are removed)."""
        if not self.path.exists():
            return None
        try:
            pid = int(self.path.read_text().strip())
            os.kill(pid, 0)
        except (ValueError, ProcessLookupError, PermissionError):
            self.remove()
            return None
        return pid

    def _alive(self, pid: int) -> bool:
        try:
            os.kill(pid, 0)
        except ProcessLookupError:
            return False
        return True

    def stop(self, timeout: float = STOP_TIMEOUT) -> bool:
        """SIGTERM the bot, SIGKILL it after ``timeout``. False if it wasn't running."""
        pid = self.read()
        if pid is None:
            return False

        try:
            os.kill(pid, signal.SIGTERM)
        except ProcessLookupError:
            self.remove()
            return True

        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if not self._alive(pid):
                self.remove()
                return True
            time.sleep(0.1)

        logger.warning("Bot (PID %d) ignored SIGTERM, killing it", pid)
        try:
            os.kill(pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
        self.remove()
        return True


def daemonize(log_file: Path) -> None:
    """Unix double-fork; stdout and stderr go to ``log_file``."""
    if os.fork() > 0:
        sys.exit(0)
    os.setsid()
    if os.fork() > 0:
        sys.exit(0)

    sys.stdout.flush()
    sys.stderr.flush()

    devnull = open(os.devnull, "r")
    log_fd = open(log_file, "a")

    os.dup2(devnull.fileno(), sys.stdin.fileno())
    os.dup2(log_fd.fileno(), sys.stdout.fileno())
    os.dup2(log_fd.fileno(), sys.stderr.fileno())
