"""System utility checks."""

from __future__ import annotations

import shutil
import subprocess


def check_prettier_cli(command: str = "prettier") -> tuple[bool, str]:
    """Check whether the prettier CLI is available and return its version."""
    if not shutil.which(command):
        return False, f"{command} not found. Install: npm install -g prettier"
    try:
        result = subprocess.run(
            [command, "--version"],
            capture_output=True,
            text=True,
            timeout=10,
        )
    except subprocess.TimeoutExpired:
        return False, "prettier version check timed out"
    except OSError as e:
        return False, f"Error checking prettier: {e}"
    return True, result.stdout.strip() or result.stderr.strip()
