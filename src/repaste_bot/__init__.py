"""Repaste code from paste sites to GitHub gists from Telegram."""

__version__ = "0.1.0"
