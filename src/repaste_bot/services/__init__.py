"""Repaste pipeline services."""
