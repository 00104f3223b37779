"""Tests for the PID file."""

from __future__ import annotations

import os

from repaste_bot.daemon import PidFile


class TestPidFile:
    def test_write_and_read(self, tmp_path):
        pid_file = PidFile(tmp_path / "bot.pid")
        pid_file.write()
        assert pid_file.read() == os.getpid()

    def test_missing(self, tmp_path):
        assert PidFile(tmp_path / "bot.pid").read() is None

    def test_garbage_removed(self, tmp_path):
        path = tmp_path / "bot.pid"
        path.write_text("not a pid")
        assert PidFile(path).read() is None
        assert not path.exists()

    def test_stale_pid_removed(self, tmp_path, monkeypatch):
        path = tmp_path / "bot.pid"
        path.write_text("424242")

        def dead(pid, sig):
            raise ProcessLookupError

        monkeypatch.setattr(os, "kill", dead)
        assert PidFile(path).read() is None
        assert not path.exists()

    def test_stop_not_running(self, tmp_path):
        assert PidFile(tmp_path / "bot.pid").stop() is False

    def test_stop_terminates(self, tmp_path, monkeypatch):
        path = tmp_path / "bot.pid"
        path.write_text("424242")
        sent: list[int] = []

        def fake_kill(pid, sig):
            if sig != 0:
                sent.append(sig)
            elif sent:
                raise ProcessLookupError

        monkeypatch.setattr(os, "kill", fake_kill)
        assert PidFile(path).stop(timeout=1.0) is True
        assert len(sent) == 1
        assert not path.exists()

    def test_remove_missing_ok(self, tmp_path):
        PidFile(tmp_path / "bot.pid").remove()
