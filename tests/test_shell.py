"""Tests for the nested shell used by `hop to`."""

import shutil
import stat

import pytest

from hop.shell import FALLBACK_SHELL, resolve_shell, spawn_shell


class TestResolveShell:

    def test_configured_wins(self, monkeypatch):
        monkeypatch.setenv("SHELL", "/bin/zsh")
        assert resolve_shell("/usr/bin/fish") == "/usr/bin/fish"

    def test_env_shell(self, monkeypatch):
        monkeypatch.setenv("SHELL", "/bin/zsh")
        assert resolve_shell() == "/bin/zsh"

    def test_fallback(self, monkeypatch):
        monkeypatch.delenv("SHELL", raising=False)
        assert resolve_shell("") == FALLBACK_SHELL


class TestSpawnShell:

    def test_runs_in_directory_and_returns_status(self, tmp_path):
        target = tmp_path / "target"
        target.mkdir()
        script = tmp_path / "fake-shell"
        script.write_text("#!/bin/sh\npwd -P > \"$0.out\"\nexit 4\n")
        script.chmod(script.stat().st_mode | stat.S_IEXEC)

        assert spawn_shell(str(target), str(script)) == 4
        assert (tmp_path / "fake-shell.out").read_text().strip() == str(target.resolve())

    @pytest.mark.skipif(shutil.which("true") is None, reason="needs `true`")
    def test_clean_exit(self, tmp_path):
        assert spawn_shell(str(tmp_path), shutil.which("true")) == 0

    @pytest.mark.skipif(shutil.which("sh") is None, reason="needs `sh`")
    def test_command_with_arguments(self, tmp_path):
        assert spawn_shell(str(tmp_path), "sh -c 'exit 5'") == 5

    def test_unbalanced_quotes_raise(self, tmp_path):
        with pytest.raises(ValueError):
            spawn_shell(str(tmp_path), "sh -c 'exit")

    def test_missing_shell_raises(self, tmp_path):
        with pytest.raises(OSError):
            spawn_shell(str(tmp_path), str(tmp_path / "no-such-shell"))
