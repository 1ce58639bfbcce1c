"""Tests for the command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tabshell import cli


@pytest.fixture
def local_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run against /bin/sh in-process with state in a temp file."""
    state = tmp_path / "state.json"
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TABSHELL_EXECUTOR__BACKEND", "local")
    monkeypatch.setenv("TABSHELL_ENDPOINT__SHELL_COMMAND", "/bin/sh")
    monkeypatch.setenv("TABSHELL_STORAGE__PATH", str(state))
    monkeypatch.setattr("tabshell.utils.logging.setup_logging", lambda *a, **kw: None)
    return state


def run_cli(tmp_path: Path, *args: str) -> int | None:
    try:
        cli.main(["-c", str(tmp_path / "missing.yaml"), *args])
    except SystemExit as e:
        return e.code
    return None


class TestParseArgs:
    def test_console_defaults(self) -> None:
        args = cli.parse_args(["console"])
        assert args.command == "console"
        assert args.ephemeral is False
        assert args.config is None

    def test_exec_with_session(self) -> None:
        args = cli.parse_args(["-v", "exec", "ls -la", "--session", "2"])
        assert args.verbose is True
        assert args.line == "ls -la"
        assert args.session == "2"

    def test_config_path(self) -> None:
        args = cli.parse_args(["-c", "other.yaml", "sessions"])
        assert args.config == Path("other.yaml")


class TestExec:
    def test_runs_and_persists(self, local_env: Path, tmp_path: Path, capsys) -> None:
        assert run_cli(tmp_path, "exec", "echo hi") == 0

        out = capsys.readouterr().out
        assert "$ echo hi" in out
        assert "hi" in out
        stored = json.loads(json.loads(local_env.read_text())["terminal-sessions"])
        assert stored[0]["history"] == [
            {"type": "command", "content": "$ echo hi"},
            {"type": "output", "content": "hi\n"},
        ]

    def test_failure_is_printed(self, local_env: Path, tmp_path: Path, capsys) -> None:
        assert run_cli(tmp_path, "exec", "echo bad 1>&2; exit 4") == 0
        assert "bad" in capsys.readouterr().out

    def test_unknown_session(self, local_env: Path, tmp_path: Path, capsys) -> None:
        assert run_cli(tmp_path, "exec", "ls", "--session", "nope") == 1
        assert "Unknown session: nope" in capsys.readouterr().out


class TestSessions:
    def test_no_saved_sessions(self, local_env: Path, tmp_path: Path, capsys) -> None:
        run_cli(tmp_path, "sessions")
        assert "No saved sessions" in capsys.readouterr().out
        assert not local_env.exists()

    def test_lists_after_exec(self, local_env: Path, tmp_path: Path, capsys) -> None:
        run_cli(tmp_path, "exec", "true")
        capsys.readouterr()

        run_cli(tmp_path, "sessions")

        out = capsys.readouterr().out
        assert "Terminal 1" in out
        assert "*" in out

    def test_unreadable_state(self, local_env: Path, tmp_path: Path, capsys) -> None:
        local_env.write_text(json.dumps({"terminal-sessions": "{broken"}))
        run_cli(tmp_path, "sessions")
        assert "unreadable" in capsys.readouterr().out

    def test_corrupt_file(self, local_env: Path, tmp_path: Path, capsys) -> None:
        local_env.write_text("not json")
        run_cli(tmp_path, "sessions")
        assert "Cannot read" in capsys.readouterr().out

    def test_session_option_keeps_active_tab(self, local_env: Path, tmp_path: Path, capsys) -> None:
        run_cli(tmp_path, "exec", "true")
        state = json.loads(local_env.read_text())
        sessions = json.loads(state["terminal-sessions"])
        sessions.append({"id": "2", "name": "Terminal 2", "history": []})
        state["terminal-sessions"] = json.dumps(sessions)
        local_env.write_text(json.dumps(state))

        assert run_cli(tmp_path, "exec", "echo other", "--session", "2") == 0

        state = json.loads(local_env.read_text())
        assert state["active-terminal-tab"] == "1"
        stored = json.loads(state["terminal-sessions"])
        assert stored[1]["history"] == [
            {"type": "command", "content": "$ echo other"},
            {"type": "output", "content": "other\n"},
        ]
