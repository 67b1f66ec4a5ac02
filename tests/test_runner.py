"""
Tests for CommandRunner: echo, dry-run, checked / best-effort / interactive runs, capture.
subprocess.run is mocked; nothing real is executed.
"""

from __future__ import annotations

import io
import subprocess
from unittest.mock import patch

import pytest

from stackctl.core.errors import CommandFailedError, ToolNotFoundError
from stackctl.runner import INTERRUPTED_EXIT_CODE, CommandRunner


def _completed(code: int = 0, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=code, stdout=stdout, stderr=stderr)


def test_dry_run_echoes_and_does_not_execute() -> None:
    out = io.StringIO()
    runner = CommandRunner(dry_run=True, stdout=out)
    with patch("stackctl.runner.subprocess.run") as mock_run:
        code = runner.run(["docker", "compose", "-f", "a b.yaml", "ps"])
    assert code == 0
    mock_run.assert_not_called()
    assert out.getvalue() == "docker compose -f 'a b.yaml' ps\n"


def test_echo_includes_cwd() -> None:
    out = io.StringIO()
    CommandRunner(dry_run=True, stdout=out).run(["npm", "install"], cwd="backend")
    assert out.getvalue().strip() == "cd backend && npm install"


def test_success_returns_zero() -> None:
    runner = CommandRunner(stdout=io.StringIO())
    with patch("stackctl.runner.subprocess.run", return_value=_completed(0)) as mock_run:
        assert runner.run(["docker", "compose", "ps"]) == 0
    args, kwargs = mock_run.call_args
    assert args[0] == ["docker", "compose", "ps"]
    assert kwargs["stderr"] is None


def test_failure_raises_with_tool_exit_code() -> None:
    runner = CommandRunner(stdout=io.StringIO())
    with patch("stackctl.runner.subprocess.run", return_value=_completed(17)):
        with pytest.raises(CommandFailedError) as exc_info:
            runner.run(["docker", "compose", "up", "-d"])
    assert exc_info.value.returncode == 17
    assert exc_info.value.exit_code == 17
    assert "docker compose up -d" in str(exc_info.value)


def test_failure_without_check_returns_code() -> None:
    runner = CommandRunner(stdout=io.StringIO())
    with patch("stackctl.runner.subprocess.run", return_value=_completed(3)):
        assert runner.run(["false"], check=False) == 3


def test_best_effort_discards_stderr_and_never_raises() -> None:
    runner = CommandRunner(stdout=io.StringIO())
    with patch("stackctl.runner.subprocess.run", return_value=_completed(1)) as mock_run:
        assert runner.run(["docker", "volume", "rm", "x"], best_effort=True) == 1
    assert mock_run.call_args.kwargs["stderr"] is subprocess.DEVNULL


def test_missing_tool_raises_tool_not_found() -> None:
    runner = CommandRunner(stdout=io.StringIO())
    with patch("stackctl.runner.subprocess.run", side_effect=FileNotFoundError()):
        with pytest.raises(ToolNotFoundError) as exc_info:
            runner.run(["docker", "ps"])
    assert exc_info.value.exit_code == 127
    assert "docker" in str(exc_info.value)


def test_missing_tool_in_best_effort_is_ignored() -> None:
    runner = CommandRunner(stdout=io.StringIO())
    with patch("stackctl.runner.subprocess.run", side_effect=FileNotFoundError()):
        assert runner.run(["docker", "ps"], best_effort=True) == 127


def test_interactive_inherits_terminal_and_maps_ctrl_c() -> None:
    runner = CommandRunner(stdout=io.StringIO())
    with patch("stackctl.runner.subprocess.run", side_effect=KeyboardInterrupt()) as mock_run:
        assert runner.run(["docker", "exec", "-it", "c1", "sh"], interactive=True) == INTERRUPTED_EXIT_CODE
    assert "stderr" not in mock_run.call_args.kwargs


def test_no_echo() -> None:
    out = io.StringIO()
    CommandRunner(dry_run=True, echo=False, stdout=out).run(["docker", "ps"])
    assert out.getvalue() == ""


def test_capture_returns_stripped_stdout_even_in_dry_run() -> None:
    runner = CommandRunner(dry_run=True, stdout=io.StringIO())
    with patch("stackctl.runner.subprocess.run", return_value=_completed(0, stdout="abc\ndef\n")) as mock_run:
        assert runner.capture(["docker", "compose", "ps", "-q", "backend"]) == "abc\ndef"
    assert mock_run.call_args.kwargs["capture_output"] is True


def test_capture_failure_raises() -> None:
    runner = CommandRunner(stdout=io.StringIO())
    with patch("stackctl.runner.subprocess.run", return_value=_completed(1, stderr="no such file")):
        with pytest.raises(CommandFailedError):
            runner.capture(["docker", "compose", "ps", "-q"])
