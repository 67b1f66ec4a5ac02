"""
Process execution for wrapped tools. Echoes each command line before running it,
the way make echoes recipe lines; dry-run echoes only.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO

from stackctl.core.errors import CommandFailedError, ToolNotFoundError

logger = logging.getLogger(__name__)

INTERRUPTED_EXIT_CODE = 130


class CommandRunner:
    """Runs argv lists synchronously, one process at a time."""

    def __init__(self, dry_run: bool = False, echo: bool = True, stdout: Optional[TextIO] = None) -> None:
        self.dry_run = dry_run
        self.echo = echo
        self._stdout = stdout

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    def _echo(self, argv: Sequence[str], cwd: Optional[Path | str]) -> None:
        if not self.echo:
            return
        line = shlex.join(argv)
        if cwd is not None:
            line = f"cd {shlex.quote(str(cwd))} && {line}"
        print(line, file=self.stdout, flush=True)

    def run(
        self,
        argv: Sequence[str],
        *,
        cwd: Optional[Path | str] = None,
        check: bool = True,
        best_effort: bool = False,
        interactive: bool = False,
    ) -> int:
        """
        Run argv and return its exit code.
        best_effort: discard stderr and never raise (2>/dev/null || true).
        check: raise CommandFailedError on non-zero exit (ignored when best_effort).
        interactive: inherit the terminal; Ctrl-C ends the command and returns 130.
        """
        argv = list(argv)
        self._echo(argv, cwd)
        if self.dry_run:
            return 0

        logger.debug("run argv=%r cwd=%s best_effort=%s interactive=%s", argv, cwd, best_effort, interactive)
        try:
            if interactive:
                result = subprocess.run(argv, cwd=cwd)
            else:
                result = subprocess.run(
                    argv,
                    cwd=cwd,
                    stderr=subprocess.DEVNULL if best_effort else None,
                )
        except FileNotFoundError:
            if best_effort:
                logger.debug("best-effort command skipped, %s not found", argv[0])
                return ToolNotFoundError.exit_code
            raise ToolNotFoundError(argv[0]) from None
        except KeyboardInterrupt:
            if interactive:
                return INTERRUPTED_EXIT_CODE
            raise

        code = result.returncode
        logger.debug("exit code %s for %s", code, argv[0])
        if code != 0:
            if best_effort:
                logger.debug("ignoring failure of best-effort command: %s", shlex.join(argv))
            elif check:
                raise CommandFailedError(argv, code)
        return code

    def capture(self, argv: Sequence[str]) -> str:
        """Run a read-only query and return its stripped stdout. Runs in dry-run too."""
        argv = list(argv)
        logger.debug("capture argv=%r", argv)
        try:
            result = subprocess.run(argv, capture_output=True, text=True)
        except FileNotFoundError:
            raise ToolNotFoundError(argv[0]) from None
        if result.returncode != 0:
            if result.stderr:
                logger.debug("stderr: %s", result.stderr.strip())
            raise CommandFailedError(argv, result.returncode)
        return (result.stdout or "").strip()
