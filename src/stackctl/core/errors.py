"""
Error hierarchy for stackctl. Targets raise; only the CLI entrypoint catches
StackctlError and turns it into an exit code.
"""

from __future__ import annotations

import shlex
from typing import Sequence


class StackctlError(Exception):
    """Base error; exit_code is what the CLI returns when this escapes a target."""

    exit_code: int = 1


class ConfigError(StackctlError):
    """Invalid configuration value (MODE, numeric env vars)."""


class CommandFailedError(StackctlError):
    """A wrapped tool exited non-zero; the CLI exits with the same code."""

    def __init__(self, argv: Sequence[str], returncode: int) -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.exit_code = returncode if returncode > 0 else 1
        super().__init__(f"command failed with exit code {returncode}: {shlex.join(self.argv)}")


class ToolNotFoundError(StackctlError):
    """The executable for a wrapped tool is not on PATH."""

    exit_code = 127

    def __init__(self, tool: str) -> None:
        self.tool = tool
        super().__init__(f"{tool}: command not found")


class ContainerNotFoundError(StackctlError):
    def __init__(self, service: str, compose_file: str) -> None:
        self.service = service
        self.compose_file = compose_file
        super().__init__(f"no running container for service {service!r} (compose file: {compose_file})")


class ConfirmationDeclined(StackctlError):
    def __init__(self, message: str = "aborted") -> None:
        super().__init__(message)
