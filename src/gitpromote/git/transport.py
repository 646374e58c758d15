"""Transports that carry git sub-operations to a repository.

The driver is built with exactly one transport:

- LiveTransport runs git through invoke.
- RecordingTransport records the commands that would change the
  repository and answers them with a synthetic success. Read-only
  queries are forwarded to a live transport so that state inspection
  stays realistic during a dry run.
"""

from __future__ import annotations

import shlex
from pathlib import Path
from typing import Protocol

import click

from gitpromote.core.log import logger
from gitpromote.core.result import OperationResult
from gitpromote.core.runner import Runner

# Sub-operations that never change the repository or its refs
READ_ONLY_SUBCOMMANDS = frozenset({
    "status",
    "branch",
    "remote",
    "config",
    "rev-parse",
    "rev-list",
    "show-ref",
    "log",
    "for-each-ref",
})


def format_command(argv: list[str]) -> str:
    """Render an argv as the git command line a user would type."""
    return shlex.join(["git", *argv])


class Transport(Protocol):
    """Something that can run ``git <argv>`` in a repository."""

    def run(self, argv: list[str]) -> OperationResult:
        ...


class LiveTransport:
    """Runs git in a working tree."""

    def __init__(self, repo_path: Path, runner: Runner | None = None):
        self.repo_path = Path(repo_path)
        self.runner = runner or Runner()

    def run(self, argv: list[str]) -> OperationResult:
        command = format_command(argv)
        # Rejection detection matches English messages
        result = self.runner.execute(
            command, cwd=self.repo_path, check=False, env={"LC_ALL": "C"}
        )
        logger.debug(
            "git finished", command=command, exit_code=result.exited
        )
        if result.exited != 0:
            return OperationResult(
                success=False,
                output=result.stdout,
                error=result.stderr.strip() or result.stdout.strip(),
            )
        return OperationResult(success=True, output=result.stdout)


class RecordingTransport:
    """Dry-run transport: records mutating commands without running them."""

    def __init__(
        self,
        reader: Transport | None = None,
        echo: bool = True,
    ):
        """Create a recording transport.

        Args:
            reader: Transport answering read-only queries. When None,
                read-only queries are recorded like everything else.
            echo: Print each recorded command to the console
        """
        self.reader = reader
        self.echo = echo
        self.recorded: list[list[str]] = []

    def run(self, argv: list[str]) -> OperationResult:
        if self.reader is not None and argv and (
            argv[0] in READ_ONLY_SUBCOMMANDS
        ):
            return self.reader.run(argv)

        self.recorded.append(list(argv))
        command = format_command(argv)
        logger.info("Dry run: command not executed", command=command)
        if self.echo:
            click.secho(f"[DRY-RUN] would run: {command}", fg="yellow")
        return OperationResult(
            success=True,
            output="[DRY-RUN] simulated",
            synthetic=True,
        )
