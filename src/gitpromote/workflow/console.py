"""Console output for promotion runs.

Purely for the operator; nothing parses it.
"""

from __future__ import annotations

import click

from gitpromote.core.log import logger

RULE = "─" * 50


class Console:
    """Step headers and colored status markers."""

    def __init__(self, echo=click.echo):
        self._echo = echo

    def _line(self, text: str = "", **style):
        self._echo(click.style(text, **style) if style else text)

    def banner(self, text: str):
        self._line(f"\n{text}\n", fg="cyan", bold=True)

    def step(self, number: int, title: str):
        logger.info("Step", number=number, title=title)
        self._line(f"\nStep {number}: {title}", fg="cyan", bold=True)
        self._line(RULE, fg="bright_black")

    def success(self, message: str):
        self._line(f"✓ {message}", fg="green")

    def warning(self, message: str):
        logger.warn(message)
        self._line(f"⚠  {message}", fg="yellow")

    def error(self, message: str):
        logger.error(message)
        self._line(f"✗ {message}", fg="red")

    def info(self, message: str):
        self._line(f"→ {message}", fg="blue")

    def detail(self, message: str, **style):
        self._line(message, **style)

    def dry_run_banner(self):
        self._line(
            "\n⚠  DRY-RUN: git commands that change the repository are "
            "printed, not executed\n",
            fg="yellow",
            bold=True,
        )

    def conflict_report(
        self,
        step: str,
        conflict_files: tuple[str, ...] | list[str],
        current_branch: str | None,
        target_branch: str,
        source_branch: str | None,
        remote: str,
        rebase: bool,
        note: str = "",
    ):
        """Explain where the run stopped and how to recover."""
        logger.error(
            "Conflict halted the run",
            step=step,
            files=list(conflict_files),
        )
        self.error(f"Conflict while {step}; the run has stopped")

        self._line("\nCurrent state:", fg="cyan")
        self._line(f"  current branch: {current_branch or 'unknown'}")
        self._line(f"  target branch:  {target_branch}")

        if conflict_files:
            self._line("\nConflicting files:", fg="yellow")
            for path in conflict_files:
                self._line(f"  - {path}", fg="yellow")

        self._line("\nTo resolve:", fg="cyan")
        self._line("  1. Fix the conflicts by hand")
        self._line("  2. git add <resolved files>")
        if rebase:
            self._line("  3. git rebase --continue")
            self._line("  4. Run the promotion again")
        else:
            # The resolution lands on whichever branch was checked out
            branch = current_branch or target_branch
            self._line("  3. git commit (or git merge --continue)")
            self._line(f"  4. git push {remote} {branch}")
            self._line("\nNote:", fg="yellow")
            self._line(
                f"  - After committing the resolution, push it yourself: "
                f"git push {remote} {branch}",
                fg="yellow",
            )
            if source_branch != branch:
                self._line(
                    f"  - Make sure {source_branch or 'the source branch'} "
                    f"is pushed too: git push {remote} <branch>",
                    fg="yellow",
                )
            self._line(
                "  - Check the result with: git log --oneline --graph",
                fg="yellow",
            )

        if note:
            self._line(f"\n{note}", fg="bright_black")
