"""Operator interaction at workflow decision points."""

from __future__ import annotations

import re
from typing import Protocol

import click

from gitpromote.core.config import MergeStrategy, PullStrategy

CONVENTIONAL_COMMIT = re.compile(
    r"^(feat|fix|docs|style|refactor|perf|test|build|ci|chore|revert|merge)"
    r"(\([\w./-]+\))?!?: \S.*"
)

PULL_CHOICES = {
    PullStrategy.REBASE: "rebase (linear history, recommended)",
    PullStrategy.MERGE: "merge (keep merge history)",
}

MERGE_CHOICES = {
    MergeStrategy.NO_FF: "--no-ff (merge commit, easy to revert; recommended)",
    MergeStrategy.FF_ONLY: "--ff-only (fast-forward only)",
    MergeStrategy.SQUASH: "--squash (collapse into one change)",
}


def validate_commit_message(message: str, conventional: bool = False) -> str:
    """Return the trimmed message or raise click.BadParameter."""
    message = (message or "").strip()
    if not message:
        raise click.BadParameter("Commit message cannot be empty")
    if conventional and not CONVENTIONAL_COMMIT.match(message):
        raise click.BadParameter(
            "Use Conventional Commits, e.g. 'fix(parser): handle empty input'"
        )
    return message


class Prompter(Protocol):
    """Blocking request/response with the operator."""

    def commit_message(self, conventional: bool = False) -> str:
        ...

    def confirm_create_remote_branch(self, branch: str) -> bool:
        ...

    def select_pull_strategy(self, default: PullStrategy) -> PullStrategy:
        ...

    def select_merge_strategy(self, default: MergeStrategy) -> MergeStrategy:
        ...

    def confirm_continue(self, question: str) -> bool:
        ...

    def confirm_switch_back(self, branch: str) -> bool:
        ...

    def confirm_force_with_lease(self, default: bool = False) -> bool:
        ...

    def confirm_direct_merge(self, target: str) -> bool:
        ...


class ClickPrompter:
    """Prompter on the terminal using click."""

    def commit_message(self, conventional: bool = False) -> str:
        hint = " (Conventional Commits)" if conventional else ""
        return click.prompt(
            f"Commit message{hint}",
            value_proc=lambda v: validate_commit_message(v, conventional),
        )

    def confirm_create_remote_branch(self, branch: str) -> bool:
        return click.confirm(
            f"Branch {click.style(branch, fg='cyan')} has no remote branch. "
            f"Create and push it?",
            default=True,
        )

    def select_pull_strategy(self, default: PullStrategy) -> PullStrategy:
        return self._choose("Pull strategy", PULL_CHOICES, default)

    def select_merge_strategy(self, default: MergeStrategy) -> MergeStrategy:
        return self._choose("Merge strategy", MERGE_CHOICES, default)

    def confirm_continue(self, question: str) -> bool:
        return click.confirm(question, default=False)

    def confirm_switch_back(self, branch: str) -> bool:
        return click.confirm(
            f"Switch back to {click.style(branch, fg='cyan')}?", default=True
        )

    def confirm_force_with_lease(self, default: bool = False) -> bool:
        return click.confirm(
            click.style("Retry with git push --force-with-lease?", fg="yellow"),
            default=default,
        )

    def confirm_direct_merge(self, target: str) -> bool:
        return click.confirm(
            click.style(
                f"Changes to {target} should go through a pull request. "
                f"Merge directly anyway?",
                fg="yellow",
            ),
            default=False,
        )

    @staticmethod
    def _choose(title, choices: dict, default):
        for value, label in choices.items():
            click.echo(f"  {value.value:<8} {label}")
        picked = click.prompt(
            title,
            type=click.Choice([value.value for value in choices]),
            default=default.value,
            show_choices=True,
        )
        return type(default)(picked)
