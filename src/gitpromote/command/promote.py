"""Promote commands - run the promotion workflow against a fixed target."""

from __future__ import annotations

import traceback
from typing import TYPE_CHECKING, ClassVar

import click
from pydantic import BaseModel, ConfigDict, Field
from pydantic_graph import End

from gitpromote.core.log import logger

if TYPE_CHECKING:
    from gitpromote.core.config import State
    from gitpromote.git.transport import Transport
    from gitpromote.interaction.prompter import Prompter
    from gitpromote.workflow.console import Console


class PromoteCommand(BaseModel):
    """Shared driver for both promotion commands."""

    target_branch: ClassVar[str] = "test"
    review_only: ClassVar[bool] = False

    model_config = ConfigDict(populate_by_name=True)

    dry_run: bool = Field(
        default=False,
        alias="dry-run",
        description=(
            "Print the git commands that would change the repository "
            "instead of running them"
        ),
    )

    async def run_workflow(
        self,
        state: State,
        prompter: Prompter | None = None,
        console: Console | None = None,
        transport: Transport | None = None,
    ) -> int:
        """Run the promotion workflow.

        Args:
            state: State instance with config loaded
            prompter: Replaces the interactive prompts (tests)
            console: Replaces terminal output (tests)
            transport: Replaces git execution (tests)

        Returns:
            Exit code (0=success or nothing to do, 1=halted)
        """
        from gitpromote.workflow.console import Console
        from gitpromote.workflow.deps import PromotionDeps
        from gitpromote.workflow.graph import create_workflow
        from gitpromote.workflow.nodes.preflight import Preflight

        if self.dry_run:
            state.dry_run = True
        run = state.runtime.promotion
        run.target_branch = self.target_branch

        console = console or Console()
        console.banner(f"Promote to {self.target_branch}")
        if state.dry_run:
            console.dry_run_banner()

        outcome = None
        try:
            deps = PromotionDeps.build(
                state, prompter=prompter, console=console, transport=transport
            )
            workflow = create_workflow()

            with logger.span(
                "promotion", target=self.target_branch, dry_run=state.dry_run
            ):
                async with workflow.iter(
                    Preflight(review_only=self.review_only),
                    state=state,
                    deps=deps,
                ) as graph_run:
                    async for node in graph_run:
                        if isinstance(node, End):
                            outcome = node.data
        except click.Abort:
            console.error("Aborted by user")
            return 1
        except Exception as e:
            logger.exception("Promotion failed", error=str(e))
            console.error(f"Unexpected error: {e}")
            console.detail(traceback.format_exc(), fg="bright_black")
            return 1

        if outcome is None:
            logger.error("Workflow ended without an outcome")
            return 1

        logger.info(
            "Promotion finished",
            outcome=outcome.kind.value,
            exit_code=outcome.exit_code,
        )
        return outcome.exit_code


class PromoteToTestCommand(PromoteCommand):
    """Commit, sync and merge the current branch into 'test', then push
    to trigger CI.

    Stops at the first conflict and explains how to resolve it.
    Settings come from gitpromote.yaml, environment variables or CLI
    flags.
    """

    target_branch: ClassVar[str] = "test"


class PromoteToMainCommand(PromoteCommand):
    """Validate the repository and hand the promotion to 'main' over to
    code review.

    Nothing is merged into 'main'; the command prints the pull request
    URL for the current branch when the remote host is recognized.
    """

    target_branch: ClassVar[str] = "main"
    review_only: ClassVar[bool] = True
