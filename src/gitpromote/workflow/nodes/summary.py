"""Summary node - report the run and optionally switch back."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from gitpromote.core.config import State
from gitpromote.workflow.deps import PromotionDeps
from gitpromote.workflow.outcome import Outcome, OutcomeKind, finish


@dataclass
class Summary(BaseNode[State, PromotionDeps, Outcome]):
    """Print what happened; switching back is best effort."""

    async def run(
        self, ctx: GraphRunContext[State, PromotionDeps]
    ) -> End[Outcome]:
        deps = ctx.deps
        console = deps.console
        run = ctx.state.runtime.promotion
        remote = deps.driver.remote
        console.step(6, "Summary")

        console.detail("\nRun summary:", bold=True)
        console.detail(f"  source branch:  {run.original_branch}", fg="cyan")
        console.detail(f"  target branch:  {run.target_branch}", fg="cyan")
        if run.source_pull_strategy:
            console.detail(
                f"  source pull:    {run.source_pull_strategy.value}",
                fg="cyan",
            )
        if run.target_pull_strategy:
            console.detail(
                f"  target pull:    {run.target_pull_strategy.value}",
                fg="cyan",
            )
        if run.merge_strategy:
            console.detail(
                f"  merge strategy: {run.merge_strategy.value}", fg="cyan"
            )
        if run.resumed_merge:
            console.detail("  resumed merge:  yes", fg="cyan")
        console.detail(f"  pushed to:      {remote}/{run.target_branch}", fg="cyan")

        subjects = deps.driver.recent_subjects(1)
        if subjects:
            console.detail(f"  last commit:    {subjects[0]}", fg="cyan")

        console.detail("\nTo roll back after the push:", bold=True)
        console.detail("  git revert -m 1 <merge-commit>")
        console.detail(f"  git push {remote} {run.target_branch}")

        original = run.original_branch
        if (
            ctx.state.config.workflow.auto_switch_back
            and original
            and original != run.target_branch
            and deps.prompter.confirm_switch_back(original)
        ):
            console.info(f"git checkout {original}")
            switched = deps.driver.checkout(original)
            if switched.success:
                console.success(f"Back on {original}")
            else:
                console.warning(
                    f"Could not switch back to {original}: {switched.error}"
                )

        console.detail(
            f"\n✅ Promotion to {run.target_branch} complete\n",
            fg="green",
            bold=True,
        )
        return finish(ctx, OutcomeKind.COMPLETE)
