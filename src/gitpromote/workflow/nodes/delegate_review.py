"""DelegateReview node - hand promotions to main over to code review."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from gitpromote.core.config import State
from gitpromote.git.remote import infer_review_url
from gitpromote.workflow.deps import PromotionDeps
from gitpromote.workflow.outcome import Outcome, OutcomeKind, finish


@dataclass
class DelegateReview(BaseNode[State, PromotionDeps, Outcome]):
    """Point the operator at a pull request instead of merging."""

    async def run(
        self, ctx: GraphRunContext[State, PromotionDeps]
    ) -> End[Outcome]:
        deps = ctx.deps
        run = ctx.state.runtime.promotion
        target = run.target_branch

        direct = deps.prompter.confirm_direct_merge(target)
        if direct:
            deps.console.warning(
                f"Direct merges into {target} are not performed; "
                f"open a pull request instead"
            )
        else:
            deps.console.info("Cancelled; open a pull request to merge")

        url = infer_review_url(
            deps.driver.remote_url(), run.original_branch, target
        )
        if url:
            deps.console.detail(f"Pull request: {url}", fg="cyan")

        return finish(
            ctx,
            OutcomeKind.DELEGATED,
            f"Promotion to {target} delegated to code review",
        )
