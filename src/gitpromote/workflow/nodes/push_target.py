"""PushTarget node - push the target branch to trigger CI."""

from __future__ import annotations

import re
from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from gitpromote.core.config import State
from gitpromote.git.remote import infer_ci_url
from gitpromote.workflow.deps import PromotionDeps
from gitpromote.workflow.outcome import Outcome, halt

# "[remote rejected]" (hooks, protected branches) is not a fast-forward problem
_NON_FAST_FORWARD = re.compile(r"non-fast-forward|fetch first", re.IGNORECASE)


def is_non_fast_forward(error: str | None) -> bool:
    return bool(error) and bool(_NON_FAST_FORWARD.search(error))


@dataclass
class PushTarget(BaseNode[State, PromotionDeps, Outcome]):
    """Push the target branch; offer force-with-lease after a rejection."""

    async def run(
        self, ctx: GraphRunContext[State, PromotionDeps]
    ) -> "Summary | End[Outcome]":
        deps = ctx.deps
        run = ctx.state.runtime.promotion
        target = run.target_branch
        remote = deps.driver.remote
        deps.console.step(5, "Push to trigger CI")

        deps.console.info(f"git push {remote} {target}")
        pushed = deps.driver.push(target)

        if not pushed.success:
            if not is_non_fast_forward(pushed.error):
                deps.console.error(f"Push failed: {pushed.error}")
                return halt(ctx, f"Push of {target} failed: {pushed.error}")

            deps.console.warning(
                f"Push rejected; {remote}/{target} has commits you do not"
            )
            deps.console.info(
                f"Usually: git pull --rebase {remote} {target}, then "
                f"git push {remote} {target}"
            )
            if not deps.prompter.confirm_force_with_lease(
                default=ctx.state.config.workflow.allow_force_push
            ):
                return halt(ctx, f"Push of {target} rejected")

            deps.console.info(f"git push --force-with-lease {remote} {target}")
            forced = deps.driver.push(target, force_with_lease=True)
            if not forced.success:
                deps.console.error(f"Forced push failed: {forced.error}")
                return halt(ctx, f"Forced push failed: {forced.error}")
            deps.console.success("Forced push succeeded")
        else:
            deps.console.success(f"Pushed to {remote}/{target}")

        run.ci_url = infer_ci_url(deps.driver.remote_url())
        if run.ci_url:
            deps.console.detail(f"CI: {run.ci_url}", fg="cyan")
        else:
            deps.console.info("CI triggered; check your CI dashboard")

        from gitpromote.workflow.nodes.summary import Summary
        return Summary()
