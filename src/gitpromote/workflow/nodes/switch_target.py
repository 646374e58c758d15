"""SwitchToTarget node - check out and update the target branch."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from gitpromote.core.config import PullStrategy, State
from gitpromote.workflow.deps import PromotionDeps
from gitpromote.workflow.outcome import Outcome, halt


@dataclass
class SwitchToTarget(BaseNode[State, PromotionDeps, Outcome]):
    """Fetch, check out the target branch and pull its latest commits."""

    async def run(
        self, ctx: GraphRunContext[State, PromotionDeps]
    ) -> "MergeSource | End[Outcome]":
        deps = ctx.deps
        run = ctx.state.runtime.promotion
        target = run.target_branch
        remote = deps.driver.remote
        deps.console.step(3, f"Switch to {target}")

        deps.console.info(f"git fetch {remote}")
        fetched = deps.driver.fetch()
        if not fetched.success:
            deps.console.warning(f"Fetch failed: {fetched.error}")

        if deps.inspector.local_branch_exists(target):
            deps.console.info(f"git checkout {target}")
            checkout = deps.driver.checkout(target)
        else:
            deps.console.info(f"No local {target}; creating it from {remote}")
            checkout = deps.driver.checkout(target, create_from_remote=True)
        if not checkout.success:
            deps.console.error(f"Checkout failed: {checkout.error}")
            return halt(
                ctx,
                f"Could not check out {target}: {checkout.error}",
                checkout.conflict_files,
            )

        strategy = deps.prompter.select_pull_strategy(
            ctx.state.config.workflow.pull_strategy
        )
        run.target_pull_strategy = strategy
        rebase = strategy is PullStrategy.REBASE
        flag = "--rebase" if rebase else "--no-rebase"
        deps.console.info(f"git pull {flag} {remote} {target}")

        pulled = deps.driver.pull(target, strategy)
        if not pulled.success:
            if pulled.has_conflicts:
                deps.console.conflict_report(
                    step=f"pulling {remote}/{target}",
                    conflict_files=pulled.conflict_files,
                    current_branch=target,
                    target_branch=target,
                    source_branch=run.original_branch,
                    remote=remote,
                    rebase=rebase,
                    note=(
                        f"Resolve the conflicts on {target}, then run the "
                        f"promotion again."
                    ),
                )
                return halt(
                    ctx,
                    f"Conflict pulling {remote}/{target}",
                    pulled.conflict_files,
                )
            deps.console.error(f"Pull failed: {pulled.error}")
            return halt(ctx, f"Pull of {target} failed: {pulled.error}")

        deps.console.success(f"On {target} with the latest commits")

        from gitpromote.workflow.nodes.merge_source import MergeSource
        return MergeSource()
