"""SyncSourceBranch node - make sure the source branch is on the remote."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from gitpromote.core.config import PullStrategy, State
from gitpromote.workflow.deps import PromotionDeps
from gitpromote.workflow.outcome import Outcome, halt


@dataclass
class SyncSourceBranch(BaseNode[State, PromotionDeps, Outcome]):
    """Push the source branch and pull what others pushed to it."""

    async def run(
        self, ctx: GraphRunContext[State, PromotionDeps]
    ) -> "SwitchToTarget | End[Outcome]":
        """Synchronize the source branch with its remote counterpart.

        A missing remote branch is offered for creation; declining is
        fine. Existing remote branches get local commits pushed first,
        then remote updates pulled. A pull conflict stops the run.

        Returns:
            SwitchToTarget: Source branch handled
            End[Outcome]: Push or pull failed
        """
        from gitpromote.workflow.nodes.switch_target import SwitchToTarget

        deps = ctx.deps
        run = ctx.state.runtime.promotion
        branch = run.original_branch
        remote = deps.driver.remote
        deps.console.step(2, "Sync the source branch with its remote")

        if not deps.inspector.remote_branch_exists(branch):
            deps.console.info(f"{branch} has no remote branch")
            if not deps.prompter.confirm_create_remote_branch(branch):
                deps.console.warning(
                    "Remote branch not created; continuing without it"
                )
                return SwitchToTarget()

            deps.console.info(f"git push -u {remote} {branch}")
            pushed = deps.driver.push(branch, set_upstream=True)
            if not pushed.success:
                deps.console.error(f"Push failed: {pushed.error}")
                return halt(ctx, f"Could not create {remote}/{branch}")
            deps.console.success("Remote branch created and pushed")
            return SwitchToTarget()

        deps.console.info(f"{branch} exists on {remote}")

        if deps.inspector.has_local_commits(branch):
            deps.console.info(f"{branch} has unpushed commits")
            deps.console.info(f"git push {remote} {branch}")
            pushed = deps.driver.push(branch)
            if pushed.success:
                deps.console.success("Source branch pushed")
            else:
                deps.console.error(f"Push failed: {pushed.error}")
                deps.console.warning(
                    "Without the source branch on the remote, the merge "
                    "cannot be traced back to it"
                )
                if not deps.prompter.confirm_continue(
                    "Continue with the merge anyway?"
                ):
                    return halt(ctx, f"Push of {branch} failed")

        if not deps.inspector.has_remote_updates(branch):
            deps.console.info("Remote has no new commits")
            return SwitchToTarget()

        deps.console.info("Remote has commits not yet pulled")
        strategy = deps.prompter.select_pull_strategy(
            ctx.state.config.workflow.pull_strategy
        )
        run.source_pull_strategy = strategy
        rebase = strategy is PullStrategy.REBASE
        flag = "--rebase" if rebase else "--no-rebase"
        deps.console.info(f"git pull {flag} {remote} {branch}")

        pulled = deps.driver.pull(branch, strategy)
        if not pulled.success:
            if pulled.has_conflicts:
                deps.console.conflict_report(
                    step=f"pulling {remote}/{branch}",
                    conflict_files=pulled.conflict_files,
                    current_branch=branch,
                    target_branch=run.target_branch,
                    source_branch=branch,
                    remote=remote,
                    rebase=rebase,
                    note=(
                        "Resolve the conflicts on the source branch, then "
                        "run the promotion again."
                    ),
                )
                return halt(
                    ctx,
                    f"Conflict pulling {remote}/{branch}",
                    pulled.conflict_files,
                )
            deps.console.error(f"Pull failed: {pulled.error}")
            return halt(ctx, f"Pull of {branch} failed: {pulled.error}")

        deps.console.success("Pulled without conflicts")
        return SwitchToTarget()
