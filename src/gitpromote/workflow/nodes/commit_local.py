"""CommitLocal node - commit pending working-tree changes."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from gitpromote.core.config import State
from gitpromote.workflow.deps import PromotionDeps
from gitpromote.workflow.outcome import Outcome, OutcomeKind, finish, halt


@dataclass
class CommitLocal(BaseNode[State, PromotionDeps, Outcome]):
    """Stage and commit everything in the working tree."""

    async def run(
        self, ctx: GraphRunContext[State, PromotionDeps]
    ) -> "SyncSourceBranch | End[Outcome]":
        deps = ctx.deps
        deps.console.step(1, "Commit local changes")

        status = deps.inspector.status()
        if status.is_clean:
            deps.console.warning(
                "Working tree is clean; nothing to promote"
            )
            return finish(ctx, OutcomeKind.NOTHING_TO_PROMOTE)

        deps.console.info(
            f"Uncommitted changes (staged: {status.staged_count}, "
            f"unstaged: {status.unstaged_count}, "
            f"untracked: {status.untracked_count})"
        )
        message = deps.prompter.commit_message(
            conventional=ctx.state.config.workflow.enforce_conventional_commits
        )
        deps.console.info(f'git add -A && git commit -m "{message}"')

        added = deps.driver.add_all()
        if not added.success:
            deps.console.error(f"Staging failed: {added.error}")
            return halt(ctx, f"git add failed: {added.error}")

        committed = deps.driver.commit(message)
        if not committed.success:
            deps.console.error(f"Commit failed: {committed.error}")
            return halt(ctx, f"git commit failed: {committed.error}")

        deps.console.success("Local changes committed")

        from gitpromote.workflow.nodes.sync_source import SyncSourceBranch
        return SyncSourceBranch()
