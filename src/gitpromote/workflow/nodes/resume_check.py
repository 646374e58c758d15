"""ResumeCheck node - complete a merge left over from a previous run."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from gitpromote.core.config import State
from gitpromote.core.result import OperationKind
from gitpromote.workflow.deps import PromotionDeps
from gitpromote.workflow.outcome import Outcome, halt

RESUME_COMMIT_MESSAGE = "merge: complete merge"


@dataclass
class ResumeCheck(BaseNode[State, PromotionDeps, Outcome]):
    """Commit a resolved, unfinished merge before promoting."""

    async def run(
        self, ctx: GraphRunContext[State, PromotionDeps]
    ) -> "CommitLocal | PushTarget | End[Outcome]":
        """Decide between resuming and a fresh promotion.

        Returns:
            CommitLocal: Nothing to resume, or resumed off the target
            PushTarget: Resumed merge was on the target branch
            End[Outcome]: Paused operation needs the operator
        """
        from gitpromote.workflow.nodes.commit_local import CommitLocal

        deps = ctx.deps
        run = ctx.state.runtime.promotion
        state = deps.inspector.in_progress()

        if not state.in_progress:
            return CommitLocal()

        if state.kind is not OperationKind.MERGE or not state.can_resume:
            deps.console.error(f"A git {state.kind.value} is in progress")
            deps.console.info(state.hint)
            return halt(ctx, f"Unfinished {state.kind.value}: {state.hint}")

        deps.console.warning(
            "Found an unfinished merge whose conflicts are resolved"
        )
        if deps.inspector.status().staged_count == 0:
            deps.console.warning("Nothing is staged; cannot finish the merge")
            deps.console.info("Run manually: git commit or git merge --continue")
            return halt(ctx, "Unfinished merge has no staged changes")

        deps.console.info("Committing the resolved merge...")
        result = deps.driver.commit(RESUME_COMMIT_MESSAGE)
        if not result.success:
            deps.console.error(f"Could not finish the merge: {result.error}")
            deps.console.info("Run manually: git commit or git merge --continue")
            return halt(ctx, f"Merge commit failed: {result.error}")
        deps.console.success("Merge commit created")
        run.resumed_merge = True

        if deps.inspector.current_branch() == run.target_branch:
            from gitpromote.workflow.nodes.push_target import PushTarget
            return PushTarget()

        deps.console.info("Merge finished; continuing with the promotion")
        return CommitLocal()
