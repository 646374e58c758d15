"""MergeSource node - merge the source branch into the target."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from gitpromote.core.config import State
from gitpromote.workflow.deps import PromotionDeps
from gitpromote.workflow.outcome import Outcome, OutcomeKind, finish, halt


@dataclass
class MergeSource(BaseNode[State, PromotionDeps, Outcome]):
    """Merge with the operator's chosen strategy."""

    async def run(
        self, ctx: GraphRunContext[State, PromotionDeps]
    ) -> "PushTarget | End[Outcome]":
        """Merge the source branch into the checked-out target.

        Returns:
            PushTarget: Merge committed
            End[Outcome]: Conflict or failure (exit 1), or a squash
                merge left staged for a manual commit (exit 0)
        """
        deps = ctx.deps
        run = ctx.state.runtime.promotion
        source, target = run.original_branch, run.target_branch
        deps.console.step(4, f"Merge {source} into {target}")

        strategy = deps.prompter.select_merge_strategy(
            ctx.state.config.workflow.merge_strategy
        )
        run.merge_strategy = strategy
        deps.console.info(f"git merge {strategy.flag} {source}")

        merged = deps.driver.merge(source, strategy)
        if not merged.success:
            if merged.has_conflicts:
                deps.console.conflict_report(
                    step=f"merging {source} into {target}",
                    conflict_files=merged.conflict_files,
                    current_branch=target,
                    target_branch=target,
                    source_branch=source,
                    remote=deps.driver.remote,
                    rebase=False,
                    note="Resolve the conflicts, commit, then push.",
                )
                return halt(
                    ctx,
                    f"Conflict merging {source} into {target}",
                    merged.conflict_files,
                )
            deps.console.error(f"Merge failed: {merged.error}")
            return halt(ctx, f"Merge failed: {merged.error}")

        if merged.needs_manual_commit:
            deps.console.warning(
                "Squash merge staged the changes; commit them yourself"
            )
            deps.console.info('git commit -m "merge: ..."')
            return finish(
                ctx,
                OutcomeKind.NEEDS_MANUAL_COMMIT,
                "Squash merge staged; manual commit required",
            )

        deps.console.success("Merge complete")

        from gitpromote.workflow.nodes.push_target import PushTarget
        return PushTarget()
