"""Preflight node - validate the repository before anything changes."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from gitpromote.core.config import State
from gitpromote.core.errors import GitCommandError
from gitpromote.core.log import logger
from gitpromote.workflow.deps import PromotionDeps
from gitpromote.workflow.outcome import Outcome, halt


@dataclass
class Preflight(BaseNode[State, PromotionDeps, Outcome]):
    """Run the validator battery and record the original branch."""

    review_only: bool = False

    async def run(
        self, ctx: GraphRunContext[State, PromotionDeps]
    ) -> "ResumeCheck | DelegateReview | End[Outcome]":
        """Validate, then continue to resume handling (or review
        delegation for promotions to main).

        Returns:
            DelegateReview: When the run only delegates to review
            ResumeCheck: When validation passed
            End[Outcome]: When any blocking check failed
        """
        console = ctx.deps.console
        run = ctx.state.runtime.promotion
        run.status = "running"

        console.step(0, "Validate repository state")
        report = ctx.deps.validator.validate_all()
        for warning in report.warnings:
            console.warning(warning)
        if not report.valid:
            console.error("Preflight failed:")
            for error in report.errors:
                console.detail(f"  - {error}", fg="red")
            return halt(ctx, "; ".join(report.errors))

        target = ctx.deps.validator.validate_target_branch(run.target_branch)
        if not target.valid:
            console.error(target.errors[0])
            return halt(ctx, target.errors[0])
        console.success("Preflight passed")

        try:
            run.original_branch = ctx.deps.inspector.current_branch()
        except GitCommandError as e:
            console.error(e.message)
            return halt(ctx, str(e))
        logger.info(
            "Promotion starting",
            source=run.original_branch,
            target=run.target_branch,
            dry_run=ctx.state.dry_run,
        )
        console.detail(f"Current branch: {run.original_branch}", fg="cyan")

        prefix_warning = ctx.deps.validator.check_branch_prefix(
            run.original_branch,
            ctx.state.config.workflow.branch_prefixes,
            run.target_branch,
        )
        if prefix_warning:
            console.warning(prefix_warning)

        if self.review_only:
            from gitpromote.workflow.nodes.delegate_review import (
                DelegateReview,
            )
            return DelegateReview()

        from gitpromote.workflow.nodes.resume_check import ResumeCheck
        return ResumeCheck()
