"""Preflight validation run before any mutating step."""

from __future__ import annotations

from pydantic import BaseModel, Field

from gitpromote.core.log import logger
from gitpromote.core.result import OperationKind
from gitpromote.git.inspector import StateInspector


class ValidationReport(BaseModel):
    """Verdict of a validation pass."""

    valid: bool = True
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class PreflightValidator:
    """Fixed battery of repository checks."""

    def __init__(self, inspector: StateInspector):
        self.inspector = inspector

    def validate_all(self) -> ValidationReport:
        """Run the preflight checks in order.

        1. working directory is a git repository
        2. the configured remote exists
        3. no blocking operation is in progress
        4. user.name and user.email are set (warning only)

        Checks 2-4 are skipped when 1 fails. A paused merge whose
        conflicts are already resolved does not fail check 3; the
        workflow completes it during resume.
        """
        report = ValidationReport()

        logger.debug("Preflight: repository check")
        if not self.inspector.is_repository():
            report.errors.append("Current directory is not a git repository")
            report.valid = False
            return report

        logger.debug("Preflight: remote check")
        if not self.inspector.has_remote():
            report.errors.append(
                f"Remote '{self.inspector.remote}' not found"
            )

        logger.debug("Preflight: in-progress operation check")
        state = self.inspector.in_progress()
        if state.in_progress:
            if state.kind is OperationKind.MERGE and state.can_resume:
                report.warnings.append(
                    "An unfinished merge with resolved conflicts was found"
                )
            else:
                report.errors.append(
                    f"A git {state.kind.value} is in progress; finish or "
                    f"abort it first. {state.hint}"
                )

        logger.debug("Preflight: user identity check")
        if not self.inspector.user_identity().configured:
            report.warnings.append(
                "git user.name / user.email are not configured"
            )

        report.valid = not report.errors
        if report.valid:
            logger.info("Preflight passed", warnings=len(report.warnings))
        else:
            logger.error("Preflight failed", errors=report.errors)
        return report

    def validate_target_branch(self, branch: str) -> ValidationReport:
        """The promotion target must already exist on the remote."""
        if self.inspector.remote_branch_exists(branch):
            return ValidationReport()
        return ValidationReport(
            valid=False,
            errors=[
                f"Remote branch {self.inspector.remote}/{branch} does "
                f"not exist"
            ],
        )

    @staticmethod
    def check_branch_prefix(
        branch: str, prefixes: list[str], target: str
    ) -> str | None:
        """Return a warning when the source branch name is unexpected."""
        if not prefixes or branch == target:
            return None
        if any(branch.startswith(p) for p in prefixes):
            return None
        return (
            f"Branch '{branch}' does not start with any of: "
            f"{', '.join(prefixes)}"
        )
