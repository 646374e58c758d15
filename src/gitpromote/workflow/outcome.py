"""Terminal values of the promotion graph."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel
from pydantic_graph import End, GraphRunContext

from gitpromote.core.config import State
from gitpromote.core.log import logger


class OutcomeKind(str, Enum):
    COMPLETE = "complete"
    NOTHING_TO_PROMOTE = "nothing-to-promote"
    NEEDS_MANUAL_COMMIT = "needs-manual-commit"
    DELEGATED = "delegated"
    HALTED_CONFLICT = "halted-conflict"
    HALTED_ERROR = "halted-error"


class Outcome(BaseModel):
    """How a run ended and the process exit status it maps to."""

    kind: OutcomeKind
    message: str = ""
    conflict_files: tuple[str, ...] = ()

    @property
    def exit_code(self) -> int:
        if self.kind in (
            OutcomeKind.HALTED_CONFLICT, OutcomeKind.HALTED_ERROR
        ):
            return 1
        return 0


def finish(
    ctx: GraphRunContext[State], kind: OutcomeKind, message: str = ""
) -> End[Outcome]:
    """End the run without failure."""
    ctx.state.runtime.promotion.status = "complete"
    logger.info("Run finished", outcome=kind.value, message=message)
    return End(Outcome(kind=kind, message=message))


def halt(
    ctx: GraphRunContext[State],
    message: str,
    conflict_files: tuple[str, ...] = (),
) -> End[Outcome]:
    """End the run with failure status."""
    ctx.state.runtime.promotion.status = "halted"
    kind = (
        OutcomeKind.HALTED_CONFLICT if conflict_files
        else OutcomeKind.HALTED_ERROR
    )
    logger.error("Run halted", reason=message, files=list(conflict_files))
    return End(Outcome(
        kind=kind, message=message, conflict_files=conflict_files
    ))
