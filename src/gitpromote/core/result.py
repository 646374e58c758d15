"""Result and snapshot types produced by the git layer."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field


class OperationResult(BaseModel):
    """Outcome of a single git sub-operation.

    Produced once per call and never mutated afterwards.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    output: str = ""
    error: str | None = None
    synthetic: bool = Field(
        default=False,
        description="True when produced by a dry-run recording",
    )
    has_conflicts: bool = False
    conflict_files: tuple[str, ...] = ()
    needs_manual_commit: bool = Field(
        default=False,
        description=(
            "Set when a squash merge staged changes without "
            "committing them"
        ),
    )


class FileStatus(BaseModel):
    """One entry of a working-tree status report."""

    model_config = ConfigDict(frozen=True)

    path: str
    index: str = " "
    worktree: str = " "
    conflict: bool = False


class RepoStatus(BaseModel):
    """Snapshot of the working tree."""

    model_config = ConfigDict(frozen=True)

    staged_count: int = 0
    unstaged_count: int = 0
    untracked_count: int = 0
    files: tuple[FileStatus, ...] = ()

    @computed_field
    @property
    def is_clean(self) -> bool:
        return (
            self.staged_count == 0
            and self.unstaged_count == 0
            and self.untracked_count == 0
        )

    @property
    def conflict_files(self) -> tuple[str, ...]:
        return tuple(f.path for f in self.files if f.conflict)


class OperationKind(str, Enum):
    """Kinds of git operation that can be left in progress."""

    NONE = "none"
    REBASE = "rebase"
    MERGE = "merge"
    CHERRY_PICK = "cherry-pick"
    BISECT = "bisect"


class InProgressState(BaseModel):
    """Operation currently paused in the repository, if any.

    Derived from repository markers on every check; never cached.
    ``can_resume`` is true when no conflict markers remain and only a
    completion command is pending.
    """

    model_config = ConfigDict(frozen=True)

    kind: OperationKind = OperationKind.NONE
    can_resume: bool = False
    hint: str = ""

    @property
    def in_progress(self) -> bool:
        return self.kind is not OperationKind.NONE

    @property
    def blocked(self) -> bool:
        return self.in_progress and not self.can_resume


class BranchComparison(BaseModel):
    """Commit counts of a local branch relative to its remote."""

    model_config = ConfigDict(frozen=True)

    ahead: int = 0
    behind: int = 0

    @property
    def has_local_commits(self) -> bool:
        return self.ahead > 0

    @property
    def has_remote_commits(self) -> bool:
        return self.behind > 0


class UserIdentity(BaseModel):
    """Configured git author identity."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    email: str | None = None

    @property
    def configured(self) -> bool:
        return bool(self.name) and bool(self.email)
