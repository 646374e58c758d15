"""Read-only repository state queries."""

from __future__ import annotations

from gitpromote.core.errors import GitCommandError
from gitpromote.core.log import logger
from gitpromote.core.result import (
    BranchComparison,
    InProgressState,
    OperationKind,
    RepoStatus,
    UserIdentity,
)
from gitpromote.git.driver import GitDriver

# Marker files in the git directory, checked in this order
_MARKERS = (
    ("rebase-merge", OperationKind.REBASE),
    ("rebase-apply", OperationKind.REBASE),
    ("MERGE_HEAD", OperationKind.MERGE),
    ("CHERRY_PICK_HEAD", OperationKind.CHERRY_PICK),
    ("BISECT_LOG", OperationKind.BISECT),
)

_RESUME_HINTS = {
    OperationKind.REBASE: "git add <files> && git rebase --continue",
    OperationKind.MERGE: "git commit (or git merge --continue)",
    OperationKind.CHERRY_PICK: "git cherry-pick --continue",
}

_ABORT_HINTS = {
    OperationKind.REBASE: "git rebase --abort",
    OperationKind.MERGE: "git merge --abort",
    OperationKind.CHERRY_PICK: "git cherry-pick --abort",
    OperationKind.BISECT: "git bisect reset",
}


class StateInspector:
    """Queries built on the driver's read-only sub-operations.

    No query retries. Transient failures come back as False or empty
    values; only current_branch() and status() raise, because the
    workflow cannot go on without them.
    """

    def __init__(self, driver: GitDriver):
        self.driver = driver

    @property
    def remote(self) -> str:
        return self.driver.remote

    def is_repository(self) -> bool:
        return self.driver.execute("rev-parse", "--is-inside-work-tree").success

    def current_branch(self) -> str:
        result = self.driver.execute("branch", "--show-current")
        if not result.success:
            raise GitCommandError(
                ["branch", "--show-current"], result.error or ""
            )
        branch = result.output.strip()
        if not branch:
            raise GitCommandError(
                ["branch", "--show-current"],
                "HEAD is detached; check out a branch first",
            )
        return branch

    def local_branch_exists(self, branch: str) -> bool:
        return self.driver.execute(
            "show-ref", "--verify", "--quiet", f"refs/heads/{branch}"
        ).success

    def remote_branch_exists(self, branch: str) -> bool:
        result = self.driver.execute(
            "branch", "-r", "--format=%(refname:short)"
        )
        if not result.success:
            return False
        wanted = f"{self.remote}/{branch}"
        return any(
            line.strip() == wanted for line in result.output.splitlines()
        )

    def has_remote(self) -> bool:
        result = self.driver.execute("remote")
        if not result.success:
            return False
        return self.remote in result.output.split()

    def status(self) -> RepoStatus:
        return self.driver.status()

    def in_progress(self) -> InProgressState:
        """Detect a paused rebase, merge, cherry-pick or bisect.

        Derived from the git directory on every call. A paused
        operation is resumable when the working tree has no unmerged
        paths left.
        """
        try:
            git_dir = self.driver.git_dir()
        except GitCommandError:
            return InProgressState()

        kind = next(
            (k for marker, k in _MARKERS if (git_dir / marker).exists()),
            OperationKind.NONE,
        )
        if kind is OperationKind.NONE:
            return InProgressState()

        if kind is OperationKind.BISECT:
            return InProgressState(
                kind=kind,
                can_resume=False,
                hint=f"Finish the bisect with: {_ABORT_HINTS[kind]}",
            )

        try:
            conflicts = self.status().conflict_files
        except GitCommandError:
            conflicts = ("<status unavailable>",)

        if conflicts:
            hint = (
                f"Resolve conflicts in {', '.join(conflicts)}, then run "
                f"{_RESUME_HINTS[kind]}; or abort with {_ABORT_HINTS[kind]}"
            )
            return InProgressState(kind=kind, can_resume=False, hint=hint)

        return InProgressState(
            kind=kind,
            can_resume=True,
            hint=f"Conflicts resolved; complete with {_RESUME_HINTS[kind]}",
        )

    def compare_branch_local_vs_remote(self, branch: str) -> BranchComparison:
        """Count commits only on the local branch and only on its remote."""
        result = self.driver.execute(
            "rev-list",
            "--left-right",
            "--count",
            f"{branch}...{self.remote}/{branch}",
        )
        if not result.success:
            return BranchComparison()
        try:
            ahead, behind = (int(n) for n in result.output.split())
        except ValueError:
            return BranchComparison()
        return BranchComparison(ahead=ahead, behind=behind)

    def has_local_commits(self, branch: str) -> bool:
        return self.compare_branch_local_vs_remote(branch).has_local_commits

    def has_remote_updates(self, branch: str) -> bool:
        """Fetch one branch and report whether the remote moved ahead.

        Any failure counts as "no updates".
        """
        if not self.remote_branch_exists(branch):
            return False

        fetched = self.driver.fetch(branch)
        if not fetched.success:
            logger.warn(
                "Fetch failed; assuming no remote updates",
                branch=branch,
                error=fetched.error,
            )
            return False

        local = self.driver.execute("rev-parse", branch)
        remote = self.driver.execute("rev-parse", f"{self.remote}/{branch}")
        if not (local.success and remote.success):
            return False
        if local.output.strip() == remote.output.strip():
            return False
        return self.compare_branch_local_vs_remote(branch).has_remote_commits

    def user_identity(self) -> UserIdentity:
        name = self.driver.execute("config", "--get", "user.name")
        email = self.driver.execute("config", "--get", "user.email")
        return UserIdentity(
            name=name.output.strip() if name.success else None,
            email=email.output.strip() if email.success else None,
        )
