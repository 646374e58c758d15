"""Process driver: issues individual git sub-operations."""

from __future__ import annotations

from pathlib import Path

from gitpromote.core.config import MergeStrategy, PullStrategy
from gitpromote.core.errors import GitCommandError
from gitpromote.core.log import logger
from gitpromote.core.result import FileStatus, OperationResult, RepoStatus
from gitpromote.git.transport import (
    LiveTransport,
    RecordingTransport,
    Transport,
    format_command,
)

# Porcelain XY codes for unmerged paths
CONFLICT_CODES = frozenset({"DD", "AU", "UD", "UA", "DU", "AA", "UU"})


def parse_porcelain(output: str) -> RepoStatus:
    """Parse ``git status --porcelain=v1 -z`` output."""
    files = []
    staged = unstaged = untracked = 0

    entries = output.split("\0")
    i = 0
    while i < len(entries):
        entry = entries[i]
        i += 1
        if len(entry) < 4:
            continue

        code, path = entry[:2], entry[3:]
        x, y = code[0], code[1]
        if code == "!!":
            continue
        if x in "RC":
            # Rename/copy: the next entry is the original path
            i += 1

        conflict = code in CONFLICT_CODES
        if code == "??":
            untracked += 1
        elif conflict:
            unstaged += 1
        else:
            if x != " ":
                staged += 1
            if y != " ":
                unstaged += 1

        files.append(
            FileStatus(path=path, index=x, worktree=y, conflict=conflict)
        )

    return RepoStatus(
        staged_count=staged,
        unstaged_count=unstaged,
        untracked_count=untracked,
        files=tuple(files),
    )


class GitDriver:
    """Runs git sub-operations and returns OperationResult values.

    The driver has no decision logic. Failures of mutating operations
    are returned, never raised; only the identity-critical queries
    (status, git directory) raise GitCommandError.
    """

    def __init__(self, transport: Transport, remote: str = "origin"):
        self.transport = transport
        self.remote = remote

    @classmethod
    def for_repository(
        cls, repo_path: Path, dry_run: bool = False, remote: str = "origin"
    ) -> GitDriver:
        """Build a driver for a working tree.

        The transport is chosen here, once: a dry run records every
        mutating sub-operation and still answers read-only queries
        from the real repository.
        """
        live = LiveTransport(repo_path)
        transport = RecordingTransport(reader=live) if dry_run else live
        return cls(transport, remote=remote)

    @property
    def simulated(self) -> bool:
        return isinstance(self.transport, RecordingTransport)

    def execute(self, subcommand: str, *args: str) -> OperationResult:
        argv = [subcommand, *args]
        logger.debug("git", command=format_command(argv))
        return self.transport.run(argv)

    # ---- read-only queries ------------------------------------------------

    def status(self) -> RepoStatus:
        result = self.execute(
            "status", "--porcelain=v1", "-z", "--untracked-files=all"
        )
        if not result.success:
            raise GitCommandError(["status"], result.error or "")
        return parse_porcelain(result.output)

    def git_dir(self) -> Path:
        result = self.execute("rev-parse", "--absolute-git-dir")
        if not result.success:
            raise GitCommandError(
                ["rev-parse", "--absolute-git-dir"], result.error or ""
            )
        return Path(result.output.strip())

    def remote_url(self) -> str | None:
        result = self.execute("remote", "get-url", self.remote)
        if not result.success:
            return None
        return result.output.strip() or None

    def recent_subjects(self, count: int = 5) -> list[str]:
        result = self.execute("log", f"--max-count={count}", "--format=%s")
        if not result.success:
            return []
        return [line for line in result.output.splitlines() if line]

    # ---- mutating operations ----------------------------------------------

    def add_all(self) -> OperationResult:
        return self.execute("add", "-A")

    def commit(self, message: str) -> OperationResult:
        return self.execute("commit", "-m", message)

    def fetch(self, branch: str | None = None) -> OperationResult:
        args = [self.remote] + ([branch] if branch else [])
        return self.execute("fetch", *args)

    def push(
        self,
        branch: str,
        set_upstream: bool = False,
        force_with_lease: bool = False,
    ) -> OperationResult:
        args = []
        if set_upstream:
            args.append("-u")
        if force_with_lease:
            args.append("--force-with-lease")
        result = self.execute("push", *args, self.remote, branch)
        return self._settle(result)

    def pull(
        self, branch: str, strategy: PullStrategy = PullStrategy.REBASE
    ) -> OperationResult:
        flag = "--rebase" if strategy is PullStrategy.REBASE else "--no-rebase"
        result = self.execute("pull", flag, self.remote, branch)
        return self._settle(result, simulate_conflicts=True)

    def merge(
        self, branch: str, strategy: MergeStrategy = MergeStrategy.NO_FF
    ) -> OperationResult:
        result = self.execute("merge", strategy.flag, branch)
        result = self._settle(result, simulate_conflicts=True)

        if result.success and strategy is MergeStrategy.SQUASH:
            # --squash stages the changes but never commits them
            if result.synthetic:
                # The real index holds the operator's changes, not the merge's
                needs_commit = True
            else:
                try:
                    needs_commit = self.status().staged_count > 0
                except GitCommandError:
                    needs_commit = False
            if needs_commit:
                result = result.model_copy(
                    update={"needs_manual_commit": True}
                )
        return result

    def checkout(
        self, branch: str, create_from_remote: bool = False
    ) -> OperationResult:
        if create_from_remote:
            result = self.execute(
                "checkout", "-b", branch, f"{self.remote}/{branch}"
            )
        else:
            result = self.execute("checkout", branch)
        return self._settle(result)

    def derive_conflict_state(
        self, result: OperationResult
    ) -> OperationResult:
        """Attach conflict details from a fresh status read.

        Conflicts are read from the working tree, not from git's
        messages. A failed status read counts as no conflicts.
        """
        try:
            conflicts = self.status().conflict_files
        except GitCommandError as e:
            logger.debug("Status unavailable for conflict check", error=str(e))
            conflicts = ()

        if not conflicts:
            return result.model_copy(
                update={"has_conflicts": False, "conflict_files": ()}
            )

        error = result.error
        if result.success:
            error = "Conflicts present in working tree"
            if result.synthetic:
                error = f"[DRY-RUN] {error}"
        return result.model_copy(update={
            "success": False,
            "error": error,
            "has_conflicts": True,
            "conflict_files": conflicts,
        })

    def _settle(
        self, result: OperationResult, simulate_conflicts: bool = False
    ) -> OperationResult:
        if not result.success or (simulate_conflicts and result.synthetic):
            return self.derive_conflict_state(result)
        return result
