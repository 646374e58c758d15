"""Pytest configuration and fixtures for gitpromote tests."""

import sys
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from gitpromote.core.config import MergeStrategy, PullStrategy
from gitpromote.core.log import ConsoleSink, setup_logger
from gitpromote.core.result import OperationResult
from gitpromote.git.transport import READ_ONLY_SUBCOMMANDS

SOURCE = "feature/login"
REMOTE_URL = "git@github.com:acme/widgets.git"


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    """Console-only logging; nothing is sent anywhere."""
    test_log_root = Path(tempfile.gettempdir()) / "gitpromote-tests"
    setup_logger(
        log_root=test_log_root,
        run_name="test",
        console=ConsoleSink(level="debug"),
    )


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep settings loading away from the developer's own files.

    sys.argv is replaced so pytest's arguments never reach the
    settings parser, the user settings file points into tmp_path and
    the working directory has no gitpromote.yaml.
    """
    from gitpromote.core import yaml_settings

    monkeypatch.setattr(sys, "argv", ["gitpromote"])
    monkeypatch.setattr(
        yaml_settings,
        "user_settings_file",
        lambda: tmp_path / "user-config" / "gitpromote.yaml",
    )
    monkeypatch.delenv("DRY_RUN", raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)


@pytest.fixture
def make_state(tmp_path):
    """Build State from the packaged defaults plus overrides.

    Workflow keys are given in their camelCase settings-file form.
    """
    from gitpromote.core.config import State

    def _make(dry_run=False, **workflow):
        return State(
            config={
                "repo_path": str(tmp_path),
                "log_root": str(tmp_path / "logs"),
                "workflow": workflow,
            },
            dry_run=dry_run,
        )

    return _make


def porcelain(*entries: str) -> str:
    """Join status entries the way ``git status -z`` prints them."""
    if not entries:
        return ""
    return "\0".join(entries) + "\0"


class FakeGit:
    """Transport answering git commands from a table of canned results.

    Responses are matched on the longest registered argv prefix.
    Registering the same prefix more than once queues the results;
    the last one then repeats. Unmatched commands succeed with no
    output.
    """

    def __init__(self, git_dir: Path):
        self.git_dir = git_dir
        self.calls: list[list[str]] = []
        self._responses: dict[tuple[str, ...], list[OperationResult]] = {}

    def on(self, *prefix, output="", error=None, success=True):
        self._responses.setdefault(tuple(prefix), []).append(
            OperationResult(success=success, output=output, error=error)
        )
        return self

    def replace(self, *prefix, output="", error=None, success=True):
        self._responses.pop(tuple(prefix), None)
        return self.on(*prefix, output=output, error=error, success=success)

    def run(self, argv: list[str]) -> OperationResult:
        self.calls.append(list(argv))
        matches = [
            key for key in self._responses
            if tuple(argv[:len(key)]) == key
        ]
        if not matches:
            return OperationResult(success=True)
        queue = self._responses[max(matches, key=len)]
        if len(queue) > 1:
            return queue.pop(0)
        return queue[0]

    def called(self, *argv) -> bool:
        return list(argv) in self.calls

    def calls_to(self, subcommand: str) -> list[list[str]]:
        return [c for c in self.calls if c and c[0] == subcommand]

    @property
    def mutations(self) -> list[list[str]]:
        return [
            c for c in self.calls
            if c and c[0] not in READ_ONLY_SUBCOMMANDS
        ]


@pytest.fixture
def git_dir(tmp_path):
    path = tmp_path / ".git"
    path.mkdir()
    return path


@pytest.fixture
def fake_git(git_dir):
    """A healthy repository on feature/login, in sync with origin.

    origin has feature/login, test and main; every local branch
    exists and the working tree is clean.
    """
    fake = FakeGit(git_dir)
    fake.on("rev-parse", "--is-inside-work-tree", output="true\n")
    fake.on("rev-parse", "--absolute-git-dir", output=f"{git_dir}\n")
    fake.on("remote", output="origin\n")
    fake.on("remote", "get-url", "origin", output=f"{REMOTE_URL}\n")
    fake.on("config", "--get", "user.name", output="Dev\n")
    fake.on("config", "--get", "user.email", output="dev@example.com\n")
    fake.on("branch", "--show-current", output=f"{SOURCE}\n")
    fake.on(
        "branch", "-r",
        output=f"origin/{SOURCE}\norigin/test\norigin/main\n",
    )
    fake.on("show-ref")
    fake.on("status", output="")
    fake.on("rev-list", output="0\t0\n")
    fake.on("rev-parse", SOURCE, output="1111111\n")
    fake.on("rev-parse", f"origin/{SOURCE}", output="1111111\n")
    fake.on("log", output="fix: bug\n")
    return fake


@dataclass
class ScriptedPrompter:
    """Prompter with fixed answers; records every question asked.

    ``None`` strategy or force answers take the offered default.
    """

    message: str = "fix: bug"
    create_remote: bool = True
    pull: PullStrategy | None = None
    merge: MergeStrategy | None = None
    keep_going: bool = False
    switch_back: bool = False
    force: bool | None = False
    direct_merge: bool = False
    asked: list[str] = field(default_factory=list)
    force_default: bool | None = None

    def commit_message(self, conventional=False):
        self.asked.append("commit_message")
        return self.message

    def confirm_create_remote_branch(self, branch):
        self.asked.append("confirm_create_remote_branch")
        return self.create_remote

    def select_pull_strategy(self, default):
        self.asked.append("select_pull_strategy")
        return self.pull or default

    def select_merge_strategy(self, default):
        self.asked.append("select_merge_strategy")
        return self.merge or default

    def confirm_continue(self, question):
        self.asked.append("confirm_continue")
        return self.keep_going

    def confirm_switch_back(self, branch):
        self.asked.append("confirm_switch_back")
        return self.switch_back

    def confirm_force_with_lease(self, default=False):
        self.asked.append("confirm_force_with_lease")
        self.force_default = default
        return default if self.force is None else self.force

    def confirm_direct_merge(self, target):
        self.asked.append("confirm_direct_merge")
        return self.direct_merge


@pytest.fixture
def prompter():
    return ScriptedPrompter()


@pytest.fixture
def output():
    """Lines written by the console fixture."""
    return []


@pytest.fixture
def console(output):
    from gitpromote.workflow.console import Console

    return Console(echo=output.append)


@pytest.fixture
def printed(output):
    """Everything the console printed, as one string."""
    return lambda: "\n".join(output)


@pytest.fixture
def reset_logger(tmp_path):
    """Reinstall a console-only logger after a test replaced it."""
    yield
    setup_logger(
        log_root=tmp_path,
        run_name="test",
        console=ConsoleSink(level="debug"),
    )
