"""Tests for the process driver's argv and result handling."""

import pytest
from conftest import porcelain

from gitpromote.core.config import MergeStrategy, PullStrategy
from gitpromote.core.errors import GitCommandError
from gitpromote.git.driver import GitDriver
from gitpromote.git.transport import RecordingTransport


@pytest.fixture
def driver(fake_git):
    return GitDriver(fake_git)


def test_push_argv(driver, fake_git):
    driver.push("feature/x")
    driver.push("feature/x", set_upstream=True)
    driver.push("test", force_with_lease=True)

    assert fake_git.calls_to("push") == [
        ["push", "origin", "feature/x"],
        ["push", "-u", "origin", "feature/x"],
        ["push", "--force-with-lease", "origin", "test"],
    ]


def test_pull_flags_follow_strategy(driver, fake_git):
    driver.pull("test", PullStrategy.REBASE)
    driver.pull("test", PullStrategy.MERGE)

    assert fake_git.calls_to("pull") == [
        ["pull", "--rebase", "origin", "test"],
        ["pull", "--no-rebase", "origin", "test"],
    ]


def test_checkout_can_track_remote(driver, fake_git):
    driver.checkout("test", create_from_remote=True)

    assert fake_git.called("checkout", "-b", "test", "origin/test")


def test_other_remote_name_is_used(fake_git):
    GitDriver(fake_git, remote="upstream").push("test")

    assert fake_git.called("push", "upstream", "test")


def test_failed_merge_carries_conflict_files(driver, fake_git):
    fake_git.on("merge", success=False, error="CONFLICT")
    fake_git.replace("status", output=porcelain("UU a.txt", " M b.txt"))

    result = driver.merge("feature/x")

    assert not result.success
    assert result.has_conflicts
    assert result.conflict_files == ("a.txt",)
    assert result.error == "CONFLICT"


def test_failure_without_conflicts_is_plain_failure(driver, fake_git):
    fake_git.on("push", success=False, error="fatal: no route")

    result = driver.push("test")

    assert not result.success
    assert not result.has_conflicts
    assert result.error == "fatal: no route"


def test_squash_with_staged_changes_needs_manual_commit(driver, fake_git):
    fake_git.replace("status", output=porcelain("M  app.py"))

    result = driver.merge("feature/x", MergeStrategy.SQUASH)

    assert result.success
    assert result.needs_manual_commit
    assert fake_git.called("merge", "--squash", "feature/x")


def test_status_failure_raises(driver, fake_git):
    fake_git.replace("status", success=False, error="not a git repository")

    with pytest.raises(GitCommandError, match="not a git repository"):
        driver.status()


def test_recent_subjects(driver, fake_git):
    fake_git.replace("log", output="fix: one\nfeat: two\n")

    assert driver.recent_subjects(2) == ["fix: one", "feat: two"]
    assert fake_git.called("log", "--max-count=2", "--format=%s")


def test_dry_run_pull_reports_existing_conflicts(fake_git):
    fake_git.replace("status", output=porcelain("AA shared.txt"))
    driver = GitDriver(RecordingTransport(reader=fake_git, echo=False))

    result = driver.pull("test")

    assert result.synthetic
    assert not result.success
    assert result.conflict_files == ("shared.txt",)
    assert result.error.startswith("[DRY-RUN]")
    assert fake_git.calls_to("pull") == []


def test_dry_run_push_succeeds_without_running(fake_git):
    recorder = RecordingTransport(reader=fake_git, echo=False)
    driver = GitDriver(recorder)

    result = driver.push("test")

    assert result.success
    assert result.synthetic
    assert driver.simulated
    assert recorder.recorded == [["push", "origin", "test"]]


def test_dry_run_squash_ignores_operator_index(fake_git):
    fake_git.replace("status", output="")
    driver = GitDriver(RecordingTransport(reader=fake_git, echo=False))

    result = driver.merge("feature/x", MergeStrategy.SQUASH)

    assert result.success
    assert result.synthetic
    assert result.needs_manual_commit
    assert fake_git.calls_to("merge") == []
