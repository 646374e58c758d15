"""Tests for live and recording transports."""

from gitpromote.git.transport import (
    READ_ONLY_SUBCOMMANDS,
    RecordingTransport,
    format_command,
)


def test_format_command_quotes_arguments():
    assert (
        format_command(["commit", "-m", "fix: a bug"])
        == "git commit -m 'fix: a bug'"
    )


def test_read_only_queries_reach_the_reader(fake_git):
    recorder = RecordingTransport(reader=fake_git, echo=False)

    result = recorder.run(["branch", "--show-current"])

    assert result.output == "feature/login\n"
    assert not result.synthetic
    assert recorder.recorded == []


def test_mutating_commands_are_recorded(fake_git):
    recorder = RecordingTransport(reader=fake_git, echo=False)

    for argv in (["add", "-A"], ["fetch", "origin"], ["push", "origin", "test"]):
        result = recorder.run(argv)
        assert result.success
        assert result.synthetic

    assert recorder.recorded == [
        ["add", "-A"],
        ["fetch", "origin"],
        ["push", "origin", "test"],
    ]
    assert fake_git.calls == []


def test_without_reader_everything_is_recorded():
    recorder = RecordingTransport(echo=False)

    recorder.run(["status", "--porcelain=v1"])

    assert recorder.recorded == [["status", "--porcelain=v1"]]


def test_echo_prints_the_command(capsys):
    RecordingTransport().run(["merge", "--no-ff", "feature/x"])

    assert "[DRY-RUN] would run: git merge --no-ff feature/x" in (
        capsys.readouterr().out
    )


def test_mutating_subcommands_are_not_read_only():
    for sub in ("add", "commit", "fetch", "push", "pull", "merge", "checkout"):
        assert sub not in READ_ONLY_SUBCOMMANDS
