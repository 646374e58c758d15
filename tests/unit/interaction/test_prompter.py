"""Tests for commit message validation and the click prompter."""

import click
import pytest
from click.testing import CliRunner

from gitpromote.core.config import MergeStrategy, PullStrategy
from gitpromote.interaction.prompter import ClickPrompter, validate_commit_message


def test_message_is_trimmed():
    assert validate_commit_message("  fix: bug \n") == "fix: bug"


@pytest.mark.parametrize("message", ["", "   ", None])
def test_empty_message_rejected(message):
    with pytest.raises(click.BadParameter):
        validate_commit_message(message)


@pytest.mark.parametrize(
    "message",
    ["feat: add login", "fix(parser): handle eof", "refactor!: drop py2"],
)
def test_conventional_messages_accepted(message):
    assert validate_commit_message(message, conventional=True) == message


@pytest.mark.parametrize("message", ["added login", "feat:missing space"])
def test_unconventional_messages_rejected_when_enforced(message):
    assert validate_commit_message(message) == message
    with pytest.raises(click.BadParameter):
        validate_commit_message(message, conventional=True)


def test_commit_prompt_asks_again_after_empty_input():
    with CliRunner().isolation(input="\nfix: bug\n"):
        assert ClickPrompter().commit_message() == "fix: bug"


def test_pull_strategy_default_on_enter():
    with CliRunner().isolation(input="\n"):
        picked = ClickPrompter().select_pull_strategy(PullStrategy.MERGE)

    assert picked is PullStrategy.MERGE


def test_merge_strategy_choice():
    with CliRunner().isolation(input="squash\n"):
        picked = ClickPrompter().select_merge_strategy(MergeStrategy.NO_FF)

    assert picked is MergeStrategy.SQUASH


def test_force_with_lease_default_follows_argument():
    with CliRunner().isolation(input="\n"):
        assert ClickPrompter().confirm_force_with_lease(default=True)
    with CliRunner().isolation(input="\n"):
        assert not ClickPrompter().confirm_force_with_lease()


def test_direct_merge_defaults_to_no():
    with CliRunner().isolation(input="\n"):
        assert not ClickPrompter().confirm_direct_merge("main")
