"""CLI command modules for gitpromote."""

from gitpromote.command.promote import PromoteToMainCommand, PromoteToTestCommand

__all__ = ["PromoteToMainCommand", "PromoteToTestCommand"]
