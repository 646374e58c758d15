"""Operator interaction."""

from gitpromote.interaction.prompter import ClickPrompter, Prompter

__all__ = ["ClickPrompter", "Prompter"]
