"""Collaborators shared by every workflow node."""

from __future__ import annotations

from dataclasses import dataclass

from gitpromote.core.config import State
from gitpromote.git.driver import GitDriver
from gitpromote.git.inspector import StateInspector
from gitpromote.git.transport import Transport
from gitpromote.git.validator import PreflightValidator
from gitpromote.interaction.prompter import ClickPrompter, Prompter
from gitpromote.workflow.console import Console


@dataclass
class PromotionDeps:
    """Driver, inspector, validator, prompter and console for one run."""

    driver: GitDriver
    inspector: StateInspector
    validator: PreflightValidator
    prompter: Prompter
    console: Console

    @classmethod
    def build(
        cls,
        state: State,
        prompter: Prompter | None = None,
        console: Console | None = None,
        transport: Transport | None = None,
    ) -> PromotionDeps:
        """Wire the collaborators from resolved settings.

        ``state.dry_run`` picks the driver's transport here and
        nowhere else. Tests pass their own transport.
        """
        config = state.config
        if transport is not None:
            driver = GitDriver(transport, remote=config.remote)
        else:
            driver = GitDriver.for_repository(
                config.repo_path, dry_run=state.dry_run, remote=config.remote
            )
        inspector = StateInspector(driver)
        return cls(
            driver=driver,
            inspector=inspector,
            validator=PreflightValidator(inspector),
            prompter=prompter or ClickPrompter(),
            console=console or Console(),
        )
