#!/usr/bin/env python3
"""gitpromote CLI - promote feature branches through test toward main."""

import asyncio
import sys

from pydantic import Field
from pydantic_settings import CliApp, CliSubCommand, get_subcommand

from gitpromote.command.promote import PromoteToMainCommand, PromoteToTestCommand
from gitpromote.core.config import State
from gitpromote.core.log import logger


class CliState(State):
    """Promote the current branch into 'test' (or toward 'main').

    Commits pending work, synchronizes the branch with its remote,
    merges it into the target and pushes to trigger CI. Every step
    asks before doing anything with consequences and stops at the
    first conflict.

    Configuration sources (in priority order):
    1. Command-line arguments (--config.remote upstream)
    2. --include files, ./gitpromote.yaml, then the user's
       gitpromote.yaml
    3. .env file
    4. Environment variables
       (GITPROMOTE_CONFIG__REPO_PATH=/path/to/repo)

    Pass --dry-run (or set DRY_RUN=true) to print the git commands
    that would change the repository instead of running them.
    """

    promote_to_test: CliSubCommand[PromoteToTestCommand] = Field(
        alias="promote-to-test"
    )
    promote_to_main: CliSubCommand[PromoteToMainCommand] = Field(
        alias="promote-to-main"
    )

    def cli_cmd(self):
        """Dispatch to active subcommand, or show help if none
        provided."""
        subcommand = get_subcommand(self, is_required=False)

        if subcommand is None:
            CliApp.run(CliState, cli_args=['--help'])
            sys.exit(1)

        # Closing the logger flushes and closes log files
        with logger:
            exit_code = asyncio.run(subcommand.run_workflow(self))
            raise SystemExit(exit_code)


def main():
    """Main entry point for CLI."""
    CliApp.run(CliState)


if __name__ == "__main__":
    main()
