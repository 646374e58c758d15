"""Exception types raised by gitpromote."""


class GitPromoteError(Exception):
    """Base class for gitpromote errors."""


class GitCommandError(GitPromoteError):
    """A git query the workflow cannot proceed without failed.

    Most git failures are reported as OperationResult values; this
    is reserved for identity-critical queries such as the current
    branch.
    """

    def __init__(self, argv: list[str], message: str):
        self.argv = argv
        self.message = message
        super().__init__(f"git {' '.join(argv)} failed: {message}")
