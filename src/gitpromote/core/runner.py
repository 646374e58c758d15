"""Command execution using the invoke library."""

from pathlib import Path

from invoke import Context, Result


class Runner(Context):
    """invoke.Context with a single entry point for running commands.

    Output is always captured, never echoed; callers decide what to
    show. Commands never read from the terminal.
    """

    def execute(
        self,
        command: str,
        cwd: Path | None = None,
        check: bool = True,
        env: dict[str, str] | None = None,
    ) -> Result:
        """Run a shell command.

        Args:
            command: Command line to execute
            cwd: Working directory for the command
            check: Raise invoke.UnexpectedExit on non-zero exit
            env: Extra environment variables (merged into os.environ)

        Returns:
            invoke.Result with stdout, stderr and exited
        """
        kwargs = {"hide": True, "warn": not check, "in_stream": False}
        if env:
            kwargs["env"] = env

        if cwd:
            with self.cd(str(cwd)):
                return self.run(command, **kwargs)
        return self.run(command, **kwargs)
