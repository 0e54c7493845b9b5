"""Shell command execution for git, gh and claude invocations."""

import logging
import os
import shlex
import subprocess
from typing import Any, Callable, Optional

from gh_claude_tools.errors import CommandError, CommandTimeoutError
from gh_claude_tools.schemas import ExecutionOptions
from gh_claude_tools.settings import gh_claude_tools_logger


RunProcess = Callable[..., subprocess.CompletedProcess]


class CommandExecutor:
    """Run shell commands either capturing their output or streaming it live.

    Both entry points share the same failure policy: a nonzero exit or a
    timeout raises unless ``throw_on_error`` is ``False``, in which case a
    sentinel (``None`` or ``False``) is returned instead.
    """

    def __init__(
        self,
        run_process: Optional[RunProcess] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._run_process = run_process or subprocess.run
        self._logger = logger or gh_claude_tools_logger(__name__)

    # --- Public API ---
    def run(self, command: str, options: Optional[ExecutionOptions] = None) -> Optional[str]:
        """Run *command* and return its stripped stdout.

        Args:
            command: Command line to execute.
            options: Execution options; defaults apply when omitted.

        Returns:
            The captured stdout, or ``None`` when the command failed and
            ``throw_on_error`` is ``False``.

        Raises:
            CommandTimeoutError: If the command exceeded its timeout.
            CommandError: If the command exited with a nonzero status.
        """
        options = options or ExecutionOptions()
        try:
            result = self._execute(command, options)
        except CommandError:
            if options.throw_on_error is False:
                return None
            raise

        return (result.stdout or "").strip()

    def stream(self, command: str, options: Optional[ExecutionOptions] = None) -> bool:
        """Run *command* with inherited standard streams and report success."""

        options = (options or ExecutionOptions()).model_copy(update={"stdio": "inherit"})
        try:
            self._execute(command, options)
        except CommandError:
            if options.throw_on_error is False:
                return False
            raise

        return True

    # --- Private helpers ---
    def _execute(self, command: str, options: ExecutionOptions) -> subprocess.CompletedProcess:
        self._logger.debug("Running command: %s", command)

        kwargs: dict[str, Any] = {
            "shell": options.shell,
            "text": True,
            "check": False,
        }
        if options.stdio == "pipe":
            kwargs["capture_output"] = True
        if options.timeout is not None:
            kwargs["timeout"] = options.timeout
        if options.input is not None:
            kwargs["input"] = options.input
        if options.env:
            kwargs["env"] = {**os.environ, **options.env}

        args = command if options.shell else shlex.split(command)

        try:
            result = self._run_process(args, **kwargs)
        except subprocess.TimeoutExpired:
            self._logger.error("Command timed out after %ss: %s", options.timeout, command)
            raise CommandTimeoutError(command, options.timeout)
        except FileNotFoundError as exc:
            self._logger.debug("Executable not found for command %s: %s", command, exc)
            raise CommandError(command, returncode=127, stderr=str(exc))

        if result.returncode != 0:
            stderr = result.stderr or ""
            stdout = result.stdout or ""
            self._logger.debug(
                "Command returned non-zero exit code %s: %s %s",
                result.returncode,
                stderr.strip(),
                stdout.strip(),
            )
            raise CommandError(command, result.returncode, stdout, stderr)

        self._logger.debug("Command output length: %d", len(result.stdout or ""))
        return result
