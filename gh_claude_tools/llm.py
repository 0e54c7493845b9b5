"""Commit message and PR content generation through the claude CLI."""

import logging
import shlex
from typing import Optional

from gh_claude_tools.auth import AuthResolver
from gh_claude_tools.config import (
    API_KEY_ENV_VAR,
    CLAUDE_COMMAND,
    CLAUDE_INSTALL_HINT,
    CLAUDE_TIMEOUT_SECONDS,
    COMMIT_PROMPT,
    PR_PROMPT,
)
from gh_claude_tools.diff import truncate_diff_for_commit
from gh_claude_tools.errors import (
    ClaudeCliNotFoundError,
    ClaudeTimeoutError,
    CommandError,
    CommandTimeoutError,
    EmptyResponseError,
)
from gh_claude_tools.executor import CommandExecutor
from gh_claude_tools.schemas import ExecutionOptions, PRContent
from gh_claude_tools.settings import gh_claude_tools_logger


class ClaudeContentGenerator:
    """Generate commit messages and PR descriptions with Claude.

    Every call resolves credentials, pipes the payload to
    ``claude --print`` on stdin and returns the trimmed answer.

    Attributes:
        timeout (float): Seconds allowed for a single Claude call.
    """

    # --- Initialization ---
    def __init__(
        self,
        executor: Optional[CommandExecutor] = None,
        auth_resolver: Optional[AuthResolver] = None,
        timeout: float = CLAUDE_TIMEOUT_SECONDS,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._executor = executor or CommandExecutor()
        self._auth_resolver = auth_resolver or AuthResolver(executor=self._executor)
        self.timeout = timeout
        self._logger = logger or gh_claude_tools_logger(__name__)

    # --- Public methods ---
    def generate_commit_message(self, diff: str) -> str:
        """Generate a one-line conventional commit message for a staged diff.

        Args:
            diff: Staged diff; reduced by the commit size policy before use.

        Returns:
            The first non-empty line of Claude's answer.

        Raises:
            EmptyResponseError: If Claude answered with nothing.
            ClaudeTimeoutError: If Claude did not answer in time.
            ClaudeCliNotFoundError: If the claude CLI failed.
        """
        payload = truncate_diff_for_commit(diff)
        self._logger.debug("Commit diff payload: %d chars (raw %d)", len(payload), len(diff))

        try:
            output = self._invoke(COMMIT_PROMPT, payload)
        except Exception:
            self._logger.error("Failed to generate commit message with Claude")
            raise

        message = next((line.strip() for line in output.splitlines() if line.strip()), "")
        if not message:
            raise EmptyResponseError("Claude returned an empty commit message")
        return message

    def generate_pr_content(self, context: str) -> PRContent:
        """Generate a PR title and markdown description from branch context."""

        self._logger.debug("PR context payload: %d chars", len(context))

        try:
            output = self._invoke(PR_PROMPT, context)
        except Exception:
            self._logger.error("Failed to generate PR content with Claude")
            raise

        if not output:
            raise EmptyResponseError("Claude returned an empty PR description")
        return PRContent.from_text(output)

    # --- Private methods ---
    def _invoke(self, prompt: str, payload: str) -> str:
        auth = self._auth_resolver.resolve()
        env = {API_KEY_ENV_VAR: auth.key} if auth.key else None
        command = f"{CLAUDE_COMMAND} --print {shlex.quote(prompt)}"

        try:
            output = self._executor.run(
                command,
                ExecutionOptions(input=payload, timeout=self.timeout, env=env),
            )
        except CommandTimeoutError as exc:
            raise ClaudeTimeoutError(self.timeout) from exc
        except CommandError as exc:
            detail = exc.stderr.strip()
            message = f"Claude CLI is required but not found. Install with: {CLAUDE_INSTALL_HINT}"
            if detail:
                message = f"{message}\n{detail}"
            raise ClaudeCliNotFoundError(message) from exc

        return (output or "").strip()

    # --- Dunder methods ---
    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(timeout={self.timeout!r})"
