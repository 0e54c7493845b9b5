from typing import Optional


class GhClaudeToolsError(Exception):
    """Base exception for gh-claude-tools errors."""


class CommandError(GhClaudeToolsError):
    """Raised when an external command exits with a nonzero status."""

    def __init__(
        self,
        command: str,
        returncode: Optional[int] = None,
        stdout: str = "",
        stderr: str = "",
        message: Optional[str] = None,
    ) -> None:
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        detail = stderr.strip() or stdout.strip()
        if message is None:
            message = f"Command failed with exit code {returncode}: {command}"
            if detail:
                message = f"{message}\n{detail}"
        super().__init__(message)


class CommandTimeoutError(CommandError):
    """Raised when an external command runs past its timeout."""

    def __init__(self, command: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(
            command,
            message=f"Command timed out after {timeout:g}s: {command}",
        )


class GitError(GhClaudeToolsError):
    """Raised when the repository state cannot be read."""


class ApiKeyMissingError(GhClaudeToolsError):
    """Raised when no Anthropic API key could be obtained."""


class CredentialStoreError(GhClaudeToolsError):
    """Raised when the saved credential file cannot be written."""


class ClaudeError(GhClaudeToolsError):
    """Base exception for Claude invocation errors."""


class ClaudeTimeoutError(ClaudeError):
    """Raised when Claude does not answer within the configured timeout."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(
            f"Claude timed out after {timeout:g} seconds. "
            "The diff may be too large or the Claude service may be slow."
        )


class ClaudeCliNotFoundError(ClaudeError):
    """Raised when the claude CLI is missing or exits with an error."""


class EmptyResponseError(ClaudeError):
    """Raised when Claude returns no usable text."""
