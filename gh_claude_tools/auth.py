"""Anthropic credential resolution for Claude invocations.

Sources are tried in a fixed order, each only when the previous one yielded
nothing:

1. the ``ANTHROPIC_API_KEY`` environment variable,
2. an already-authenticated ``claude`` CLI session,
3. the key saved in ``~/.gh-claude-tools/config.json``,
4. an interactive prompt, whose answer is saved for next time.
"""

import json
import logging
import os
import stat
from pathlib import Path
from typing import Callable, Mapping, Optional

import click
from pydantic import ValidationError

from gh_claude_tools.config import API_KEY_ENV_VAR, API_KEY_URL, CLAUDE_COMMAND, CONFIG_FILE
from gh_claude_tools.errors import ApiKeyMissingError, CredentialStoreError
from gh_claude_tools.executor import CommandExecutor
from gh_claude_tools.schemas import AuthMethod, AuthResult, ExecutionOptions, Result, SavedCredentials
from gh_claude_tools.settings import gh_claude_tools_logger

logger = gh_claude_tools_logger(__name__)


def resolve_auth(
    env: Mapping[str, str],
    probe_session: Callable[[], Result],
    load_saved_key: Callable[[], Optional[str]],
    prompt_for_key: Callable[[], str],
    save_key: Callable[[str], None],
    on_saved: Optional[Callable[[], None]] = None,
    on_save_failed: Optional[Callable[[Exception], None]] = None,
) -> AuthResult:
    """Pick the credential source for the next Claude call.

    Args:
        env: Environment mapping to read the API key from.
        probe_session: Checks for a usable claude CLI session.
        load_saved_key: Returns the saved key, or None.
        prompt_for_key: Asks the user for a key.
        save_key: Persists a prompted key.
        on_saved: Called after a prompted key was saved.
        on_save_failed: Called with the error when saving failed.

    Returns:
        The AuthResult of the first source that produced credentials.

    Raises:
        ApiKeyMissingError: If the user entered an empty key.
    """
    env_key = env.get(API_KEY_ENV_VAR)
    if env_key:
        logger.debug("Using %s from environment", API_KEY_ENV_VAR)
        return AuthResult(method=AuthMethod.ENVIRONMENT, key=env_key)

    probe = probe_session()
    if probe.is_err():
        logger.debug("No claude CLI session: %s", probe.error_message)
    else:
        logger.debug("Using existing claude CLI session")
        return AuthResult(method=AuthMethod.CLI_SESSION)

    saved_key = load_saved_key()
    if saved_key:
        logger.debug("Using saved API key")
        return AuthResult(method=AuthMethod.SAVED_CONFIG, key=saved_key)

    key = (prompt_for_key() or "").strip()
    if not key:
        raise ApiKeyMissingError("API key is required for AI features")

    try:
        save_key(key)
    except (CredentialStoreError, OSError) as exc:
        logger.warning("Could not save API key: %s", exc)
        if on_save_failed:
            on_save_failed(exc)
    else:
        if on_saved:
            on_saved()

    return AuthResult(method=AuthMethod.INTERACTIVE_PROMPT, key=key)


class CredentialStore:
    """Read and write the saved API key file."""

    def __init__(self, path: Path = CONFIG_FILE) -> None:
        self.path = Path(path)

    def load_key(self) -> Optional[str]:
        """Return the saved key, or None when the file is absent or unusable."""

        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError:
            logger.debug("No saved credentials at %s", self.path)
            return None

        try:
            credentials = SavedCredentials.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError, TypeError) as exc:
            logger.debug("Ignoring unreadable credentials file %s: %s", self.path, exc)
            return None

        return credentials.api_key or None

    def save_key(self, key: str) -> None:
        """Write *key* to the credentials file with owner-only permissions."""

        payload = SavedCredentials(api_key=key).model_dump(by_alias=True)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            os.chmod(self.path, stat.S_IRUSR | stat.S_IWUSR)
        except OSError as exc:
            raise CredentialStoreError(f"Failed to save API key to {self.path}: {exc}") from exc

        logger.debug("Saved API key to %s", self.path)


def _prompt_for_key() -> str:
    click.echo(click.style("\n🔑 Anthropic API key required for AI features", fg="yellow"))
    click.echo(click.style(f"Get your API key from: {API_KEY_URL}\n", fg="bright_black"))
    return click.prompt(
        "Enter your Anthropic API key",
        default="",
        show_default=False,
        hide_input=True,
    )


class AuthResolver:
    """Resolve credentials against the real environment, CLI and config file."""

    def __init__(
        self,
        executor: Optional[CommandExecutor] = None,
        store: Optional[CredentialStore] = None,
        env: Optional[Mapping[str, str]] = None,
        prompt: Callable[[], str] = _prompt_for_key,
        echo: Callable[..., None] = click.echo,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._executor = executor or CommandExecutor()
        self._store = store or CredentialStore()
        self._env = env
        self._prompt = prompt
        self._echo = echo
        self._logger = logger or gh_claude_tools_logger(__name__)

    def resolve(self) -> AuthResult:
        auth = resolve_auth(
            env=os.environ if self._env is None else self._env,
            probe_session=self.probe_session,
            load_saved_key=self._store.load_key,
            prompt_for_key=self._prompt,
            save_key=self._store.save_key,
            on_saved=lambda: self._echo(click.style("✓ API key saved securely\n", fg="green")),
            on_save_failed=lambda _exc: self._echo(
                click.style("⚠️  Could not save API key for future use", fg="yellow"),
                err=True,
            ),
        )
        self._logger.debug("Resolved auth method: %s", auth.method.value)
        return auth

    def probe_session(self) -> Result:
        """Check whether the claude CLI answers a version probe."""

        output = self._executor.run(
            f"{CLAUDE_COMMAND} --version",
            ExecutionOptions(throw_on_error=False),
        )
        if output is None:
            return Result.err("claude --version failed")
        return Result.ok(output)
