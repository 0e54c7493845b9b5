"""Unit tests for ClaudeContentGenerator."""

import logging
import shlex
import subprocess
from typing import List

import pytest

from gh_claude_tools.config import COMMIT_PROMPT, PR_PROMPT, TRUNCATION_MARKER
from gh_claude_tools.errors import (
    ApiKeyMissingError,
    ClaudeCliNotFoundError,
    ClaudeTimeoutError,
    EmptyResponseError,
)
from gh_claude_tools.llm import ClaudeContentGenerator
from gh_claude_tools.schemas import AuthMethod, AuthResult


COMMIT_COMMAND = f"claude --print {shlex.quote(COMMIT_PROMPT)}"
PR_COMMAND = f"claude --print {shlex.quote(PR_PROMPT)}"


class FakeAuthResolver:
    """Auth resolver stub returning a fixed result and counting calls."""

    def __init__(self, result: AuthResult = None, error: Exception = None) -> None:
        self.result = result or AuthResult(method=AuthMethod.CLI_SESSION)
        self.error = error
        self.calls = 0

    def resolve(self) -> AuthResult:
        self.calls += 1
        if self.error:
            raise self.error
        return self.result


def _generator(executor, auth: FakeAuthResolver = None, **kwargs) -> ClaudeContentGenerator:
    return ClaudeContentGenerator(executor=executor, auth_resolver=auth or FakeAuthResolver(), **kwargs)


# === generate_commit_message() ============================================


def test_commit_message_pipes_diff_to_claude(runner, executor, make_completed):
    runner.responses[COMMIT_COMMAND] = make_completed("feat: add widget support\n")

    message = _generator(executor).generate_commit_message("diff --git a/w.py b/w.py\n+widget")

    assert message == "feat: add widget support"
    kwargs = runner.kwargs_for("claude --print")
    assert kwargs["input"] == "diff --git a/w.py b/w.py\n+widget"
    assert kwargs["timeout"] == 30
    assert "env" not in kwargs


def test_commit_message_uses_first_non_empty_line(runner, executor, make_completed):
    runner.responses[COMMIT_COMMAND] = make_completed("\n  fix: handle empty diff  \nextra words\n")

    assert _generator(executor).generate_commit_message("+x") == "fix: handle empty diff"


def test_commit_message_truncates_large_diff(runner, executor):
    seen: List[str] = []

    def respond(command, **kwargs):
        seen.append(kwargs["input"])
        return subprocess.CompletedProcess(command, 0, "chore: bulk update", "")

    runner.on_prefix("claude --print", respond)
    huge = "diff --git a/a b/a\n" + "\n".join("+" + "x" * 200 for _ in range(500))

    _generator(executor).generate_commit_message(huge)

    assert len(seen[0]) <= 15_000
    assert seen[0].endswith(TRUNCATION_MARKER)


def test_commit_message_passes_api_key_env(runner, executor, make_completed):
    runner.responses[COMMIT_COMMAND] = make_completed("feat: x")
    auth = FakeAuthResolver(AuthResult(method=AuthMethod.SAVED_CONFIG, key="sk-ant-saved"))

    _generator(executor, auth).generate_commit_message("+x")

    assert runner.kwargs_for("claude --print")["env"]["ANTHROPIC_API_KEY"] == "sk-ant-saved"
    assert auth.calls == 1


def test_commit_message_empty_response_raises(runner, executor, make_completed):
    runner.responses[COMMIT_COMMAND] = make_completed("  \n")

    with pytest.raises(EmptyResponseError):
        _generator(executor).generate_commit_message("+x")


def test_timeout_surfaces_distinguished_error(runner, executor):
    runner.responses[COMMIT_COMMAND] = subprocess.TimeoutExpired("claude", 30)

    with pytest.raises(ClaudeTimeoutError) as excinfo:
        _generator(executor).generate_commit_message("+x")

    assert excinfo.value.timeout == 30
    assert "30 seconds" in str(excinfo.value)
    assert not isinstance(excinfo.value, ClaudeCliNotFoundError)


def test_custom_timeout_is_reported(runner, executor):
    runner.responses[COMMIT_COMMAND] = subprocess.TimeoutExpired("claude", 5)

    with pytest.raises(ClaudeTimeoutError, match="5 seconds"):
        _generator(executor, timeout=5).generate_commit_message("+x")

    assert runner.kwargs_for("claude --print")["timeout"] == 5


def test_nonzero_exit_surfaces_cli_not_found(runner, executor, make_completed):
    runner.responses[COMMIT_COMMAND] = make_completed(returncode=127, stderr="claude: command not found")

    with pytest.raises(ClaudeCliNotFoundError) as excinfo:
        _generator(executor).generate_commit_message("+x")

    assert "Claude CLI is required but not found" in str(excinfo.value)
    assert "claude: command not found" in str(excinfo.value)


def test_other_errors_propagate_and_are_logged(executor, caplog: pytest.LogCaptureFixture):
    auth = FakeAuthResolver(error=ApiKeyMissingError("API key is required for AI features"))

    with pytest.raises(ApiKeyMissingError):
        _generator(executor, auth).generate_commit_message("+x")

    assert "Failed to generate commit message with Claude" in caplog.text


# === generate_pr_content() ================================================


def test_pr_content_parses_title_and_body(runner, executor, make_completed):
    runner.responses[PR_COMMAND] = make_completed(
        "Add widget support\n\n## Summary\nWidgets.\n\n- Add widget module\n"
    )

    content = _generator(executor).generate_pr_content("Diff summary:\n w.py | 2 +")

    assert content.title == "Add widget support"
    assert content.body == "## Summary\nWidgets.\n\n- Add widget module"
    assert runner.kwargs_for("claude --print")["input"] == "Diff summary:\n w.py | 2 +"


def test_pr_content_empty_response_raises(runner, executor, make_completed):
    runner.responses[PR_COMMAND] = make_completed("")

    with pytest.raises(EmptyResponseError):
        _generator(executor).generate_pr_content("context")


def test_pr_content_failure_is_logged(runner, executor, make_completed, caplog):
    caplog.set_level(logging.ERROR)
    runner.responses[PR_COMMAND] = make_completed(returncode=1)

    with pytest.raises(ClaudeCliNotFoundError):
        _generator(executor).generate_pr_content("context")

    assert "Failed to generate PR content with Claude" in caplog.text
