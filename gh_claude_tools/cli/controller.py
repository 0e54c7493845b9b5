import logging
from typing import Callable, Optional

import click

from gh_claude_tools.errors import GhClaudeToolsError
from gh_claude_tools.llm import ClaudeContentGenerator
from gh_claude_tools.settings import gh_claude_tools_logger, is_debug

from .service import GitHubService, GitService


class WorkflowController:
    """Orchestrates the commit, push and pull request workflows.

    Each public method runs one workflow step by step, stops at the first
    failure and returns the process exit code.
    """

    def __init__(
        self,
        git: Optional[GitService] = None,
        github: Optional[GitHubService] = None,
        generator_factory: Callable[[], ClaudeContentGenerator] = ClaudeContentGenerator,
        logger: Optional[logging.Logger] = None,
        echo: Callable[..., None] = click.echo,
        echo_err: Optional[Callable[[str], None]] = None,
        debug: Optional[Callable[[], bool]] = None,
    ) -> None:
        self._git = git or GitService()
        self._github = github or GitHubService()
        self._generator_factory = generator_factory
        self._logger = logger or gh_claude_tools_logger(__name__)
        self._echo = echo
        self._echo_err = echo_err or (lambda message: self._echo(message, err=True))
        self._debug = debug or is_debug

    # --- Public API ---
    def commit(self) -> int:
        """Stage, generate a message and commit. No changes is a successful no-op."""

        self._logger.debug("Starting commit workflow")
        try:
            if not self._git.has_uncommitted_changes():
                self._echo(click.style("✅ No changes to commit", fg="green"))
                return 0

            if not self._git.has_staged_changes():
                self._echo(click.style("📝 Staging all changes...", fg="yellow"))
                self._git.stage_all()

            diff = self._git.staged_diff()
            if not diff:
                self._echo_err(click.style("✗ No staged changes to commit", fg="red"))
                return 1

            self._echo(click.style("🤖 Generating commit message...", fg="yellow"))
            message = self._generator_factory().generate_commit_message(diff)
            self._echo(click.style(f"📝 Commit message: {message}", fg="yellow"))
        except GhClaudeToolsError as exc:
            return self._fail(f"Error: {exc}")

        try:
            self._git.commit(message)
        except GhClaudeToolsError as exc:
            return self._fail("✗ Commit failed", exc)

        self._echo(click.style("✓ Committed successfully", fg="green"))
        self._show_pr_url()
        return 0

    def push_and_pr(self) -> int:
        """Commit pending work, push, then create the PR or refresh its description."""

        self._logger.debug("Starting push and PR workflow")
        try:
            branch = self._git.current_branch()

            if self._git.has_uncommitted_changes():
                self._echo(click.style("📝 Uncommitted changes detected...", fg="yellow"))
                if self.commit() != 0:
                    return 1
        except GhClaudeToolsError as exc:
            return self._fail(f"Error: {exc}")

        if not self._push(branch):
            return 1

        existing_pr = self._github.current_pr_url()
        try:
            if existing_pr:
                self._update_pr(existing_pr)
            else:
                self._create_pr(branch)
        except GhClaudeToolsError as exc:
            action = "update PR description" if existing_pr else "create PR"
            return self._fail(f"✗ Failed to {action}", exc)

        return 0

    def push_and_pr_with_automerge(self) -> int:
        """Run the push and PR workflow, then try to enable squash auto-merge."""

        self._echo(click.style("🚀 Creating PR with auto-merge...", fg="blue"))
        if self.push_and_pr() != 0:
            return 1

        self._echo(click.style("⏳ Enabling auto-merge...", fg="yellow"))
        if self._github.enable_auto_merge():
            self._echo(click.style("✓ Auto-merge enabled", fg="green"))
        else:
            self._logger.debug("gh pr merge --auto --squash failed")
            self._echo(
                click.style(
                    "⚠️  Could not enable auto-merge (may already be enabled or checks pending)",
                    fg="yellow",
                )
            )
        return 0

    def new_branch(self, branch_name: Optional[str]) -> int:
        """Fetch the remote and switch to a new branch off its default branch."""

        if not branch_name:
            self._echo_err(click.style("Usage: ghn <branch-name>", fg="red"))
            return 1

        try:
            base = self._git.default_branch()
            self._echo(
                click.style(
                    f"⏳ Creating new branch '{branch_name}' from {self._git.remote}/{base}...",
                    fg="yellow",
                )
            )
            self._git.fetch()
            self._git.create_branch(branch_name, base)
        except GhClaudeToolsError as exc:
            return self._fail("✗ Failed to create branch", exc)

        self._echo(click.style(f"✓ Switched to new branch '{branch_name}'", fg="green"))
        return 0

    def commit_and_push(self) -> int:
        """Commit and push without touching the pull request."""

        self._echo(click.style("🚀 Starting commit and push workflow...", fg="blue"))
        if self.commit() != 0:
            return 1

        try:
            branch = self._git.current_branch()
        except GhClaudeToolsError as exc:
            return self._fail(f"Error: {exc}")

        if not self._push(branch):
            return 1

        pr_url = self._github.current_pr_url()
        if pr_url:
            self._echo(click.style(f"📎 PR: {pr_url}", fg="blue"))
        else:
            self._echo(click.style("💡 No PR yet. Run 'ghp' to create one.", fg="yellow"))
        return 0

    # --- Private helpers ---
    def _push(self, branch: str) -> bool:
        self._echo(click.style(f"⏳ Pushing {branch} to {self._git.remote}...", fg="yellow"))
        try:
            self._git.push(branch)
        except GhClaudeToolsError as exc:
            self._logger.debug("Push failed: %s", exc)
            self._echo_err(click.style("✗ Push failed", fg="red"))
            if self._debug():
                self._echo_err(click.style(f"Error details: {exc}", fg="bright_black"))
            return False

        self._echo(click.style(f"✓ Pushed to {self._git.remote}/{branch}", fg="green"))
        return True

    def _update_pr(self, pr_url: str) -> None:
        self._echo(click.style(f"✓ PR already exists: {pr_url}", fg="green"))
        self._echo(click.style("⏳ Auto-updating PR description...", fg="yellow"))

        context = self._git.pr_context(self._git.default_branch())
        content = self._generator_factory().generate_pr_content(context)
        self._github.update_pr_body(content.body)
        self._echo(click.style("✓ PR description updated", fg="green"))

    def _create_pr(self, branch: str) -> None:
        self._echo(click.style("⏳ Creating new PR...", fg="yellow"))
        self._echo(click.style("⏳ Generating PR title and description...", fg="yellow"))

        base = self._git.default_branch()
        context = self._git.pr_context(base)
        content = self._generator_factory().generate_pr_content(context)
        self._logger.debug("Creating PR with title: %s", content.title)

        pr_url = self._github.create_pr(content.title, content.body, base=base, head=branch)
        if pr_url:
            self._echo(click.style(f"✓ PR created: {pr_url}", fg="green"))
        else:
            self._echo(click.style("✓ PR created", fg="green"))

    def _show_pr_url(self) -> None:
        pr_url = self._github.current_pr_url()
        if pr_url:
            self._echo(click.style(f"📎 PR: {pr_url}", fg="blue"))

    def _fail(self, message: str, exc: Optional[Exception] = None) -> int:
        self._logger.debug("%s%s", message, f": {exc}" if exc else "")
        self._echo_err(click.style(message, fg="red"))
        if exc is not None:
            self._echo_err(click.style(str(exc), fg="bright_black"))
        return 1
