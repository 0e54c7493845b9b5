import logging
import shlex
from typing import Optional

from gh_claude_tools.config import DEFAULT_BASE_BRANCH, DEFAULT_REMOTE
from gh_claude_tools.diff import truncate_diff_for_pr
from gh_claude_tools.errors import GitError
from gh_claude_tools.executor import CommandExecutor
from gh_claude_tools.schemas import ExecutionOptions
from gh_claude_tools.settings import gh_claude_tools_logger
from gh_claude_tools.utils import extract_url, temporary_body_file


_QUIET = ExecutionOptions(throw_on_error=False)


class GitService:
    """Thin wrapper around the git commands used by the workflows."""

    def __init__(
        self,
        executor: Optional[CommandExecutor] = None,
        remote: str = DEFAULT_REMOTE,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._executor = executor or CommandExecutor()
        self.remote = remote
        self._logger = logger or gh_claude_tools_logger(__name__)

    # --- Repository state ---
    def current_branch(self) -> str:
        branch = self._executor.run("git branch --show-current")
        if not branch:
            raise GitError("Failed to get current branch")
        return branch

    def has_uncommitted_changes(self) -> bool:
        unstaged = self._executor.run("git diff --name-only", _QUIET)
        staged = self._executor.run("git diff --cached --name-only", _QUIET)
        untracked = self._executor.run("git ls-files --others --exclude-standard", _QUIET)
        return bool(unstaged or staged or untracked)

    def has_staged_changes(self) -> bool:
        return bool(self._executor.run("git diff --cached --name-only", _QUIET))

    def staged_diff(self) -> str:
        return self._executor.run("git diff --cached") or ""

    def has_upstream(self, branch: str) -> bool:
        ref = shlex.quote(f"{branch}@{{upstream}}")
        return bool(self._executor.run(f"git rev-parse --abbrev-ref {ref}", _QUIET))

    def default_branch(self) -> str:
        """Return the remote's default branch name, falling back to ``main``."""

        ref = self._executor.run(
            f"git symbolic-ref --short refs/remotes/{self.remote}/HEAD", _QUIET
        )
        prefix = f"{self.remote}/"
        if ref and ref.startswith(prefix):
            return ref[len(prefix):]
        self._logger.debug("Remote HEAD not set, using %s", DEFAULT_BASE_BRANCH)
        return DEFAULT_BASE_BRANCH

    def pr_context(self, base: str) -> str:
        """Collect diff stats, commit log and the size-bounded branch diff."""

        base_ref = f"{self.remote}/{base}"
        diff_stat = self._executor.run(f"git diff {base_ref}...HEAD --stat") or ""
        commits = self._executor.run(f"git log {base_ref}..HEAD --oneline") or ""
        diff = self._executor.run(f"git diff {base_ref}...HEAD") or ""
        changes = truncate_diff_for_pr(diff)
        self._logger.debug("PR context diff: %d chars (raw %d)", len(changes), len(diff))
        return f"Diff summary:\n{diff_stat}\n\nCommits:\n{commits}\n\nChanges:\n{changes}"

    # --- Mutations ---
    def stage_all(self) -> None:
        self._executor.run("git add -A")

    def commit(self, message: str) -> str:
        return self._executor.run(f"git commit -m {shlex.quote(message)}") or ""

    def push(self, branch: str) -> None:
        """Push *branch*, setting up upstream tracking when it has none."""

        if self.has_upstream(branch):
            self._logger.debug("Pushing %s to existing upstream", branch)
            self._executor.run("git push")
        else:
            self._logger.debug("Pushing %s with upstream tracking", branch)
            self._executor.run(f"git push -u {self.remote} {shlex.quote(branch)}")

    def fetch(self) -> None:
        self._executor.run(f"git fetch {self.remote}")

    def create_branch(self, name: str, base: str) -> None:
        start_point = shlex.quote(f"{self.remote}/{base}")
        self._executor.run(f"git checkout -b {shlex.quote(name)} {start_point}")


class GitHubService:
    """Thin wrapper around the gh pull request commands."""

    def __init__(
        self,
        executor: Optional[CommandExecutor] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._executor = executor or CommandExecutor()
        self._logger = logger or gh_claude_tools_logger(__name__)

    def current_pr_url(self) -> Optional[str]:
        url = self._executor.run("gh pr view --json url -q .url", _QUIET)
        return url or None

    def create_pr(self, title: str, body: str, base: str, head: str) -> Optional[str]:
        """Open a PR with the body passed through a temp file; return its URL."""

        with temporary_body_file(body, prefix="pr-body") as body_file:
            self._logger.debug("Creating PR %r with body file %s", title, body_file)
            output = self._executor.run(
                "gh pr create"
                f" --title {shlex.quote(title)}"
                f" --body-file {shlex.quote(str(body_file))}"
                f" --base {shlex.quote(base)}"
                f" --head {shlex.quote(head)}"
            )
        return extract_url(output)

    def update_pr_body(self, body: str) -> None:
        """Replace the current branch's PR description, leaving the title alone."""

        with temporary_body_file(body, prefix="pr-edit") as body_file:
            self._logger.debug("Updating PR body from %s", body_file)
            self._executor.run(f"gh pr edit --body-file {shlex.quote(str(body_file))}")

    def enable_auto_merge(self) -> bool:
        return self._executor.run("gh pr merge --auto --squash", _QUIET) is not None
