import shutil
import sys
from typing import Callable, Optional

import click
from dotenv import load_dotenv

from gh_claude_tools.config import REQUIRED_TOOLS
from gh_claude_tools.settings import gh_claude_tools_logger, set_log_level

from .controller import WorkflowController

logger = gh_claude_tools_logger(__name__)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

debug_option = click.option("--debug", is_flag=True, help="Enable debug logging")


def _run(debug: bool, workflow: Callable[[WorkflowController], int]) -> None:
    """Load .env, apply --debug and exit with the workflow's status."""

    load_dotenv()
    if debug:
        set_log_level("DEBUG")
        logger.debug("Debug logging enabled via --debug flag")

    try:
        exit_code = workflow(WorkflowController())
    except Exception as exc:
        logger.exception("Unexpected error")
        click.echo(click.style(f"Error: {exc}", fg="red"), err=True)
        exit_code = 1

    sys.exit(exit_code)


@click.command(context_settings=CONTEXT_SETTINGS)
@debug_option
def ghc(debug: bool) -> None:
    """Commit all changes with a Claude-generated conventional commit message.

    \b
    Stages everything when nothing is staged yet, then commits.
    Exits 0 without doing anything when the working tree is clean.
    """
    _run(debug, lambda controller: controller.commit())


@click.command(context_settings=CONTEXT_SETTINGS)
@debug_option
def ghp(debug: bool) -> None:
    """Commit, push and create or update the pull request.

    \b
    An existing PR gets a freshly generated description (title untouched).
    Otherwise a new PR is opened against the default branch.
    """
    _run(debug, lambda controller: controller.push_and_pr())


@click.command(context_settings=CONTEXT_SETTINGS)
@debug_option
def ghpa(debug: bool) -> None:
    """Same as ghp, then enable squash auto-merge on the PR."""
    _run(debug, lambda controller: controller.push_and_pr_with_automerge())


@click.command(context_settings=CONTEXT_SETTINGS)
@debug_option
@click.argument("branch_name", required=False)
def ghn(debug: bool, branch_name: Optional[str]) -> None:
    """Create BRANCH_NAME from the remote's default branch and switch to it.

    Usage: ghn <branch-name>
    """
    _run(debug, lambda controller: controller.new_branch(branch_name))


@click.command(context_settings=CONTEXT_SETTINGS)
@debug_option
def ghcp(debug: bool) -> None:
    """Commit and push without creating or updating a PR."""
    _run(debug, lambda controller: controller.commit_and_push())


@click.command(context_settings=CONTEXT_SETTINGS)
def ghcheck() -> None:
    """Check that git, gh and claude are installed."""

    click.echo(click.style("\nChecking gh-claude-tools requirements...\n", fg="blue"))

    all_good = True
    for command, name, install_hint in REQUIRED_TOOLS:
        if shutil.which(command):
            click.echo(click.style(f"✓ {name} is installed", fg="green"))
        else:
            all_good = False
            click.echo(click.style(f"✗ {name} is not installed", fg="red"))
            click.echo(click.style(f"  {install_hint}", fg="yellow"))

    click.echo("")
    if all_good:
        click.echo(click.style("✅ All requirements are installed!", fg="green"))
        click.echo(click.style("\nYou can now use: ghc, ghp, ghpa, ghn, ghcp", fg="bright_black"))
        sys.exit(0)

    click.echo(
        click.style(
            "⚠️  Some requirements are missing. Please install them before using gh-claude-tools.",
            fg="yellow",
        )
    )
    sys.exit(1)
