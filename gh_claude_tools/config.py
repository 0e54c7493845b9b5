from pathlib import Path

API_KEY_ENV_VAR = "ANTHROPIC_API_KEY"
API_KEY_URL = "https://console.anthropic.com/settings/keys"

CONFIG_DIR = Path.home() / ".gh-claude-tools"
CONFIG_FILE = CONFIG_DIR / "config.json"

CLAUDE_COMMAND = "claude"
CLAUDE_INSTALL_HINT = "npm install -g @anthropic-ai/claude-code"
CLAUDE_TIMEOUT_SECONDS = 30

DEFAULT_REMOTE = "origin"
DEFAULT_BASE_BRANCH = "main"

COMMIT_DIFF_MAX_CHARS = 15_000
COMMIT_DIFF_MAX_CHANGE_LINES = 200

PR_DIFF_MAX_CHARS = 30_000
PR_DIFF_HARD_LIMIT = 100_000
PR_DIFF_MAX_LINES_PER_FILE = 20

TRUNCATION_MARKER = "\n\n[diff truncated due to size]"

COMMIT_TYPES = ("feat", "fix", "docs", "style", "refactor", "test", "chore")

COMMIT_PROMPT = (
    "Write a conventional commit message for these changes. "
    "Format: <type>: <description>. Keep under 72 chars. "
    f"Use types: {'/'.join(COMMIT_TYPES)}. "
    "Output ONLY the commit message, no explanation."
)

PR_PROMPT = (
    "Based on these git changes, write a PR title (first line, under 72 chars) "
    "and description. Include: brief summary, key changes as bullets. "
    "Format for GitHub markdown. Output ONLY the title on first line, "
    "then a blank line, then the description."
)

REQUIRED_TOOLS = (
    ("git", "Git", "Install from: https://git-scm.com/downloads"),
    ("gh", "GitHub CLI", "Install with: brew install gh (macOS) or see https://cli.github.com/"),
    (CLAUDE_COMMAND, "Claude CLI", f"Install with: {CLAUDE_INSTALL_HINT}"),
)
