"""Size policies that shrink git diffs before they are sent to Claude.

Two policies share the same shape:

- ``truncate_diff_for_commit`` keeps every file header plus the first few
  hundred changed lines, falling back to a hard cut.
- ``truncate_diff_for_pr`` keeps every file represented with a capped number
  of changed lines each, and hard-cuts very large diffs up front.

Diffs at or under the ceiling are returned unchanged.
"""

from typing import Iterator, List, Tuple

from gh_claude_tools.config import (
    COMMIT_DIFF_MAX_CHANGE_LINES,
    COMMIT_DIFF_MAX_CHARS,
    PR_DIFF_HARD_LIMIT,
    PR_DIFF_MAX_CHARS,
    PR_DIFF_MAX_LINES_PER_FILE,
    TRUNCATION_MARKER,
)
from gh_claude_tools.settings import gh_claude_tools_logger

logger = gh_claude_tools_logger(__name__)

FILE_HEADER_PREFIX = "diff --git"
HUNK_PREFIX = "@@"
HEADER_PREFIXES = (FILE_HEADER_PREFIX, "--- a/", "+++ b/", "--- /dev/null", "+++ /dev/null")

HEADER = "header"
CHANGE = "change"
OTHER = "other"


def is_header_line(line: str) -> bool:
    """Return True for lines that name the file being changed."""

    return line.startswith(HEADER_PREFIXES)


def is_change_line(line: str) -> bool:
    """Return True for added or removed content lines."""

    return line.startswith(("+", "-")) and not is_header_line(line)


def classify_lines(diff: str) -> Iterator[Tuple[str, str]]:
    """Yield ``(kind, line)`` pairs for every line of *diff*.

    Inside a hunk every ``+``/``-`` line is a change, even when its content
    looks like a ``---`` or ``+++`` file header (removed ``-- comment``
    lines, added ``++i;``). Hunks end at the next ``diff --git`` line.
    """
    in_hunk = False
    for line in diff.split("\n"):
        if line.startswith(FILE_HEADER_PREFIX):
            in_hunk = False
            yield HEADER, line
        elif line.startswith(HUNK_PREFIX):
            in_hunk = True
            yield OTHER, line
        elif in_hunk:
            yield (CHANGE if line.startswith(("+", "-")) else OTHER), line
        elif line.startswith(("---", "+++")):
            yield HEADER, line
        elif is_change_line(line):
            yield CHANGE, line
        else:
            yield OTHER, line


def hard_truncate(diff: str, max_chars: int) -> str:
    """Cut *diff* so that, with the marker appended, it fits in *max_chars*."""

    keep = max(max_chars - len(TRUNCATION_MARKER), 0)
    return diff[:keep] + TRUNCATION_MARKER


def truncate_diff_for_commit(
    diff: str,
    max_chars: int = COMMIT_DIFF_MAX_CHARS,
    max_change_lines: int = COMMIT_DIFF_MAX_CHANGE_LINES,
) -> str:
    """Bound a staged diff for commit message generation.

    Args:
        diff: Raw unified diff.
        max_chars: Character ceiling of the returned payload.
        max_change_lines: Number of added/removed lines kept.

    Returns:
        The diff itself when small enough, otherwise all header lines with
        the first ``max_change_lines`` change lines, or a hard cut ending in
        the truncation marker when even that is too large.
    """
    if len(diff) <= max_chars:
        return diff

    logger.debug("Diff is %d chars, reducing to headers and changed lines", len(diff))

    kept: List[str] = []
    change_count = 0
    for kind, line in classify_lines(diff):
        if kind == HEADER:
            kept.append(line)
        elif kind == CHANGE and change_count < max_change_lines:
            kept.append(line)
            change_count += 1

    reduced = "\n".join(kept)
    if len(reduced) <= max_chars:
        logger.debug("Reduced diff to %d chars (%d changed lines)", len(reduced), change_count)
        return reduced

    logger.debug("Reduced diff still %d chars, hard truncating", len(reduced))
    return hard_truncate(diff, max_chars)


def _group_by_file(diff: str, max_lines_per_file: int) -> List[str]:
    """Split *diff* into per-file sections with capped changed lines."""

    sections: List[List[str]] = []
    change_count = 0

    for kind, line in classify_lines(diff):
        if line.startswith(FILE_HEADER_PREFIX) or not sections:
            sections.append([])
            change_count = 0

        if kind == HEADER:
            sections[-1].append(line)
        elif kind == CHANGE and change_count < max_lines_per_file:
            sections[-1].append(line)
            change_count += 1

    return ["\n".join(lines) for lines in sections if lines]


def truncate_diff_for_pr(
    diff: str,
    max_chars: int = PR_DIFF_MAX_CHARS,
    hard_limit: int = PR_DIFF_HARD_LIMIT,
    max_lines_per_file: int = PR_DIFF_MAX_LINES_PER_FILE,
) -> str:
    """Bound a branch diff for PR description generation.

    Diffs over ``hard_limit`` are hard-cut without any per-file work.
    Otherwise each file contributes its headers and up to
    ``max_lines_per_file`` changed lines, in the order the files appear,
    until the next file would overflow ``max_chars``.
    """
    if len(diff) <= max_chars:
        return diff

    if len(diff) > hard_limit:
        logger.debug("Diff is %d chars (over %d), hard truncating", len(diff), hard_limit)
        return hard_truncate(diff, max_chars)

    sections = _group_by_file(diff, max_lines_per_file)
    budget = max_chars - len(TRUNCATION_MARKER)

    kept: List[str] = []
    total = 0
    for section in sections:
        added = len(section) + (1 if kept else 0)
        if total + added > budget:
            logger.debug("Kept %d of %d files in PR diff", len(kept), len(sections))
            return "\n".join(kept) + TRUNCATION_MARKER
        kept.append(section)
        total += added

    logger.debug("Kept all %d files in PR diff (%d chars)", len(sections), total)
    return "\n".join(kept)
