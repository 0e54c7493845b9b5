import os
import re
import tempfile
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional


URL_PATTERN = re.compile(r"https://\S+")


@contextmanager
def temporary_body_file(text: str, prefix: str = "pr-body") -> Iterator[Path]:
    """Write *text* to a timestamped temp file and remove it on exit.

    The file is deleted whether or not the body of the ``with`` block raises.
    """

    fd, name = tempfile.mkstemp(prefix=f"{prefix}-{int(time.time() * 1000)}-", suffix=".md")
    path = Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
        yield path
    finally:
        path.unlink(missing_ok=True)


def extract_url(output: Optional[str]) -> Optional[str]:
    """Return the first https URL in *output*, if any."""

    if not output:
        return None
    match = URL_PATTERN.search(output)
    return match.group(0) if match else None
