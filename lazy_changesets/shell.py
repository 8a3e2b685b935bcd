"""Git and terminal output.

git() is the only place a subprocess is started. Progress goes to stdout
and warnings to stderr, so `lazy-changesets status` can be piped.
"""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

from .errors import GitError


def git(*args: str, cwd: Path | None = None, check: bool = True) -> str:
    """Run a git command in cwd and return its stripped stdout.

    Args:
        *args: Arguments to pass to git (e.g., "add", "pyproject.toml").
        cwd: Directory to run in; defaults to the current directory.
        check: If False, a non-zero exit is ignored and stdout is
               returned as-is.

    Raises:
        GitError: If git is not installed, or check is set and git exits
            non-zero. The message carries git's stderr.
    """
    try:
        result = subprocess.run(
            ["git", *args], cwd=cwd, capture_output=True, text=True
        )
    except FileNotFoundError:
        raise GitError(args, "git executable not found") from None
    if check and result.returncode != 0:
        raise GitError(args, result.stderr.strip())
    return result.stdout.strip()


def step(msg: str) -> None:
    """Print a phase header between two rules."""
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")


def warn(msg: str) -> None:
    print(f"Warning: {msg}", file=sys.stderr)
