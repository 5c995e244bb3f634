"""
Nested interactive shell for `hop to`.

The shell runs as a child process in the bookmarked directory. The caller
blocks until the user exits it; there is no timeout.
"""

import logging
import os
import shlex
import subprocess
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

FALLBACK_SHELL = "/bin/sh"


def resolve_shell(configured: Optional[str] = None) -> str:
    """Shell to start: configured command, then $SHELL, then /bin/sh."""
    return configured or os.environ.get("SHELL") or FALLBACK_SHELL


def spawn_shell(path: str, shell: Optional[str] = None) -> int:
    """
    Run an interactive shell in `path` and wait for it to exit.

    Args:
        path: Directory to start the shell in
        shell: Shell command line (see resolve_shell); split like a POSIX
            shell would, so "zsh -l" passes -l to zsh

    Returns:
        The shell's exit status

    Raises:
        OSError: if the shell can't be started or `path` is unusable
        ValueError: if the shell command has unbalanced quotes
    """
    command = resolve_shell(shell)
    logger.debug("Starting %s in %s", command, path)
    argv = shlex.split(command) or [FALLBACK_SHELL]
    result = subprocess.run(argv, cwd=Path(path))
    logger.debug("Shell %s exited with %d", command, result.returncode)
    return result.returncode
