"""Run a resolved command through the configured shell."""

import logging
import os
import signal
import subprocess
from pathlib import Path

from dotree.errors import SpawnError
from dotree.models import ShellDef

log = logging.getLogger(__name__)


def _ignore_interrupt(_signum, _frame):
    log.debug("interrupt left to the running command")


def execute(command: str, shell: ShellDef, cwd: Path | None = None) -> int:
    """Run ``command`` with ``shell`` and return its exit status.

    Standard streams are inherited so the command owns the terminal until it
    exits. While it runs, Ctrl-C only reaches the command: dotree swallows its
    own SIGINT with a handler (``SIG_IGN`` would be inherited by the child).
    A child killed by signal N reports 128 + N, as shells do.
    """
    argv = shell.argv(command)
    log.debug("running %s in %s", argv, cwd or os.getcwd())
    previous = signal.signal(signal.SIGINT, _ignore_interrupt)
    try:
        result = subprocess.run(argv, cwd=cwd, check=False)
    except OSError as e:
        raise SpawnError(shell.program, e.strerror or str(e)) from e
    finally:
        signal.signal(signal.SIGINT, previous)

    code = result.returncode
    if code < 0:
        code = 128 - code
    log.debug("%s exited with %d", shell.program, code)
    return code
