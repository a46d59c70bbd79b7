"""Core logic for dotree."""

import logging
from collections.abc import Iterable

from dotree.constants import EXIT_CANCELLED
from dotree.dispatch import execute
from dotree.models import Config, RuntimeConfig
from dotree.navigation import Cancelled, navigate
from dotree.snippets import expand
from dotree.terminal import Renderer, hidden_cursor

log = logging.getLogger("dotree")


def run(config: Config, keys: Iterable[str], runtime: RuntimeConfig, renderer: Renderer) -> int:
    """Select an entry from ``config``'s menu using ``keys`` and run its command."""
    with hidden_cursor(renderer.stream):
        try:
            outcome = navigate(config.menu, keys, renderer)
        finally:
            renderer.clear()

    if isinstance(outcome, Cancelled):
        return EXIT_CANCELLED

    command = expand(outcome.template, config.snippets)
    log.debug("selected %s: %r", "".join(outcome.path), command)
    return execute(command, runtime.shell, runtime.working_directory)
