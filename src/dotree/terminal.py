"""Terminal I/O: raw key reads, the cursor guard and the live menu view."""

import codecs
import logging
import os
import shutil
import sys
import termios
import tty
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TextIO

from dotree.constants import BELL, BOLD, CYAN, DIM, GREEN, HIDE_CURSOR, RED, RESET, SHOW_CURSOR
from dotree.navigation import View

log = logging.getLogger(__name__)

TITLE = "dotree"


def supports_color(stream: TextIO) -> bool:
    """Return whether ANSI color output should be used on ``stream``."""
    if os.getenv("NO_COLOR") is not None:
        return False
    if os.getenv("TERM", "").lower() == "dumb":
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def read_key(fd: int) -> str | None:
    """Block until one character is typed on the tty ``fd``; None at end of input."""
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    old_attrs = termios.tcgetattr(fd)
    try:
        # Raw mode so Ctrl-C and Esc arrive as characters instead of signals.
        tty.setraw(fd)
        while True:
            data = os.read(fd, 1)
            if not data:
                return None
            char = decoder.decode(data)
            if char:
                return char
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_attrs)


@contextmanager
def hidden_cursor(stream: TextIO) -> Iterator[None]:
    """Hide the cursor on a tty ``stream`` and show it again on every exit path."""
    enabled = hasattr(stream, "isatty") and stream.isatty()
    if enabled:
        stream.write(HIDE_CURSOR)
        stream.flush()
    try:
        yield
    finally:
        if enabled:
            try:
                stream.write(SHOW_CURSOR)
                stream.flush()
            except OSError as e:
                log.warning("couldn't show cursor again: %s", e)


class Renderer:
    """Redraw the current menu in place on a tty stream."""

    def __init__(self, stream: TextIO | None = None, color: bool | None = None) -> None:
        self.stream = stream if stream is not None else sys.stderr
        self._enabled = hasattr(self.stream, "isatty") and self.stream.isatty()
        self._color = supports_color(self.stream) if color is None else color
        self._lines = 0

    def render(self, view: View) -> None:
        if not self._enabled:
            return
        lines = self.format(view)
        try:
            self._erase()
            if view.rejected:
                self.stream.write(BELL)
            for line in lines:
                self.stream.write(line + "\n")
            self.stream.flush()
        except OSError:
            self._enabled = False
            return
        self._lines = len(lines)

    def clear(self) -> None:
        if not self._enabled:
            return
        try:
            self._erase()
            self.stream.flush()
        except OSError:
            self._enabled = False
        self._lines = 0

    def format(self, view: View) -> list[str]:
        """Return the lines of one frame, clipped to the terminal width."""
        width = max(shutil.get_terminal_size(fallback=(80, 24)).columns - 1, 10)
        crumbs = " > ".join((TITLE, *view.breadcrumb))
        lines = [self._style(crumbs, BOLD)]
        typed = len(view.buffer)
        trigger_width = max((len(entry.trigger) for entry in view.entries), default=0)
        label_width = max(width - trigger_width - 4, 1)
        for entry in view.entries:
            trigger = self._style(entry.trigger[:typed], GREEN)
            trigger += self._style(entry.trigger[typed:], CYAN)
            padding = " " * (trigger_width - len(entry.trigger) + 2)
            lines.append(f"  {trigger}{padding}{_clip(entry.label, label_width)}")
        prompt = f"> {view.buffer}"
        if view.rejected:
            prompt += self._style("  (no match)", RED)
        lines.append(self._style(prompt, DIM) if not view.buffer else prompt)
        return lines

    def _style(self, text: str, code: str) -> str:
        if not self._color or not text:
            return text
        return f"{code}{text}{RESET}"

    def _erase(self) -> None:
        if self._lines:
            # Move to the first line of the previous frame and clear to the end of screen.
            self.stream.write(f"\r\033[{self._lines}A\033[J")


def _clip(label: str, width: int) -> str:
    """Collapse ``label`` onto one line of at most ``width`` characters."""
    label = " ".join(label.split())
    if len(label) > width:
        return label[: width - 1] + "…"
    return label
