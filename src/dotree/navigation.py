"""Incremental menu navigation.

The navigator consumes one key at a time. Ordinary characters extend the
pending buffer and narrow the current menu to the entries whose trigger starts
with it; a fully typed trigger that no other trigger extends selects its entry.
Selecting a submenu descends into it, selecting an action ends the session.
"""

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Protocol

from dotree.constants import CANCEL_KEYS, CONFIRM_KEYS, ERASE_KEYS
from dotree.errors import IncompleteSelectionError
from dotree.models import Entry, Menu

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class View:
    """What the renderer shows after a transition."""

    breadcrumb: tuple[str, ...]
    entries: tuple[Entry, ...]
    buffer: str
    rejected: bool = False


@dataclass(frozen=True)
class Resolved:
    template: str
    path: tuple[str, ...]


@dataclass(frozen=True)
class Cancelled:
    buffer: str


@dataclass(frozen=True)
class _Frame:
    """A menu left by descending, and the buffer it had before the descent."""

    menu: Menu
    entry: Entry
    buffer: str


class Navigator:
    """State machine over a menu tree: current menu plus pending buffer."""

    def __init__(self, root: Menu) -> None:
        self.root = root
        self.current = root
        self.buffer = ""
        self.rejected = False
        self._stack: list[_Frame] = []

    @property
    def breadcrumb(self) -> tuple[str, ...]:
        return tuple(frame.entry.label for frame in self._stack)

    @property
    def path(self) -> tuple[str, ...]:
        return tuple(frame.entry.trigger for frame in self._stack)

    def state(self) -> tuple[Menu, str]:
        return self.current, self.buffer

    def view(self) -> View:
        return View(
            breadcrumb=self.breadcrumb,
            entries=tuple(self.current.matching(self.buffer)),
            buffer=self.buffer,
            rejected=self.rejected,
        )

    def feed(self, key: str) -> Resolved | Cancelled | None:
        """Apply one key. Returns the final outcome, or None to keep going."""
        self.rejected = False
        if key in CANCEL_KEYS:
            log.debug("cancelled with pending buffer %r", self.buffer)
            return Cancelled(self.buffer)
        if key in ERASE_KEYS:
            self._erase()
            return None

        previous = self.buffer
        if key in CONFIRM_KEYS:
            entry = self.current.find(self.buffer) if self.buffer else None
            if entry is None:
                self._reject(key)
                return None
            return self._select(entry, previous)

        candidate = self.buffer + key
        matches = self.current.matching(candidate)
        if not matches:
            self._reject(key)
            return None
        self.buffer = candidate
        if len(matches) == 1 and matches[0].trigger == candidate:
            return self._select(matches[0], previous)
        log.debug("buffer %r matches %d entries", candidate, len(matches))
        return None

    def _reject(self, key: str) -> None:
        log.debug("rejected key %r at buffer %r", key, self.buffer)
        self.rejected = True

    def _erase(self) -> None:
        if self.buffer:
            self.buffer = self.buffer[:-1]
        elif self._stack:
            frame = self._stack.pop()
            self.current = frame.menu
            self.buffer = frame.buffer
            log.debug("ascended out of %r", frame.entry.trigger)

    def _select(self, entry: Entry, previous: str) -> Resolved | None:
        if isinstance(entry.child, Menu):
            self._stack.append(_Frame(menu=self.current, entry=entry, buffer=previous))
            self.current = entry.child
            self.buffer = ""
            log.debug("descended into %r", entry.trigger)
            return None
        log.debug("resolved %r", entry.trigger)
        return Resolved(template=entry.child.template, path=(*self.path, entry.trigger))


class KeyStream:
    """Iterate over pre-supplied characters, then over live key presses.

    ``read_key`` blocks until a key arrives and returns None once input is
    closed. Without it the stream ends with the pre-supplied characters.
    """

    def __init__(
        self,
        preset: Iterable[str],
        read_key: Callable[[], str | None] | None = None,
    ) -> None:
        self._preset = "".join(preset)
        self._read_key = read_key

    @property
    def interactive(self) -> bool:
        return self._read_key is not None

    def __iter__(self) -> Iterator[str]:
        yield from self._preset
        if self._read_key is None:
            return
        while True:
            key = self._read_key()
            if key is None:
                return
            yield key


class ViewRenderer(Protocol):
    def render(self, view: View) -> None: ...


def navigate(root: Menu, keys: Iterable[str], renderer: ViewRenderer) -> Resolved | Cancelled:
    """Drive a navigator with ``keys`` until an action is selected or the user cancels."""
    navigator = Navigator(root)
    renderer.render(navigator.view())
    for key in keys:
        outcome = navigator.feed(key)
        if outcome is not None:
            return outcome
        renderer.render(navigator.view())
    raise IncompleteSelectionError(navigator.buffer)
