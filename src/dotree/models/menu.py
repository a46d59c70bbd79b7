"""Menu tree model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Action(BaseModel):
    """A leaf entry: a command template that may contain snippet references."""

    model_config = ConfigDict(frozen=True)

    template: str


class Entry(BaseModel):
    """A named, selectable item of a menu."""

    model_config = ConfigDict(frozen=True)

    trigger: str = Field(min_length=1)
    label: str
    child: Menu | Action


class Menu(BaseModel):
    """An ordered list of entries. Entry order is the display order."""

    model_config = ConfigDict(frozen=True)

    entries: tuple[Entry, ...] = ()

    @model_validator(mode="after")
    def _triggers_are_unique(self) -> Menu:
        seen: set[str] = set()
        for entry in self.entries:
            if entry.trigger in seen:
                raise ValueError(f"duplicate trigger {entry.trigger!r}")
            seen.add(entry.trigger)
        return self

    def matching(self, buffer: str) -> list[Entry]:
        """Return the entries whose trigger starts with ``buffer``, in menu order."""
        return [entry for entry in self.entries if entry.trigger.startswith(buffer)]

    def find(self, trigger: str) -> Entry | None:
        """Return the entry whose trigger is exactly ``trigger``."""
        for entry in self.entries:
            if entry.trigger == trigger:
                return entry
        return None


Node = Menu | Action

Entry.model_rebuild()
Menu.model_rebuild()
