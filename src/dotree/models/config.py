"""Parsed configuration and per-process runtime settings."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from dotree.models.menu import Menu
from dotree.models.shell_def import ShellDef


class Config(BaseModel):
    """Everything a config file defines."""

    model_config = ConfigDict(frozen=True)

    menu: Menu
    shell_def: ShellDef | None = None
    snippets: dict[str, str] = Field(default_factory=dict)


class RuntimeConfig(BaseModel):
    """Settings fixed once before the session starts."""

    model_config = ConfigDict(frozen=True)

    working_directory: Path | None = None
    shell: ShellDef = Field(default_factory=ShellDef.default)
