"""Model package for dotree."""

from dotree.models.config import Config, RuntimeConfig
from dotree.models.menu import Action, Entry, Menu, Node
from dotree.models.shell_def import BUILTIN_SHELLS, ShellDef, classify_shell

__all__ = [
    "Action",
    "BUILTIN_SHELLS",
    "Config",
    "Entry",
    "Menu",
    "Node",
    "RuntimeConfig",
    "ShellDef",
    "classify_shell",
]
