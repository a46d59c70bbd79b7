"""Locate the config file and the default shell."""

import logging
import os
from pathlib import Path

from dotree.constants import CONFIG_FILE_NAME, SHELL_ENV_VAR
from dotree.models import ShellDef
from dotree.parser import parse_shell_string

log = logging.getLogger(__name__)


def default_config_dir() -> Path:
    """Return ``$XDG_CONFIG_HOME``, falling back to ``~/.config``."""
    xdg = os.environ.get("XDG_CONFIG_HOME", "").strip()
    if xdg:
        return Path(xdg)
    return Path.home() / ".config"


def default_config_path() -> Path:
    return default_config_dir() / CONFIG_FILE_NAME


def search_local_config(start: Path) -> Path | None:
    """Return the nearest config file in ``start`` or one of its parents."""
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            log.debug("found local config %s", candidate)
            return candidate
    return None


def shell_from_env() -> ShellDef | None:
    """Parse the shell spec in the environment, if one is set."""
    spec = os.environ.get(SHELL_ENV_VAR, "").strip()
    if not spec:
        return None
    log.debug("%s=%r", SHELL_ENV_VAR, spec)
    return parse_shell_string(f"shell {spec}")


def resolve_shell(file_shell: ShellDef | None) -> ShellDef:
    """Pick the config file's shell, else the environment's, else the built-in default."""
    if file_shell is not None:
        return file_shell
    env_shell = shell_from_env()
    if env_shell is not None:
        return env_shell
    return ShellDef.default()
