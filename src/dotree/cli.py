"""Command-line interface for dotree."""

import argparse
import functools
import logging
import sys
from pathlib import Path

from dotree import __version__
from dotree.constants import CONFIG_FILE_NAME, EXIT_CANCELLED, EXIT_FAILURE, SHELL_ENV_VAR
from dotree.discovery import default_config_path, resolve_shell, search_local_config
from dotree.dotree import run
from dotree.errors import ConfigNotFoundError, DotreeError
from dotree.models import RuntimeConfig
from dotree.navigation import KeyStream
from dotree.parser import parse
from dotree.terminal import Renderer, read_key

log = logging.getLogger("dotree")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dotree",
        description="Pick and run commands from a tree of keyboard-driven menus",
        epilog=f"The shell can also be set with {SHELL_ENV_VAR} (e.g. {SHELL_ENV_VAR}=zsh).",
    )
    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-d", "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "-c", "--conf-file",
        type=Path,
        help=f"Path to the config file (default: $XDG_CONFIG_HOME/{CONFIG_FILE_NAME})",
    )
    source.add_argument(
        "-l", "--local-mode",
        action="store_true",
        help=(
            f"Use the nearest {CONFIG_FILE_NAME} in this or a parent directory "
            "and run commands from that directory"
        ),
    )
    parser.add_argument(
        "input",
        nargs="*",
        help="Keys to process one character at a time, as if they were typed",
    )
    return parser


def locate_config(args: argparse.Namespace) -> tuple[Path, Path | None]:
    """Return the config path and, in local mode, the directory commands run in."""
    if args.local_mode:
        path = search_local_config(Path.cwd())
        if path is None:
            raise ConfigNotFoundError(None)
        return path, path.parent
    path = args.conf_file if args.conf_file is not None else default_config_path()
    if not path.is_file():
        raise ConfigNotFoundError(path)
    return path, None


def _live_key_reader():
    """Return a blocking key reader for an interactive stdin, else None."""
    if not sys.stdin.isatty():
        return None
    return functools.partial(read_key, sys.stdin.fileno())


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(name)s %(levelname)s: %(message)s",
    )

    try:
        conf_path, working_directory = locate_config(args)
        log.debug("config=%s cwd=%s", conf_path, working_directory)
        config = parse(conf_path.read_text(encoding="utf-8"))
        runtime = RuntimeConfig(
            working_directory=working_directory,
            shell=resolve_shell(config.shell_def),
        )
        keys = KeyStream(args.input, _live_key_reader())
        return run(config, keys, runtime, Renderer(sys.stderr))
    except (DotreeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        return EXIT_CANCELLED


def entrypoint() -> None:
    raise SystemExit(main())
