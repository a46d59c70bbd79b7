"""Shared constants for dotree."""

BOLD = "\033[1m"
DIM = "\033[2m"
CYAN = "\033[36m"
GREEN = "\033[32m"
RED = "\033[31m"
RESET = "\033[0m"

HIDE_CURSOR = "\033[?25l"
SHOW_CURSOR = "\033[?25h"
BELL = "\a"

CONFIG_FILE_NAME = "dotree.dt"
SHELL_ENV_VAR = "DT_DEFAULT_SHELL"

# The single argument of a shell invocation that receives the command string.
PLACEHOLDER = "{}"

# Keys with a meaning of their own in the navigation engine.
CANCEL_KEYS = frozenset({"\x1b", "\x03", "\x04"})
ERASE_KEYS = frozenset({"\x7f", "\x08"})
CONFIRM_KEYS = frozenset({"\r", "\n"})

EXIT_CANCELLED = 0
EXIT_FAILURE = 1
