"""Exception types raised by dotree."""

from enum import Enum
from pathlib import Path

from dotree.constants import CONFIG_FILE_NAME


class DotreeError(Exception):
    """Base class for every fatal dotree error."""


class ConfigNotFoundError(DotreeError):
    def __init__(self, path: Path | None) -> None:
        self.path = path
        if path is None:
            message = (
                f"Couldn't find a local config (no {CONFIG_FILE_NAME} "
                "in this or any parent directory)"
            )
        else:
            message = f"Expected config file at {path}, but couldn't find it. Please create one."
        super().__init__(message)


class ParseErrorKind(str, Enum):
    UNEXPECTED_TOKEN = "unexpected-token"
    UNTERMINATED_BLOCK = "unterminated-block"
    UNTERMINATED_STRING = "unterminated-string"
    DUPLICATE_TRIGGER = "duplicate-trigger"
    DUPLICATE_SNIPPET = "duplicate-snippet"
    DUPLICATE_DIRECTIVE = "duplicate-directive"
    MISSING_MENU = "missing-menu"
    UNKNOWN_SHELL_NAME = "unknown-shell-name"
    MALFORMED_SHELL_SPEC = "malformed-shell-spec"
    AMBIGUOUS_SHELL_SPEC = "ambiguous-shell-spec"
    MALFORMED_SNIPPET_REFERENCE = "malformed-snippet-reference"


class ParseError(DotreeError):
    """A config source could not be parsed.

    ``line`` and ``column`` are 1-based and point at the offending token.
    """

    def __init__(self, kind: ParseErrorKind, message: str, line: int, column: int) -> None:
        self.kind = kind
        self.line = line
        self.column = column
        self.detail = message
        super().__init__(f"line {line}, column {column}: {message} [{kind.value}]")


class SnippetError(DotreeError):
    """A command template could not be expanded."""


class UnknownSnippetError(SnippetError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown snippet {name!r}")


class CyclicSnippetError(SnippetError):
    def __init__(self, cycle: list[str]) -> None:
        self.cycle = cycle
        super().__init__("Cyclic snippet reference: " + " -> ".join(cycle))


class IncompleteSelectionError(DotreeError):
    def __init__(self, buffer: str) -> None:
        self.buffer = buffer
        if buffer:
            message = f"Input ended before a command was selected (pending input: {buffer!r})"
        else:
            message = "Input ended before a command was selected"
        super().__init__(message)


class SpawnError(DotreeError):
    def __init__(self, program: str, reason: str) -> None:
        self.program = program
        super().__init__(f"Couldn't start {program!r}: {reason}")
