"""Parser for the dotree configuration language.

A config file holds exactly one ``menu`` block, at most one ``shell``
directive and any number of ``snippet`` blocks, in any order::

    # comments run to the end of the line
    shell bash

    menu {
        g "Git" {
            s "Status" => git status
            c "Checkout main" => git checkout {{branch}}
        }
        q "Quit" => "exit 0"
    }

    snippet branch { main }

An entry is a trigger, an optional quoted label and either ``=> command`` or a
nested block. A command is a quoted string (escapes allowed, may span lines)
or the rest of the line.
"""

import logging
import textwrap

from dotree.constants import PLACEHOLDER
from dotree.errors import ParseError, ParseErrorKind
from dotree.models import Action, Config, Entry, Menu, ShellDef, classify_shell
from dotree.snippets import SNIPPET_NAME_RE, check_references

log = logging.getLogger(__name__)

COMMENT = "#"
ARROW = "=>"
WORD_STOP = frozenset('"{}' + COMMENT)
ESCAPES = {'"': '"', "\\": "\\", "n": "\n", "t": "\t", "r": "\r"}


class _Scanner:
    """Character cursor over config source that knows how to report errors."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    def peek(self) -> str:
        return self.source[self.pos] if self.pos < len(self.source) else ""

    def startswith(self, text: str) -> bool:
        return self.source.startswith(text, self.pos)

    def location(self, pos: int) -> tuple[int, int]:
        line = self.source.count("\n", 0, pos) + 1
        column = pos - (self.source.rfind("\n", 0, pos) + 1) + 1
        return line, column

    def error(self, kind: ParseErrorKind, message: str, pos: int | None = None) -> ParseError:
        line, column = self.location(self.pos if pos is None else pos)
        return ParseError(kind, message, line, column)

    def describe_next(self) -> str:
        if self.at_end():
            return "end of input"
        if self.peek() == "\n":
            return "end of line"
        return repr(self.peek())

    def skip_comment(self) -> None:
        end = self.source.find("\n", self.pos)
        self.pos = len(self.source) if end == -1 else end

    def skip_trivia(self) -> None:
        """Skip whitespace, newlines and comments."""
        while not self.at_end():
            char = self.peek()
            if char.isspace():
                self.pos += 1
            elif char == COMMENT:
                self.skip_comment()
            else:
                break

    def skip_inline_space(self) -> None:
        while not self.at_end() and self.peek() != "\n" and self.peek().isspace():
            self.pos += 1

    def expect(self, text: str) -> int:
        start = self.pos
        if not self.startswith(text):
            raise self.error(
                ParseErrorKind.UNEXPECTED_TOKEN,
                f"expected {text!r}, found {self.describe_next()}",
            )
        self.pos += len(text)
        return start

    def read_word(self, what: str) -> str:
        """Read a trigger, keyword or name."""
        start = self.pos
        while not self.at_end():
            char = self.peek()
            if char.isspace() or char in WORD_STOP or self.startswith(ARROW):
                break
            self.pos += 1
        if self.pos == start:
            raise self.error(
                ParseErrorKind.UNEXPECTED_TOKEN,
                f"expected {what}, found {self.describe_next()}",
            )
        return self.source[start:self.pos]

    def read_argument(self) -> str:
        """Read one shell argument: a quoted string or a run of non-space characters."""
        if self.peek() == '"':
            return self.read_quoted()
        start = self.pos
        while not self.at_end() and not self.peek().isspace():
            self.pos += 1
        return self.source[start:self.pos]

    def read_quoted(self) -> str:
        start = self.expect('"')
        chars: list[str] = []
        while True:
            if self.at_end():
                raise self.error(
                    ParseErrorKind.UNTERMINATED_STRING, "string is never closed", start
                )
            char = self.peek()
            self.pos += 1
            if char == '"':
                return "".join(chars)
            if char == "\\" and not self.at_end():
                escaped = self.peek()
                self.pos += 1
                chars.append(ESCAPES.get(escaped, "\\" + escaped))
            else:
                chars.append(char)

    def read_bare(self, multiline: bool) -> str:
        """Read an unquoted command.

        A single-line command is the rest of the line, braces and all. A
        multi-line one ends at a ``}`` with no matching ``{`` inside the
        command, which is left for the enclosing block to consume.
        """
        start = self.pos
        if not multiline:
            end = self.source.find("\n", self.pos)
            self.pos = len(self.source) if end == -1 else end
            return self.source[start:self.pos]
        depth = 0
        while not self.at_end():
            char = self.peek()
            if char == "{":
                depth += 1
            elif char == "}":
                if depth == 0:
                    break
                depth -= 1
            self.pos += 1
        return self.source[start:self.pos]


def parse(source: str) -> Config:
    """Parse a complete config file."""
    scanner = _Scanner(source)
    menu: Menu | None = None
    shell_def: ShellDef | None = None
    snippets: dict[str, str] = {}

    while True:
        scanner.skip_trivia()
        if scanner.at_end():
            break
        start = scanner.pos
        keyword = scanner.read_word("'menu', 'shell' or 'snippet'")
        if keyword == "menu":
            if menu is not None:
                raise scanner.error(
                    ParseErrorKind.DUPLICATE_DIRECTIVE, "only one menu block is allowed", start
                )
            scanner.skip_trivia()
            menu = _parse_block(scanner)
        elif keyword == "shell":
            if shell_def is not None:
                raise scanner.error(
                    ParseErrorKind.DUPLICATE_DIRECTIVE,
                    "only one shell directive is allowed",
                    start,
                )
            shell_def = _parse_shell_spec(scanner)
        elif keyword == "snippet":
            name, template = _parse_snippet(scanner)
            if name in snippets:
                raise scanner.error(
                    ParseErrorKind.DUPLICATE_SNIPPET, f"snippet {name!r} is already defined", start
                )
            snippets[name] = template
        else:
            raise scanner.error(
                ParseErrorKind.UNEXPECTED_TOKEN,
                f"expected 'menu', 'shell' or 'snippet', found {keyword!r}",
                start,
            )

    if menu is None:
        raise scanner.error(ParseErrorKind.MISSING_MENU, "config has no menu block")

    log.debug(
        "parsed config: %d top-level entries, %d snippets, shell=%s",
        len(menu.entries),
        len(snippets),
        shell_def.program if shell_def else None,
    )
    return Config(menu=menu, shell_def=shell_def, snippets=snippets)


def parse_shell_string(source: str) -> ShellDef:
    """Parse a lone ``shell <spec>`` directive, e.g. from an environment variable."""
    scanner = _Scanner(source)
    scanner.skip_trivia()
    start = scanner.pos
    keyword = scanner.read_word("'shell'")
    if keyword != "shell":
        raise scanner.error(
            ParseErrorKind.UNEXPECTED_TOKEN, f"expected 'shell', found {keyword!r}", start
        )
    shell_def = _parse_shell_spec(scanner)
    scanner.skip_trivia()
    if not scanner.at_end():
        raise scanner.error(
            ParseErrorKind.UNEXPECTED_TOKEN,
            f"unexpected {scanner.describe_next()} after shell spec",
        )
    return shell_def


def _parse_block(scanner: _Scanner) -> Menu:
    open_pos = scanner.expect("{")
    entries: list[Entry] = []
    triggers: set[str] = set()
    while True:
        scanner.skip_trivia()
        if scanner.at_end():
            raise scanner.error(
                ParseErrorKind.UNTERMINATED_BLOCK, "block is never closed", open_pos
            )
        if scanner.peek() == "}":
            scanner.pos += 1
            return Menu(entries=tuple(entries))

        start = scanner.pos
        entry = _parse_entry(scanner)
        if entry.trigger in triggers:
            raise scanner.error(
                ParseErrorKind.DUPLICATE_TRIGGER,
                f"trigger {entry.trigger!r} is already used in this menu",
                start,
            )
        triggers.add(entry.trigger)
        entries.append(entry)


def _parse_entry(scanner: _Scanner) -> Entry:
    trigger = scanner.read_word("a trigger")
    scanner.skip_trivia()
    label: str | None = None
    if scanner.peek() == '"':
        label = scanner.read_quoted()
        scanner.skip_trivia()

    if scanner.startswith(ARROW):
        scanner.pos += len(ARROW)
        template = _parse_template(scanner, multiline=False)
        return Entry(
            trigger=trigger,
            label=template if label is None else label,
            child=Action(template=template),
        )
    if scanner.peek() == "{":
        return Entry(
            trigger=trigger,
            label=trigger if label is None else label,
            child=_parse_block(scanner),
        )
    raise scanner.error(
        ParseErrorKind.UNEXPECTED_TOKEN,
        f"expected '=>' or '{{' after trigger {trigger!r}, found {scanner.describe_next()}",
    )


def _parse_template(scanner: _Scanner, multiline: bool) -> str:
    scanner.skip_inline_space()
    if multiline:
        if scanner.peek() == COMMENT:
            scanner.skip_comment()
        # A quoted body may start on a later line; a bare one keeps its
        # leading newline so that dedenting sees every line.
        body_pos = scanner.pos
        scanner.skip_trivia()
        if scanner.peek() != '"':
            scanner.pos = body_pos
    start = scanner.pos
    if scanner.peek() == '"':
        template = scanner.read_quoted()
        offset = check_references(template)
        bad_pos = None if offset is None else start
    else:
        raw = scanner.read_bare(multiline)
        template = textwrap.dedent(raw).strip()
        if not template:
            raise scanner.error(
                ParseErrorKind.UNEXPECTED_TOKEN,
                f"expected a command, found {scanner.describe_next()}",
                start,
            )
        offset = check_references(raw)
        bad_pos = None if offset is None else start + offset
    if bad_pos is not None:
        raise scanner.error(
            ParseErrorKind.MALFORMED_SNIPPET_REFERENCE,
            "'{{' must be followed by a snippet name and '}}'",
            bad_pos,
        )
    return template


def _parse_snippet(scanner: _Scanner) -> tuple[str, str]:
    scanner.skip_inline_space()
    name_pos = scanner.pos
    name = scanner.read_word("a snippet name")
    if SNIPPET_NAME_RE.fullmatch(name) is None:
        raise scanner.error(
            ParseErrorKind.UNEXPECTED_TOKEN, f"invalid snippet name {name!r}", name_pos
        )
    scanner.skip_trivia()
    open_pos = scanner.expect("{")
    template = _parse_template(scanner, multiline=True)
    scanner.skip_trivia()
    if scanner.at_end():
        raise scanner.error(
            ParseErrorKind.UNTERMINATED_BLOCK, f"snippet {name!r} is never closed", open_pos
        )
    scanner.expect("}")
    return name, template


def _parse_shell_spec(scanner: _Scanner) -> ShellDef:
    """Parse the words after ``shell`` up to the end of the line."""
    start = scanner.pos
    words: list[str] = []
    while True:
        scanner.skip_inline_space()
        if scanner.at_end() or scanner.peek() == "\n":
            break
        if scanner.peek() == COMMENT:
            scanner.skip_comment()
            break
        words.append(scanner.read_argument())

    if not words:
        raise scanner.error(
            ParseErrorKind.MALFORMED_SHELL_SPEC, "expected a shell name or program", start
        )
    if len(words) == 1:
        if classify_shell(words[0]) is None:
            raise scanner.error(
                ParseErrorKind.UNKNOWN_SHELL_NAME,
                f"unknown shell {words[0]!r}; use one of bash, zsh, fish, sh, cmd, "
                f"powershell, pwsh or give a program with arguments containing {PLACEHOLDER}",
                start,
            )
        return ShellDef.from_name(words[0])

    program, args = words[0], words[1:]
    count = args.count(PLACEHOLDER)
    if program == PLACEHOLDER or count == 0:
        raise scanner.error(
            ParseErrorKind.MALFORMED_SHELL_SPEC,
            f"shell arguments must contain the placeholder {PLACEHOLDER} for the command",
            start,
        )
    if count > 1:
        raise scanner.error(
            ParseErrorKind.AMBIGUOUS_SHELL_SPEC,
            f"shell arguments contain the placeholder {PLACEHOLDER} {count} times",
            start,
        )
    return ShellDef(program=program, args=tuple(args))
