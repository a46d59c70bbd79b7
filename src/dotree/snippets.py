"""Snippet reference scanning and expansion.

A command template refers to a snippet as ``{{name}}`` (inner spaces are
allowed). Expansion replaces each reference with the fully expanded snippet
text, so snippets may themselves refer to other snippets.
"""

import logging
import re
from collections.abc import Mapping

from dotree.errors import CyclicSnippetError, UnknownSnippetError

log = logging.getLogger(__name__)

SNIPPET_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_-]*")
REFERENCE_RE = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_-]*)\s*\}\}")
REFERENCE_OPEN = "{{"


def find_references(template: str) -> list[str]:
    """Return the snippet names referenced by ``template``, in order of appearance."""
    return REFERENCE_RE.findall(template)


def check_references(template: str) -> int | None:
    """Return the offset of the first ``{{`` that does not open a valid reference."""
    pos = template.find(REFERENCE_OPEN)
    while pos != -1:
        match = REFERENCE_RE.match(template, pos)
        if match is None:
            return pos
        pos = template.find(REFERENCE_OPEN, match.end())
    return None


def expand(template: str, table: Mapping[str, str]) -> str:
    """Replace every snippet reference in ``template`` with its expanded value."""
    return _expand(template, table, ())


def _expand(template: str, table: Mapping[str, str], chain: tuple[str, ...]) -> str:
    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in chain:
            raise CyclicSnippetError([*chain[chain.index(name):], name])
        if name not in table:
            raise UnknownSnippetError(name)
        log.debug("expanding snippet %s (chain: %s)", name, " -> ".join(chain) or "-")
        return _expand(table[name], table, (*chain, name))

    return REFERENCE_RE.sub(replace, template)
