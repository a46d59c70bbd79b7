"""Unit tests for dotree.snippets."""

import pytest

from dotree.errors import CyclicSnippetError, UnknownSnippetError
from dotree.snippets import check_references, expand, find_references


class TestFindReferences:
    def test_names_in_order(self):
        assert find_references("git {{cmd}} {{ branch }} {{cmd}}") == ["cmd", "branch", "cmd"]

    def test_no_references(self):
        assert find_references("echo {} ${HOME}") == []


class TestCheckReferences:
    def test_well_formed(self):
        assert check_references("a {{x}} b {{ y-z }} c") is None

    def test_plain_braces_are_fine(self):
        assert check_references("awk '{print $1}' ${HOME}") is None

    def test_offset_of_first_bad_reference(self):
        assert check_references("ok {{x}} then {{1bad}}") == 14

    def test_unclosed_reference(self):
        assert check_references("echo {{name") == 5


class TestExpand:
    def test_substitutes_reference(self):
        assert expand("git checkout {{branch}}", {"branch": "main"}) == "git checkout main"

    def test_every_occurrence(self):
        assert expand("{{x}}-{{ x }}", {"x": "1"}) == "1-1"

    def test_transitive_expansion(self):
        table = {"push": "git push origin {{branch}}", "branch": "main"}

        assert expand("{{push}} --force", table) == "git push origin main --force"

    def test_text_without_references_is_unchanged(self):
        text = "echo '{{' is not {x} a ${reference}"

        assert expand(text, {"x": "y"}) == text

    def test_idempotent_on_expanded_text(self):
        once = expand("run {{a}}", {"a": "ls -la"})

        assert expand(once, {"a": "other"}) == once

    def test_non_reference_braces_in_snippet_stay_literal(self):
        assert expand("{{a}}", {"a": "{{ '{' }}"}) == "{{ '{' }}"

    def test_unknown_snippet(self):
        with pytest.raises(UnknownSnippetError) as exc_info:
            expand("echo {{missing}}", {})

        assert exc_info.value.name == "missing"
        assert "missing" in str(exc_info.value)

    def test_unknown_snippet_deep_in_chain(self):
        with pytest.raises(UnknownSnippetError) as exc_info:
            expand("{{a}}", {"a": "{{b}}"})

        assert exc_info.value.name == "b"

    def test_two_snippet_cycle_names_both(self):
        with pytest.raises(CyclicSnippetError) as exc_info:
            expand("{{a}}", {"a": "x {{b}}", "b": "y {{a}}"})

        assert exc_info.value.cycle == ["a", "b", "a"]
        assert "a -> b -> a" in str(exc_info.value)

    def test_self_reference(self):
        with pytest.raises(CyclicSnippetError) as exc_info:
            expand("{{loop}}", {"loop": "again {{loop}}"})

        assert exc_info.value.cycle == ["loop", "loop"]

    def test_cycle_reported_from_where_it_starts(self):
        table = {"entry": "{{a}}", "a": "{{b}}", "b": "{{a}}"}

        with pytest.raises(CyclicSnippetError) as exc_info:
            expand("{{entry}}", table)

        assert exc_info.value.cycle == ["a", "b", "a"]

    def test_repeated_use_is_not_a_cycle(self):
        table = {"both": "{{x}} {{x}}", "x": "1"}

        assert expand("{{both}}", table) == "1 1"
